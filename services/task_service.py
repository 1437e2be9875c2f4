# services/task_service.py

import logging
from typing import Callable, List, Optional

from core.models import Task, TaskFilter, TaskPriority, ValidationError, validate_enum_value
from services.data_service import UserDataService

logger = logging.getLogger(__name__)


class TaskService:
    """Сервис задач пользователя: добавление, отметка, удаление, фильтры"""

    def __init__(self, data: UserDataService,
                 on_completed: Optional[Callable[[], None]] = None,
                 on_change: Optional[Callable[[], None]] = None):
        self.data = data
        self.on_completed = on_completed
        self.on_change = on_change

    def add_task(self, text: str, priority: str = TaskPriority.MEDIUM.value) -> Task:
        """Добавить задачу; пустой текст отклоняется"""
        if not (text or '').strip():
            raise ValidationError('Task text cannot be empty')
        priority = validate_enum_value(priority, TaskPriority, 'priority')

        task = Task.create(text=text, priority=priority, created_at=self.data.today())
        tasks = self.data.get_tasks()
        tasks.append(task)
        self.data.save_tasks(tasks)

        logger.info(f"➕ Задача {task.id} добавлена ({priority})")
        self._changed()
        return task

    def toggle_task(self, task_id: str) -> Task:
        """Переключить выполнение задачи"""
        tasks = self.data.get_tasks()
        for task in tasks:
            if task.id == task_id:
                completed = task.toggle()
                self.data.save_tasks(tasks)
                logger.info(f"{'✅' if completed else '↩️'} Задача {task.id}: completed={completed}")
                if completed and self.on_completed:
                    self.on_completed()
                self._changed()
                return task

        raise ValidationError(f"Task {task_id} not found")

    def delete_task(self, task_id: str) -> bool:
        tasks = self.data.get_tasks()
        remaining = [task for task in tasks if task.id != task_id]
        if len(remaining) == len(tasks):
            return False

        self.data.save_tasks(remaining)
        logger.info(f"🗑️ Задача {task_id} удалена")
        self._changed()
        return True

    def list_tasks(self, task_filter: str = TaskFilter.ALL.value) -> List[Task]:
        task_filter = TaskFilter(validate_enum_value(task_filter, TaskFilter, 'filter'))
        tasks = self.data.get_tasks()
        if task_filter == TaskFilter.COMPLETED:
            return [task for task in tasks if task.completed]
        if task_filter == TaskFilter.PENDING:
            return [task for task in tasks if not task.completed]
        return tasks

    def completed_count(self) -> int:
        return sum(1 for task in self.data.get_tasks() if task.completed)

    def total_count(self) -> int:
        return len(self.data.get_tasks())

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()
