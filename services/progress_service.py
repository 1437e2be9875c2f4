# services/progress_service.py

import logging
from typing import Callable, Dict, List, Optional

from core.models import DailyProgress
from services.data_service import UserDataService
from services.rollover_service import DailyRolloverEngine
from utils.datetime_utils import last_n_days

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
MONTH_DAYS = 30
CALENDAR_DAYS = 28


class ProgressService:
    """
    Ежедневные снимки метрик и агрегаты для экрана прогресса

    Снимок за сегодня пересобирается из текущих данных при каждом
    изменении задач, воды, помодоро или журнала.
    """

    def __init__(self, data: UserDataService, rollover: DailyRolloverEngine,
                 water_goal: Callable[[], int],
                 days_active: Optional[Callable[[], List[str]]] = None):
        self.data = data
        self.rollover = rollover
        self.water_goal = water_goal
        self.days_active = days_active or (lambda: [])

    # ===== СНИМКИ =====

    def snapshot(self) -> DailyProgress:
        """Пересчитать и сохранить снимок за сегодня"""
        self.rollover.run()
        today = self.data.today()
        tasks = self.data.get_tasks()

        progress = DailyProgress(
            date=today,
            tasks_completed=sum(1 for task in tasks if task.completed),
            tasks_total=len(tasks),
            pomodoro_sessions=self.data.get_pomodoro_stats().sessions_today,
            water_intake=self.data.get_water_log().today,
            water_goal=self.water_goal(),
            journal_entries=sum(1 for entry in self.data.get_journal_entries() if entry.date == today)
        )
        self.upsert(progress)
        return progress

    def upsert(self, progress: DailyProgress) -> None:
        """Заменить запись за ту же дату или добавить в конец"""
        history = self.data.get_daily_progress()
        for index, item in enumerate(history):
            if item.date == progress.date:
                history[index] = progress
                break
        else:
            history.append(progress)
        self.data.save_daily_progress(history)
        logger.debug(f"📊 Прогресс {self.data.namespace} за {progress.date} обновлен")

    def get_progress_for_date(self, day: str) -> DailyProgress:
        """Снимок за дату или нулевой, если данных нет"""
        for item in self.data.get_daily_progress():
            if item.date == day:
                return item
        return DailyProgress(date=day, water_goal=self.water_goal())

    def last_days(self, count: int = WEEK_DAYS) -> List[DailyProgress]:
        return [self.get_progress_for_date(day) for day in last_n_days(count, self.data.now())]

    # ===== АГРЕГАТЫ =====

    def today_summary(self) -> Dict[str, int]:
        today = self.get_progress_for_date(self.data.today())
        return {
            'taskCompletion': today.task_completion_percent,
            'waterCompletion': today.water_completion_percent,
            'pomodoroSessions': today.pomodoro_sessions,
            'journalEntries': today.journal_entries,
        }

    def weekly_averages(self) -> Dict[str, int]:
        """Средние за последние 7 дней (пустые дни считаются нулями)"""
        week = self.last_days(WEEK_DAYS)
        return {
            'tasks': round(sum(day.tasks_completed for day in week) / WEEK_DAYS),
            'pomodoro': round(sum(day.pomodoro_sessions for day in week) / WEEK_DAYS),
            'water': round(sum(day.water_intake for day in week) / WEEK_DAYS),
        }

    def activity_calendar(self) -> List[Dict[str, object]]:
        """Последние 28 дней с отметкой активности"""
        active = set(self.days_active())
        return [
            {'date': day, 'active': day in active}
            for day in last_n_days(CALENDAR_DAYS, self.data.now())
        ]

    def get_report(self, view: str = 'week') -> dict:
        count = MONTH_DAYS if view == 'month' else WEEK_DAYS
        days = self.last_days(count)
        return {
            'view': 'month' if count == MONTH_DAYS else 'week',
            'days': [day.to_dict() for day in days],
            'maxTasks': max([day.tasks_total for day in days] + [1]),
            'maxPomodoro': max([day.pomodoro_sessions for day in days] + [1]),
            'today': self.today_summary(),
            'weeklyAverages': self.weekly_averages(),
            'activityCalendar': self.activity_calendar(),
        }
