from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Dict, Any

from services import UserSession
from core.models import TaskFilter
from shared.models import TaskCreate
from ..dependencies import get_session

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("/", response_model=Dict[str, Any])
async def list_tasks(
    session: UserSession = Depends(get_session),
    filter: TaskFilter = Query(TaskFilter.ALL)
):
    """
    Список задач с фильтром all|pending|completed
    """
    tasks = session.tasks.list_tasks(filter.value)
    return {
        "tasks": [task.to_dict() for task in tasks],
        "filter": filter.value,
        "completed": session.tasks.completed_count(),
        "total": session.tasks.total_count()
    }


@router.post("/", response_model=Dict[str, Any], status_code=201)
async def add_task(body: TaskCreate, session: UserSession = Depends(get_session)):
    task = session.tasks.add_task(body.text, body.priority.value)
    return task.to_dict()


@router.post("/{task_id}/toggle", response_model=Dict[str, Any])
async def toggle_task(task_id: str, session: UserSession = Depends(get_session)):
    return session.tasks.toggle_task(task_id).to_dict()


@router.delete("/{task_id}")
async def delete_task(task_id: str, session: UserSession = Depends(get_session)):
    if not session.tasks.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"success": True}
