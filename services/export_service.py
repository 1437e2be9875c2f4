# services/export_service.py

import json
from typing import Any, Dict

from core.database import (
    TASKS, JOURNAL_ENTRIES, WATER_LOG, POMODORO_STATS, DAILY_PROGRESS
)
from core.models import User
from services.data_service import UserDataService

EXPORT_KEYS = ('user', 'tasks', 'journal', 'waterLog', 'pomodoroStats', 'dailyProgress')


def build_export(user: User, data: UserDataService) -> Dict[str, Any]:
    """Документ экспорта: профиль и сырые наборы данных пользователя"""
    return {
        'user': user.to_dict(),
        'tasks': data.raw(TASKS),
        'journal': data.raw(JOURNAL_ENTRIES),
        'waterLog': data.raw(WATER_LOG),
        'pomodoroStats': data.raw(POMODORO_STATS),
        'dailyProgress': data.raw(DAILY_PROGRESS),
    }


def export_filename(day: str) -> str:
    return f"lifesync-data-{day}.json"


def dumps(document: Dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2)

