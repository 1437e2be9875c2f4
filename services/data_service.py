# services/data_service.py

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Any

from config import config
from core.database import (
    KeyValueStore, user_key, user_namespace,
    TASKS, JOURNAL_ENTRIES, JOURNAL_DRAFTS, WATER_LOG, POMODORO_STATS,
    DAILY_PROGRESS, REMINDER_ENABLED
)
from core.models import (
    Task, JournalEntry, JournalDraft, WaterLog, PomodoroStats, DailyProgress
)
from utils.datetime_utils import now_local, today_str

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class UserDataService:
    """
    Типизированный доступ к данным одного пользователя в хранилище

    Все ключи строятся как user_{id}_{dataset}; без пользователя
    используется пространство guest.
    """

    def __init__(self, store: KeyValueStore, user_id: Optional[str], clock: Clock = now_local):
        self.store = store
        self.user_id = user_id
        self.clock = clock

    @property
    def namespace(self) -> str:
        return user_namespace(self.user_id)

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> str:
        return today_str(self.clock())

    def _key(self, dataset: str) -> str:
        return user_key(self.user_id, dataset)

    def _load_list(self, dataset: str) -> List[Dict[str, Any]]:
        return self.store.get(self._key(dataset)) or []

    # ===== ЗАДАЧИ =====

    def get_tasks(self) -> List[Task]:
        return [Task.from_dict(item) for item in self._load_list(TASKS)]

    def save_tasks(self, tasks: List[Task]) -> None:
        self.store.set(self._key(TASKS), [task.to_dict() for task in tasks])

    # ===== ЖУРНАЛ =====

    def get_journal_entries(self) -> List[JournalEntry]:
        return [JournalEntry.from_dict(item) for item in self._load_list(JOURNAL_ENTRIES)]

    def save_journal_entries(self, entries: List[JournalEntry]) -> None:
        self.store.set(self._key(JOURNAL_ENTRIES), [entry.to_dict() for entry in entries])

    def get_journal_drafts(self) -> List[JournalDraft]:
        return [JournalDraft.from_dict(item) for item in self._load_list(JOURNAL_DRAFTS)]

    def save_journal_drafts(self, drafts: List[JournalDraft]) -> None:
        self.store.set(self._key(JOURNAL_DRAFTS), [draft.to_dict() for draft in drafts])

    # ===== ДНЕВНЫЕ СЧЕТЧИКИ =====

    def get_water_log(self) -> WaterLog:
        data = self.store.get(self._key(WATER_LOG))
        if data is None:
            return WaterLog(today=0, date=self.today(), streak=0)
        return WaterLog.from_dict(data)

    def save_water_log(self, water_log: WaterLog) -> None:
        self.store.set(self._key(WATER_LOG), water_log.to_dict())

    def get_pomodoro_stats(self) -> PomodoroStats:
        data = self.store.get(self._key(POMODORO_STATS))
        if data is None:
            return PomodoroStats(sessions_today=0, date=self.today())
        return PomodoroStats.from_dict(data)

    def save_pomodoro_stats(self, stats: PomodoroStats) -> None:
        self.store.set(self._key(POMODORO_STATS), stats.to_dict())

    def get_daily_progress(self) -> List[DailyProgress]:
        return [DailyProgress.from_dict(item) for item in self._load_list(DAILY_PROGRESS)]

    def save_daily_progress(self, progress: List[DailyProgress]) -> None:
        self.store.set(self._key(DAILY_PROGRESS), [item.to_dict() for item in progress])

    # ===== НАСТРОЙКИ =====

    def get_reminder_enabled(self) -> bool:
        value = self.store.get(self._key(REMINDER_ENABLED))
        if value is None:
            return config.reminders.enabled_by_default
        return bool(value)

    def set_reminder_enabled(self, enabled: bool) -> None:
        self.store.set(self._key(REMINDER_ENABLED), bool(enabled))
        logger.info(f"🔔 Напоминания для {self.namespace}: {'вкл' if enabled else 'выкл'}")

    # ===== СЫРЫЕ ДАННЫЕ =====

    def raw(self, dataset: str) -> Any:
        """Значение набора данных как оно лежит в хранилище"""
        return self.store.get(self._key(dataset))
