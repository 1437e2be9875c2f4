# services/session.py

"""
Сессия пользователя: связывает сервисы одного пространства ключей

Сессия создается при входе (или для гостя) и закрывается при выходе,
отменяя все таймеры, которыми владеют ее компоненты.
"""

import asyncio
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import config
from core.database import KeyValueStore
from core.models import User
from services.auth_service import AuthService
from services.data_service import Clock, UserDataService
from services.export_service import build_export, export_filename
from services.journal_service import JournalEditor, JournalService
from services.notifications import Notifier, ReminderScheduler
from services.pomodoro_service import PomodoroService, PomodoroTimer
from services.progress_service import ProgressService
from services.rollover_service import DailyRolloverEngine, RolloverResult
from services.settings_service import SettingsService
from services.task_service import TaskService
from services.water_service import WaterService
from ui.messages import get_greeting, quote_seen_key, random_quote, welcome_screen
from utils.datetime_utils import now_local

logger = logging.getLogger(__name__)


class UserSession:
    """Набор сервисов и таймеров одного пользователя (или гостя)"""

    def __init__(self, store: KeyValueStore, auth: AuthService, user_id: Optional[str],
                 clock: Clock = now_local,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 scheduler: Optional[AsyncIOScheduler] = None,
                 notifier: Optional[Notifier] = None):
        self.store = store
        self.auth = auth
        self.user_id = user_id
        self.opened = False

        self.data = UserDataService(store, user_id, clock)
        self.rollover = DailyRolloverEngine(self.data, self.water_goal)
        self.progress = ProgressService(self.data, self.rollover, self.water_goal, self.days_active)

        self.tasks = TaskService(
            self.data,
            on_completed=lambda: self._increment_stat('totalTasksCompleted'),
            on_change=self._metrics_changed
        )
        self.water = WaterService(self.data, self.rollover, self.water_goal, on_change=self._metrics_changed)
        self.pomodoro = PomodoroService(
            self.data, self.rollover,
            on_session=lambda: self._increment_stat('totalPomodoroSessions'),
            on_change=self._metrics_changed
        )
        self.timer = PomodoroTimer(loop=loop)
        self.timer.add_completion_callback(self.pomodoro.handle_completion)

        self.journal = JournalService(
            self.data,
            on_publish=lambda: self._increment_stat('totalJournalEntries'),
            on_change=self._metrics_changed
        )
        self.editor = JournalEditor(self.journal, loop=loop)
        self.settings = SettingsService(auth, self.data, on_change=self._settings_changed)
        self.reminders = ReminderScheduler(self.data, self.water, self.get_user, notifier, scheduler)

    # ===== ПОЛЬЗОВАТЕЛЬ =====

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def get_user(self) -> Optional[User]:
        if self.is_guest:
            return None
        user = self.auth.current_user
        if user is None or user.id != self.user_id:
            return None
        return user

    def water_goal(self) -> int:
        user = self.get_user()
        return user.preferences.water_goal if user else config.tracking.default_water_goal

    def days_active(self):
        user = self.get_user()
        return list(user.stats.days_active) if user else []

    # ===== ЖИЗНЕННЫЙ ЦИКЛ =====

    def open(self) -> "UserSession":
        """Смена дня, отметка активности, запуск напоминаний, снимок прогресса"""
        self.rollover.run()
        if not self.is_guest:
            self.auth.record_activity()
            self.reminders.activate()
            self.progress.snapshot()
        self.opened = True
        logger.info(f"🟢 Сессия {self.data.namespace} открыта")
        return self

    def close(self) -> None:
        """Отменить все таймеры сессии"""
        self.timer.cancel()
        self.editor.cancel()
        self.reminders.deactivate()
        self.opened = False
        logger.info(f"🔴 Сессия {self.data.namespace} закрыта")

    def new_day(self) -> RolloverResult:
        """Обработка полуночи, пока приложение открыто"""
        result = self.rollover.run()
        if not self.is_guest:
            self.auth.record_activity()
            self.progress.snapshot()
        return result

    # ===== ГЛАВНЫЙ ЭКРАН =====

    def should_show_quote(self) -> bool:
        return not self.store.get(quote_seen_key(self.user_id, self.data.today()))

    def mark_quote_seen(self) -> None:
        self.store.set(quote_seen_key(self.user_id, self.data.today()), True)

    def get_welcome(self) -> Optional[dict]:
        """Экран приветствия, если сегодня он еще не показывался"""
        user = self.get_user()
        if user is None or not self.should_show_quote():
            return None
        return welcome_screen(user.name)

    def get_dashboard(self) -> dict:
        user = self.get_user()
        water_log = self.water.get_log()
        return {
            'greeting': get_greeting(self.data.now().hour),
            'name': user.name if user else None,
            'quote': random_quote(),
            'streak': user.stats.current_streak if user else 0,
            'tasksCompleted': self.tasks.completed_count(),
            'tasksTotal': self.tasks.total_count(),
            'waterToday': water_log.today,
            'waterGoal': self.water_goal(),
            'pomodoroSessions': self.pomodoro.sessions_today(),
            'journalEntries': len(self.journal.list_entries()),
            'reminder': self.reminders.get_state(),
        }

    def export(self) -> dict:
        user = self.auth.require_user()
        return {
            'filename': export_filename(self.data.today()),
            'document': build_export(user, self.data),
        }

    # ===== ВНУТРЕННИЕ ОБРАБОТЧИКИ =====

    def _increment_stat(self, stat_name: str) -> None:
        if not self.is_guest:
            self.auth.increment_stat(stat_name)

    def _metrics_changed(self) -> None:
        if not self.is_guest:
            self.progress.snapshot()

    def _settings_changed(self) -> None:
        # настройки меняют условия напоминания: проверить сразу
        if self.reminders.active:
            self.reminders.check()
