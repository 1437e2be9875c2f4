# services/__init__.py

"""
Модуль сервисов LifeSync Pro

Этот модуль содержит сервисы трекеров и менеджер сессий, который
управляет хранилищем, планировщиком и сессией текущего пользователя.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import config as default_config
from core.database import KeyValueStore, create_store
from core.models import User
from utils.datetime_utils import now_local
from utils.validators import validate_delete_confirmation, validate_login_form, validate_signup_form

from .auth_service import AuthService, AuthError, InvalidCredentialsError, UsernameTakenError, NotAuthenticatedError
from .data_service import Clock, UserDataService
from .notifications import Notifier
from .scheduler import create_scheduler, schedule_daily_rollover, DAILY_ROLLOVER_JOB, remove_job_safely
from .session import UserSession

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Менеджер хранилища, планировщика и пользовательских сессий

    Обеспечивает:
    - Инициализацию хранилища и демо-пользователей
    - Открытие сессии при входе и регистрации
    - Отмену всех таймеров при выходе и удалении аккаунта
    """

    def __init__(self, store: Optional[KeyValueStore] = None, clock: Clock = now_local,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 notifier: Optional[Notifier] = None, app_config=None):
        self.config = app_config or default_config
        self.store = store or create_store()
        self.clock = clock
        self.loop = loop
        self.notifier = notifier or Notifier()
        self.auth = AuthService(self.store, clock, self.config)
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._session: Optional[UserSession] = None
        self.initialized = False

    def initialize(self, use_scheduler: bool = False) -> bool:
        """Открыть хранилище, при необходимости запустить планировщик и восстановить сессию.

        Планировщик запускается только внутри работающего event loop.
        """
        logger.info("🔧 Инициализация сервисов LifeSync Pro...")
        self.store.open()

        if self.config.storage.seed_demo_users:
            self.auth.seed_demo_users()

        if use_scheduler:
            self.scheduler = create_scheduler()
            schedule_daily_rollover(self.scheduler, self._on_midnight)
            self.scheduler.start()
            logger.info("📅 Планировщик запущен")

        user = self.auth.current_user
        if user is not None:
            self._open_session(user)

        self.initialized = True
        logger.info("✅ Все сервисы инициализированы успешно!")
        return True

    def close(self):
        """Закрытие сессии, планировщика и хранилища"""
        logger.info("🛑 Закрытие сервисов...")
        self._close_session()

        if self.scheduler is not None:
            remove_job_safely(self.scheduler, DAILY_ROLLOVER_JOB)
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.scheduler = None

        self.store.close()
        self.initialized = False
        logger.info("✅ Все сервисы закрыты")

    # ===== СЕССИИ =====

    @property
    def session(self) -> UserSession:
        """Сессия текущего пользователя; без входа используется гостевая"""
        if self._session is None:
            self._session = UserSession(
                self.store, self.auth, None, self.clock, self.loop, self.scheduler, self.notifier
            ).open()
        return self._session

    @property
    def current_user(self) -> Optional[User]:
        return self.auth.current_user

    def require_session(self) -> UserSession:
        """Сессия вошедшего пользователя"""
        self.auth.require_user()
        return self.session

    def _open_session(self, user: User) -> UserSession:
        self._close_session()
        self._session = UserSession(
            self.store, self.auth, user.id, self.clock, self.loop, self.scheduler, self.notifier
        ).open()
        return self._session

    def _close_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    async def _on_midnight(self) -> None:
        try:
            if self._session is not None:
                self._session.new_day()
        except Exception as e:
            logger.error(f"❌ Ошибка смены дня: {e}")

    # ===== АВТОРИЗАЦИЯ =====

    def login(self, username: str, password: str) -> User:
        validate_login_form(username, password)
        user = self.auth.login(username, password)
        self._open_session(user)
        return self.auth.current_user

    def signup(self, form: Dict[str, Any]) -> User:
        validate_signup_form(
            form.get('username', ''), form.get('password', ''),
            form.get('confirmPassword'), form.get('name', '')
        )
        user = self.auth.signup(form)
        self._open_session(user)
        return self.auth.current_user

    def logout(self) -> None:
        self._close_session()
        self.auth.logout()

    def delete_account(self, confirm_username: str) -> str:
        """Удаление аккаунта с подтверждением вводом имени пользователя"""
        user = self.auth.require_user()
        validate_delete_confirmation(user.username, confirm_username)
        self._close_session()
        return self.auth.delete_account()

    # ===== СОСТОЯНИЕ =====

    def get_services_info(self) -> dict:
        session = self._session
        return {
            "initialized": self.initialized,
            "users_count": self.auth.get_users_count(),
            "session": session.data.namespace if session else None,
            "scheduler_running": bool(self.scheduler and self.scheduler.running),
        }

    def health_check(self) -> dict:
        """Проверка состояния хранилища и планировщика"""
        health = {
            "status": "healthy",
            "services": {
                "store": self.store.get_health_status(),
            }
        }
        if self.scheduler is not None:
            health["services"]["scheduler"] = {
                "status": "healthy" if self.scheduler.running else "warning"
            }

        statuses = [s.get("status", "unknown") for s in health["services"].values()]
        if "error" in statuses:
            health["status"] = "error"
        elif "warning" in statuses:
            health["status"] = "warning"
        return health

    def __enter__(self):
        """Context manager вход"""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager выход"""
        self.close()


# Глобальный экземпляр менеджера сессий
_session_manager = None


def get_session_manager() -> SessionManager:
    """Получить глобальный менеджер сессий"""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager()
    return _session_manager


def reset_session_manager() -> None:
    global _session_manager
    if _session_manager is not None and _session_manager.initialized:
        _session_manager.close()
    _session_manager = None


__all__ = [
    'SessionManager',
    'UserSession',
    'UserDataService',
    'AuthService',
    'AuthError',
    'InvalidCredentialsError',
    'UsernameTakenError',
    'NotAuthenticatedError',
    'get_session_manager',
    'reset_session_manager',
]
