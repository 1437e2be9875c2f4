# services/auth_service.py

"""
Реестр пользователей и авторизация

Пароли сравниваются открытым текстом, как в исходном клиенте LifeSync.
Это известный недостаток: хранилище здесь только в памяти процесса,
но любая реальная установка должна хранить хэш с солью.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from config import config as default_config
from core.database import KeyValueStore, USERS_KEY, CURRENT_USER_KEY
from core.models import User, UserPreferences, UserStats, ValidationError
from utils.datetime_utils import now_local, today_str

logger = logging.getLogger(__name__)

STAT_FIELDS = ('totalTasksCompleted', 'totalPomodoroSessions', 'totalJournalEntries')

# ===== EXCEPTIONS =====

class AuthError(Exception):
    """Базовая ошибка авторизации (сообщение показывается пользователю)"""
    pass

class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = 'Invalid username or password'):
        super().__init__(message)

class UsernameTakenError(AuthError):
    def __init__(self, message: str = 'Username already exists'):
        super().__init__(message)

class NotAuthenticatedError(AuthError):
    def __init__(self, message: str = 'Please log in first'):
        super().__init__(message)

# ===== DEMO DATA =====

def _demo_user(user_id: str, password: str, name: str, created_at: str, days: List[str],
               tasks: int, sessions: int, entries: int) -> User:
    return User(
        id=user_id,
        username=user_id,
        password=password,
        name=name,
        created_at=created_at,
        preferences=UserPreferences(),
        stats=UserStats(
            days_active=days,
            current_streak=len(days),
            longest_streak=len(days),
            total_tasks_completed=tasks,
            total_pomodoro_sessions=sessions,
            total_journal_entries=entries
        )
    )

def demo_users() -> List[User]:
    """Демо-аккаунты исходного приложения"""
    return [
        _demo_user('user1', 'password123', 'User One', '2025-10-25',
                   [f'2025-10-{day}' for day in range(25, 30)], 12, 8, 6),
        _demo_user('user2', 'demo123', 'User Two', '2025-10-28',
                   [f'2025-10-{day}' for day in range(28, 31)], 5, 3, 2),
        _demo_user('admin', 'admin123', 'Admin User', '2025-10-15',
                   [f'2025-10-{day}' for day in range(15, 25)], 25, 20, 15),
    ]

# ===== SERVICE =====

class AuthService:
    """Реестр пользователей: вход, регистрация, обновление, удаление, активность"""

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = now_local,
                 app_config=None):
        self.store = store
        self.clock = clock
        self.config = app_config or default_config

    # ===== РЕЕСТР =====

    def _load_users(self) -> List[User]:
        return [User.from_dict(data) for data in self.store.get(USERS_KEY) or []]

    def _save_users(self, users: List[User]) -> None:
        self.store.set(USERS_KEY, [user.to_dict() for user in users])

    def seed_demo_users(self) -> int:
        """Заполнить пустой реестр демо-аккаунтами"""
        if self.store.get(USERS_KEY):
            return 0
        users = demo_users()
        self._save_users(users)
        logger.info(f"👥 Добавлено {len(users)} демо-пользователей")
        return len(users)

    def get_users_count(self) -> int:
        return len(self.store.get(USERS_KEY) or [])

    def get_user(self, user_id: str) -> Optional[User]:
        for user in self._load_users():
            if user.id == user_id:
                return user
        return None

    def find_by_username(self, username: str) -> Optional[User]:
        for user in self._load_users():
            if user.username == username:
                return user
        return None

    # ===== ТЕКУЩИЙ ПОЛЬЗОВАТЕЛЬ =====

    @property
    def current_user(self) -> Optional[User]:
        data = self.store.get(CURRENT_USER_KEY)
        return User.from_dict(data) if data else None

    def _set_current_user(self, user: Optional[User]) -> None:
        if user is None:
            self.store.delete(CURRENT_USER_KEY)
        else:
            self.store.set(CURRENT_USER_KEY, user.to_dict())

    def require_user(self) -> User:
        user = self.current_user
        if user is None:
            raise NotAuthenticatedError()
        return user

    # ===== ОПЕРАЦИИ =====

    def login(self, username: str, password: str) -> User:
        """Вход по точному совпадению имени и пароля"""
        for user in self._load_users():
            if user.username == username and user.password == password:
                self._set_current_user(user)
                logger.info(f"🔑 Пользователь {user.id} вошел в систему")
                return user

        logger.info(f"🚫 Неудачная попытка входа для '{username}'")
        raise InvalidCredentialsError()

    def signup(self, user_data: Dict[str, Any]) -> User:
        """Регистрация с настройками по умолчанию и автоматическим входом"""
        users = self._load_users()
        username = user_data.get('username', '')
        if any(user.username == username for user in users):
            raise UsernameTakenError()

        try:
            user = User.create(
                username=username,
                password=user_data.get('password', ''),
                name=user_data.get('name', ''),
                created_at=today_str(self.clock()),
                default_water_goal=self.config.tracking.default_water_goal,
                quiet_hours_start=self.config.reminders.quiet_hours_start,
                quiet_hours_end=self.config.reminders.quiet_hours_end
            )
        except ValidationError:
            logger.warning(f"⚠️ Некорректные данные регистрации для '{username}'")
            raise

        user.phone = user_data.get('phone')
        user.email = user_data.get('email')

        users.append(user)
        self._save_users(users)
        self._set_current_user(user)
        logger.info(f"🆕 Зарегистрирован пользователь {user.id} ({user.username})")
        return user

    def logout(self) -> None:
        user = self.current_user
        self._set_current_user(None)
        if user:
            logger.info(f"👋 Пользователь {user.id} вышел")

    def update_user(self, updates: Dict[str, Any]) -> User:
        """Поверхностное слияние в текущего пользователя и его копию в реестре"""
        current = self.require_user()
        updated = current.apply_updates(updates)

        users = [updated if user.id == current.id else user for user in self._load_users()]
        self._save_users(users)
        self._set_current_user(updated)
        return updated

    def delete_account(self) -> str:
        """Удалить пользователя, все его ключи и выйти. Необратимо."""
        user = self.require_user()

        users = [u for u in self._load_users() if u.id != user.id]
        self._save_users(users)
        self.store.purge_user(user.id)
        self._set_current_user(None)

        logger.warning(f"🗑️ Аккаунт {user.id} ({user.username}) удален")
        return user.id

    def record_activity(self, user: Optional[User] = None) -> User:
        """Отметить сегодняшний день активности и пересчитать серию.

        Повторный вызов в тот же день ничего не меняет.
        """
        user = user or self.require_user()
        stats = UserStats.from_dict(user.stats.to_dict())

        if not stats.register_active_day(today_str(self.clock())):
            return user

        logger.info(
            f"🔥 Активность {user.id}: серия {stats.current_streak}, рекорд {stats.longest_streak}"
        )
        return self.update_user({'stats': stats})

    def increment_stat(self, stat_name: str, amount: int = 1) -> Optional[User]:
        """Увеличить накопительный счетчик текущего пользователя"""
        if stat_name not in STAT_FIELDS:
            raise ValueError(f"Unknown stat: {stat_name}")

        user = self.current_user
        if user is None:
            return None

        stats = user.stats.to_dict()
        stats[stat_name] = max(0, stats.get(stat_name, 0) + amount)
        return self.update_user({'stats': stats})
