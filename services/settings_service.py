# services/settings_service.py

import logging
from typing import Any, Callable, Dict, Optional

from core.models import User, UserPreferences, ValidationError
from services.auth_service import AuthService
from services.data_service import UserDataService
from utils.validators import is_valid_hour

logger = logging.getLogger(__name__)

MIN_WATER_GOAL = 500
MAX_WATER_GOAL = 5000


def _to_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


class SettingsService:
    """Профиль и настройки текущего пользователя"""

    def __init__(self, auth: AuthService, data: UserDataService,
                 on_change: Optional[Callable[[], None]] = None):
        self.auth = auth
        self.data = data
        self.on_change = on_change

    def get_settings(self) -> Dict[str, Any]:
        user = self.auth.require_user()
        return {
            'username': user.username,
            'name': user.name,
            'createdAt': user.created_at,
            **user.preferences.to_dict(),
            'reminderEnabled': self.data.get_reminder_enabled(),
        }

    def save_settings(self, name: Optional[str], water_goal: Any, reminder_interval: Any,
                      quiet_hours_start: Any, quiet_hours_end: Any) -> User:
        """Сохранить форму настроек; числовые поля приводятся к int"""
        user = self.auth.require_user()

        water_goal = _to_int(water_goal, 'waterGoal')
        reminder_interval = _to_int(reminder_interval, 'reminderInterval')
        quiet_hours_start = _to_int(quiet_hours_start, 'quietHoursStart')
        quiet_hours_end = _to_int(quiet_hours_end, 'quietHoursEnd')

        if not MIN_WATER_GOAL <= water_goal <= MAX_WATER_GOAL:
            raise ValidationError(
                f"Water goal must be between {MIN_WATER_GOAL} and {MAX_WATER_GOAL} ml"
            )
        if reminder_interval <= 0:
            raise ValidationError('Reminder interval must be positive')
        if not (is_valid_hour(quiet_hours_start) and is_valid_hour(quiet_hours_end)):
            raise ValidationError('Quiet hours must be between 0 and 23')

        preferences = UserPreferences(
            water_goal=water_goal,
            reminder_interval=reminder_interval,
            quiet_hours_start=quiet_hours_start,
            quiet_hours_end=quiet_hours_end,
            theme=user.preferences.theme
        )
        updates: Dict[str, Any] = {'preferences': preferences}
        if name is not None and name.strip():
            updates['name'] = name.strip()

        updated = self.auth.update_user(updates)
        logger.info(f"⚙️ Настройки {user.id} сохранены: цель {water_goal} мл")
        self._changed()
        return updated

    def set_reminder_enabled(self, enabled: bool) -> bool:
        self.data.set_reminder_enabled(enabled)
        self._changed()
        return self.data.get_reminder_enabled()

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()
