"""
Напоминания о воде и доставка уведомлений
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import config
from core.models import User
from services.data_service import UserDataService
from services.scheduler import WATER_REMINDER_JOB, remove_job_safely, schedule_interval
from services.water_service import WaterService
from utils.datetime_utils import hours_between

logger = logging.getLogger(__name__)

REMINDER_TEXT = 'Time to drink water!'


class Channel(Enum):
    """Каналы доставки напоминаний"""
    SMS = "sms"
    EMAIL = "email"


class Notifier:
    """Отправка уведомлений. Реальной доставки нет: сообщение пишется в лог."""

    LABELS = {
        Channel.SMS: '[SMS Reminder]',
        Channel.EMAIL: '[Email Reminder]',
    }

    def notify(self, channel: Channel, address: Optional[str], message: str) -> None:
        """Fire-and-forget; отсутствие адреса не считается ошибкой"""
        channel = Channel(channel)
        logger.info(f"{self.LABELS[channel]} Sending to {address}: {message}")


def should_fire(enabled: bool, hour: int, quiet_start: int, quiet_end: int,
                amount: int, goal: int, last_reminder: Optional[datetime],
                now: datetime, min_gap_hours: float = 1.0) -> bool:
    """Условия показа напоминания.

    Активные часы проверяются буквально: quiet_end <= hour < quiet_start.
    Если тихие часы не пересекают полночь (например 1..6), окно
    получается пустым и напоминания не приходят.
    """
    if not enabled:
        return False
    if not quiet_end <= hour < quiet_start:
        return False
    if amount >= goal:
        return False
    if last_reminder is None:
        return True
    return hours_between(last_reminder, now) >= min_gap_hours


class ReminderScheduler:
    """
    Ежечасная проверка напоминания о воде для одного пользователя

    activate() сразу выполняет проверку и ставит интервальную задачу в
    APScheduler; deactivate() снимает ее. Без планировщика работает
    только ручной вызов check().
    """

    def __init__(self, data: UserDataService, water: WaterService,
                 get_user: Callable[[], Optional[User]],
                 notifier: Optional[Notifier] = None,
                 scheduler: Optional[AsyncIOScheduler] = None,
                 interval_seconds: Optional[int] = None):
        self.data = data
        self.water = water
        self.get_user = get_user
        self.notifier = notifier or Notifier()
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds or config.reminders.check_interval_seconds
        self.min_gap_hours = config.reminders.min_gap_seconds / 3600
        self.show_reminder = False
        self.last_reminder: Optional[datetime] = None
        self.active = False

    @property
    def job_id(self) -> str:
        return f"{WATER_REMINDER_JOB}_{self.data.namespace}"

    def activate(self) -> bool:
        """Проверить сразу и запустить ежечасную проверку"""
        self.active = True
        fired = self.check()
        if self.scheduler is not None:
            schedule_interval(self.scheduler, self._run_check, self.interval_seconds, self.job_id)
            logger.info(f"⏰ Напоминания о воде запущены для {self.data.namespace}")
        return fired

    def deactivate(self) -> None:
        self.active = False
        if remove_job_safely(self.scheduler, self.job_id):
            logger.info(f"🔕 Напоминания о воде остановлены для {self.data.namespace}")

    def check(self) -> bool:
        """Одна проверка; при срабатывании выставляет флаг и рассылает сообщения"""
        user = self.get_user()
        if user is None:
            return False

        now = self.data.now()
        fired = should_fire(
            enabled=self.data.get_reminder_enabled(),
            hour=now.hour,
            quiet_start=user.preferences.quiet_hours_start,
            quiet_end=user.preferences.quiet_hours_end,
            amount=self.water.get_log().today,
            goal=user.preferences.water_goal,
            last_reminder=self.last_reminder,
            now=now,
            min_gap_hours=self.min_gap_hours
        )
        if not fired:
            return False

        self.show_reminder = True
        self.last_reminder = now
        self.notifier.notify(Channel.SMS, user.phone, REMINDER_TEXT)
        self.notifier.notify(Channel.EMAIL, user.email, REMINDER_TEXT)
        return True

    def dismiss(self) -> None:
        self.show_reminder = False

    def drink(self):
        """Кнопка в напоминании: стакан воды и закрытие окна"""
        water_log = self.water.add_water()
        self.dismiss()
        return water_log

    def get_state(self) -> dict:
        return {
            'active': self.active,
            'showReminder': self.show_reminder,
            'lastReminder': self.last_reminder.isoformat() if self.last_reminder else None,
            'message': self.water.reminder_text(),
        }

    async def _run_check(self) -> None:
        try:
            self.check()
        except Exception as e:
            logger.error(f"❌ Ошибка проверки напоминания: {e}")
