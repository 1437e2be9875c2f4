# services/water_service.py

import logging
from typing import Callable, Optional

from config import config
from core.models import WaterLog, ValidationError
from services.data_service import UserDataService
from services.rollover_service import DailyRolloverEngine

logger = logging.getLogger(__name__)


def reminder_message(amount: int, goal: int) -> str:
    """Текст напоминания в зависимости от прогресса"""
    remaining = max(0, goal - amount)
    percentage = round(amount / goal * 100) if goal else 100

    if percentage < 30:
        return f"Time to drink water! ☀️ You've had {amount}ml, need {remaining}ml more!"
    if percentage < 70:
        return f"Keep it up! 💧 You're {percentage}% to your goal!"
    if percentage < 100:
        return f"Almost there! 🎯 Just {remaining}ml to reach your goal!"
    return '🎉 Goal reached! Amazing work staying hydrated!'


class WaterService:
    """Учет выпитой воды за день"""

    def __init__(self, data: UserDataService, rollover: DailyRolloverEngine,
                 water_goal: Callable[[], int],
                 on_change: Optional[Callable[[], None]] = None):
        self.data = data
        self.rollover = rollover
        self.water_goal = water_goal
        self.on_change = on_change
        self.glass_ml = config.tracking.water_glass_ml
        self.goal_reached_now = False

    def get_log(self) -> WaterLog:
        self.rollover.run()
        return self.data.get_water_log()

    def add_water(self, amount: Optional[int] = None) -> WaterLog:
        """Добавить порцию (по умолчанию один стакан)"""
        amount = self.glass_ml if amount is None else amount
        if amount <= 0:
            raise ValidationError('Water amount must be positive')

        water_log = self.get_log()
        goal = self.water_goal()
        before = water_log.today
        water_log.today += amount
        self.data.save_water_log(water_log)

        self.goal_reached_now = before < goal <= water_log.today
        if self.goal_reached_now:
            logger.info(f"🎉 {self.data.namespace} выполнил цель по воде ({goal} мл)")
        self._changed()
        return water_log

    def reset_today(self) -> WaterLog:
        """Обнулить сегодняшний объем (серия не меняется)"""
        water_log = self.get_log()
        water_log.today = 0
        self.data.save_water_log(water_log)
        logger.info(f"🔄 Вода за сегодня сброшена для {self.data.namespace}")
        self._changed()
        return water_log

    def goal_reached(self) -> bool:
        return self.get_log().today >= self.water_goal()

    def progress_percent(self) -> float:
        """Прогресс для отображения, не больше 100"""
        goal = self.water_goal()
        return min(self.get_log().today / goal * 100, 100) if goal else 100

    def glasses(self) -> int:
        return self.get_log().today // self.glass_ml

    def reminder_text(self) -> str:
        return reminder_message(self.get_log().today, self.water_goal())

    def get_summary(self) -> dict:
        """Сводка для экрана; goalReachedNow сообщается один раз после добавления"""
        water_log = self.get_log()
        reached_now, self.goal_reached_now = self.goal_reached_now, False
        goal = self.water_goal()
        return {
            **water_log.to_dict(),
            'goal': goal,
            'remaining': max(0, goal - water_log.today),
            'progress': round(self.progress_percent(), 2),
            'glasses': water_log.today // self.glass_ml,
            'goalReached': water_log.today >= goal,
            'goalReachedNow': reached_now,
        }

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()
