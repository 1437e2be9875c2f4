# services/rollover_service.py

"""
Смена календарного дня для дневных счетчиков (вода, помодоро)

Если приложение не открывали несколько дней, оценивается только
один переход: пропущенные промежуточные дни не засчитываются.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from core.models import WaterLog, PomodoroStats
from services.data_service import UserDataService

logger = logging.getLogger(__name__)


@dataclass
class RolloverResult:
    """Что изменилось при проверке смены дня"""
    water_reset: bool = False
    pomodoro_reset: bool = False
    water_streak: int = 0

    @property
    def changed(self) -> bool:
        return self.water_reset or self.pomodoro_reset


def roll_water_log(water_log: WaterLog, today: str, water_goal: int) -> WaterLog:
    """Новый журнал воды для дня today; серия растет, если цель была выполнена"""
    if water_log.date == today:
        return water_log
    streak = water_log.streak + 1 if water_log.today >= water_goal else 0
    return WaterLog(today=0, date=today, streak=streak)


def roll_pomodoro_stats(stats: PomodoroStats, today: str) -> PomodoroStats:
    if stats.date == today:
        return stats
    return PomodoroStats(sessions_today=0, date=today)


class DailyRolloverEngine:
    """Сбрасывает дневные счетчики при смене даты.

    Вызывается перед каждым чтением или изменением метрик, а также
    по cron-задаче в полночь, пока приложение открыто.
    """

    def __init__(self, data: UserDataService, water_goal: Callable[[], int]):
        self.data = data
        self.water_goal = water_goal

    def run(self) -> RolloverResult:
        today = self.data.today()
        result = RolloverResult()

        water_log = self.data.get_water_log()
        if water_log.date != today:
            rolled = roll_water_log(water_log, today, self.water_goal())
            self.data.save_water_log(rolled)
            result.water_reset = True
            result.water_streak = rolled.streak
            logger.info(
                f"🌅 Новый день для {self.data.namespace}: вода {water_log.today} мл за "
                f"{water_log.date}, серия {rolled.streak}"
            )
        else:
            result.water_streak = water_log.streak

        pomodoro_stats = self.data.get_pomodoro_stats()
        if pomodoro_stats.date != today:
            self.data.save_pomodoro_stats(roll_pomodoro_stats(pomodoro_stats, today))
            result.pomodoro_reset = True
            logger.info(f"🍅 Сброс помодоро-сессий для {self.data.namespace}")

        return result
