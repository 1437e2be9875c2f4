"""
Помодоро-таймер: обратный отсчет, смена режимов и подсчет сессий
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from config import config
from core.models import PomodoroMode
from services.data_service import UserDataService
from services.rollover_service import DailyRolloverEngine

logger = logging.getLogger(__name__)

MODE_LABELS = {
    PomodoroMode.FOCUS: 'Focus Time',
    PomodoroMode.SHORT_BREAK: 'Short Break',
    PomodoroMode.LONG_BREAK: 'Long Break',
}

CompletionCallback = Callable[[PomodoroMode, PomodoroMode], None]


def default_durations() -> Dict[PomodoroMode, int]:
    return {
        PomodoroMode.FOCUS: config.tracking.focus_seconds,
        PomodoroMode.SHORT_BREAK: config.tracking.short_break_seconds,
        PomodoroMode.LONG_BREAK: config.tracking.long_break_seconds,
    }


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class PomodoroTimer:
    """Конечный автомат помодоро.

    Режимы focus, shortBreak, longBreak. Счетчик сессии 1..4 меняется
    только при завершении фокуса. Пока таймер запущен, раз в секунду
    через loop.call_later вызывается tick(); одновременно запущен не
    более одного таймера.
    """

    def __init__(self, durations: Optional[Dict[PomodoroMode, int]] = None,
                 sessions_before_long_break: Optional[int] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.durations = durations or default_durations()
        self.sessions_before_long_break = (
            sessions_before_long_break or config.tracking.sessions_before_long_break
        )
        self.mode = PomodoroMode.FOCUS
        self.session = 1
        self.time_left = self.durations[self.mode]
        self._loop = loop
        self._handle = None
        self._armed = False
        self._callbacks: List[CompletionCallback] = []

    # ===== СОСТОЯНИЕ =====

    @property
    def is_active(self) -> bool:
        return self._armed

    @property
    def duration(self) -> int:
        return self.durations[self.mode]

    @property
    def progress(self) -> float:
        """Доля пройденного времени текущего режима, 0-100"""
        return (self.duration - self.time_left) / self.duration * 100

    def add_completion_callback(self, callback: CompletionCallback) -> None:
        self._callbacks.append(callback)

    def get_state(self) -> dict:
        return {
            'mode': self.mode.value,
            'label': MODE_LABELS[self.mode],
            'session': self.session,
            'timeLeft': self.time_left,
            'display': format_time(self.time_left),
            'isActive': self._armed,
            'progress': round(self.progress, 2),
        }

    # ===== УПРАВЛЕНИЕ =====

    def start(self) -> bool:
        """Запустить отсчет. Повторный запуск ничего не делает."""
        if self._armed:
            return False
        self._armed = True
        self._schedule_tick()
        logger.info(f"▶️ Помодоро запущен: {MODE_LABELS[self.mode]}, осталось {format_time(self.time_left)}")
        return True

    def pause(self) -> bool:
        if not self._armed:
            return False
        self._cancel_tick()
        self._armed = False
        logger.info(f"⏸️ Помодоро на паузе, осталось {format_time(self.time_left)}")
        return True

    def toggle(self) -> bool:
        """Старт/пауза; возвращает новое состояние"""
        if self._armed:
            self.pause()
        else:
            self.start()
        return self._armed

    def reset(self) -> None:
        """Остановить и вернуть полное время текущего режима"""
        self.pause()
        self.time_left = self.duration

    def change_mode(self, mode: PomodoroMode) -> None:
        """Принудительно переключить режим; таймер останавливается"""
        self.pause()
        self.mode = PomodoroMode(mode)
        self.time_left = self.duration
        logger.info(f"🔀 Режим помодоро: {MODE_LABELS[self.mode]}")

    def cancel(self) -> None:
        """Отменить таймер при завершении сессии пользователя"""
        self._cancel_tick()
        self._armed = False

    # ===== ОТСЧЕТ =====

    def tick(self) -> None:
        if self.time_left > 0:
            self.time_left -= 1
        if self.time_left <= 0:
            self.complete()

    def complete(self) -> PomodoroMode:
        """Завершение текущего режима и переход к следующему"""
        self.cancel()
        finished = self.mode

        if finished == PomodoroMode.FOCUS:
            if self.session >= self.sessions_before_long_break:
                self.mode = PomodoroMode.LONG_BREAK
                self.session = 1
            else:
                self.mode = PomodoroMode.SHORT_BREAK
                self.session += 1
        else:
            self.mode = PomodoroMode.FOCUS

        self.time_left = self.duration
        logger.info(f"🎉 {MODE_LABELS[finished]} complete! Далее: {MODE_LABELS[self.mode]}")

        for callback in self._callbacks:
            try:
                callback(finished, self.mode)
            except Exception as e:
                logger.error(f"❌ Ошибка обработчика завершения помодоро: {e}")

        return self.mode

    def _get_loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _schedule_tick(self) -> None:
        self._handle = self._get_loop().call_later(1, self._on_tick)

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_tick(self) -> None:
        self._handle = None
        if not self._armed:
            return
        try:
            self.tick()
        except Exception as e:
            logger.error(f"❌ Ошибка в таймере помодоро: {e}")
            self.cancel()
            return
        if self._armed:
            self._schedule_tick()


class PomodoroService:
    """Учет завершенных фокус-сессий за день"""

    def __init__(self, data: UserDataService, rollover: DailyRolloverEngine,
                 on_session: Optional[Callable[[], None]] = None,
                 on_change: Optional[Callable[[], None]] = None):
        self.data = data
        self.rollover = rollover
        self.on_session = on_session
        self.on_change = on_change

    def sessions_today(self) -> int:
        self.rollover.run()
        return self.data.get_pomodoro_stats().sessions_today

    def record_focus_session(self) -> int:
        self.rollover.run()
        stats = self.data.get_pomodoro_stats()
        stats.sessions_today += 1
        self.data.save_pomodoro_stats(stats)
        logger.info(f"🍅 Сессий сегодня у {self.data.namespace}: {stats.sessions_today}")

        if self.on_session:
            self.on_session()
        if self.on_change:
            self.on_change()
        return stats.sessions_today

    def handle_completion(self, finished: PomodoroMode, next_mode: PomodoroMode) -> None:
        """Обработчик для PomodoroTimer.add_completion_callback"""
        if finished == PomodoroMode.FOCUS:
            self.record_focus_session()
