from unittest.mock import MagicMock

import pytest

from core.models import PomodoroMode
from services.pomodoro_service import PomodoroService, PomodoroTimer, format_time
from services.rollover_service import DailyRolloverEngine


@pytest.fixture()
def timer(loop):
    return PomodoroTimer(loop=loop)


@pytest.fixture()
def pomodoro(data):
    return PomodoroService(data, DailyRolloverEngine(data, lambda: 2000))


def run_to_completion(timer, loop):
    timer.start()
    loop.advance(timer.time_left)


class TestPomodoroTimer:
    def test_initial_state(self, timer):
        state = timer.get_state()

        assert state['mode'] == 'focus'
        assert state['session'] == 1
        assert state['timeLeft'] == 1500
        assert state['display'] == '25:00'
        assert state['isActive'] is False

    def test_ticks_once_per_second(self, timer, loop):
        timer.start()
        loop.advance(10)

        assert timer.time_left == 1490
        assert timer.is_active

    def test_start_while_armed_is_noop(self, timer, loop):
        assert timer.start() is True
        assert timer.start() is False
        loop.advance(1)

        assert timer.time_left == 1499
        assert len(loop.pending) == 1

    def test_pause_stops_countdown(self, timer, loop):
        timer.start()
        loop.advance(5)
        timer.pause()
        loop.advance(60)

        assert timer.time_left == 1495
        assert not timer.is_active
        assert loop.pending == []

    def test_reset_restores_duration(self, timer, loop):
        timer.start()
        loop.advance(100)
        timer.reset()

        assert timer.time_left == 1500
        assert not timer.is_active

    def test_change_mode_stops_and_resets(self, timer, loop):
        timer.start()
        loop.advance(3)
        timer.change_mode(PomodoroMode.LONG_BREAK)

        assert timer.mode == PomodoroMode.LONG_BREAK
        assert timer.time_left == 900
        assert not timer.is_active

    def test_full_cycle(self, timer, loop):
        callback = MagicMock()
        timer.add_completion_callback(callback)
        modes = []

        for _ in range(4):
            run_to_completion(timer, loop)
            modes.append(timer.mode)
            if timer.mode == PomodoroMode.SHORT_BREAK:
                run_to_completion(timer, loop)
                assert timer.mode == PomodoroMode.FOCUS

        assert modes == [PomodoroMode.SHORT_BREAK] * 3 + [PomodoroMode.LONG_BREAK]
        assert timer.session == 1
        focus_completions = [c for c in callback.call_args_list if c.args[0] == PomodoroMode.FOCUS]
        assert len(focus_completions) == 4

    def test_break_completion_keeps_session(self, timer, loop):
        run_to_completion(timer, loop)
        assert timer.session == 2

        run_to_completion(timer, loop)
        assert timer.mode == PomodoroMode.FOCUS
        assert timer.session == 2
        assert timer.time_left == 1500

    def test_completion_stops_timer(self, timer, loop):
        run_to_completion(timer, loop)

        assert not timer.is_active
        assert loop.pending == []

    def test_callback_error_does_not_break_timer(self, timer, loop):
        timer.add_completion_callback(MagicMock(side_effect=RuntimeError('boom')))
        run_to_completion(timer, loop)

        assert timer.mode == PomodoroMode.SHORT_BREAK

    def test_cancel(self, timer, loop):
        timer.start()
        timer.cancel()

        assert loop.pending == []
        assert not timer.is_active

    def test_format_time(self):
        assert format_time(65) == '01:05'
        assert format_time(-3) == '00:00'


class TestPomodoroService:
    def test_four_focus_sessions_counted(self, timer, loop, pomodoro):
        timer.add_completion_callback(pomodoro.handle_completion)

        for _ in range(4):
            run_to_completion(timer, loop)
            if timer.mode != PomodoroMode.FOCUS:
                run_to_completion(timer, loop)

        assert pomodoro.sessions_today() == 4

    def test_break_completion_not_counted(self, pomodoro):
        pomodoro.handle_completion(PomodoroMode.SHORT_BREAK, PomodoroMode.FOCUS)
        assert pomodoro.sessions_today() == 0

    def test_on_session_callback(self, data):
        on_session = MagicMock()
        service = PomodoroService(data, DailyRolloverEngine(data, lambda: 2000), on_session=on_session)

        service.record_focus_session()

        on_session.assert_called_once_with()

    def test_sessions_reset_on_new_day(self, pomodoro, clock):
        pomodoro.record_focus_session()
        clock.advance(days=1)

        assert pomodoro.sessions_today() == 0
