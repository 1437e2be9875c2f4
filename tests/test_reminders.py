from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from services.notifications import Channel, Notifier, ReminderScheduler, should_fire
from services.rollover_service import DailyRolloverEngine
from services.water_service import WaterService

NOW = datetime(2025, 10, 30, 10, 0)


def fire(**overrides):
    params = dict(enabled=True, hour=10, quiet_start=22, quiet_end=8, amount=500, goal=2000,
                  last_reminder=None, now=NOW)
    params.update(overrides)
    return should_fire(**params)


class TestShouldFire:
    def test_first_reminder_always_fires(self):
        assert fire() is True

    def test_disabled(self):
        assert fire(enabled=False) is False

    @pytest.mark.parametrize('hour,expected', [(7, False), (8, True), (21, True), (22, False), (23, False)])
    def test_active_hours(self, hour, expected):
        assert fire(hour=hour) is expected

    def test_quiet_hours_are_taken_literally(self):
        # окно [6, 1) пустое
        assert fire(hour=3, quiet_start=1, quiet_end=6) is False
        assert fire(hour=10, quiet_start=1, quiet_end=6) is False

    def test_goal_met(self):
        assert fire(amount=2000) is False

    def test_minimum_gap(self):
        assert fire(last_reminder=NOW - timedelta(minutes=59)) is False
        assert fire(last_reminder=NOW - timedelta(hours=1)) is True


class TestReminderScheduler:
    @pytest.fixture()
    def water(self, data):
        return WaterService(data, DailyRolloverEngine(data, lambda: 2000), lambda: 2000)

    @pytest.fixture()
    def reminders(self, data, water, auth, user, notifier):
        auth.update_user({'phone': '+100', 'email': 'alice@example.com'})
        return ReminderScheduler(data, water, lambda: auth.current_user, notifier=notifier)

    def test_activate_checks_immediately(self, reminders, notifier, clock):
        assert reminders.activate() is True

        assert reminders.show_reminder is True
        assert reminders.last_reminder == clock()
        notifier.notify.assert_any_call(Channel.SMS, '+100', 'Time to drink water!')
        notifier.notify.assert_any_call(Channel.EMAIL, 'alice@example.com', 'Time to drink water!')

    def test_hourly_gap(self, reminders, clock):
        assert reminders.check() is True
        clock.advance(minutes=30)
        assert reminders.check() is False
        clock.advance(minutes=30)
        assert reminders.check() is True

    def test_disabled_reminders(self, reminders, data):
        data.set_reminder_enabled(False)
        assert reminders.check() is False

    def test_goal_met_suppresses(self, reminders, water):
        water.add_water(2000)
        assert reminders.check() is False

    def test_quiet_hours(self, reminders, clock):
        clock.set(2025, 10, 30, hour=23)
        assert reminders.check() is False

    def test_drink_adds_glass_and_dismisses(self, reminders, water):
        reminders.check()

        reminders.drink()

        assert reminders.show_reminder is False
        assert water.get_log().today == 250

    def test_without_user(self, data, water, notifier):
        reminders = ReminderScheduler(data, water, lambda: None, notifier=notifier)

        assert reminders.check() is False
        notifier.notify.assert_not_called()

    def test_activate_schedules_job(self, data, water, auth, user):
        scheduler = MagicMock()
        reminders = ReminderScheduler(data, water, lambda: auth.current_user,
                                      notifier=MagicMock(spec=Notifier), scheduler=scheduler)

        reminders.activate()
        reminders.deactivate()

        job_kwargs = scheduler.add_job.call_args.kwargs
        assert job_kwargs['id'] == reminders.job_id
        assert job_kwargs['seconds'] == 3600
        assert job_kwargs['replace_existing'] is True
        scheduler.remove_job.assert_called_once_with(reminders.job_id)
        assert reminders.active is False


class TestNotifier:
    def test_missing_address_is_not_an_error(self, caplog):
        caplog.set_level('INFO')

        Notifier().notify(Channel.SMS, None, 'Time to drink water!')

        assert '[SMS Reminder] Sending to None: Time to drink water!' in caplog.text

    def test_accepts_channel_value(self, caplog):
        caplog.set_level('INFO')

        Notifier().notify('email', 'a@example.com', 'hi')

        assert '[Email Reminder] Sending to a@example.com: hi' in caplog.text
