from unittest.mock import MagicMock

import pytest

from core.models import ValidationError, WaterLog
from services.rollover_service import DailyRolloverEngine
from services.task_service import TaskService
from services.water_service import WaterService, reminder_message


@pytest.fixture()
def tasks(data):
    return TaskService(data)


@pytest.fixture()
def water(data):
    return WaterService(data, DailyRolloverEngine(data, lambda: 2000), lambda: 2000)


class TestTaskService:
    def test_add_defaults_to_medium(self, tasks):
        task = tasks.add_task('Stretch')

        assert task.priority == 'medium'
        assert task.completed is False
        assert task.created_at == '2025-10-30'
        assert tasks.total_count() == 1

    def test_blank_text_rejected(self, tasks):
        with pytest.raises(ValidationError):
            tasks.add_task('   ')
        assert tasks.total_count() == 0

    def test_invalid_priority_rejected(self, tasks):
        with pytest.raises(ValidationError):
            tasks.add_task('Stretch', 'urgent')

    def test_toggle_and_filters(self, tasks):
        read = tasks.add_task('Read', 'high')
        tasks.add_task('Walk', 'low')

        tasks.toggle_task(read.id)

        assert [t.text for t in tasks.list_tasks('completed')] == ['Read']
        assert [t.text for t in tasks.list_tasks('pending')] == ['Walk']
        assert len(tasks.list_tasks('all')) == 2
        assert tasks.completed_count() == 1

    def test_unknown_filter_rejected(self, tasks):
        with pytest.raises(ValidationError):
            tasks.list_tasks('archived')

    def test_on_completed_only_when_completing(self, data):
        on_completed = MagicMock()
        on_change = MagicMock()
        service = TaskService(data, on_completed=on_completed, on_change=on_change)
        task = service.add_task('Read')

        service.toggle_task(task.id)
        service.toggle_task(task.id)

        on_completed.assert_called_once_with()
        assert on_change.call_count == 3

    def test_delete(self, tasks):
        task = tasks.add_task('Read')

        assert tasks.delete_task(task.id) is True
        assert tasks.delete_task(task.id) is False
        assert tasks.list_tasks() == []

    def test_toggle_missing_task(self, tasks):
        with pytest.raises(ValidationError):
            tasks.toggle_task('missing')


class TestWaterService:
    def test_add_glass(self, water):
        water.add_water()
        water.add_water()

        assert water.get_log().today == 500
        assert water.glasses() == 2
        assert water.progress_percent() == 25

    def test_goal_crossing_flag(self, water):
        water.add_water(1750)
        assert water.goal_reached_now is False

        water.add_water()
        assert water.goal_reached_now is True
        assert water.goal_reached()

        water.add_water()
        assert water.goal_reached_now is False

    def test_goal_crossing_reported_once_in_summary(self, water):
        water.add_water(2000)

        assert water.get_summary()['goalReachedNow'] is True
        assert water.get_summary()['goalReachedNow'] is False
        assert water.get_summary()['goalReached'] is True

    def test_progress_capped_at_100(self, water):
        water.add_water(3000)

        assert water.progress_percent() == 100
        assert water.get_summary()['remaining'] == 0

    def test_non_positive_amount_rejected(self, water):
        with pytest.raises(ValidationError):
            water.add_water(0)

    def test_reset_keeps_streak(self, water, data):
        data.save_water_log(WaterLog(today=800, date='2025-10-30', streak=4))

        water_log = water.reset_today()

        assert water_log.today == 0
        assert water_log.streak == 4

    def test_rollover_before_add(self, water, data):
        data.save_water_log(WaterLog(today=2100, date='2025-10-29', streak=1))

        water_log = water.add_water()

        assert water_log.today == 250
        assert water_log.streak == 2
        assert water_log.date == '2025-10-30'


class TestReminderMessage:
    @pytest.mark.parametrize('amount,expected', [
        (0, "Time to drink water! ☀️ You've had 0ml, need 2000ml more!"),
        (500, "Time to drink water! ☀️ You've had 500ml, need 1500ml more!"),
        (1000, "Keep it up! 💧 You're 50% to your goal!"),
        (1500, "Almost there! 🎯 Just 500ml to reach your goal!"),
        (2000, "🎉 Goal reached! Amazing work staying hydrated!"),
    ])
    def test_tiers(self, amount, expected):
        assert reminder_message(amount, 2000) == expected
