import pytest

from core.models import (
    Task, JournalEntry, JournalDraft, User, UserStats, UserPreferences, WaterLog, DailyProgress,
    ValidationError, calculate_current_streak, UNTITLED_ENTRY, PomodoroMode, TaskPriority
)
from shared.models import PomodoroModeChange, TaskCreate


class TestStreak:
    def test_five_consecutive_days(self):
        days = ['2025-10-01', '2025-10-02', '2025-10-03', '2025-10-04', '2025-10-05']
        assert calculate_current_streak(days) == 5

    def test_gap_breaks_chain(self):
        days = ['2025-10-01', '2025-10-02', '2025-10-04', '2025-10-05']
        assert calculate_current_streak(days) == 2

    def test_month_boundary(self):
        assert calculate_current_streak(['2025-09-30', '2025-10-01']) == 2

    def test_empty(self):
        assert calculate_current_streak([]) == 0


class TestUserStats:
    def test_register_active_day_updates_streaks(self):
        stats = UserStats(days_active=['2025-10-28', '2025-10-29'], current_streak=2, longest_streak=2)

        assert stats.register_active_day('2025-10-30') is True
        assert stats.days_active == ['2025-10-28', '2025-10-29', '2025-10-30']
        assert stats.current_streak == 3
        assert stats.longest_streak == 3

    def test_register_same_day_twice_is_noop(self):
        stats = UserStats()
        stats.register_active_day('2025-10-30')
        before = stats.to_dict()

        assert stats.register_active_day('2025-10-30') is False
        assert stats.to_dict() == before

    def test_longest_streak_survives_gap(self):
        stats = UserStats(days_active=['2025-10-01', '2025-10-02', '2025-10-03'],
                          current_streak=3, longest_streak=3)
        stats.register_active_day('2025-10-10')

        assert stats.current_streak == 1
        assert stats.longest_streak == 3

    def test_duplicates_removed_and_sorted(self):
        stats = UserStats(days_active=['2025-10-02', '2025-10-01', '2025-10-02'])
        assert stats.days_active == ['2025-10-01', '2025-10-02']

    def test_longest_never_below_current(self):
        stats = UserStats(current_streak=4, longest_streak=1)
        assert stats.longest_streak == 4


class TestUser:
    def test_camel_case_round_trip(self):
        user = User.create('alice', 'secret1', 'Alice', '2025-10-30')
        data = user.to_dict()

        assert data['createdAt'] == '2025-10-30'
        assert data['preferences']['waterGoal'] == 2000
        assert data['stats']['daysActive'] == []
        assert User.from_dict(data) == user

    def test_apply_updates_replaces_nested_objects(self):
        user = User.create('alice', 'secret1', 'Alice', '2025-10-30')
        updated = user.apply_updates({'name': 'Alicia', 'preferences': {'waterGoal': 3000}})

        assert updated.id == user.id
        assert updated.name == 'Alicia'
        assert updated.preferences.water_goal == 3000
        assert updated.preferences.quiet_hours_start == 22

    def test_missing_field_raises_validation_error(self):
        with pytest.raises(ValidationError):
            User.from_dict({'id': 'x', 'username': 'bob'})

    def test_invalid_quiet_hours(self):
        with pytest.raises(ValidationError):
            UserPreferences(quiet_hours_start=24)


class TestTrackers:
    def test_task_rejects_unknown_priority(self):
        with pytest.raises(ValidationError):
            Task(id='1', text='Read', priority='urgent')

    def test_task_toggle(self):
        task = Task(id='1', text='Read')
        assert task.toggle() is True
        assert task.toggle() is False

    def test_journal_entry_empty_mood_is_none(self):
        entry = JournalEntry.from_dict({'id': '1', 'date': '2025-10-30', 'title': '', 'content': 'x', 'mood': ''})

        assert entry.mood is None
        assert entry.title == UNTITLED_ENTRY
        assert entry.to_dict()['mood'] == ''

    def test_draft_has_draft_status(self):
        draft = JournalDraft(id='d1', user_id='u1', title='t', content='c', mood='calm')
        assert draft.to_dict()['status'] == 'draft'

    def test_water_log_never_negative(self):
        assert WaterLog(today=-100, date='2025-10-30').today == 0

    def test_daily_progress_percentages(self):
        progress = DailyProgress(date='2025-10-30', tasks_completed=1, tasks_total=3,
                                 water_intake=1500, water_goal=2000)

        assert progress.task_completion_percent == 33
        assert progress.water_completion_percent == 75
        assert DailyProgress(date='2025-10-30').task_completion_percent == 0


class TestRequestModels:
    def test_request_enums_are_core_enums(self):
        assert TaskCreate(text='Read', priority='high').priority is TaskPriority.HIGH
        assert PomodoroModeChange(mode='longBreak').mode is PomodoroMode.LONG_BREAK
