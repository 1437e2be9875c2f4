from datetime import datetime

import pytest
import pytz

from config import LifeSyncConfig
from core.models import ValidationError
from ui.messages import MOTIVATIONAL_QUOTES, get_greeting, quote_seen_key, random_quote
from utils.datetime_utils import hours_between, last_n_days, today_str
from utils.validators import (
    validate_delete_confirmation, validate_login_form, validate_signup_form
)


class TestValidators:
    def test_login_requires_both_fields(self):
        with pytest.raises(ValidationError, match='Please fill all fields'):
            validate_login_form('user1', '')

    def test_signup_valid(self):
        validate_signup_form('alice', 'secret1', 'secret1', 'Alice')

    def test_signup_checks_run_in_order(self):
        with pytest.raises(ValidationError, match='Username must be at least 4 characters'):
            validate_signup_form('abc', '123', '456', 'A')

    def test_delete_confirmation_exact(self):
        validate_delete_confirmation('alice', 'alice')
        with pytest.raises(ValidationError):
            validate_delete_confirmation('alice', 'Alice')


class TestDates:
    def test_today_in_configured_timezone(self):
        late_utc = pytz.UTC.localize(datetime(2025, 10, 30, 23, 30))
        tokyo = late_utc.astimezone(pytz.timezone('Asia/Tokyo'))

        assert today_str(late_utc) == '2025-10-30'
        assert today_str(tokyo) == '2025-10-31'

    def test_last_n_days_ascending(self):
        now = datetime(2025, 3, 2, 12, 0)
        assert last_n_days(3, now) == ['2025-02-28', '2025-03-01', '2025-03-02']

    def test_hours_between(self):
        assert hours_between(datetime(2025, 1, 1, 8), datetime(2025, 1, 1, 9, 30)) == 1.5


class TestMessages:
    @pytest.mark.parametrize('hour,greeting', [
        (0, 'Good Morning'), (11, 'Good Morning'), (12, 'Good Afternoon'),
        (16, 'Good Afternoon'), (17, 'Good Evening'), (23, 'Good Evening'),
    ])
    def test_greeting(self, hour, greeting):
        assert get_greeting(hour) == greeting

    def test_quote_key(self):
        assert quote_seen_key('user1', '2025-10-30') == 'quote_seen_user1_2025-10-30'

    def test_random_quote(self):
        assert random_quote() in MOTIVATIONAL_QUOTES


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv('TIMEZONE', raising=False)
        app_config = LifeSyncConfig()

        assert app_config.tracking.default_water_goal == 2000
        assert app_config.tracking.draft_autosave_seconds == 30
        assert app_config.reminders.check_interval_seconds == 3600
        assert app_config.get_timezone().zone == 'UTC'

    def test_invalid_timezone(self, monkeypatch):
        monkeypatch.setenv('TIMEZONE', 'Mars/Olympus')

        with pytest.raises(ValueError):
            LifeSyncConfig()

    def test_logging_config_adds_file_handler(self, monkeypatch, tmp_path):
        monkeypatch.setenv('LOG_TO_FILE', 'true')
        monkeypatch.setenv('LOG_DIR', str(tmp_path))

        logging_config = LifeSyncConfig().get_logging_config()

        assert 'file' in logging_config['handlers']
        assert logging_config['handlers']['file']['class'] == 'logging.handlers.RotatingFileHandler'

    def test_ensure_directories_only_creates_log_dir(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('LOG_TO_FILE', 'true')
        monkeypatch.setenv('LOG_DIR', str(tmp_path / 'logs'))

        LifeSyncConfig().ensure_directories()

        assert [p.name for p in tmp_path.iterdir()] == ['logs']
