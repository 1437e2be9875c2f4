import pytest

from core.database import CURRENT_USER_KEY, USERS_KEY
from core.models import ValidationError
from services.auth_service import (
    AuthService, InvalidCredentialsError, UsernameTakenError, NotAuthenticatedError
)


class TestLoginSignup:
    def test_signup_creates_user_with_defaults_and_logs_in(self, auth, store):
        user = auth.signup({'username': 'alice', 'password': 'secret1', 'name': 'Alice'})

        assert user.created_at == '2025-10-30'
        assert user.preferences.water_goal == 2000
        assert user.stats.days_active == []
        assert user.stats.current_streak == 0
        assert auth.current_user == user
        assert store.get(CURRENT_USER_KEY)['id'] == user.id

    def test_signup_keeps_contact_info(self, auth):
        user = auth.signup({'username': 'alice', 'password': 'secret1', 'name': 'Alice',
                            'phone': '+100', 'email': 'a@example.com'})
        assert user.phone == '+100'
        assert user.email == 'a@example.com'

    def test_duplicate_username_rejected(self, auth, user):
        with pytest.raises(UsernameTakenError, match='Username already exists'):
            auth.signup({'username': 'alice', 'password': 'other12', 'name': 'Other'})

    def test_username_match_is_case_sensitive(self, auth, user):
        other = auth.signup({'username': 'Alice', 'password': 'other12', 'name': 'Other'})
        assert other.id != user.id
        assert auth.get_users_count() == 2

    def test_login_exact_match(self, auth, user):
        auth.logout()
        assert auth.current_user is None

        assert auth.login('alice', 'secret1').id == user.id
        assert auth.current_user.id == user.id

    @pytest.mark.parametrize('username,password', [
        ('alice', 'wrong'),
        ('ALICE', 'secret1'),
        ('nobody', 'secret1'),
    ])
    def test_login_invalid_credentials(self, auth, user, username, password):
        with pytest.raises(InvalidCredentialsError, match='Invalid username or password'):
            auth.login(username, password)

    def test_require_user_without_login(self, auth):
        with pytest.raises(NotAuthenticatedError):
            auth.require_user()


class TestUpdateUser:
    def test_update_merges_into_current_and_registry(self, auth, user):
        updated = auth.update_user({'name': 'Alicia'})

        assert updated.name == 'Alicia'
        assert auth.current_user.name == 'Alicia'
        assert auth.get_user(user.id).name == 'Alicia'
        assert updated.username == 'alice'

    def test_increment_stat(self, auth, user):
        auth.increment_stat('totalTasksCompleted')
        auth.increment_stat('totalTasksCompleted')

        assert auth.current_user.stats.total_tasks_completed == 2
        assert auth.get_user(user.id).stats.total_tasks_completed == 2

    def test_increment_unknown_stat(self, auth, user):
        with pytest.raises(ValueError):
            auth.increment_stat('totalHugs')


class TestRecordActivity:
    def test_first_day(self, auth, user):
        updated = auth.record_activity()

        assert updated.stats.days_active == ['2025-10-30']
        assert updated.stats.current_streak == 1
        assert updated.stats.longest_streak == 1

    def test_idempotent_per_day(self, auth, user):
        first = auth.record_activity()
        second = auth.record_activity()

        assert second.stats.to_dict() == first.stats.to_dict()

    def test_consecutive_days_and_gap(self, auth, user, clock):
        for _ in range(5):
            auth.record_activity()
            clock.advance(days=1)

        stats = auth.current_user.stats
        assert stats.current_streak == 5
        assert stats.longest_streak == 5

        clock.advance(days=2)
        stats = auth.record_activity().stats
        assert stats.current_streak == 1
        assert stats.longest_streak == 5
        assert stats.current_streak <= stats.longest_streak


class TestDeleteAccount:
    def test_delete_purges_every_user_key(self, auth, store, user):
        store.set(f'user_{user.id}_tasks', [{'id': '1', 'text': 'Read'}])
        store.set(f'user_{user.id}_waterLog', {'today': 500, 'date': '2025-10-30', 'streak': 0})
        store.set(f'quote_seen_{user.id}_2025-10-30', True)
        store.set('guest_tasks', [])

        deleted_id = auth.delete_account()

        assert deleted_id == user.id
        assert not [key for key in store.keys() if user.id in key]
        assert store.get(CURRENT_USER_KEY) is None
        assert auth.find_by_username('alice') is None
        assert store.get('guest_tasks') == []

    def test_delete_does_not_touch_similar_ids(self, store, clock):
        auth = AuthService(store, clock)
        auth.seed_demo_users()
        store.set('user_user10_tasks', [])
        store.set('user_user1_tasks', [])
        auth.login('user1', 'password123')

        auth.delete_account()

        assert store.get('user_user1_tasks') is None
        assert store.get('user_user10_tasks') == []

    def test_delete_requires_login(self, auth):
        with pytest.raises(NotAuthenticatedError):
            auth.delete_account()


class TestDemoUsers:
    def test_seed_only_into_empty_registry(self, store, clock):
        auth = AuthService(store, clock)

        assert auth.seed_demo_users() == 3
        assert auth.seed_demo_users() == 0
        assert len(store.get(USERS_KEY)) == 3

    def test_demo_user_can_log_in(self, store, clock):
        auth = AuthService(store, clock)
        auth.seed_demo_users()

        user = auth.login('user1', 'password123')
        assert user.name == 'User One'
        assert user.stats.current_streak == 5

        updated = auth.record_activity()
        assert updated.stats.current_streak == 6

    def test_invalid_signup_data(self, auth):
        with pytest.raises(ValidationError):
            auth.signup({'username': '', 'password': 'secret1', 'name': 'Nobody'})
