from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
import pytz
from fastapi.testclient import TestClient

from core.database import create_store
from services import SessionManager
from services.auth_service import AuthService
from services.data_service import UserDataService
from services.notifications import Notifier


class FrozenClock:
    """Часы, которые двигаются только вручную"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, year, month, day, hour=10, minute=0) -> datetime:
        self.now = pytz.UTC.localize(datetime(year, month, day, hour, minute))
        return self.now


class FakeHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Минимальный event loop для call_later с ручным временем"""

    def __init__(self):
        self.time = 0
        self._handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.time + delay, callback, args)
        self._handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds):
        target = self.time + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.time = handle.when
            handle.callback(*handle.args)
        self.time = target


@pytest.fixture()
def clock():
    return FrozenClock(pytz.UTC.localize(datetime(2025, 10, 30, 10, 0)))


@pytest.fixture()
def loop():
    return FakeLoop()


@pytest.fixture()
def store():
    store = create_store()
    yield store
    store.close()


@pytest.fixture()
def auth(store, clock):
    return AuthService(store, clock)


@pytest.fixture()
def user(auth):
    return auth.signup({'username': 'alice', 'password': 'secret1', 'name': 'Alice'})


@pytest.fixture()
def data(store, clock, user):
    return UserDataService(store, user.id, clock)


@pytest.fixture()
def notifier():
    return MagicMock(spec=Notifier)


@pytest.fixture()
def manager(store, clock, loop, notifier):
    manager = SessionManager(store=store, clock=clock, loop=loop, notifier=notifier)
    manager.initialize()
    yield manager
    if manager.initialized:
        manager.close()


@pytest.fixture()
def client(clock):
    from dashboard.app import create_app

    manager = SessionManager(store=create_store(), clock=clock, notifier=MagicMock(spec=Notifier))
    app = create_app(session_manager=manager, use_scheduler=False)
    with TestClient(app) as c:
        yield c
