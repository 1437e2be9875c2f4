#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LifeSync Pro v1.0 - Key-Value Store
Хранилище состояния пользователей по строковым ключам

Все данные пользователя лежат под ключами вида user_{id}_{dataset},
данные неавторизованного режима под guest_{dataset}. Реестр
пользователей и текущий пользователь хранятся под ключами "users"
и "currentUser".

Версия: 1.0.0
Дата: 2025-10-30
"""

import copy
import time
from datetime import datetime
from typing import Dict, List, Optional, Any, Iterator
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

GUEST_NAMESPACE = "guest"
USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"

# Наборы данных пользователя
TASKS = "tasks"
JOURNAL_ENTRIES = "journalEntries"
JOURNAL_DRAFTS = "journalDrafts"
WATER_LOG = "waterLog"
POMODORO_STATS = "pomodoroStats"
DAILY_PROGRESS = "dailyProgress"
REMINDER_ENABLED = "reminderEnabled"

# ===== EXCEPTIONS =====

class StorageError(Exception):
    """Базовое исключение для ошибок хранилища"""
    pass

class StorageClosedError(StorageError):
    """Обращение к закрытому хранилищу"""
    pass

# ===== KEYS =====

def user_namespace(user_id: Optional[str]) -> str:
    """Префикс ключей пользователя (или гостя)"""
    return f"user_{user_id}" if user_id else GUEST_NAMESPACE

def user_key(user_id: Optional[str], dataset: str) -> str:
    """Ключ набора данных пользователя, например user_abc_tasks"""
    return f"{user_namespace(user_id)}_{dataset}"

# ===== HELPER CLASSES =====

@dataclass
class StoreStats:
    """Статистика хранилища"""
    reads: int = 0
    writes: int = 0
    deletes: int = 0
    misses: int = 0
    opened_at: Optional[str] = None
    uptime_seconds: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'reads': self.reads,
            'writes': self.writes,
            'deletes': self.deletes,
            'misses': self.misses,
            'opened_at': self.opened_at,
            'uptime_hours': round(self.uptime_seconds / 3600, 2)
        }

# ===== STORE =====

class KeyValueStore:
    """Базовый интерфейс хранилища.

    Контракт: get(key) -> значение или None, set(key, value). Значения
    JSON-совместимые; запись сразу видна в том же процессе.
    """

    def open(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self) -> Iterator[str]:
        raise NotImplementedError

    def purge_user(self, user_id: str) -> List[str]:
        """Удалить все ключи, содержащие идентификатор пользователя.

        Идентификатор сравнивается как целый сегмент ключа между "_",
        чтобы удаление user1 не задело ключи user10.
        """
        marker = f"_{user_id}_"
        removed = [key for key in list(self.keys()) if marker in f"_{key}_"]
        for key in removed:
            self.delete(key)
        logger.info(f"🗑️ Удалено {len(removed)} ключей пользователя {user_id}")
        return removed

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class MemoryStore(KeyValueStore):
    """Хранилище в памяти процесса.

    Значения копируются при записи и чтении, чтобы изменения объектов
    у вызывающей стороны не попадали в хранилище без set().
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        self._opened = False
        self._start_time: Optional[float] = None
        self.stats = StoreStats()
        if initial:
            self._data.update(copy.deepcopy(initial))

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> None:
        if self._opened:
            return
        self._opened = True
        self._start_time = time.time()
        self.stats.opened_at = datetime.now().isoformat()
        logger.info(f"📂 Хранилище открыто, ключей: {len(self._data)}")

    def close(self) -> None:
        if not self._opened:
            return
        self._opened = False
        logger.info(f"🔒 Хранилище закрыто, ключей: {len(self._data)}")

    def _ensure_open(self) -> None:
        if not self._opened:
            raise StorageClosedError("Store is not open")

    def get(self, key: str, default: Any = None) -> Any:
        self._ensure_open()
        self.stats.reads += 1
        if key not in self._data:
            self.stats.misses += 1
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._ensure_open()
        self.stats.writes += 1
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        self._ensure_open()
        if key in self._data:
            del self._data[key]
            self.stats.deletes += 1
            return True
        return False

    def keys(self) -> Iterator[str]:
        self._ensure_open()
        return iter(list(self._data.keys()))

    def get_stats(self) -> Dict[str, Any]:
        """Получить статистику хранилища"""
        if self._start_time is not None:
            self.stats.uptime_seconds = int(time.time() - self._start_time)
        stats = self.stats.to_dict()
        stats['keys'] = len(self._data)
        return stats

    def get_health_status(self) -> Dict[str, Any]:
        """Состояние хранилища для health-check"""
        return {
            'status': 'healthy' if self._opened else 'error',
            'open': self._opened,
            'stats': self.get_stats()
        }


def create_store(initial: Optional[Dict[str, Any]] = None) -> MemoryStore:
    """Фабрика хранилища по умолчанию"""
    store = MemoryStore(initial)
    store.open()
    return store
