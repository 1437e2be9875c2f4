#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LifeSync Pro v1.0 - Configuration
Централизованная конфигурация с валидацией

Версия: 1.0.0
Дата: 2025-10-30
"""

import os
import sys
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass
from enum import Enum

import pytz


class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class StorageConfig:
    """Конфигурация хранилища"""
    seed_demo_users: bool = True


@dataclass
class TrackingConfig:
    """Конфигурация трекеров (вода, помодоро, журнал)"""
    timezone: str = "UTC"
    default_water_goal: int = 2000  # мл
    water_glass_ml: int = 250
    focus_seconds: int = 25 * 60
    short_break_seconds: int = 5 * 60
    long_break_seconds: int = 15 * 60
    sessions_before_long_break: int = 4
    draft_autosave_seconds: int = 30


@dataclass
class ReminderConfig:
    """Конфигурация напоминаний о воде"""
    check_interval_seconds: int = 3600
    min_gap_seconds: int = 3600
    quiet_hours_start: int = 22
    quiet_hours_end: int = 8
    enabled_by_default: bool = True


@dataclass
class ServerConfig:
    """Конфигурация сервера дашборда"""
    host: str = "127.0.0.1"
    port: int = 8000
    debug_mode: bool = False


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == 'true'


class LifeSyncConfig:
    """Главный класс конфигурации"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Директории
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.storage = StorageConfig(
            seed_demo_users=_env_bool('SEED_DEMO_USERS', 'true'),
        )

        self.tracking = TrackingConfig(
            timezone=os.getenv('TIMEZONE', 'UTC'),
            default_water_goal=int(os.getenv('DEFAULT_WATER_GOAL', 2000)),
            water_glass_ml=int(os.getenv('WATER_GLASS_ML', 250)),
            focus_seconds=int(os.getenv('POMODORO_FOCUS_SECONDS', 25 * 60)),
            short_break_seconds=int(os.getenv('POMODORO_SHORT_BREAK_SECONDS', 5 * 60)),
            long_break_seconds=int(os.getenv('POMODORO_LONG_BREAK_SECONDS', 15 * 60)),
            draft_autosave_seconds=int(os.getenv('DRAFT_AUTOSAVE_SECONDS', 30)),
        )

        self.reminders = ReminderConfig(
            check_interval_seconds=int(os.getenv('REMINDER_CHECK_SECONDS', 3600)),
            min_gap_seconds=int(os.getenv('REMINDER_MIN_GAP_SECONDS', 3600)),
            quiet_hours_start=int(os.getenv('QUIET_HOURS_START', 22)),
            quiet_hours_end=int(os.getenv('QUIET_HOURS_END', 8)),
            enabled_by_default=_env_bool('REMINDERS_ENABLED', 'true'),
        )

        self.server = ServerConfig(
            host=os.getenv('HOST', '127.0.0.1'),
            port=int(os.getenv('PORT', 8000)),
            debug_mode=_env_bool('DEBUG_MODE', 'false'),
        )

        # Логирование
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO'))
        self.log_to_file = _env_bool('LOG_TO_FILE', 'false')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if self.tracking.timezone not in pytz.all_timezones_set:
            errors.append(f"Неизвестная временная зона: {self.tracking.timezone}")

        if not 1024 <= self.server.port <= 65535:
            errors.append(f"Порт {self.server.port} вне допустимого диапазона (1024-65535)")

        for name in ('quiet_hours_start', 'quiet_hours_end'):
            value = getattr(self.reminders, name)
            if not 0 <= value <= 23:
                errors.append(f"{name} должен быть от 0 до 23")

        durations = {
            'POMODORO_FOCUS_SECONDS': self.tracking.focus_seconds,
            'POMODORO_SHORT_BREAK_SECONDS': self.tracking.short_break_seconds,
            'POMODORO_LONG_BREAK_SECONDS': self.tracking.long_break_seconds,
            'DRAFT_AUTOSAVE_SECONDS': self.tracking.draft_autosave_seconds,
            'REMINDER_CHECK_SECONDS': self.reminders.check_interval_seconds,
        }
        for key, value in durations.items():
            if value <= 0:
                errors.append(f"{key} должен быть положительным числом")

        if self.tracking.default_water_goal <= 0:
            errors.append("DEFAULT_WATER_GOAL должен быть положительным числом")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Создание необходимых директорий"""
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'apscheduler': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"lifesync_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return logging_config

    def get_timezone(self):
        """Временная зона для определения "сегодня" пользователя"""
        return pytz.timezone(self.tracking.timezone)


# Глобальный экземпляр конфигурации
config = LifeSyncConfig()

__all__ = [
    'config',
    'LifeSyncConfig',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'TrackingConfig',
    'ReminderConfig',
    'ServerConfig'
]
