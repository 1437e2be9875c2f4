#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LifeSync Pro v1.0 - Core Data Models
Модели данных с валидацией и типизацией

Сериализация использует camelCase ключи: в таком виде данные лежат
в хранилище и попадают в экспорт lifesync-data-*.json.

Версия: 1.0.0
Дата: 2025-10-30
"""

import uuid
from datetime import datetime, date, timedelta
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum
import logging

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class TaskPriority(Enum):
    """Приоритеты задач"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class TaskFilter(Enum):
    """Фильтры списка задач"""
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

class Mood(Enum):
    """Настроение записи в журнале"""
    HAPPY = "happy"
    CALM = "calm"
    SAD = "sad"
    ANXIOUS = "anxious"
    STRESSED = "stressed"

class EntryStatus(Enum):
    """Статус записи журнала"""
    DRAFT = "draft"
    PUBLISHED = "published"

class PomodoroMode(Enum):
    """Режимы помодоро-таймера"""
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

class UserTheme(Enum):
    """Темы оформления"""
    LIGHT = "light"
    DARK = "dark"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Ошибка валидации данных"""
    pass

def validate_text(text: str, min_length: int = 1, max_length: int = 10000, field_name: str = "text") -> str:
    """Валидация текстовых полей"""
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    if len(text.strip()) < min_length:
        raise ValidationError(f"{field_name} must contain at least {min_length} characters")

    if len(text) > max_length:
        raise ValidationError(f"{field_name} must contain at most {max_length} characters")

    return text

def validate_enum_value(value: str, enum_class: type, field_name: str = "value") -> str:
    """Валидация значений enum"""
    try:
        enum_class(value)
        return value
    except ValueError:
        valid_values = [e.value for e in enum_class]
        raise ValidationError(f"{field_name} must be one of: {valid_values}")

def validate_mood(mood: Optional[str]) -> Optional[str]:
    """Пустое настроение допустимо и хранится как None"""
    if not mood:
        return None
    return validate_enum_value(mood, Mood, "mood")

def new_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex}"

def calculate_current_streak(days: List[str]) -> int:
    """Серия подряд идущих дней, считая назад от самой поздней даты.

    Ожидает уникальные ISO даты по возрастанию. Первый разрыв
    останавливает подсчет.
    """
    if not days:
        return 0

    streak = 1
    for i in range(len(days) - 1, 0, -1):
        current_day = date.fromisoformat(days[i])
        previous_day = date.fromisoformat(days[i - 1])
        if current_day - previous_day == timedelta(days=1):
            streak += 1
        else:
            break

    return streak

# ===== USER =====

@dataclass
class UserPreferences:
    """Настройки пользователя"""
    water_goal: int = 2000  # мл
    reminder_interval: int = 3600  # секунды
    quiet_hours_start: int = 22
    quiet_hours_end: int = 8
    theme: str = UserTheme.LIGHT.value

    def __post_init__(self):
        """Валидация после создания объекта"""
        if not isinstance(self.water_goal, int) or self.water_goal <= 0:
            raise ValidationError("waterGoal must be a positive integer")

        for name in ("quiet_hours_start", "quiet_hours_end"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 23:
                raise ValidationError(f"{name} must be between 0 and 23")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "waterGoal": self.water_goal,
            "reminderInterval": self.reminder_interval,
            "quietHoursStart": self.quiet_hours_start,
            "quietHoursEnd": self.quiet_hours_end,
            "theme": self.theme
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPreferences":
        return cls(
            water_goal=data.get("waterGoal", 2000),
            reminder_interval=data.get("reminderInterval", 3600),
            quiet_hours_start=data.get("quietHoursStart", 22),
            quiet_hours_end=data.get("quietHoursEnd", 8),
            theme=data.get("theme", UserTheme.LIGHT.value)
        )

@dataclass
class UserStats:
    """Статистика активности пользователя"""
    days_active: List[str] = field(default_factory=list)
    current_streak: int = 0
    longest_streak: int = 0
    total_tasks_completed: int = 0
    total_pomodoro_sessions: int = 0
    total_journal_entries: int = 0

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.days_active = sorted(set(self.days_active))
        self.current_streak = max(0, self.current_streak)
        self.longest_streak = max(self.longest_streak, self.current_streak)
        self.total_tasks_completed = max(0, self.total_tasks_completed)
        self.total_pomodoro_sessions = max(0, self.total_pomodoro_sessions)
        self.total_journal_entries = max(0, self.total_journal_entries)

    def register_active_day(self, day: str) -> bool:
        """Отметить день активности и пересчитать серии.

        Возвращает False, если день уже был отмечен.
        """
        if day in self.days_active:
            return False

        self.days_active = sorted(self.days_active + [day])
        self.current_streak = calculate_current_streak(self.days_active)
        self.longest_streak = max(self.longest_streak, self.current_streak)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daysActive": list(self.days_active),
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "totalTasksCompleted": self.total_tasks_completed,
            "totalPomodoroSessions": self.total_pomodoro_sessions,
            "totalJournalEntries": self.total_journal_entries
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserStats":
        return cls(
            days_active=list(data.get("daysActive", [])),
            current_streak=data.get("currentStreak", 0),
            longest_streak=data.get("longestStreak", 0),
            total_tasks_completed=data.get("totalTasksCompleted", 0),
            total_pomodoro_sessions=data.get("totalPomodoroSessions", 0),
            total_journal_entries=data.get("totalJournalEntries", 0)
        )

@dataclass
class User:
    """Модель пользователя.

    Пароль хранится и сравнивается открытым текстом, как в исходном
    клиентском приложении. Для реального развертывания нужен хэш с солью.
    """
    id: str
    username: str
    password: str
    name: str
    created_at: str = field(default_factory=lambda: date.today().isoformat())
    preferences: UserPreferences = field(default_factory=UserPreferences)
    stats: UserStats = field(default_factory=UserStats)
    phone: Optional[str] = None
    email: Optional[str] = None

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.username = validate_text(self.username, min_length=1, max_length=64, field_name="username")
        self.name = validate_text(self.name, min_length=1, max_length=100, field_name="name")

    @property
    def display_name(self) -> str:
        """Отображаемое имя пользователя"""
        return self.name or self.username

    def apply_updates(self, updates: Dict[str, Any]) -> "User":
        """Поверхностное слияние частичного обновления (camelCase ключи).

        Вложенные объекты (preferences, stats) заменяются целиком.
        """
        data = self.to_dict()
        data.update(updates)
        data["id"] = self.id
        return User.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь"""
        data = {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "name": self.name,
            "createdAt": self.created_at,
            "preferences": self.preferences.to_dict(),
            "stats": self.stats.to_dict()
        }
        if self.phone is not None:
            data["phone"] = self.phone
        if self.email is not None:
            data["email"] = self.email
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Десериализация из словаря"""
        try:
            preferences = data.get("preferences") or {}
            stats = data.get("stats") or {}
            return cls(
                id=str(data["id"]),
                username=data["username"],
                password=data["password"],
                name=data.get("name", ""),
                created_at=data.get("createdAt", date.today().isoformat()),
                preferences=preferences if isinstance(preferences, UserPreferences) else UserPreferences.from_dict(preferences),
                stats=stats if isinstance(stats, UserStats) else UserStats.from_dict(stats),
                phone=data.get("phone"),
                email=data.get("email")
            )
        except KeyError as e:
            logger.error(f"Ошибка десериализации пользователя: нет поля {e}")
            raise ValidationError(f"Missing user field: {e}")

    @classmethod
    def create(cls, username: str, password: str, name: str, created_at: str,
               default_water_goal: int = 2000, quiet_hours_start: int = 22,
               quiet_hours_end: int = 8) -> "User":
        """Создание нового пользователя с настройками по умолчанию"""
        return cls(
            id=new_id(),
            username=username,
            password=password,
            name=name,
            created_at=created_at,
            preferences=UserPreferences(
                water_goal=default_water_goal,
                quiet_hours_start=quiet_hours_start,
                quiet_hours_end=quiet_hours_end
            )
        )

# ===== TASKS =====

@dataclass
class Task:
    """Задача пользователя"""
    id: str
    text: str
    completed: bool = False
    priority: str = TaskPriority.MEDIUM.value
    created_at: str = field(default_factory=lambda: date.today().isoformat())

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.text = validate_text(self.text, min_length=1, max_length=500, field_name="text")
        self.priority = validate_enum_value(self.priority, TaskPriority, "priority")

    def toggle(self) -> bool:
        """Переключить статус выполнения"""
        self.completed = not self.completed
        return self.completed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "priority": self.priority,
            "createdAt": self.created_at
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data["id"]),
            text=data["text"],
            completed=data.get("completed", False),
            priority=data.get("priority", TaskPriority.MEDIUM.value),
            created_at=data.get("createdAt", date.today().isoformat())
        )

    @classmethod
    def create(cls, text: str, priority: str, created_at: str) -> "Task":
        """Создание новой задачи"""
        return cls(id=new_id(), text=text, priority=priority, created_at=created_at)

# ===== JOURNAL =====

UNTITLED_ENTRY = "Untitled Entry"

@dataclass
class JournalEntry:
    """Опубликованная запись журнала"""
    id: str
    date: str
    title: str
    content: str
    mood: Optional[str] = None
    status: str = EntryStatus.PUBLISHED.value

    def __post_init__(self):
        self.mood = validate_mood(self.mood)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "content": self.content,
            "mood": self.mood or "",
            "status": self.status
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JournalEntry":
        return cls(
            id=str(data["id"]),
            date=data["date"],
            title=data.get("title") or UNTITLED_ENTRY,
            content=data.get("content", ""),
            mood=data.get("mood") or None,
            status=data.get("status", EntryStatus.PUBLISHED.value)
        )

@dataclass
class JournalDraft:
    """Черновик записи, сохраняемый автоматически"""
    id: str
    user_id: Optional[str]
    title: str
    content: str
    mood: Optional[str] = None
    status: str = EntryStatus.DRAFT.value
    last_saved: str = field(default_factory=lambda: datetime.now().isoformat())
    created: str = field(default_factory=lambda: datetime.now().isoformat())

    def __post_init__(self):
        self.mood = validate_mood(self.mood)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "content": self.content,
            "mood": self.mood or "",
            "status": self.status,
            "lastSaved": self.last_saved,
            "created": self.created
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JournalDraft":
        return cls(
            id=str(data["id"]),
            user_id=data.get("userId"),
            title=data.get("title") or UNTITLED_ENTRY,
            content=data.get("content", ""),
            mood=data.get("mood") or None,
            status=data.get("status", EntryStatus.DRAFT.value),
            last_saved=data.get("lastSaved", datetime.now().isoformat()),
            created=data.get("created", datetime.now().isoformat())
        )

# ===== DAILY TRACKERS =====

@dataclass
class WaterLog:
    """Потребление воды за текущий день"""
    today: int = 0  # мл
    date: str = field(default_factory=lambda: date.today().isoformat())
    streak: int = 0

    def __post_init__(self):
        self.today = max(0, self.today)
        self.streak = max(0, self.streak)

    def to_dict(self) -> Dict[str, Any]:
        return {"today": self.today, "date": self.date, "streak": self.streak}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WaterLog":
        return cls(
            today=data.get("today", 0),
            date=data.get("date", date.today().isoformat()),
            streak=data.get("streak", 0)
        )

@dataclass
class PomodoroStats:
    """Счетчик помодоро-сессий за день"""
    sessions_today: int = 0
    date: str = field(default_factory=lambda: date.today().isoformat())

    def __post_init__(self):
        self.sessions_today = max(0, self.sessions_today)

    def to_dict(self) -> Dict[str, Any]:
        return {"sessionsToday": self.sessions_today, "date": self.date}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PomodoroStats":
        return cls(
            sessions_today=data.get("sessionsToday", 0),
            date=data.get("date", date.today().isoformat())
        )

@dataclass
class DailyProgress:
    """Снимок метрик за календарный день"""
    date: str
    tasks_completed: int = 0
    tasks_total: int = 0
    pomodoro_sessions: int = 0
    water_intake: int = 0
    water_goal: int = 2000
    journal_entries: int = 0

    @property
    def task_completion_percent(self) -> int:
        if self.tasks_total == 0:
            return 0
        return round(self.tasks_completed / self.tasks_total * 100)

    @property
    def water_completion_percent(self) -> int:
        if self.water_goal <= 0:
            return 0
        return round(self.water_intake / self.water_goal * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "tasksCompleted": self.tasks_completed,
            "tasksTotal": self.tasks_total,
            "pomodoroSessions": self.pomodoro_sessions,
            "waterIntake": self.water_intake,
            "waterGoal": self.water_goal,
            "journalEntries": self.journal_entries
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyProgress":
        return cls(
            date=data["date"],
            tasks_completed=data.get("tasksCompleted", 0),
            tasks_total=data.get("tasksTotal", 0),
            pomodoro_sessions=data.get("pomodoroSessions", 0),
            water_intake=data.get("waterIntake", 0),
            water_goal=data.get("waterGoal", 2000),
            journal_entries=data.get("journalEntries", 0)
        )

# ===== EXPORT =====

__all__ = [
    # Enums
    'TaskPriority', 'TaskFilter', 'Mood', 'EntryStatus', 'PomodoroMode', 'UserTheme',

    # Exceptions
    'ValidationError',

    # Helpers
    'validate_text', 'validate_enum_value', 'validate_mood', 'new_id', 'calculate_current_streak',

    # Models
    'UserPreferences', 'UserStats', 'User', 'Task', 'JournalEntry', 'JournalDraft',
    'WaterLog', 'PomodoroStats', 'DailyProgress', 'UNTITLED_ENTRY'
]
