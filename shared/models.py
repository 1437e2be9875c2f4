from pydantic import BaseModel, Field, field_validator
from typing import Optional, Union
from enum import Enum

from core.models import PomodoroMode, TaskPriority

# Перечисления API
class ProgressView(str, Enum):
    WEEK = "week"
    MONTH = "month"

# Авторизация
class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""

class SignupRequest(BaseModel):
    name: str = ""
    username: str = ""
    password: str = ""
    confirmPassword: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

class DeleteAccountRequest(BaseModel):
    confirmUsername: str = ""

# Задачи
class TaskCreate(BaseModel):
    text: str
    priority: TaskPriority = TaskPriority.MEDIUM

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        if not v.strip():
            raise ValueError('Task text cannot be empty')
        return v

# Вода
class WaterAdd(BaseModel):
    amount: int = Field(250, gt=0, le=5000)

# Помодоро
class PomodoroModeChange(BaseModel):
    mode: PomodoroMode

# Журнал
class JournalForm(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    mood: Optional[str] = None

class JournalPublish(BaseModel):
    title: str = ""
    content: str = ""
    mood: Optional[str] = None

# Настройки (значения формы могут прийти строками)
class SettingsUpdate(BaseModel):
    name: Optional[str] = None
    waterGoal: Union[int, str] = 2000
    reminderInterval: Union[int, str] = 3600
    quietHoursStart: Union[int, str] = 22
    quietHoursEnd: Union[int, str] = 8

class ReminderToggle(BaseModel):
    enabled: bool

# Служебные модели
class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
