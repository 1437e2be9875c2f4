from fastapi import APIRouter, Depends
from fastapi.responses import Response
from typing import Dict, Any

from services import UserSession
from services.export_service import dumps
from shared.models import SettingsUpdate, ReminderToggle
from ..dependencies import get_user_session

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/", response_model=Dict[str, Any])
async def get_settings(session: UserSession = Depends(get_user_session)):
    return session.settings.get_settings()


@router.put("/", response_model=Dict[str, Any])
async def save_settings(body: SettingsUpdate, session: UserSession = Depends(get_user_session)):
    """
    Сохранить профиль и настройки; числовые поля приводятся к int
    """
    session.settings.save_settings(
        name=body.name,
        water_goal=body.waterGoal,
        reminder_interval=body.reminderInterval,
        quiet_hours_start=body.quietHoursStart,
        quiet_hours_end=body.quietHoursEnd
    )
    return session.settings.get_settings()


@router.put("/reminders", response_model=Dict[str, Any])
async def toggle_reminders(body: ReminderToggle, session: UserSession = Depends(get_user_session)):
    enabled = session.settings.set_reminder_enabled(body.enabled)
    return {"reminderEnabled": enabled}


@router.get("/export")
async def export_data(session: UserSession = Depends(get_user_session)):
    """
    Скачать все данные пользователя одним JSON файлом
    """
    export = session.export()
    return Response(
        content=dumps(export["document"]),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export["filename"]}"'}
    )
