from fastapi import APIRouter, Depends
from typing import Dict, Any, Optional

from services import UserSession
from shared.models import WaterAdd
from ..dependencies import get_session

router = APIRouter(prefix="/api/water", tags=["water"])


@router.get("/", response_model=Dict[str, Any])
async def get_water(session: UserSession = Depends(get_session)):
    """
    Выпито за сегодня, цель, серия и прогресс
    """
    return session.water.get_summary()


@router.post("/", response_model=Dict[str, Any])
async def add_water(body: Optional[WaterAdd] = None, session: UserSession = Depends(get_session)):
    session.water.add_water(body.amount if body else None)
    return session.water.get_summary()


@router.post("/reset", response_model=Dict[str, Any])
async def reset_water(session: UserSession = Depends(get_session)):
    session.water.reset_today()
    return session.water.get_summary()


@router.get("/reminder", response_model=Dict[str, Any])
async def get_reminder(session: UserSession = Depends(get_session)):
    return session.reminders.get_state()


@router.post("/reminder/check", response_model=Dict[str, Any])
async def check_reminder(session: UserSession = Depends(get_session)):
    fired = session.reminders.check()
    return {"fired": fired, **session.reminders.get_state()}


@router.post("/reminder/drink", response_model=Dict[str, Any])
async def drink_from_reminder(session: UserSession = Depends(get_session)):
    """
    Кнопка в окне напоминания: +250 мл и закрыть окно
    """
    session.reminders.drink()
    return session.water.get_summary()


@router.post("/reminder/dismiss", response_model=Dict[str, Any])
async def dismiss_reminder(session: UserSession = Depends(get_session)):
    session.reminders.dismiss()
    return session.reminders.get_state()
