from fastapi import APIRouter, Depends
from typing import Dict, Any

from services import UserSession
from shared.models import PomodoroModeChange
from ..dependencies import get_session

router = APIRouter(prefix="/api/pomodoro", tags=["pomodoro"])


def _state(session: UserSession) -> Dict[str, Any]:
    return {**session.timer.get_state(), "sessionsToday": session.pomodoro.sessions_today()}


@router.get("/", response_model=Dict[str, Any])
async def get_timer(session: UserSession = Depends(get_session)):
    """
    Режим, номер сессии, оставшееся время и сессии за сегодня
    """
    return _state(session)


@router.post("/start", response_model=Dict[str, Any])
async def start_timer(session: UserSession = Depends(get_session)):
    session.timer.start()
    return _state(session)


@router.post("/pause", response_model=Dict[str, Any])
async def pause_timer(session: UserSession = Depends(get_session)):
    session.timer.pause()
    return _state(session)


@router.post("/toggle", response_model=Dict[str, Any])
async def toggle_timer(session: UserSession = Depends(get_session)):
    session.timer.toggle()
    return _state(session)


@router.post("/reset", response_model=Dict[str, Any])
async def reset_timer(session: UserSession = Depends(get_session)):
    session.timer.reset()
    return _state(session)


@router.post("/mode", response_model=Dict[str, Any])
async def change_mode(body: PomodoroModeChange, session: UserSession = Depends(get_session)):
    session.timer.change_mode(body.mode)
    return _state(session)
