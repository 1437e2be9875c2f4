from fastapi import APIRouter, Depends, Query
from typing import Dict, Any

from services import UserSession
from shared.models import ProgressView
from ..dependencies import get_session, get_user_session

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("/", response_model=Dict[str, Any])
async def get_progress(
    session: UserSession = Depends(get_user_session),
    view: ProgressView = Query(ProgressView.WEEK)
):
    """
    Снимки за 7 или 30 дней, сводка за сегодня, средние за неделю и календарь активности
    """
    user = session.get_user()
    report = session.progress.get_report(view.value)
    report["currentStreak"] = user.stats.current_streak
    report["longestStreak"] = user.stats.longest_streak
    return report


@router.get("/dashboard", response_model=Dict[str, Any])
async def get_dashboard(session: UserSession = Depends(get_session)):
    """Главный экран: приветствие, цитата и ключевые метрики"""
    return session.get_dashboard()
