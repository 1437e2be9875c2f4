from fastapi import APIRouter, Depends
from typing import Dict, Any

from services import SessionManager, UserSession
from shared.models import LoginRequest, SignupRequest, DeleteAccountRequest
from ..dependencies import get_session_manager, get_user_session

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _public_user(user) -> Dict[str, Any]:
    data = user.to_dict()
    data.pop("password", None)
    return data


@router.post("/login", response_model=Dict[str, Any])
async def login(
    body: LoginRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Вход по имени пользователя и паролю
    """
    user = manager.login(body.username, body.password)
    return {"user": _public_user(user), "welcome": manager.session.get_welcome()}


@router.post("/signup", response_model=Dict[str, Any], status_code=201)
async def signup(
    body: SignupRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Регистрация с автоматическим входом
    """
    user = manager.signup(body.model_dump())
    return {"user": _public_user(user), "welcome": manager.session.get_welcome()}


@router.post("/logout")
async def logout(manager: SessionManager = Depends(get_session_manager)):
    manager.logout()
    return {"success": True}


@router.get("/me", response_model=Dict[str, Any])
async def get_me(session: UserSession = Depends(get_user_session)):
    return {"user": _public_user(session.get_user())}


@router.get("/welcome")
async def get_welcome(session: UserSession = Depends(get_user_session)):
    """Экран с цитатой (null, если сегодня уже показан)"""
    return {"welcome": session.get_welcome()}


@router.post("/welcome/seen")
async def mark_welcome_seen(session: UserSession = Depends(get_user_session)):
    session.mark_quote_seen()
    return {"success": True}


@router.delete("/account")
async def delete_account(
    body: DeleteAccountRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Удаление аккаунта и всех данных пользователя
    """
    user_id = manager.delete_account(body.confirmUsername)
    return {"success": True, "deleted": user_id}
