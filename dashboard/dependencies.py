#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LifeSync Pro - Dashboard Dependencies
Провайдеры менеджера сессий и текущей сессии для FastAPI
"""

from fastapi import Depends, HTTPException, Request, status

from services import SessionManager, UserSession


async def get_session_manager(request: Request) -> SessionManager:
    """Менеджер сессий, созданный в lifespan приложения"""
    manager = getattr(request.app.state, "session_manager", None)
    if manager is None or not manager.initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not initialized"
        )
    return manager


async def get_session(manager: SessionManager = Depends(get_session_manager)) -> UserSession:
    """Сессия текущего пользователя или гостя"""
    return manager.session


async def get_user_session(manager: SessionManager = Depends(get_session_manager)) -> UserSession:
    """Сессия вошедшего пользователя; без входа NotAuthenticatedError -> 401"""
    return manager.require_session()
