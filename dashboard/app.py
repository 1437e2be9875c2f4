#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LifeSync Pro Web Dashboard - FastAPI Application
HTTP API для задач, воды, помодоро, журнала, прогресса и настроек

Версия: 1.0.0
Дата: 2025-10-30
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import config
from core.database import StorageError
from core.models import ValidationError
from services import (
    SessionManager, get_session_manager,
    InvalidCredentialsError, UsernameTakenError, NotAuthenticatedError, AuthError
)
from shared.models import HealthCheck
from dashboard.api import auth, tasks, water, pomodoro, journal, progress, settings

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(session_manager: Optional[SessionManager] = None,
               use_scheduler: bool = True) -> FastAPI:
    """Фабрика приложения; менеджер сессий можно подменить в тестах"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        logger.info("🚀 Запуск LifeSync Pro Dashboard...")
        app.state.start_time = time.time()

        manager = session_manager or get_session_manager()
        manager.initialize(use_scheduler=use_scheduler)
        app.state.session_manager = manager

        logger.info(f"👥 Пользователей в реестре: {manager.auth.get_users_count()}")
        logger.info(f"🌐 Dashboard доступен на: http://{config.server.host}:{config.server.port}")

        yield

        logger.info("🛑 Остановка Dashboard...")
        manager.close()
        app.state.session_manager = None
        logger.info("✅ Ресурсы очищены")

    app = FastAPI(
        title="LifeSync Pro",
        description="Персональный дашборд: задачи, помодоро, вода, журнал и прогресс",
        version=VERSION,
        docs_url="/api/docs" if config.server.debug_mode else None,
        redoc_url="/api/redoc" if config.server.debug_mode else None,
        lifespan=lifespan
    )

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Логирование запросов"""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

    # ===== ОБРАБОТЧИКИ ОШИБОК =====

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        if isinstance(exc, UsernameTakenError):
            status_code = 409
        elif isinstance(exc, (InvalidCredentialsError, NotAuthenticatedError)):
            status_code = 401
        else:
            status_code = 400
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"❌ Ошибка хранилища: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Обработчик HTTP исключений"""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "status_code": exc.status_code
            }
        )

    # ===== API =====

    for module in (auth, tasks, water, pomodoro, journal, progress, settings):
        app.include_router(module.router)

    # ===== СЛУЖЕБНЫЕ МАРШРУТЫ =====

    @app.get("/health", response_model=HealthCheck)
    async def health_check(request: Request):
        """Health check для мониторинга"""
        manager = getattr(request.app.state, "session_manager", None)
        health = manager.health_check() if manager else {"status": "error"}
        if health["status"] == "error":
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "lifesync",
                    "timestamp": time.time()
                }
            )
        return HealthCheck(
            status=health["status"],
            service="lifesync",
            version=VERSION,
            timestamp=time.time()
        )

    @app.get("/api/info")
    async def api_info(request: Request):
        """Информация об API"""
        manager = getattr(request.app.state, "session_manager", None)
        return {
            "name": "LifeSync Pro API",
            "version": VERSION,
            "environment": config.environment.value,
            "uptime": time.time() - getattr(request.app.state, "start_time", time.time()),
            "services": manager.get_services_info() if manager else None,
            "endpoints": {
                "auth": "/api/auth",
                "tasks": "/api/tasks",
                "water": "/api/water",
                "pomodoro": "/api/pomodoro",
                "journal": "/api/journal",
                "progress": "/api/progress",
                "settings": "/api/settings"
            }
        }

    @app.get("/ping")
    async def ping():
        """Простой ping endpoint"""
        return {"message": "pong", "timestamp": time.time(), "service": "lifesync"}

    return app


app = create_app()
