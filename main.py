#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LifeSync Pro v1.0
Персональный дашборд благополучия: задачи, помодоро, вода, журнал и прогресс

Версия: 1.0.0
Дата: 2025-10-30
"""

import argparse
import logging
import sys

import uvicorn

from config import config
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Запуск LifeSync Pro')
    parser.add_argument('--host', default=config.server.host, help='Host для запуска')
    parser.add_argument('--port', type=int, default=config.server.port, help='Port для запуска')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logger()
    config.ensure_directories()

    logger.info(f"🌐 Запуск LifeSync Pro на http://{args.host}:{args.port}")
    logger.info(f"🔧 Окружение: {config.environment.value}")

    try:
        uvicorn.run(
            "dashboard.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_config=None,
            server_header=False
        )
    except KeyboardInterrupt:
        logger.info("👋 LifeSync Pro остановлен")
    return 0


if __name__ == "__main__":
    sys.exit(main())
