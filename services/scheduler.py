# services/scheduler.py

import logging
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import config

logger = logging.getLogger(__name__)

DAILY_ROLLOVER_JOB = 'daily_rollover'
WATER_REMINDER_JOB = 'water_reminder'


def create_scheduler(timezone=None) -> AsyncIOScheduler:
    """Планировщик в часовом поясе приложения (запускается внутри event loop)"""
    return AsyncIOScheduler(timezone=timezone or config.get_timezone())


def schedule_daily_rollover(scheduler: AsyncIOScheduler, callback: Callable,
                            hour: int = 0, minute: int = 0) -> None:
    scheduler.add_job(
        callback,
        CronTrigger(hour=hour, minute=minute, timezone=scheduler.timezone),
        id=DAILY_ROLLOVER_JOB,
        replace_existing=True
    )
    logger.info(f"📅 Смена дня запланирована на {hour:02d}:{minute:02d}")


def schedule_interval(scheduler: AsyncIOScheduler, callback: Callable, seconds: int,
                      job_id: str) -> None:
    scheduler.add_job(
        callback,
        'interval',
        seconds=seconds,
        id=job_id,
        replace_existing=True
    )


def remove_job_safely(scheduler: Optional[AsyncIOScheduler], job_id: str) -> bool:
    """Удалить задачу, если она есть"""
    if scheduler is None:
        return False
    try:
        scheduler.remove_job(job_id)
        return True
    except JobLookupError:
        return False
