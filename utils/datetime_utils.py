from datetime import date, datetime, timedelta
from typing import Optional

from config import config


def now_local() -> datetime:
    return datetime.now(config.get_timezone())


def today_str(now: Optional[datetime] = None) -> str:
    """Календарная дата пользователя в ISO формате (YYYY-MM-DD)"""
    return (now or now_local()).strftime("%Y-%m-%d")


def parse_date(date_str: str) -> date:
    return date.fromisoformat(date_str)


def last_n_days(n: int, now: Optional[datetime] = None) -> list:
    """Последние n дат по возрастанию, включая сегодня"""
    today = parse_date(today_str(now))
    return [(today - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]


def hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600
