from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


def format_iso_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def month_label(month: int, year: int) -> str:
    """E.g. 'February 2024'."""
    return f"{calendar.month_name[int(month)]} {int(year)}"


def now_local() -> datetime:
    """Current local time (single place for tests to patch)."""
    return datetime.now()
