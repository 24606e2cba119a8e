from datetime import date, datetime, timedelta
from typing import List, Tuple


def today_local() -> date:
    """Today's calendar day in the machine's local time"""
    return datetime.now().date()


def day_key(d) -> str:
    """Format a date (or datetime) as YYYY-MM-DD from its own calendar fields"""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def days_in_month(year: int, month: int) -> List[date]:
    # Last day is the day before the 1st of the next month
    first_of_next = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    last_day = (first_of_next - timedelta(days=1)).day
    return [date(year, month, day) for day in range(1, last_day + 1)]


def is_same_calendar_day(a, b) -> bool:
    return a.year == b.year and a.month == b.month and a.day == b.day


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move delta months forward (or back), wrapping across years"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
