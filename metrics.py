"""
Streak and monthly completion figures for a single habit.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from dates import day_key
from models import Habit


@dataclass(frozen=True)
class MonthlyCompletion:
    done: int
    total: int
    pct: int


def current_streak(habit: Habit, today: date) -> int:
    """
    Count consecutive completed days ending at today.

    Stops at the first day missing from the habit's completion set; a habit
    not completed today has a streak of 0.
    """
    streak = 0
    current = today
    while day_key(current) in habit.completed_dates:
        streak += 1
        current -= timedelta(days=1)
    return streak


def _round_percent(done: int, total: int) -> int:
    # Halves round up: 12.5 -> 13
    return int((Decimal(100 * done) / Decimal(total)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def monthly_completion(habit: Habit, days: Sequence[date]) -> MonthlyCompletion:
    total = len(days)
    done = sum(1 for d in days if day_key(d) in habit.completed_dates)
    pct = _round_percent(done, total) if total else 0
    return MonthlyCompletion(done=done, total=total, pct=pct)
