import calendar
from datetime import date
from typing import List, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from dates import day_key, is_same_calendar_day
from metrics import MonthlyCompletion, current_streak, monthly_completion
from models import HabitCollection, ViewState


def month_label(view: ViewState) -> str:
    return f"{calendar.month_name[view.month]} {view.year}"


def streak_label(streak: int) -> str:
    return f"{streak}-day streak"


def completion_label(completion: MonthlyCompletion) -> str:
    return f"{completion.pct}% ({completion.done}/{completion.total})"


def grid_frame(collection: HabitCollection, days: List[date], today: date) -> pd.DataFrame:
    """One row per habit: a checkbox column per day plus the streak and month labels"""
    rows = []
    for habit in collection:
        row = {d.day: day_key(d) in habit.completed_dates for d in days}
        row["Streak"] = streak_label(current_streak(habit, today))
        row["Month"] = completion_label(monthly_completion(habit, days))
        rows.append(row)

    df = pd.DataFrame(rows, columns=[d.day for d in days] + ["Streak", "Month"])
    df.index = pd.Index(collection.names(), name="Habit")
    # Arrow-backed widgets want string column labels
    df.columns = [str(c) for c in df.columns]
    return df


def grid_changes(before: pd.DataFrame, after: pd.DataFrame, days: List[date]) -> List[Tuple[int, str, bool]]:
    """(habit_index, day_key, checked) for every day cell that differs between two grids"""
    changes = []
    for row in range(min(len(before), len(after))):
        for d in days:
            column = str(d.day)
            checked = bool(after.iloc[row][column])
            if checked != bool(before.iloc[row][column]):
                changes.append((row, day_key(d), checked))
    return changes


def completion_matrix(collection: HabitCollection, days: List[date]) -> np.ndarray:
    matrix = np.zeros((len(collection), len(days)), dtype=int)
    keys = [day_key(d) for d in days]
    for row, habit in enumerate(collection):
        for col, key in enumerate(keys):
            if key in habit.completed_dates:
                matrix[row, col] = 1
    return matrix


def month_heatmap(collection: HabitCollection, days: List[date], today: date):
    """Heatmap of completed days for the month, today's column outlined"""
    matrix = completion_matrix(collection, days)

    fig, ax = plt.subplots(figsize=(12, 0.6 * max(len(collection), 1) + 1.5))
    cmap = plt.get_cmap("RdYlGn")

    ax.pcolor(matrix, cmap=cmap, vmin=0, vmax=1, edgecolors="w", linewidths=2)

    # Set labels
    ax.set_xticks(np.arange(len(days)) + 0.5)
    ax.set_yticks(np.arange(len(collection)) + 0.5)
    ax.set_xticklabels([d.day for d in days], fontsize=8)
    ax.set_yticklabels(collection.names(), fontweight="bold")
    ax.invert_yaxis()

    for col, d in enumerate(days):
        if is_same_calendar_day(d, today):
            ax.add_patch(plt.Rectangle((col, 0), 1, len(collection), fill=False, edgecolor="black", linewidth=2))

    fig.tight_layout()
    return fig
