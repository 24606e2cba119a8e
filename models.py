from datetime import date
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set

from dates import days_in_month, shift_month


@dataclass
class Habit:
    name: str
    completed_dates: Set[str] = field(default_factory=set)


@dataclass
class HabitCollection:
    habits: List[Habit] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.habits)

    def __iter__(self) -> Iterator[Habit]:
        return iter(self.habits)

    def __getitem__(self, index: int) -> Habit:
        # Negative indices would silently pick the wrong row
        if not 0 <= index < len(self.habits):
            raise IndexError(f"habit index {index} out of range for {len(self.habits)} habits")
        return self.habits[index]

    def find(self, name: str) -> Optional[Habit]:
        wanted = name.lower()
        return next((h for h in self.habits if h.name.lower() == wanted), None)

    def names(self) -> List[str]:
        return [h.name for h in self.habits]


@dataclass
class ViewState:
    year: int
    month: int  # 1-12

    @classmethod
    def for_day(cls, d: date) -> "ViewState":
        return cls(year=d.year, month=d.month)

    def previous(self) -> "ViewState":
        year, month = shift_month(self.year, self.month, -1)
        return ViewState(year=year, month=month)

    def next(self) -> "ViewState":
        year, month = shift_month(self.year, self.month, 1)
        return ViewState(year=year, month=month)


def view_days(view: ViewState) -> List[date]:
    return days_in_month(view.year, view.month)


@dataclass
class AppState:
    habits: HabitCollection
    view: ViewState
    today: date


@dataclass
class ImportResult:
    accepted: bool
    habits: Optional[HabitCollection] = None
    reason: str = ""
