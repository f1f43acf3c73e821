"""Calendar navigation for browsing puzzles by date."""
from __future__ import annotations

import calendar
from datetime import date, timedelta
from enum import Enum

from brack.schemas import ProgressSnapshot

EARLIEST_YEAR = 2000

MOVES = {
    "left": -1,
    "h": -1,
    "right": 1,
    "l": 1,
    "up": -7,
    "k": -7,
    "down": 7,
    "j": 7,
}


class DayStatus(str, Enum):
    FUTURE = "future"
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    UNPLAYED = "unplayed"


class Calendar:
    """Cursor over the days up to today, one month in view at a time."""

    def __init__(self, today: date | None = None) -> None:
        self.today = today or date.today()
        self.cursor = self.today
        self.view_month = self.today.replace(day=1)

    @property
    def selected_date(self) -> date:
        return self.cursor

    def move(self, days: int) -> bool:
        """Move the cursor by ``days``.

        The cursor never goes past today or before the year 2000. Returns
        whether it moved.
        """
        try:
            new_cursor = self.cursor + timedelta(days=days)
        except OverflowError:
            return False

        if new_cursor > self.today or new_cursor.year < EARLIEST_YEAR:
            return False

        self.cursor = new_cursor
        if (new_cursor.year, new_cursor.month) != (self.view_month.year, self.view_month.month):
            self.view_month = new_cursor.replace(day=1)
        return True

    def handle_key(self, key: str) -> bool:
        """Apply a navigation key (h/j/k/l or arrow names). Unknown keys are ignored."""
        days = MOVES.get(key.strip().lower())
        if days is None:
            return False
        return self.move(days)

    def month_range(self) -> tuple[date, date]:
        """First and last day of the month in view."""
        _, days_in_month = calendar.monthrange(self.view_month.year, self.view_month.month)
        return self.view_month, self.view_month.replace(day=days_in_month)

    def weeks(self) -> list[list[date | None]]:
        """Days of the month in view, one list per Sunday-first week.

        Days outside the month are None.
        """
        month = calendar.Calendar(firstweekday=6)
        return [
            [day if day.month == self.view_month.month else None for day in week]
            for week in month.monthdatescalendar(self.view_month.year, self.view_month.month)
        ]

    def day_status(self, day: date, states: dict[str, ProgressSnapshot]) -> DayStatus:
        if day > self.today:
            return DayStatus.FUTURE

        snapshot = states.get(day.isoformat())
        if snapshot is None:
            return DayStatus.UNPLAYED
        if snapshot.completed:
            return DayStatus.COMPLETED
        return DayStatus.IN_PROGRESS
