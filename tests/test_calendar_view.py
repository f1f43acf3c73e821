"""Tests for calendar navigation."""
from datetime import date, datetime

import pytest

from brack.calendar_view import Calendar, DayStatus
from brack.schemas import ProgressSnapshot


def snapshot(puzzle_date: str, completed: bool) -> ProgressSnapshot:
    return ProgressSnapshot(
        puzzle_date=puzzle_date,
        state="",
        correct=1,
        incorrect=0,
        chars=0,
        last_played=datetime(2024, 9, 1),
        completed=completed,
    )


class TestCursor:
    """Tests for moving the selected day."""

    def test_starts_on_today(self):
        cal = Calendar(today=date(2024, 9, 15))
        assert cal.selected_date == date(2024, 9, 15)
        assert cal.view_month == date(2024, 9, 1)

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("h", date(2024, 9, 14)),
            ("left", date(2024, 9, 14)),
            ("k", date(2024, 9, 8)),
            ("up", date(2024, 9, 8)),
        ],
    )
    def test_moves_back(self, key, expected):
        cal = Calendar(today=date(2024, 9, 15))
        assert cal.handle_key(key) is True
        assert cal.selected_date == expected

    @pytest.mark.parametrize("key", ["l", "right", "j", "down"])
    def test_cannot_move_into_future(self, key):
        cal = Calendar(today=date(2024, 9, 15))
        assert cal.handle_key(key) is False
        assert cal.selected_date == date(2024, 9, 15)

    def test_moves_forward_up_to_today(self):
        cal = Calendar(today=date(2024, 9, 15))
        cal.handle_key("k")
        assert cal.handle_key("j") is True
        assert cal.selected_date == date(2024, 9, 15)

    def test_view_follows_cursor_across_months(self):
        cal = Calendar(today=date(2024, 9, 3))
        cal.handle_key("k")
        assert cal.selected_date == date(2024, 8, 27)
        assert cal.view_month == date(2024, 8, 1)

        cal.handle_key("j")
        assert cal.view_month == date(2024, 9, 1)

    def test_not_before_2000(self):
        cal = Calendar(today=date(2000, 1, 3))
        assert cal.handle_key("k") is False
        cal.move(-2)
        assert cal.selected_date == date(2000, 1, 1)
        assert cal.handle_key("h") is False

    def test_unknown_key_ignored(self):
        cal = Calendar(today=date(2024, 9, 15))
        assert cal.handle_key("x") is False
        assert cal.selected_date == date(2024, 9, 15)


class TestMonthGrid:
    """Tests for laying out the month in view."""

    def test_month_range(self):
        cal = Calendar(today=date(2024, 2, 10))
        assert cal.month_range() == (date(2024, 2, 1), date(2024, 2, 29))

    def test_weeks_start_on_sunday(self):
        cal = Calendar(today=date(2024, 9, 15))
        weeks = cal.weeks()
        assert weeks[0][0] == date(2024, 9, 1)
        assert all(len(week) == 7 for week in weeks)

    def test_padding_outside_month(self):
        cal = Calendar(today=date(2026, 10, 17))
        weeks = cal.weeks()
        assert weeks[0][:4] == [None, None, None, None]
        assert weeks[0][4] == date(2026, 10, 1)
        days = [day for week in weeks for day in week if day is not None]
        assert len(days) == 31


class TestDayStatus:
    """Tests for classifying days by progress."""

    def test_statuses(self):
        cal = Calendar(today=date(2024, 9, 15))
        states = {
            "2024-09-01": snapshot("2024-09-01", completed=True),
            "2024-09-02": snapshot("2024-09-02", completed=False),
        }
        assert cal.day_status(date(2024, 9, 1), states) is DayStatus.COMPLETED
        assert cal.day_status(date(2024, 9, 2), states) is DayStatus.IN_PROGRESS
        assert cal.day_status(date(2024, 9, 3), states) is DayStatus.UNPLAYED
        assert cal.day_status(date(2024, 9, 16), states) is DayStatus.FUTURE
