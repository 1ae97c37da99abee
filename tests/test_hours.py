"""Tests for business-hours slot validation"""

from datetime import date
from types import SimpleNamespace

import pytest

from jarimae.booking.errors import BreakTime, OutsideBusinessHours, StoreClosed
from jarimae.booking.hours import (
    check_time_allowed,
    day_of_week,
    ensure_time_allowed,
    format_minutes,
    to_minutes,
)

# 2030-01-06 is a Sunday
SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)


def hours(day, open_time="11:00", close_time="22:00", is_closed=False, break_start=None, break_end=None):
    return SimpleNamespace(
        day_of_week=day,
        open_time=open_time,
        close_time=close_time,
        is_closed=is_closed,
        break_start=break_start,
        break_end=break_end,
    )


WEEK = [hours(day, break_start="15:00", break_end="17:00") for day in range(1, 7)] + [hours(0, is_closed=True)]


def test_minutes_conversion():
    assert to_minutes("00:00") == 0
    assert to_minutes("11:30") == 690
    assert format_minutes(690) == "11:30"
    assert format_minutes(to_minutes("23:59")) == "23:59"


def test_day_of_week_starts_on_sunday():
    assert day_of_week(SUNDAY) == 0
    assert day_of_week(MONDAY) == 1
    assert day_of_week(date(2030, 1, 12)) == 6


def test_closed_day_is_rejected():
    check = check_time_allowed(WEEK, SUNDAY, "12:00")
    assert not check.allowed
    assert check.reason == "STORE_CLOSED"


def test_missing_day_is_rejected_as_closed():
    check = check_time_allowed([hours(3)], MONDAY, "12:00")
    assert not check.allowed
    assert check.reason == "STORE_CLOSED"


@pytest.mark.parametrize("time,allowed", [
    ("11:00", True),
    ("18:30", True),
    ("22:00", True),
    ("22:01", False),
    ("10:59", False),
])
def test_open_and_close_bounds(time, allowed):
    check = check_time_allowed(WEEK, MONDAY, time)
    assert check.allowed is allowed
    if not allowed:
        assert check.reason == "OUTSIDE_BUSINESS_HOURS"
        assert "11:00-22:00" in check.message


def test_break_time_ignored_by_default():
    assert check_time_allowed(WEEK, MONDAY, "15:30", enforce_break_time=False).allowed


def test_break_time_enforced_when_enabled():
    check = check_time_allowed(WEEK, MONDAY, "15:30", enforce_break_time=True)
    assert not check.allowed
    assert check.reason == "BREAK_TIME"

    # Break window is half-open
    assert check_time_allowed(WEEK, MONDAY, "15:00", enforce_break_time=True).reason == "BREAK_TIME"
    assert check_time_allowed(WEEK, MONDAY, "17:00", enforce_break_time=True).allowed


def test_ensure_time_allowed_raises_matching_error():
    with pytest.raises(StoreClosed):
        ensure_time_allowed(WEEK, SUNDAY, "12:00")

    with pytest.raises(OutsideBusinessHours) as exc_info:
        ensure_time_allowed(WEEK, MONDAY, "23:00")
    assert exc_info.value.status_code == 400

    assert ensure_time_allowed(WEEK, MONDAY, "12:00").day_of_week == 1


def test_ensure_time_allowed_break(monkeypatch):
    from jarimae.config import settings

    monkeypatch.setattr(settings, "enforce_break_time", True)
    with pytest.raises(BreakTime):
        ensure_time_allowed(WEEK, MONDAY, "16:00")
