"""Business-hours validation for reservation slots"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, Optional
from zoneinfo import ZoneInfo

from jarimae.booking.errors import SLOT_ERRORS, BreakTime, OutsideBusinessHours, StoreClosed
from jarimae.config import settings

TIME_FORMAT = "%H:%M"


@dataclass(frozen=True)
class SlotCheck:
    """Outcome of a business-hours check"""
    allowed: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    hours: Any = None


def to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def format_minutes(minutes: int) -> str:
    """Convert minutes since midnight back to "HH:MM" """
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_time(value: str) -> time:
    return datetime.strptime(value, TIME_FORMAT).time()


def slot_datetime(reservation_date: date, reservation_time: str) -> datetime:
    """Naive local datetime at which a slot starts"""
    return datetime.combine(reservation_date, parse_time(reservation_time))


def local_now() -> datetime:
    """Current wall-clock time in the marketplace timezone, without tzinfo"""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def day_of_week(day: date) -> int:
    """Day index used by business hours: 0 = Sunday ... 6 = Saturday"""
    return day.isoweekday() % 7


def find_hours(business_hours: Iterable[Any], day: date):
    weekday = day_of_week(day)
    for hours in business_hours:
        if hours.day_of_week == weekday:
            return hours
    return None


def in_break(hours: Any, minutes: int) -> bool:
    if not hours.break_start or not hours.break_end:
        return False
    return to_minutes(hours.break_start) <= minutes < to_minutes(hours.break_end)


def check_time_allowed(
    business_hours: Iterable[Any],
    reservation_date: date,
    reservation_time: str,
    enforce_break_time: Optional[bool] = None,
) -> SlotCheck:
    """Decide whether a reservation may start at the given date and time.

    The closing time is inclusive: a reservation starting exactly at
    ``close_time`` is accepted. Break windows are only enforced when
    ``enforce_break_time`` is on (defaults to the ``enforce_break_time``
    setting).
    """
    if enforce_break_time is None:
        enforce_break_time = settings.enforce_break_time

    hours = find_hours(business_hours, reservation_date)
    if hours is None or hours.is_closed:
        return SlotCheck(
            allowed=False,
            reason=StoreClosed.code,
            message=StoreClosed.default_message,
            hours=hours,
        )

    requested = to_minutes(reservation_time)
    if requested < to_minutes(hours.open_time) or requested > to_minutes(hours.close_time):
        return SlotCheck(
            allowed=False,
            reason=OutsideBusinessHours.code,
            message=f"Reservations are only available during business hours ({hours.open_time}-{hours.close_time})",
            hours=hours,
        )

    if enforce_break_time and in_break(hours, requested):
        return SlotCheck(
            allowed=False,
            reason=BreakTime.code,
            message=f"Store is on break between {hours.break_start} and {hours.break_end}",
            hours=hours,
        )

    return SlotCheck(allowed=True, hours=hours)


def ensure_time_allowed(business_hours, reservation_date: date, reservation_time: str):
    """Raise the matching ``ReservationError`` when the slot is not bookable"""
    check = check_time_allowed(business_hours, reservation_date, reservation_time)
    if not check.allowed:
        raise SLOT_ERRORS[check.reason](check.message)
    return check.hours
