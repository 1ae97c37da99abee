"""Who may see and change a reservation"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from jarimae.booking.hours import slot_datetime
from jarimae.models.reservation import ACTIVE_STATUSES, ReservationStatus
from jarimae.models.user import UserType


@dataclass(frozen=True)
class Caller:
    """Authenticated identity attached to a request"""
    user_id: UUID
    role: UserType


def _owns_reservation(caller: Caller, reservation) -> bool:
    return caller.role == UserType.CUSTOMER and reservation.customer_id == caller.user_id


def _owns_store(caller: Caller, reservation) -> bool:
    return caller.role == UserType.OWNER and reservation.store.owner_id == caller.user_id


def can_view(caller: Caller, reservation) -> bool:
    return (
        caller.role == UserType.ADMIN
        or _owns_reservation(caller, reservation)
        or _owns_store(caller, reservation)
    )


def can_update(caller: Caller, reservation) -> bool:
    """Detail edits follow the same rules as viewing"""
    return can_view(caller, reservation)


def can_update_status(caller: Caller, reservation, new_status: ReservationStatus) -> bool:
    """Customers may only cancel their own reservations"""
    if caller.role == UserType.ADMIN or _owns_store(caller, reservation):
        return True
    return _owns_reservation(caller, reservation) and new_status == ReservationStatus.CANCELLED


def can_review(caller: Caller, reservation, has_review: bool) -> bool:
    return (
        _owns_reservation(caller, reservation)
        and reservation.status == ReservationStatus.COMPLETED
        and not has_review
    )


def can_cancel(caller: Caller, reservation, now: datetime) -> bool:
    return (
        reservation.status in ACTIVE_STATUSES
        and slot_datetime(reservation.reservation_date, reservation.reservation_time) > now
        and (
            caller.role == UserType.ADMIN
            or _owns_reservation(caller, reservation)
            or _owns_store(caller, reservation)
        )
    )


def derived_permissions(caller: Caller, reservation, has_review: bool, now: datetime) -> dict:
    """UI-facing flags; ``can_modify`` mirrors ``can_cancel``"""
    cancel = can_cancel(caller, reservation, now)
    return {
        "can_review": can_review(caller, reservation, has_review),
        "can_cancel": cancel,
        "can_modify": cancel,
    }
