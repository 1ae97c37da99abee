"""Reservation error taxonomy

Every business-rule rejection is a ``ReservationError`` subclass carrying a
stable ``code`` and the HTTP status it maps to. The API layer turns them into
``{"error": {"code", "message"}}`` responses.
"""

from typing import Optional


class ReservationError(Exception):
    """Base class for reservation business errors"""

    code = "RESERVATION_ERROR"
    status_code = 400
    default_message = "Reservation request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ReservationError):
    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(ReservationError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "You do not have permission for this reservation"


class InvalidRole(ReservationError):
    code = "INVALID_ROLE"
    status_code = 403
    default_message = "Unrecognized user role"


class ReservationNotFound(ReservationError):
    code = "RESERVATION_NOT_FOUND"
    status_code = 404
    default_message = "Reservation not found"


class StoreNotFound(ReservationError):
    code = "STORE_NOT_FOUND"
    status_code = 404
    default_message = "Store not found"


class TableNotFound(ReservationError):
    code = "TABLE_NOT_FOUND"
    status_code = 404
    default_message = "Table not found for this store"


class StoreInactive(ReservationError):
    code = "STORE_INACTIVE"
    default_message = "Store is not currently taking reservations"


class ReservationsNotAccepted(ReservationError):
    code = "RESERVATIONS_NOT_ACCEPTED"
    default_message = "Store does not accept reservations"


class ReservationNotModifiable(ReservationError):
    code = "RESERVATION_NOT_MODIFIABLE"
    default_message = "Reservation can no longer be modified"


class ReservationInPast(ReservationError):
    code = "RESERVATION_IN_PAST"
    default_message = "Past reservations cannot be modified"


class StoreClosed(ReservationError):
    code = "STORE_CLOSED"
    default_message = "Store is closed on the requested date"


class OutsideBusinessHours(ReservationError):
    code = "OUTSIDE_BUSINESS_HOURS"
    default_message = "Requested time is outside business hours"


class BreakTime(ReservationError):
    code = "BREAK_TIME"
    default_message = "Requested time falls within the store's break time"


class PartySizeExceedsCapacity(ReservationError):
    code = "PARTY_SIZE_EXCEEDS_CAPACITY"
    default_message = "Party size exceeds store capacity"


class TimeSlotUnavailable(ReservationError):
    code = "TIME_SLOT_UNAVAILABLE"
    default_message = "Requested time slot is unavailable, please choose another time"


class InvalidStatusTransition(ReservationError):
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change reservation status from {_name(current)} to {_name(requested)}"
        )


class ReviewNotAllowed(ReservationError):
    code = "REVIEW_NOT_ALLOWED"
    default_message = "Only completed, unreviewed reservations can be reviewed"


class DatabaseError(ReservationError):
    code = "DATABASE_ERROR"
    status_code = 500
    default_message = "A database error occurred"


def _name(status) -> str:
    return getattr(status, "value", status)


# Reasons reported by the slot validator, keyed to the error raised for them
SLOT_ERRORS = {
    StoreClosed.code: StoreClosed,
    OutsideBusinessHours.code: OutsideBusinessHours,
    BreakTime.code: BreakTime,
}
