"""Database models"""

from jarimae.models.user import User, UserType
from jarimae.models.store import Store, StoreStatus, BusinessHour, Table
from jarimae.models.reservation import Reservation, ReservationStatus, ReservationLog
from jarimae.models.review import Review

__all__ = [
    "User",
    "UserType",
    "Store",
    "StoreStatus",
    "BusinessHour",
    "Table",
    "Reservation",
    "ReservationStatus",
    "ReservationLog",
    "Review",
]
