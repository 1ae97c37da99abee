"""Reservation lifecycle core: slot validation, conflicts, permissions, transitions"""

from jarimae.booking.errors import ReservationError
from jarimae.booking.permissions import Caller
from jarimae.booking.service import ReservationService

__all__ = ["Caller", "ReservationError", "ReservationService"]
