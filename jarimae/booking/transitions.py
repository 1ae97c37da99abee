"""Reservation status state machine

    PENDING   -> CONFIRMED | CANCELLED
    CONFIRMED -> COMPLETED | CANCELLED | NO_SHOW
    COMPLETED, CANCELLED, NO_SHOW are terminal.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from jarimae.booking.errors import InvalidStatusTransition
from jarimae.models.reservation import ReservationStatus

ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({
        ReservationStatus.COMPLETED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.NO_SHOW: frozenset(),
}

# Statuses with no outgoing transitions
TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def is_transition_allowed(current: ReservationStatus, requested: ReservationStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def plan_transition(
    current: ReservationStatus,
    requested: ReservationStatus,
    now: datetime,
    cancellation_reason: Optional[str] = None,
    total_amount: Optional[int] = None,
) -> Dict[str, Any]:
    """Return the column changes for a legal transition.

    Raises ``InvalidStatusTransition`` when ``requested`` is not reachable
    from ``current``. ``cancellation_reason`` is only kept for CANCELLED and
    cleared otherwise; ``total_amount`` is cleared on cancellation and only
    recorded on completion.
    """
    if not is_transition_allowed(current, requested):
        raise InvalidStatusTransition(current, requested)

    changes: Dict[str, Any] = {
        "status": requested,
        "cancellation_reason": None,
    }

    if requested == ReservationStatus.CONFIRMED:
        changes["confirmed_at"] = now
    elif requested == ReservationStatus.CANCELLED:
        changes["cancellation_reason"] = cancellation_reason
        changes["total_amount"] = None
    elif requested == ReservationStatus.COMPLETED:
        changes["completed_at"] = now
        if total_amount is not None:
            changes["total_amount"] = total_amount

    return changes
