"""Capacity and double-booking checks"""

from datetime import date
from typing import Optional
from uuid import UUID

from jarimae.booking.errors import PartySizeExceedsCapacity, TimeSlotUnavailable


def ensure_party_fits(store, party_size: int) -> None:
    if party_size > store.capacity:
        raise PartySizeExceedsCapacity(
            f"Party size exceeds the store's maximum capacity ({store.capacity} guests)"
        )


async def has_conflict(
    repo,
    store_id: UUID,
    reservation_date: date,
    reservation_time: str,
    exclude_reservation_id: Optional[UUID] = None,
) -> bool:
    """True when another active reservation already holds the exact slot"""
    count = await repo.count_active_reservations(
        store_id, reservation_date, reservation_time, exclude_reservation_id
    )
    return count > 0


async def ensure_slot_free(
    repo,
    store_id: UUID,
    reservation_date: date,
    reservation_time: str,
    exclude_reservation_id: Optional[UUID] = None,
) -> None:
    if await has_conflict(repo, store_id, reservation_date, reservation_time, exclude_reservation_id):
        raise TimeSlotUnavailable()
