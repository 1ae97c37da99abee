"""Reservation lifecycle orchestration

``ReservationService`` composes the slot validator, conflict checker,
permission resolver and status state machine on top of
``ReservationRepository``. Each public method is one request: it loads what
it needs, gates access, validates, writes inside the session's transaction
and commits once.
"""

import uuid
from datetime import date, datetime
from typing import Callable, Optional
from uuid import UUID

import structlog

from jarimae.booking.conflicts import ensure_party_fits, ensure_slot_free
from jarimae.booking.errors import (
    Forbidden,
    ReservationInPast,
    ReservationNotFound,
    ReservationNotModifiable,
    ReservationsNotAccepted,
    ReviewNotAllowed,
    StoreClosed,
    StoreInactive,
    StoreNotFound,
    TableNotFound,
    TimeSlotUnavailable,
)
from jarimae.booking.hours import (
    ensure_time_allowed,
    find_hours,
    format_minutes,
    in_break,
    local_now,
    slot_datetime,
    to_minutes,
)
from jarimae.booking.permissions import (
    Caller,
    can_review,
    can_update,
    can_update_status,
    can_view,
    derived_permissions,
)
from jarimae.booking.repository import ReservationRepository
from jarimae.booking.transitions import plan_transition
from jarimae.config import settings
from jarimae.jobs.notifier import ReservationNotifier
from jarimae.models.reservation import ACTIVE_STATUSES, Reservation, ReservationStatus
from jarimae.models.review import Review
from jarimae.models.store import StoreStatus
from jarimae.models.user import UserType
from jarimae.schemas.reservation import (
    AvailabilityResponse,
    AvailabilitySlot,
    BusinessHoursInfo,
    CustomerSummary,
    PreferredTimeResult,
    ReservationCreate,
    ReservationDetailResponse,
    ReservationListResponse,
    ReservationResponse,
    ReservationSearch,
    ReservationStatusUpdate,
    ReservationUpdate,
    ReviewCreate,
    ReviewSummary,
    StoreSummary,
)

logger = structlog.get_logger()

RESERVATION_FIELDS = (
    "id",
    "reservation_number",
    "table_id",
    "reservation_date",
    "reservation_time",
    "party_size",
    "status",
    "special_requests",
    "contact_phone",
    "contact_name",
    "estimated_duration",
    "deposit_amount",
    "total_amount",
    "cancellation_reason",
    "confirmed_at",
    "completed_at",
    "created_at",
    "updated_at",
)

# Slot fields that may not be cleared by an update
REQUIRED_DETAIL_FIELDS = ("reservation_date", "reservation_time", "party_size")


def reservation_number(reservation_id: UUID, reservation_date: date) -> str:
    return f"JRM-{reservation_date:%Y%m%d}-{reservation_id.hex[:6].upper()}"


def ensure_store_bookable(store) -> None:
    if not store:
        raise StoreNotFound()
    if store.status != StoreStatus.ACTIVE:
        raise StoreInactive()
    if not store.accepts_reservations:
        raise ReservationsNotAccepted()


class ReservationService:
    """Reservation operations for one request"""

    def __init__(
        self,
        db,
        notifier: Optional[ReservationNotifier] = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.repo = ReservationRepository(db)
        self.notifier = notifier or ReservationNotifier()
        self.clock = clock

    async def _load(self, reservation_id: UUID) -> Reservation:
        reservation = await self.repo.find_reservation_by_id(reservation_id)
        if not reservation:
            raise ReservationNotFound()
        return reservation

    def shape(self, caller: Caller, reservation: Reservation, model=ReservationResponse, **extra):
        """Build the caller's view; customers never get the customer block"""
        fields = {name: getattr(reservation, name) for name in RESERVATION_FIELDS}
        fields["store"] = StoreSummary.model_validate(reservation.store)
        fields["review"] = ReviewSummary.model_validate(reservation.review) if reservation.review else None
        if caller.role != UserType.CUSTOMER:
            fields["customer"] = CustomerSummary.model_validate(reservation.customer)
        return model(**fields, **extra)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_reservation(self, caller: Caller, reservation_id: UUID) -> ReservationDetailResponse:
        reservation = await self._load(reservation_id)

        if not can_view(caller, reservation):
            raise Forbidden("You do not have permission to view this reservation")

        permissions = derived_permissions(
            caller, reservation, has_review=reservation.review is not None, now=self.clock()
        )
        return self.shape(caller, reservation, ReservationDetailResponse, permissions=permissions)

    async def list_reservations(self, caller: Caller, filters: ReservationSearch) -> ReservationListResponse:
        customer_id = None
        store_ids = None

        if caller.role == UserType.CUSTOMER:
            customer_id = caller.user_id
            filters = filters.model_copy(update={"customer_id": None})
        elif caller.role == UserType.OWNER:
            store_ids = await self.repo.owned_store_ids(caller.user_id)
            if not store_ids:
                return ReservationListResponse(
                    items=[], total=0, page=filters.page, page_size=filters.page_size
                )

        reservations, total = await self.repo.list_reservations(
            filters, customer_id=customer_id, store_ids=store_ids
        )
        return ReservationListResponse(
            items=[self.shape(caller, reservation) for reservation in reservations],
            total=total,
            page=filters.page,
            page_size=filters.page_size,
        )

    async def check_availability(
        self,
        store_id: UUID,
        reservation_date: date,
        party_size: int,
        preferred_time: Optional[str] = None,
    ) -> AvailabilityResponse:
        """Bookable slots for one day.

        A slot is available when no active reservation starts exactly at it
        and the seats left during its meal window fit the party.
        """
        store = await self.repo.get_store(store_id)
        ensure_store_bookable(store)

        base = {"store_id": store.id, "reservation_date": reservation_date, "party_size": party_size}

        if party_size > store.capacity:
            return AvailabilityResponse(
                **base,
                available=False,
                message=f"Party size exceeds the store's maximum capacity ({store.capacity} guests)",
            )

        hours = find_hours(store.business_hours, reservation_date)
        if hours is None or hours.is_closed:
            return AvailabilityResponse(
                **base,
                available=False,
                message=StoreClosed.default_message,
                business_hours=BusinessHoursInfo.model_validate(hours, from_attributes=True) if hours else None,
            )

        existing = await self.repo.list_active_for_date(store.id, reservation_date)
        meal = store.average_meal_duration
        now = self.clock()

        def slot_state(minutes: int):
            occupied = 0
            taken = False
            for reservation in existing:
                start = to_minutes(reservation.reservation_time)
                end = start + (reservation.estimated_duration or meal)
                if start == minutes:
                    taken = True
                if minutes < end and minutes + meal > start:
                    occupied += reservation.party_size
            remaining = store.capacity - occupied
            available = (
                not taken
                and remaining >= party_size
                and slot_datetime(reservation_date, format_minutes(minutes)) > now
                and not (settings.enforce_break_time and in_break(hours, minutes))
            )
            return available, max(0, remaining)

        open_minutes = to_minutes(hours.open_time)
        last_seating = to_minutes(hours.close_time) - meal

        all_slots = []
        for minutes in range(open_minutes, last_seating + 1, settings.reservation_slot_minutes):
            available, remaining = slot_state(minutes)
            all_slots.append(
                AvailabilitySlot(time=format_minutes(minutes), available=available, remaining_capacity=remaining)
            )

        preferred = None
        if preferred_time:
            minutes = to_minutes(preferred_time)
            if minutes < open_minutes or minutes > last_seating:
                preferred = PreferredTimeResult(
                    time=preferred_time,
                    available=False,
                    message=f"Reservations are only available during business hours ({hours.open_time}-{hours.close_time})",
                )
            else:
                available, _ = slot_state(minutes)
                preferred = PreferredTimeResult(
                    time=preferred_time,
                    available=available,
                    message=None if available else TimeSlotUnavailable.default_message,
                )

        open_slots = [slot for slot in all_slots if slot.available]
        return AvailabilityResponse(
            **base,
            available=bool(open_slots),
            message="Reservations are available" if open_slots else "No reservations are available on this date",
            business_hours=BusinessHoursInfo.model_validate(hours, from_attributes=True),
            available_slots=open_slots,
            all_slots=all_slots,
            preferred_time=preferred,
            total_available_slots=len(open_slots),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _validate_slot(self, store, reservation_date, reservation_time, party_size, exclude_id=None):
        ensure_time_allowed(store.business_hours, reservation_date, reservation_time)
        ensure_party_fits(store, party_size)
        await ensure_slot_free(self.repo, store.id, reservation_date, reservation_time, exclude_id)

    async def create_reservation(self, caller: Caller, data: ReservationCreate) -> Reservation:
        if caller.role != UserType.CUSTOMER:
            raise Forbidden("Only customers can create reservations")

        store = await self.repo.get_store(data.store_id)
        ensure_store_bookable(store)

        if data.table_id and not await self.repo.get_table(store.id, data.table_id):
            raise TableNotFound()

        if slot_datetime(data.reservation_date, data.reservation_time) <= self.clock():
            raise ReservationInPast("Reservation time must be in the future")

        await self._validate_slot(store, data.reservation_date, data.reservation_time, data.party_size)

        reservation_id = uuid.uuid4()
        reservation = Reservation(
            id=reservation_id,
            reservation_number=reservation_number(reservation_id, data.reservation_date),
            store_id=store.id,
            customer_id=caller.user_id,
            table_id=data.table_id,
            reservation_date=data.reservation_date,
            reservation_time=data.reservation_time,
            party_size=data.party_size,
            special_requests=data.special_requests,
            contact_name=data.contact_name,
            contact_phone=data.contact_phone,
            estimated_duration=data.estimated_duration or store.average_meal_duration,
            deposit_amount=data.deposit_amount,
            status=ReservationStatus.PENDING,
        )
        self.repo.add_reservation(reservation)
        self.repo.add_log(
            reservation_id,
            "created",
            actor_id=caller.user_id,
            actor_type=caller.role.value,
            to_status=ReservationStatus.PENDING,
        )
        await self.repo.commit()

        logger.info(
            "Reservation created",
            reservation_id=str(reservation_id),
            store_id=str(store.id),
            reservation_date=data.reservation_date.isoformat(),
            reservation_time=data.reservation_time,
        )

        reservation = await self._load(reservation_id)
        self.notifier.reservation_created(reservation)
        return reservation

    async def update_details(self, caller: Caller, reservation_id: UUID, data: ReservationUpdate) -> Reservation:
        reservation = await self._load(reservation_id)

        if not can_update(caller, reservation):
            raise Forbidden("You do not have permission to modify this reservation")

        if reservation.status not in ACTIVE_STATUSES:
            raise ReservationNotModifiable()

        now = self.clock()
        if slot_datetime(reservation.reservation_date, reservation.reservation_time) <= now:
            raise ReservationInPast()

        changes = data.model_dump(exclude_unset=True)
        for field in REQUIRED_DETAIL_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]

        new_date = changes.get("reservation_date", reservation.reservation_date)
        new_time = changes.get("reservation_time", reservation.reservation_time)
        new_party_size = changes.get("party_size", reservation.party_size)
        slot_changed = "reservation_date" in changes or "reservation_time" in changes

        if slot_changed:
            if slot_datetime(new_date, new_time) <= now:
                raise ReservationInPast("New reservation time must be in the future")
            await self._validate_slot(
                reservation.store, new_date, new_time, new_party_size, exclude_id=reservation.id
            )
        elif "party_size" in changes:
            ensure_party_fits(reservation.store, new_party_size)

        self.repo.update_reservation(reservation, changes)
        self.repo.add_log(
            reservation.id,
            "details_updated",
            actor_id=caller.user_id,
            actor_type=caller.role.value,
            note=", ".join(sorted(changes)) or None,
        )
        await self.repo.commit()

        logger.info(
            "Reservation updated",
            reservation_id=str(reservation_id),
            fields=sorted(changes),
        )
        return await self._load(reservation_id)

    async def update_status(
        self, caller: Caller, reservation_id: UUID, data: ReservationStatusUpdate
    ) -> Reservation:
        reservation = await self._load(reservation_id)

        if not can_update_status(caller, reservation, data.status):
            raise Forbidden("You do not have permission to change this reservation's status")

        previous = reservation.status
        changes = plan_transition(
            previous,
            data.status,
            now=datetime.utcnow(),
            cancellation_reason=data.cancellation_reason,
            total_amount=data.total_amount,
        )

        self.repo.update_reservation(reservation, changes)
        self.repo.add_log(
            reservation.id,
            "status_changed",
            actor_id=caller.user_id,
            actor_type=caller.role.value,
            from_status=previous,
            to_status=data.status,
            note=data.cancellation_reason if data.status == ReservationStatus.CANCELLED else None,
        )
        await self.repo.commit()

        logger.info(
            "Reservation status changed",
            reservation_id=str(reservation_id),
            from_status=previous.value,
            to_status=data.status.value,
        )

        reservation = await self._load(reservation_id)
        self.notifier.status_changed(reservation, previous)
        return reservation

    async def create_review(self, caller: Caller, reservation_id: UUID, data: ReviewCreate) -> Review:
        reservation = await self._load(reservation_id)

        if caller.role != UserType.CUSTOMER or reservation.customer_id != caller.user_id:
            raise Forbidden("Only the customer who made the reservation can review it")

        if not can_review(caller, reservation, has_review=reservation.review is not None):
            raise ReviewNotAllowed()

        review = Review(
            id=uuid.uuid4(),
            reservation_id=reservation.id,
            store_id=reservation.store_id,
            customer_id=caller.user_id,
            **data.model_dump(),
        )
        self.repo.add_review(review)
        await self.repo.commit()

        logger.info("Review created", reservation_id=str(reservation_id), rating=review.rating)

        self.notifier.review_created(review)
        return review
