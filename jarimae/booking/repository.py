"""Persistence collaborator for the reservation core"""

from datetime import date
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from jarimae.booking.errors import DatabaseError, TimeSlotUnavailable
from jarimae.models.reservation import ACTIVE_STATUSES, Reservation, ReservationLog
from jarimae.models.review import Review
from jarimae.models.store import Store, Table

logger = structlog.get_logger()

SLOT_INDEX_MARKERS = ("uq_reservations_active_slot", "reservations.reservation_time")


def _reservation_query():
    return select(Reservation).options(
        selectinload(Reservation.store).selectinload(Store.business_hours),
        selectinload(Reservation.customer),
        selectinload(Reservation.review),
    )


class ReservationRepository:
    """Reads and writes reservations through one ``AsyncSession``.

    All reads and writes of an operation share the session's transaction, so
    the conflict count and the write it guards are committed together.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_reservation_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        result = await self.db.execute(
            _reservation_query()
            .where(Reservation.id == reservation_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_store(self, store_id: UUID) -> Optional[Store]:
        result = await self.db.execute(
            select(Store)
            .where(Store.id == store_id)
            .options(selectinload(Store.business_hours))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_table(self, store_id: UUID, table_id: UUID) -> Optional[Table]:
        result = await self.db.execute(
            select(Table).where(
                Table.id == table_id,
                Table.store_id == store_id,
                Table.is_active == True,
            )
        )
        return result.scalar_one_or_none()

    async def owned_store_ids(self, owner_id: UUID) -> List[UUID]:
        result = await self.db.execute(select(Store.id).where(Store.owner_id == owner_id))
        return list(result.scalars().all())

    async def count_active_reservations(
        self,
        store_id: UUID,
        reservation_date: date,
        reservation_time: str,
        exclude_id: Optional[UUID] = None,
    ) -> int:
        query = select(func.count(Reservation.id)).where(
            Reservation.store_id == store_id,
            Reservation.reservation_date == reservation_date,
            Reservation.reservation_time == reservation_time,
            Reservation.status.in_(ACTIVE_STATUSES),
        )
        if exclude_id is not None:
            query = query.where(Reservation.id != exclude_id)

        result = await self.db.execute(query)
        return result.scalar() or 0

    async def list_active_for_date(self, store_id: UUID, reservation_date: date) -> Sequence[Reservation]:
        result = await self.db.execute(
            select(Reservation).where(
                Reservation.store_id == store_id,
                Reservation.reservation_date == reservation_date,
                Reservation.status.in_(ACTIVE_STATUSES),
            )
        )
        return result.scalars().all()

    async def list_reservations(
        self,
        filters,
        customer_id: Optional[UUID] = None,
        store_ids: Optional[List[UUID]] = None,
    ) -> Tuple[Sequence[Reservation], int]:
        """Page through reservations limited to a customer or a set of stores"""
        conditions = []

        if customer_id is not None:
            conditions.append(Reservation.customer_id == customer_id)
        if store_ids is not None:
            conditions.append(Reservation.store_id.in_(store_ids))

        if filters.store_id:
            conditions.append(Reservation.store_id == filters.store_id)
        if filters.customer_id:
            conditions.append(Reservation.customer_id == filters.customer_id)
        if filters.status:
            conditions.append(Reservation.status == filters.status)
        if filters.date_from:
            conditions.append(Reservation.reservation_date >= filters.date_from)
        if filters.date_to:
            conditions.append(Reservation.reservation_date <= filters.date_to)
        if filters.contact_phone:
            conditions.append(Reservation.contact_phone.contains(filters.contact_phone))
        if filters.contact_name:
            conditions.append(Reservation.contact_name.ilike(f"%{filters.contact_name}%"))

        count_query = select(func.count(Reservation.id)).where(*conditions)
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        sort_column = getattr(Reservation, filters.sort_by)
        order = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()

        offset = (filters.page - 1) * filters.page_size
        result = await self.db.execute(
            _reservation_query()
            .where(*conditions)
            .order_by(order, Reservation.created_at.desc())
            .offset(offset)
            .limit(filters.page_size)
        )
        return result.scalars().all(), total

    def add_reservation(self, reservation: Reservation) -> Reservation:
        self.db.add(reservation)
        return reservation

    def add_review(self, review: Review) -> Review:
        self.db.add(review)
        return review

    def add_log(
        self,
        reservation_id: UUID,
        action: str,
        actor_id: Optional[UUID] = None,
        actor_type: Optional[str] = None,
        from_status=None,
        to_status=None,
        note: Optional[str] = None,
    ) -> ReservationLog:
        log = ReservationLog(
            reservation_id=reservation_id,
            action=action,
            actor_id=actor_id,
            actor_type=actor_type,
            from_status=getattr(from_status, "value", from_status),
            to_status=getattr(to_status, "value", to_status),
            note=note,
        )
        self.db.add(log)
        return log

    def update_reservation(self, reservation: Reservation, patch: dict) -> Reservation:
        for field, value in patch.items():
            setattr(reservation, field, value)
        return reservation

    async def commit(self) -> None:
        await self._guard(self.db.commit)

    async def _guard(self, operation) -> None:
        try:
            await operation()
        except IntegrityError as exc:
            await self.db.rollback()
            if any(marker in str(exc.orig) for marker in SLOT_INDEX_MARKERS):
                raise TimeSlotUnavailable() from exc
            logger.exception("Integrity error while saving reservation")
            raise DatabaseError() from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Database error while saving reservation")
            raise DatabaseError() from exc
