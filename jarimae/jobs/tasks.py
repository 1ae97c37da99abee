"""Background job tasks"""

from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID
import asyncio
import structlog

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from jarimae.booking.hours import local_now, slot_datetime
from jarimae.config import settings
from jarimae.jobs.celery_app import celery_app
from jarimae.models.reservation import Reservation, ReservationStatus
from jarimae.models.review import Review
from jarimae.models.store import Store

logger = structlog.get_logger()

STATUS_MESSAGES = {
    ReservationStatus.CONFIRMED: "has been confirmed",
    ReservationStatus.CANCELLED: "has been cancelled",
    ReservationStatus.COMPLETED: "is complete. Thank you for visiting",
    ReservationStatus.NO_SHOW: "was marked as a no-show",
}


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


def send_sms(to: str, body: str) -> None:
    """Send an SMS through Twilio; skipped when Twilio is not configured"""
    if not settings.twilio_account_sid or not to:
        logger.info("SMS skipped", to=to)
        return

    from twilio.rest import Client as TwilioClient

    client = TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)
    client.messages.create(body=body, from_=settings.twilio_phone_number, to=to)


async def _load_reservation(db, reservation_id: UUID):
    result = await db.execute(
        select(Reservation)
        .where(Reservation.id == reservation_id)
        .options(
            selectinload(Reservation.store).selectinload(Store.owner),
            selectinload(Reservation.customer),
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def notify_owner(db, reservation_id: UUID, sender: Callable[[str, str], None] = send_sms) -> bool:
    reservation = await _load_reservation(db, reservation_id)
    if not reservation:
        return False

    owner = reservation.store.owner
    sender(
        owner.phone,
        f"[Jarimae] New reservation {reservation.reservation_number} at {reservation.store.name}: "
        f"{reservation.reservation_date.isoformat()} {reservation.reservation_time}, "
        f"{reservation.party_size} guests.",
    )
    return True


async def notify_customer(db, reservation_id: UUID, sender: Callable[[str, str], None] = send_sms) -> bool:
    reservation = await _load_reservation(db, reservation_id)
    if not reservation or reservation.status not in STATUS_MESSAGES:
        return False

    phone = reservation.contact_phone or reservation.customer.phone
    sender(
        phone,
        f"[Jarimae] Your reservation {reservation.reservation_number} at {reservation.store.name} "
        f"{STATUS_MESSAGES[reservation.status]}.",
    )
    return True


async def recalculate_stats(db, store_id: UUID) -> None:
    """Refresh a store's rating, review count and completed reservation count"""
    store = await db.get(Store, store_id)
    if not store:
        return

    completed = await db.execute(
        select(func.count(Reservation.id)).where(
            Reservation.store_id == store_id,
            Reservation.status == ReservationStatus.COMPLETED,
        )
    )
    reviews = await db.execute(
        select(func.count(Review.id), func.avg(Review.rating)).where(Review.store_id == store_id)
    )
    review_count, average = reviews.one()

    store.total_reservations = completed.scalar() or 0
    store.review_count = review_count or 0
    store.rating = round(float(average), 1) if average is not None else 0.0
    await db.commit()

    logger.info(
        "Store stats recalculated",
        store_id=str(store_id),
        total_reservations=store.total_reservations,
        review_count=store.review_count,
        rating=store.rating,
    )


async def remind_upcoming(db, now: datetime, sender: Callable[[str, str], None] = send_sms) -> int:
    """Text confirmed reservations starting inside the reminder window, once each"""
    window_start = now + timedelta(hours=settings.reminder_window_start_hours)
    window_end = now + timedelta(hours=settings.reminder_window_end_hours)

    result = await db.execute(
        select(Reservation)
        .where(
            Reservation.status == ReservationStatus.CONFIRMED,
            Reservation.reminder_sent_at.is_(None),
            Reservation.reservation_date.between(window_start.date(), window_end.date()),
        )
        .options(selectinload(Reservation.store), selectinload(Reservation.customer))
        .execution_options(populate_existing=True)
    )

    sent = 0
    for reservation in result.scalars().all():
        starts_at = slot_datetime(reservation.reservation_date, reservation.reservation_time)
        if not window_start <= starts_at <= window_end:
            continue

        try:
            sender(
                reservation.contact_phone or reservation.customer.phone,
                f"[Jarimae] Reminder: {reservation.store.name} today at "
                f"{reservation.reservation_time} for {reservation.party_size} guests. See you soon!",
            )
        except Exception as e:
            logger.error(
                "Failed to send reservation reminder",
                reservation_id=str(reservation.id),
                error=str(e),
            )
            continue

        reservation.reminder_sent_at = datetime.utcnow()
        await db.commit()
        sent += 1

        logger.info("Sent reservation reminder", reservation_id=str(reservation.id))

    return sent


@celery_app.task(name="notify_owner_new_reservation")
def notify_owner_new_reservation(reservation_id: str):
    """Tell the store owner about a new reservation"""
    logger.info("Notifying owner of new reservation", reservation_id=reservation_id)

    async def _notify():
        from jarimae.database import SessionLocal

        async with SessionLocal() as db:
            await notify_owner(db, UUID(reservation_id))

    run_async(_notify())


@celery_app.task(name="notify_reservation_status")
def notify_reservation_status(reservation_id: str):
    """Tell the customer their reservation status changed"""
    logger.info("Notifying customer of status change", reservation_id=reservation_id)

    async def _notify():
        from jarimae.database import SessionLocal

        async with SessionLocal() as db:
            await notify_customer(db, UUID(reservation_id))

    run_async(_notify())


@celery_app.task(name="recalculate_store_stats")
def recalculate_store_stats(store_id: str):
    """Recalculate store aggregates after a completion or review"""
    logger.info("Recalculating store stats", store_id=store_id)

    async def _recalculate():
        from jarimae.database import SessionLocal

        async with SessionLocal() as db:
            await recalculate_stats(db, UUID(store_id))

    run_async(_recalculate())


@celery_app.task(name="send_reservation_reminders")
def send_reservation_reminders():
    """Send reminders for upcoming reservations"""
    logger.info("Sending reservation reminders")

    async def _send_reminders():
        from jarimae.database import SessionLocal

        async with SessionLocal() as db:
            sent = await remind_upcoming(db, local_now())
            logger.info("Reservation reminders sent", count=sent)

    run_async(_send_reminders())
