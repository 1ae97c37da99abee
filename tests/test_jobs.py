"""Tests for notification and statistics jobs"""

from datetime import date, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from conftest import reload
from jarimae.jobs.notifier import ReservationNotifier
from jarimae.jobs.tasks import notify_customer, notify_owner, recalculate_stats, remind_upcoming
from jarimae.models.reservation import Reservation, ReservationStatus
from jarimae.models.review import Review
from jarimae.models.store import Store

NOW = datetime(2030, 1, 7, 12, 0)


class RecordingSender:
    def __init__(self, error=None):
        self.messages = []
        self.error = error

    def __call__(self, to, body):
        if self.error:
            raise self.error
        self.messages.append((to, body))


@pytest.mark.asyncio
async def test_notify_owner(test_db, reservation):
    sender = RecordingSender()

    assert await notify_owner(test_db, reservation.id, sender=sender)

    to, body = sender.messages[0]
    assert to == "010-9999-0000"
    assert reservation.reservation_number in body
    assert "2 guests" in body


@pytest.mark.asyncio
async def test_notify_customer_prefers_contact_phone(test_db, make_reservation):
    confirmed = await make_reservation(status=ReservationStatus.CONFIRMED, contact_phone="010-5555-6666")
    sender = RecordingSender()

    assert await notify_customer(test_db, confirmed.id, sender=sender)

    to, body = sender.messages[0]
    assert to == "010-5555-6666"
    assert "has been confirmed" in body


@pytest.mark.asyncio
async def test_notify_customer_skips_pending(test_db, reservation):
    sender = RecordingSender()

    assert not await notify_customer(test_db, reservation.id, sender=sender)
    assert sender.messages == []


@pytest.mark.asyncio
async def test_notify_missing_reservation(test_db):
    assert not await notify_owner(test_db, uuid4(), sender=RecordingSender())


@pytest.mark.asyncio
async def test_recalculate_stats(test_db, store, customer, make_reservation):
    first = await make_reservation(status=ReservationStatus.COMPLETED, reservation_time="12:00")
    second = await make_reservation(status=ReservationStatus.COMPLETED, reservation_time="13:00")
    await make_reservation(status=ReservationStatus.CANCELLED, reservation_time="14:00")

    for completed, rating in ((first, 4), (second, 5)):
        test_db.add(Review(
            reservation_id=completed.id,
            store_id=store.id,
            customer_id=customer.id,
            rating=rating,
        ))
    await test_db.commit()

    await recalculate_stats(test_db, store.id)

    stored = await reload(test_db, Store, store.id)
    assert stored.total_reservations == 2
    assert stored.review_count == 2
    assert stored.rating == 4.5


@pytest.mark.asyncio
async def test_recalculate_stats_without_reviews(test_db, store):
    await recalculate_stats(test_db, store.id)

    stored = await reload(test_db, Store, store.id)
    assert stored.rating == 0.0
    assert stored.review_count == 0


@pytest.mark.asyncio
async def test_remind_upcoming_sends_once(test_db, make_reservation):
    due = await make_reservation(
        status=ReservationStatus.CONFIRMED,
        reservation_date=date(2030, 1, 7),
        reservation_time="15:00",
    )
    await make_reservation(
        status=ReservationStatus.CONFIRMED,
        reservation_date=date(2030, 1, 7),
        reservation_time="20:00",
    )
    await make_reservation(
        status=ReservationStatus.PENDING,
        reservation_date=date(2030, 1, 7),
        reservation_time="14:30",
    )
    sender = RecordingSender()

    assert await remind_upcoming(test_db, NOW, sender=sender) == 1
    assert len(sender.messages) == 1
    assert "15:00" in sender.messages[0][1]

    stored = await reload(test_db, Reservation, due.id)
    assert stored.reminder_sent_at is not None

    assert await remind_upcoming(test_db, NOW, sender=sender) == 0
    assert len(sender.messages) == 1


@pytest.mark.asyncio
async def test_remind_upcoming_failed_send_is_retried_later(test_db, make_reservation):
    due = await make_reservation(
        status=ReservationStatus.CONFIRMED,
        reservation_date=date(2030, 1, 7),
        reservation_time="15:00",
    )

    assert await remind_upcoming(test_db, NOW, sender=RecordingSender(error=RuntimeError("twilio down"))) == 0

    stored = await reload(test_db, Reservation, due.id)
    assert stored.reminder_sent_at is None


def test_enqueue_failure_is_logged_not_raised():
    def broken_delay(*args):
        raise ConnectionError("broker unavailable")

    task = SimpleNamespace(name="notify_owner_new_reservation", delay=broken_delay)

    ReservationNotifier()._enqueue(task, "some-id")
