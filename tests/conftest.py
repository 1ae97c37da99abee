"""Test configuration and fixtures"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import timedelta
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from jarimae.main import app
from jarimae.database import Base, get_db
from jarimae.api.auth import create_access_token, get_password_hash
from jarimae.booking.hours import local_now
from jarimae.jobs.notifier import get_notifier
from jarimae.models.reservation import Reservation, ReservationStatus
from jarimae.models.store import BusinessHour, Store, StoreStatus, Table
from jarimae.models.user import User, UserType


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingNotifier:
    """Collects reservation events instead of enqueueing Celery tasks"""

    def __init__(self):
        self.events = []

    def reservation_created(self, reservation):
        self.events.append(("created", reservation.id))

    def status_changed(self, reservation, previous):
        self.events.append(("status_changed", reservation.id, previous, reservation.status))

    def review_created(self, review):
        self.events.append(("review_created", review.reservation_id))


@pytest.fixture
async def session_factory():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(session_factory):
    """Session used by fixtures and assertions"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def client(session_factory, notifier):
    """Create test client with overridden database and notifier"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _create_user(db, email, name, user_type, phone="010-1234-5678"):
    user = User(
        id=uuid4(),
        email=email,
        hashed_password=get_password_hash("testpass123"),
        name=name,
        phone=phone,
        user_type=user_type,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def customer(test_db):
    return await _create_user(test_db, "customer@example.com", "Kim Minji", UserType.CUSTOMER)


@pytest.fixture
async def other_customer(test_db):
    return await _create_user(test_db, "other@example.com", "Lee Jisoo", UserType.CUSTOMER, "010-2222-3333")


@pytest.fixture
async def owner(test_db):
    return await _create_user(test_db, "owner@example.com", "Park Owner", UserType.OWNER, "010-9999-0000")


@pytest.fixture
async def other_owner(test_db):
    return await _create_user(test_db, "owner2@example.com", "Choi Owner", UserType.OWNER, "010-8888-0000")


@pytest.fixture
async def admin(test_db):
    return await _create_user(test_db, "admin@example.com", "Admin", UserType.ADMIN, None)


def auth_headers(user, user_type=None):
    """Bearer header for a user, optionally with a forged role claim"""
    return {"Authorization": f"Bearer {create_access_token(user, user_type)}"}


def future_date(days=7):
    return local_now().date() + timedelta(days=days)


@pytest.fixture
async def store(test_db, owner):
    """Active store, capacity 4, open 11:00-22:00 daily with a 15:00-17:00 break"""
    store = Store(
        id=uuid4(),
        owner_id=owner.id,
        name="Hanok Table",
        address="12 Insadong-gil, Jongno-gu, Seoul",
        phone="02-123-4567",
        capacity=4,
        average_meal_duration=120,
        accepts_reservations=True,
        status=StoreStatus.ACTIVE,
    )
    store.business_hours = [
        BusinessHour(
            day_of_week=day,
            open_time="11:00",
            close_time="22:00",
            break_start="15:00",
            break_end="17:00",
        )
        for day in range(7)
    ]
    store.tables = [Table(table_number="T1", capacity=4)]
    test_db.add(store)
    await test_db.commit()
    return store


@pytest.fixture
def make_reservation(test_db, store, customer):
    """Insert a reservation directly, bypassing the API"""
    async def _make(**overrides):
        values = {
            "id": uuid4(),
            "reservation_number": f"JRM-TEST-{uuid4().hex[:6].upper()}",
            "store_id": store.id,
            "customer_id": customer.id,
            "reservation_date": future_date(),
            "reservation_time": "19:00",
            "party_size": 2,
            "estimated_duration": 120,
            "status": ReservationStatus.PENDING,
        }
        values.update(overrides)
        reservation = Reservation(**values)
        test_db.add(reservation)
        await test_db.commit()
        return reservation

    return _make


@pytest.fixture
async def reservation(make_reservation):
    """PENDING reservation for two at 19:00 a week from now"""
    return await make_reservation()


async def reload(db, model, id):
    """Fetch the committed row, bypassing the session's identity map"""
    return await db.get(model, id, populate_existing=True)
