#!/usr/bin/env python3
"""
Seed script to create demo users, stores and reservations
"""

import asyncio
import uuid
from datetime import timedelta

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

STORES = [
    {
        "name": "Hanok Table",
        "description": "Seasonal Korean set menus in a restored hanok",
        "address": "12 Insadong-gil, Jongno-gu, Seoul",
        "phone": "02-734-1234",
        "cuisine_type": "KOREAN",
        "price_range": "FINE_DINING",
        "capacity": 8,
        "average_meal_duration": 120,
        "hours": ("11:30", "22:00", "15:00", "17:00"),
        "closed_days": (1,),
        "tables": [("A1", 2), ("A2", 4), ("R1", 8)],
    },
    {
        "name": "Mapo Galbi House",
        "description": "Charcoal-grilled pork galbi",
        "address": "45 Dohwa-gil, Mapo-gu, Seoul",
        "phone": "02-701-5678",
        "cuisine_type": "KOREAN",
        "price_range": "MID_RANGE",
        "capacity": 6,
        "average_meal_duration": 90,
        "hours": ("16:00", "23:00", None, None),
        "closed_days": (),
        "tables": [("1", 4), ("2", 4), ("3", 6)],
    },
]


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from jarimae.booking.hours import local_now
    from jarimae.booking.service import reservation_number
    from jarimae.database import SessionLocal, engine, Base
    from jarimae.models.reservation import Reservation, ReservationStatus
    from jarimae.models.store import BusinessHour, Store, StoreStatus, Table
    from jarimae.models.user import User, UserType

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(select(User).where(User.email == "admin@jarimae.kr"))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo users...")

        admin = User(
            id=uuid.uuid4(),
            email="admin@jarimae.kr",
            hashed_password=pwd_context.hash("admin1234"),
            name="Jarimae Admin",
            user_type=UserType.ADMIN,
        )
        owner = User(
            id=uuid.uuid4(),
            email="owner@jarimae.kr",
            hashed_password=pwd_context.hash("owner1234"),
            name="Park Jiho",
            phone="010-1111-2222",
            user_type=UserType.OWNER,
        )
        customer = User(
            id=uuid.uuid4(),
            email="customer@jarimae.kr",
            hashed_password=pwd_context.hash("customer1234"),
            name="Kim Minji",
            nickname="minji",
            phone="010-3333-4444",
            user_type=UserType.CUSTOMER,
        )
        db.add_all([admin, owner, customer])

        print("Creating demo stores...")

        stores = []
        for demo in STORES:
            open_time, close_time, break_start, break_end = demo["hours"]
            store = Store(
                id=uuid.uuid4(),
                owner_id=owner.id,
                name=demo["name"],
                description=demo["description"],
                address=demo["address"],
                phone=demo["phone"],
                cuisine_type=demo["cuisine_type"],
                price_range=demo["price_range"],
                capacity=demo["capacity"],
                average_meal_duration=demo["average_meal_duration"],
                status=StoreStatus.ACTIVE,
            )
            store.business_hours = [
                BusinessHour(
                    day_of_week=day,
                    open_time=open_time,
                    close_time=close_time,
                    is_closed=day in demo["closed_days"],
                    break_start=break_start,
                    break_end=break_end,
                )
                for day in range(7)
            ]
            store.tables = [Table(table_number=number, capacity=seats) for number, seats in demo["tables"]]
            db.add(store)
            stores.append(store)

        print("Creating demo reservations...")

        today = local_now().date()
        bookings = [
            (stores[0], today + timedelta(days=3), "18:00", 2, ReservationStatus.PENDING),
            (stores[0], today + timedelta(days=5), "12:00", 4, ReservationStatus.CONFIRMED),
            (stores[1], today - timedelta(days=2), "19:00", 3, ReservationStatus.COMPLETED),
        ]
        for store, day, time, party_size, status in bookings:
            reservation_id = uuid.uuid4()
            db.add(Reservation(
                id=reservation_id,
                reservation_number=reservation_number(reservation_id, day),
                store_id=store.id,
                customer_id=customer.id,
                reservation_date=day,
                reservation_time=time,
                party_size=party_size,
                estimated_duration=store.average_meal_duration,
                status=status,
            ))

        await db.commit()

        print(f"""
Demo data created successfully!

Users:
  Admin:
    Email: admin@jarimae.kr
    Password: admin1234

  Owner:
    Email: owner@jarimae.kr
    Password: owner1234

  Customer:
    Email: customer@jarimae.kr
    Password: customer1234

Stores: {len(stores)} created
Reservations: {len(bookings)} created
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
