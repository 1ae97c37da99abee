"""Store-related models"""

import uuid
from datetime import datetime
import enum
from sqlalchemy import (
    Column, String, Boolean, DateTime, ForeignKey, Integer, Float, Text, Enum,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from jarimae.database import Base


class StoreStatus(str, enum.Enum):
    """Store listing status"""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class Store(Base):
    """Restaurant listed on the marketplace"""
    __tablename__ = "stores"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    # Business information
    name = Column(String(100), nullable=False)
    description = Column(Text)
    address = Column(String(200), nullable=False)
    phone = Column(String(20))
    cuisine_type = Column(String(30), default="KOREAN")
    price_range = Column(String(20), default="MID_RANGE")

    # Reservation settings
    capacity = Column(Integer, nullable=False)
    average_meal_duration = Column(Integer, nullable=False, default=120)  # minutes
    accepts_reservations = Column(Boolean, default=True)
    status = Column(Enum(StoreStatus), nullable=False, default=StoreStatus.PENDING)

    # Aggregates maintained by background jobs
    rating = Column(Float, default=0.0)
    review_count = Column(Integer, default=0)
    total_reservations = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="stores")
    business_hours = relationship(
        "BusinessHour",
        back_populates="store",
        cascade="all, delete-orphan",
        order_by="BusinessHour.day_of_week",
    )
    tables = relationship("Table", back_populates="store", cascade="all, delete-orphan")
    reservations = relationship("Reservation", back_populates="store")


class BusinessHour(Base):
    """Weekly opening hours, one row per day"""
    __tablename__ = "business_hours"
    __table_args__ = (UniqueConstraint("store_id", "day_of_week", name="uq_business_hours_day"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    open_time = Column(String(5), nullable=False)  # "HH:MM"
    close_time = Column(String(5), nullable=False)
    is_closed = Column(Boolean, default=False)
    break_start = Column(String(5))
    break_end = Column(String(5))

    store = relationship("Store", back_populates="business_hours")


class Table(Base):
    """Physical tables of a store"""
    __tablename__ = "tables"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    table_number = Column(String(20), nullable=False)
    capacity = Column(Integer, nullable=False)
    table_type = Column(String(20), default="REGULAR")  # REGULAR, BOOTH, PRIVATE, BAR
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    store = relationship("Store", back_populates="tables")
