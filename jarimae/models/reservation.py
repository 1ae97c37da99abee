"""Reservation models"""

import uuid
from datetime import datetime
import enum
from sqlalchemy import (
    Column, String, Integer, Date, DateTime, ForeignKey, Text, Enum, Index, text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from jarimae.database import Base


class ReservationStatus(str, enum.Enum):
    """Reservation lifecycle states"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

_ACTIVE_SLOT_PREDICATE = text("status IN ('PENDING', 'CONFIRMED')")


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"
    __table_args__ = (
        # At most one active reservation per slot
        Index(
            "uq_reservations_active_slot",
            "store_id",
            "reservation_date",
            "reservation_time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
        ),
        Index("ix_reservations_customer", "customer_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reservation_number = Column(String(30), nullable=False)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    table_id = Column(UUID(as_uuid=True), ForeignKey("tables.id"))

    # Slot
    reservation_date = Column(Date, nullable=False)
    reservation_time = Column(String(5), nullable=False)  # "HH:MM"
    estimated_duration = Column(Integer)  # minutes

    # Reservation details
    party_size = Column(Integer, nullable=False)
    special_requests = Column(Text)
    contact_name = Column(String(50))
    contact_phone = Column(String(20))

    # Amounts (KRW)
    deposit_amount = Column(Integer, default=0)
    total_amount = Column(Integer)

    # Status
    status = Column(Enum(ReservationStatus), nullable=False, default=ReservationStatus.PENDING)
    cancellation_reason = Column(Text)

    # Timestamps
    confirmed_at = Column(DateTime)
    completed_at = Column(DateTime)
    reminder_sent_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="reservations")
    customer = relationship("User", back_populates="reservations")
    table = relationship("Table")
    review = relationship("Review", back_populates="reservation", uselist=False)
    logs = relationship("ReservationLog", back_populates="reservation", order_by="ReservationLog.created_at")


class ReservationLog(Base):
    """Audit trail of reservation changes"""
    __tablename__ = "reservation_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id"), nullable=False)

    # Actor information
    actor_id = Column(UUID(as_uuid=True), ForeignKey("users.id"))
    actor_type = Column(String(20))  # CUSTOMER, OWNER, ADMIN, SYSTEM

    # Change details
    action = Column(String(50), nullable=False)  # created, details_updated, status_changed
    from_status = Column(String(20))
    to_status = Column(String(20))
    note = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    reservation = relationship("Reservation", back_populates="logs")
