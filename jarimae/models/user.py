"""User model for customers, store owners and administrators"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from jarimae.database import Base


class UserType(str, enum.Enum):
    """Caller roles for RBAC"""
    CUSTOMER = "CUSTOMER"
    OWNER = "OWNER"
    ADMIN = "ADMIN"


class User(Base):
    """Marketplace users"""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    name = Column(String(100), nullable=False)
    nickname = Column(String(50))
    phone = Column(String(20))

    # Role
    user_type = Column(Enum(UserType), nullable=False, default=UserType.CUSTOMER)

    # Status
    is_active = Column(Boolean, default=True)

    # Tokens
    refresh_token = Column(String(500))

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    stores = relationship("Store", back_populates="owner")
    reservations = relationship("Reservation", back_populates="customer")
