"""Review model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from jarimae.database import Base


class Review(Base):
    """Customer review of a completed reservation"""
    __tablename__ = "reviews"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id"), unique=True, nullable=False)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    # Ratings (1-5)
    rating = Column(Integer, nullable=False)
    service_rating = Column(Integer)
    food_rating = Column(Integer)
    atmosphere_rating = Column(Integer)
    value_rating = Column(Integer)

    comment = Column(Text)
    would_recommend = Column(Boolean)

    created_at = Column(DateTime, default=datetime.utcnow)

    reservation = relationship("Reservation", back_populates="review")
