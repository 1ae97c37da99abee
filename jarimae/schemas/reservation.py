"""Reservation schemas"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from jarimae.config import settings
from jarimae.models.reservation import ReservationStatus

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
MOBILE_PATTERN = r"^010-\d{4}-\d{4}$"


class ReservationCreate(BaseModel):
    """Create reservation request"""
    store_id: UUID
    table_id: Optional[UUID] = None
    reservation_date: date
    reservation_time: str = Field(pattern=TIME_PATTERN)
    party_size: int = Field(ge=1, le=settings.max_party_size)
    special_requests: Optional[str] = Field(None, max_length=500)
    contact_name: Optional[str] = Field(None, min_length=2, max_length=20)
    contact_phone: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    estimated_duration: Optional[int] = Field(None, ge=30, le=300)
    deposit_amount: int = Field(0, ge=0)


class ReservationUpdate(BaseModel):
    """Update reservation details request"""
    reservation_date: Optional[date] = None
    reservation_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    party_size: Optional[int] = Field(None, ge=1, le=settings.max_party_size)
    special_requests: Optional[str] = Field(None, max_length=500)
    contact_name: Optional[str] = Field(None, min_length=2, max_length=20)
    contact_phone: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    estimated_duration: Optional[int] = Field(None, ge=30, le=300)


class ReservationStatusUpdate(BaseModel):
    """Update reservation status request"""
    status: ReservationStatus
    cancellation_reason: Optional[str] = Field(None, max_length=200)
    total_amount: Optional[int] = Field(None, ge=0)


class ReservationSearch(BaseModel):
    """Reservation list filters"""
    store_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    status: Optional[ReservationStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    contact_phone: Optional[str] = None
    contact_name: Optional[str] = None
    sort_by: str = Field("reservation_date", pattern=r"^(reservation_date|created_at|party_size|total_amount)$")
    sort_order: str = Field("desc", pattern=r"^(asc|desc)$")
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=100)


class StoreSummary(BaseModel):
    """Store block embedded in reservation responses"""
    id: UUID
    name: str
    address: str
    phone: Optional[str]
    cuisine_type: Optional[str]
    price_range: Optional[str]
    owner_id: UUID

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    """Customer block shown to owners and admins"""
    id: UUID
    name: str
    email: str
    phone: Optional[str]
    nickname: Optional[str]

    class Config:
        from_attributes = True


class ReviewSummary(BaseModel):
    """Review attached to a reservation"""
    id: UUID
    rating: int
    comment: Optional[str]
    service_rating: Optional[int]
    food_rating: Optional[int]
    atmosphere_rating: Optional[int]
    value_rating: Optional[int]
    would_recommend: Optional[bool]
    created_at: datetime

    class Config:
        from_attributes = True


class ReservationPermissions(BaseModel):
    """Per-caller derived permissions"""
    can_review: bool
    can_cancel: bool
    can_modify: bool


class ReservationResponse(BaseModel):
    """Reservation as seen by the caller; ``customer`` is left unset for customers"""
    id: UUID
    reservation_number: str
    store: StoreSummary
    customer: Optional[CustomerSummary] = None
    table_id: Optional[UUID]
    reservation_date: date
    reservation_time: str
    party_size: int
    status: ReservationStatus
    special_requests: Optional[str]
    contact_phone: Optional[str]
    contact_name: Optional[str]
    estimated_duration: Optional[int]
    deposit_amount: Optional[int]
    total_amount: Optional[int]
    cancellation_reason: Optional[str]
    review: Optional[ReviewSummary]
    confirmed_at: Optional[datetime]
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class ReservationDetailResponse(ReservationResponse):
    """Single reservation with derived permissions"""
    permissions: ReservationPermissions


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int


class ReservationCreatedResponse(BaseModel):
    """Newly created reservation"""
    id: UUID
    reservation_number: str
    store: StoreSummary
    table_id: Optional[UUID]
    reservation_date: date
    reservation_time: str
    party_size: int
    status: ReservationStatus
    special_requests: Optional[str]
    estimated_duration: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class ReservationUpdatedResponse(BaseModel):
    """Reservation after a details update"""
    id: UUID
    store: StoreSummary
    reservation_date: date
    reservation_time: str
    party_size: int
    status: ReservationStatus
    special_requests: Optional[str]
    contact_phone: Optional[str]
    contact_name: Optional[str]
    estimated_duration: Optional[int]
    updated_at: datetime

    class Config:
        from_attributes = True


class ReservationStatusResponse(BaseModel):
    """Reservation after a status change"""
    id: UUID
    status: ReservationStatus
    cancellation_reason: Optional[str]
    total_amount: Optional[int]
    confirmed_at: Optional[datetime]
    completed_at: Optional[datetime]
    updated_at: datetime

    class Config:
        from_attributes = True


class AvailabilitySlot(BaseModel):
    """Bookable time slot"""
    time: str
    available: bool
    remaining_capacity: int


class BusinessHoursInfo(BaseModel):
    """Opening hours for the requested day"""
    day_of_week: int
    open_time: str
    close_time: str
    is_closed: bool
    break_start: Optional[str] = None
    break_end: Optional[str] = None


class PreferredTimeResult(BaseModel):
    """Whether the caller's preferred time can be booked"""
    time: str
    available: bool
    message: Optional[str] = None


class AvailabilityResponse(BaseModel):
    """Availability check response"""
    store_id: UUID
    reservation_date: date
    party_size: int
    available: bool
    message: str
    business_hours: Optional[BusinessHoursInfo] = None
    available_slots: List[AvailabilitySlot] = []
    all_slots: List[AvailabilitySlot] = []
    preferred_time: Optional[PreferredTimeResult] = None
    total_available_slots: int = 0


class ReviewCreate(BaseModel):
    """Review a completed reservation"""
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)
    service_rating: Optional[int] = Field(None, ge=1, le=5)
    food_rating: Optional[int] = Field(None, ge=1, le=5)
    atmosphere_rating: Optional[int] = Field(None, ge=1, le=5)
    value_rating: Optional[int] = Field(None, ge=1, le=5)
    would_recommend: Optional[bool] = None
