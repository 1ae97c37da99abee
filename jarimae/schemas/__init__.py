"""Pydantic schemas for request/response validation"""

from jarimae.schemas.auth import (
    Token,
    TokenPayload,
    RefreshRequest,
    UserCreate,
    UserResponse,
)
from jarimae.schemas.store import (
    BusinessHourIn,
    BusinessHoursUpdate,
    StoreCreate,
    StoreDetailResponse,
    StoreListResponse,
    StoreResponse,
    StoreStatusUpdate,
    TableCreate,
    TableResponse,
)
from jarimae.schemas.reservation import (
    AvailabilityResponse,
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationDetailResponse,
    ReservationListResponse,
    ReservationResponse,
    ReservationSearch,
    ReservationStatusResponse,
    ReservationStatusUpdate,
    ReservationUpdate,
    ReservationUpdatedResponse,
    ReviewCreate,
    ReviewSummary,
)

__all__ = [
    "Token",
    "TokenPayload",
    "RefreshRequest",
    "UserCreate",
    "UserResponse",
    "BusinessHourIn",
    "BusinessHoursUpdate",
    "StoreCreate",
    "StoreDetailResponse",
    "StoreListResponse",
    "StoreResponse",
    "StoreStatusUpdate",
    "TableCreate",
    "TableResponse",
    "AvailabilityResponse",
    "ReservationCreate",
    "ReservationCreatedResponse",
    "ReservationDetailResponse",
    "ReservationListResponse",
    "ReservationResponse",
    "ReservationSearch",
    "ReservationStatusResponse",
    "ReservationStatusUpdate",
    "ReservationUpdate",
    "ReservationUpdatedResponse",
    "ReviewCreate",
    "ReviewSummary",
]
