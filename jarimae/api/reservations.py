"""Reservation API endpoints"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jarimae.api.auth import get_caller
from jarimae.booking.permissions import Caller
from jarimae.booking.service import ReservationService
from jarimae.config import settings
from jarimae.database import get_db
from jarimae.jobs.notifier import ReservationNotifier, get_notifier
from jarimae.models.reservation import ReservationStatus
from jarimae.schemas.reservation import (
    TIME_PATTERN,
    AvailabilityResponse,
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationDetailResponse,
    ReservationListResponse,
    ReservationSearch,
    ReservationStatusResponse,
    ReservationStatusUpdate,
    ReservationUpdate,
    ReservationUpdatedResponse,
    ReviewCreate,
    ReviewSummary,
)

router = APIRouter()


def get_service(
    db: AsyncSession = Depends(get_db),
    notifier: ReservationNotifier = Depends(get_notifier),
) -> ReservationService:
    return ReservationService(db, notifier)


@router.get("", response_model=ReservationListResponse, response_model_exclude_unset=True)
async def list_reservations(
    store_id: Optional[UUID] = None,
    customer_id: Optional[UUID] = None,
    status: Optional[ReservationStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    contact_phone: Optional[str] = None,
    contact_name: Optional[str] = None,
    sort_by: str = Query("reservation_date", pattern=r"^(reservation_date|created_at|party_size|total_amount)$"),
    sort_order: str = Query("desc", pattern=r"^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    caller: Caller = Depends(get_caller),
    service: ReservationService = Depends(get_service),
):
    """List reservations visible to the caller"""
    filters = ReservationSearch(
        store_id=store_id,
        customer_id=customer_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        contact_phone=contact_phone,
        contact_name=contact_name,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    return await service.list_reservations(caller, filters)


@router.post("", response_model=ReservationCreatedResponse, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    caller: Caller = Depends(get_caller),
    service: ReservationService = Depends(get_service),
):
    """Book a table"""
    return await service.create_reservation(caller, reservation_data)


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    store_id: UUID,
    reservation_date: date,
    party_size: int = Query(..., ge=1, le=settings.max_party_size),
    preferred_time: Optional[str] = Query(None, pattern=TIME_PATTERN),
    service: ReservationService = Depends(get_service),
):
    """Bookable slots of a store for one day"""
    return await service.check_availability(store_id, reservation_date, party_size, preferred_time)


@router.get("/{reservation_id}", response_model=ReservationDetailResponse, response_model_exclude_unset=True)
async def get_reservation(
    reservation_id: UUID,
    caller: Caller = Depends(get_caller),
    service: ReservationService = Depends(get_service),
):
    """Get a reservation with the caller's permissions"""
    return await service.get_reservation(caller, reservation_id)


@router.put("/{reservation_id}", response_model=ReservationUpdatedResponse)
async def update_reservation(
    reservation_id: UUID,
    reservation_data: ReservationUpdate,
    caller: Caller = Depends(get_caller),
    service: ReservationService = Depends(get_service),
):
    """Change date, time, party size or contact details"""
    return await service.update_details(caller, reservation_id, reservation_data)


@router.patch("/{reservation_id}", response_model=ReservationStatusResponse)
async def update_reservation_status(
    reservation_id: UUID,
    status_data: ReservationStatusUpdate,
    caller: Caller = Depends(get_caller),
    service: ReservationService = Depends(get_service),
):
    """Move a reservation through its lifecycle"""
    return await service.update_status(caller, reservation_id, status_data)


@router.post("/{reservation_id}/review", response_model=ReviewSummary, status_code=201)
async def create_review(
    reservation_id: UUID,
    review_data: ReviewCreate,
    caller: Caller = Depends(get_caller),
    service: ReservationService = Depends(get_service),
):
    """Review a completed reservation"""
    return await service.create_review(caller, reservation_id, review_data)
