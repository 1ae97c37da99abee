"""Store management API endpoints"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from jarimae.api.auth import get_caller, require_roles
from jarimae.booking.errors import Forbidden, StoreNotFound
from jarimae.booking.permissions import Caller
from jarimae.database import get_db
from jarimae.models.store import BusinessHour, Store, StoreStatus, Table
from jarimae.models.user import UserType
from jarimae.schemas.store import (
    BusinessHoursUpdate,
    StoreCreate,
    StoreDetailResponse,
    StoreListResponse,
    StoreResponse,
    StoreStatusUpdate,
    TableCreate,
    TableResponse,
)

logger = structlog.get_logger()

router = APIRouter()


async def load_store(db: AsyncSession, store_id: UUID) -> Store:
    result = await db.execute(
        select(Store)
        .where(Store.id == store_id, Store.status != StoreStatus.DELETED)
        .options(selectinload(Store.business_hours), selectinload(Store.tables))
        .execution_options(populate_existing=True)
    )
    store = result.scalar_one_or_none()
    if not store:
        raise StoreNotFound()
    return store


def ensure_can_manage(caller: Caller, store: Store) -> None:
    if caller.role == UserType.ADMIN:
        return
    if caller.role == UserType.OWNER and store.owner_id == caller.user_id:
        return
    raise Forbidden("You do not have permission to manage this store")


@router.get("", response_model=StoreListResponse)
async def list_stores(
    name: Optional[str] = None,
    cuisine_type: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List stores open for booking"""
    conditions = [Store.status == StoreStatus.ACTIVE]
    if name:
        conditions.append(Store.name.ilike(f"%{name}%"))
    if cuisine_type:
        conditions.append(Store.cuisine_type == cuisine_type)

    total_result = await db.execute(select(func.count(Store.id)).where(*conditions))
    total = total_result.scalar() or 0

    offset = (page - 1) * page_size
    result = await db.execute(
        select(Store).where(*conditions).order_by(Store.rating.desc(), Store.name).offset(offset).limit(page_size)
    )

    return StoreListResponse(
        items=result.scalars().all(),
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{store_id}", response_model=StoreDetailResponse)
async def get_store(
    store_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a store with its hours and tables"""
    return await load_store(db, store_id)


@router.post("", response_model=StoreDetailResponse, status_code=201)
async def create_store(
    store_data: StoreCreate,
    caller: Caller = Depends(require_roles(UserType.OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Register a store; it stays PENDING until an admin activates it"""
    store = Store(
        owner_id=caller.user_id,
        status=StoreStatus.PENDING,
        **store_data.model_dump(exclude={"business_hours"}),
    )
    store.business_hours = [BusinessHour(**hours.model_dump()) for hours in store_data.business_hours]
    db.add(store)
    await db.commit()

    logger.info("Store created", store_id=str(store.id), owner_id=str(caller.user_id))
    return await load_store(db, store.id)


@router.put("/{store_id}/business_hours", response_model=StoreDetailResponse)
async def replace_business_hours(
    store_id: UUID,
    hours_data: BusinessHoursUpdate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Replace the weekly hours table"""
    store = await load_store(db, store_id)
    ensure_can_manage(caller, store)

    store.business_hours.clear()
    # Flush deletes before inserting rows with the same (store_id, day_of_week)
    await db.flush()
    store.business_hours.extend(BusinessHour(**hours.model_dump()) for hours in hours_data.business_hours)
    await db.commit()

    logger.info("Business hours replaced", store_id=str(store_id), days=len(hours_data.business_hours))
    return await load_store(db, store_id)


@router.post("/{store_id}/tables", response_model=TableResponse, status_code=201)
async def create_table(
    store_id: UUID,
    table_data: TableCreate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Add a table to a store"""
    store = await load_store(db, store_id)
    ensure_can_manage(caller, store)

    table = Table(store_id=store.id, **table_data.model_dump())
    db.add(table)
    await db.commit()

    return table


@router.patch("/{store_id}/status", response_model=StoreResponse)
async def update_store_status(
    store_id: UUID,
    status_data: StoreStatusUpdate,
    caller: Caller = Depends(require_roles(UserType.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Approve, suspend or delete a store listing"""
    store = await load_store(db, store_id)
    store.status = status_data.status
    await db.commit()

    logger.info("Store status changed", store_id=str(store_id), status=status_data.status.value)
    return store
