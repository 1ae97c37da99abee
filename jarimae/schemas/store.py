"""Store schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, model_validator

from jarimae.models.store import StoreStatus
from jarimae.schemas.reservation import TIME_PATTERN


class BusinessHourIn(BaseModel):
    """Opening hours for one weekday (0 = Sunday ... 6 = Saturday)"""
    day_of_week: int = Field(ge=0, le=6)
    open_time: str = Field(pattern=TIME_PATTERN)
    close_time: str = Field(pattern=TIME_PATTERN)
    is_closed: bool = False
    break_start: Optional[str] = Field(None, pattern=TIME_PATTERN)
    break_end: Optional[str] = Field(None, pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_time_order(self):
        # Zero-padded "HH:MM" strings order the same as the times they hold
        if (self.break_start is None) != (self.break_end is None):
            raise ValueError("break_start and break_end must be given together")
        if self.is_closed:
            return self
        if self.open_time >= self.close_time:
            raise ValueError("open_time must be before close_time")
        if self.break_start is not None:
            if self.break_start >= self.break_end:
                raise ValueError("break_start must be before break_end")
            if self.break_start < self.open_time or self.break_end > self.close_time:
                raise ValueError("Break must fall within opening hours")
        return self


class BusinessHourResponse(BusinessHourIn):
    """Stored opening hours"""

    class Config:
        from_attributes = True


class BusinessHoursUpdate(BaseModel):
    """Replace the weekly hours table"""
    business_hours: List[BusinessHourIn]

    @model_validator(mode="after")
    def check_unique_days(self):
        days = [hours.day_of_week for hours in self.business_hours]
        if len(days) != len(set(days)):
            raise ValueError("Each day_of_week may appear only once")
        return self


class TableCreate(BaseModel):
    """Create table request"""
    table_number: str = Field(min_length=1, max_length=20)
    capacity: int = Field(ge=1, le=50)
    table_type: str = Field("REGULAR", pattern=r"^(REGULAR|BOOTH|PRIVATE|BAR)$")


class TableResponse(BaseModel):
    """Table response"""
    id: UUID
    table_number: str
    capacity: int
    table_type: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


class StoreCreate(BaseModel):
    """Create store request"""
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    address: str = Field(min_length=5, max_length=200)
    phone: Optional[str] = Field(None, pattern=r"^0\d{1,2}-\d{3,4}-\d{4}$")
    cuisine_type: str = "KOREAN"
    price_range: str = Field("MID_RANGE", pattern=r"^(BUDGET|MID_RANGE|FINE_DINING)$")
    capacity: int = Field(ge=1, le=1000)
    average_meal_duration: int = Field(120, ge=30, le=300)
    accepts_reservations: bool = True
    business_hours: List[BusinessHourIn] = []


class StoreStatusUpdate(BaseModel):
    """Change store listing status"""
    status: StoreStatus


class StoreResponse(BaseModel):
    """Store response"""
    id: UUID
    owner_id: UUID
    name: str
    description: Optional[str]
    address: str
    phone: Optional[str]
    cuisine_type: Optional[str]
    price_range: Optional[str]
    capacity: int
    average_meal_duration: int
    accepts_reservations: bool
    status: StoreStatus
    rating: Optional[float]
    review_count: Optional[int]
    total_reservations: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class StoreDetailResponse(StoreResponse):
    """Store with hours and tables"""
    business_hours: List[BusinessHourResponse] = []
    tables: List[TableResponse] = []


class StoreListResponse(BaseModel):
    """Paginated store list"""
    items: List[StoreResponse]
    total: int
    page: int
    page_size: int
