"""Authentication schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from jarimae.models.user import UserType


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """JWT token payload"""
    sub: str  # User ID
    user_type: str
    exp: datetime


class RefreshRequest(BaseModel):
    """Token refresh request"""
    refresh_token: str


class UserCreate(BaseModel):
    """Sign-up request"""
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=2, max_length=100)
    nickname: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, pattern=r"^010-\d{4}-\d{4}$")
    user_type: UserType = UserType.CUSTOMER


class UserResponse(BaseModel):
    """User response"""
    id: UUID
    email: str
    name: str
    nickname: Optional[str]
    phone: Optional[str]
    user_type: UserType
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True
