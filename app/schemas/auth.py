"""Pydantic schemas for authentication and user management endpoints."""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from app.core.permissions import Role
from app.schemas.common import NonEmptyStr


class UserLogin(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Response schema for login; returns the JWT token."""
    access_token: str
    token_type: str = "bearer"
    business_id: UUID | None = None
    user_id: UUID | None = None
    role: str | None = None
    full_name: str | None = None
    email: str | None = None


class UserOut(BaseModel):
    """Response schema for user info."""
    id: UUID
    email: str
    full_name: str | None = None
    business_id: UUID | None = None
    role: str
    is_active: bool
    last_login_at: datetime | None = None

    class Config:
        from_attributes = True


class MeOut(UserOut):
    """Current user plus the actions their role may perform."""
    permissions: list[str] = []


class StaffUserCreate(BaseModel):
    """Create a login and its staff record in one go."""
    email: EmailStr
    password: str = Field(min_length=8)
    name: NonEmptyStr
    phone: str | None = None
    role: Role = Role.STAFF
    business_id: UUID | None = None  # super admins only


class StaffUserOut(BaseModel):
    user: UserOut
    staff_id: UUID | None = None


class MessageResponse(BaseModel):
    """Generic success message response."""
    message: str
