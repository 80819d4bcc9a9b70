"""Pydantic schemas for Business config."""

from datetime import datetime
from uuid import UUID
from zoneinfo import available_timezones
from pydantic import BaseModel, field_validator
from app.schemas.common import NonEmptyStr, Slug
from app.schemas.settings import BusinessSettings, DayHours
from app.schemas.staff import ServiceOut, StaffPublic


def _check_timezone(value: str | None) -> str | None:
    if value is not None and value not in available_timezones():
        raise ValueError(f"Unknown timezone '{value}'")
    return value


class BusinessCreate(BaseModel):
    name: NonEmptyStr
    slug: Slug
    phone: NonEmptyStr
    address: str | None = None
    timezone: str = "UTC"
    settings: BusinessSettings | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value):
        return _check_timezone(value)


class BusinessUpdate(BaseModel):
    """Schema for updating business profile. The slug is immutable."""
    name: NonEmptyStr | None = None
    phone: NonEmptyStr | None = None
    address: str | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value):
        return _check_timezone(value)


class BusinessOut(BaseModel):
    id: UUID
    name: str
    slug: str
    phone: str
    address: str | None = None
    timezone: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class BusinessPublic(BaseModel):
    """What the public booking page needs to render a business."""
    id: UUID
    name: str
    slug: str
    phone: str
    address: str | None = None
    timezone: str
    hours: dict[str, DayHours]
    staff: list[StaffPublic]
    services: list[ServiceOut]
