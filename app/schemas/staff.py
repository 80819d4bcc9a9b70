"""Pydantic schemas for Staff and Services."""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, field_validator
from app.schemas.common import NonEmptyStr
from app.schemas.settings import DayHours, Weekday


class StaffCreate(BaseModel):
    name: NonEmptyStr
    phone: str | None = None
    working_hours: dict[Weekday, DayHours] | None = None  # only the weekdays that differ
    service_ids: list[UUID] = []


class StaffUpdate(BaseModel):
    name: NonEmptyStr | None = None
    phone: str | None = None
    working_hours: dict[Weekday, DayHours] | None = None
    is_active: bool | None = None


class StaffServicesUpdate(BaseModel):
    service_ids: list[UUID]


class StaffOut(BaseModel):
    id: UUID
    business_id: UUID
    user_id: UUID | None = None
    name: str
    phone: str | None = None
    working_hours: dict | None = None
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class StaffPublic(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class ServiceCreate(BaseModel):
    name: NonEmptyStr
    duration_minutes: int = Field(gt=0)
    price: float = Field(default=0, ge=0)
    description: str | None = None


class ServiceUpdate(BaseModel):
    name: NonEmptyStr | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, ge=0)
    description: str | None = None
    is_active: bool | None = None

    @field_validator("name", "duration_minutes", "price", "is_active")
    @classmethod
    def _not_null(cls, value):
        # Omit the field to keep the current value; null is never valid here
        if value is None:
            raise ValueError("must not be null")
        return value


class ServiceOut(BaseModel):
    id: UUID
    business_id: UUID
    name: str
    duration_minutes: int
    price: float
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True
