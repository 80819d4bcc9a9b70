"""Pydantic schemas for Appointments."""

from datetime import datetime, date, time
from uuid import UUID
from pydantic import BaseModel, EmailStr, field_validator
from typing import Literal, Optional
from app.models.appointment import AppointmentStatus
from app.schemas.common import NonEmptyStr


class AppointmentBook(BaseModel):
    """Schema for booking an appointment (customer or staff facing)."""
    customer_name: NonEmptyStr
    customer_phone: NonEmptyStr
    customer_email: Optional[EmailStr] = None
    service_id: UUID
    staff_id: UUID
    appointment_date: date
    appointment_time: time  # "14:30"
    notes: Optional[str] = None

    @field_validator("appointment_time")
    @classmethod
    def _local_clock_time(cls, value: time) -> time:
        # Wall-clock time in the business's own timezone; an offset has no meaning here
        if value.tzinfo is not None:
            raise ValueError("appointment_time must not include a timezone offset")
        return value


class StaffAppointmentBook(AppointmentBook):
    """Staff-facing booking may park an appointment as pending."""
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    @field_validator("status")
    @classmethod
    def _initial_status(cls, value: AppointmentStatus) -> AppointmentStatus:
        if value not in (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED):
            raise ValueError("New appointments must be pending or confirmed")
        return value


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class CustomerCancel(BaseModel):
    """The customer proves ownership with the phone or email used to book."""
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None


class AppointmentOut(BaseModel):
    """Schema for returning appointment details."""
    id: UUID
    business_id: UUID
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    service_id: UUID
    staff_id: UUID
    appointment_time: datetime
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailableSlotsResponse(BaseModel):
    """Schema for available slots response."""
    date: date
    staff_id: UUID
    slots: list[str]  # ["09:00", "09:30", ...]


class OverdueCompletionResult(BaseModel):
    completed: int


class ReminderResult(BaseModel):
    appointment_id: UUID
    outcome: Literal["sent", "failed", "skipped"]
    error: Optional[str] = None


class ReminderSweepResult(BaseModel):
    message: str
    total: int
    successful: int
    failed: int
    skipped: int
    results: list[ReminderResult] = []
