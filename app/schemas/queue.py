"""Pydantic schemas for the walk-in queue."""

from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import BaseModel
from app.models.queue_entry import QueueStatus
from app.schemas.common import NonEmptyStr


class QueueJoin(BaseModel):
    customer_name: NonEmptyStr
    customer_phone: NonEmptyStr
    service_id: UUID


class QueueStatusUpdate(BaseModel):
    status: QueueStatus


class QueueEntryOut(BaseModel):
    id: UUID
    business_id: UUID
    customer_name: str
    customer_phone: str
    service_id: UUID
    queue_number: int
    status: QueueStatus
    estimated_wait_minutes: Optional[int] = None
    notified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QueueTicketPublic(BaseModel):
    """What a public queue display may show: no phone numbers."""
    queue_number: int
    customer_name: str
    status: QueueStatus
    estimated_wait_minutes: Optional[int] = None

    class Config:
        from_attributes = True


class QueueBoard(BaseModel):
    """Today's queue for staff screens."""
    now_serving: Optional[QueueEntryOut] = None
    next_waiting: Optional[QueueEntryOut] = None
    active: list[QueueEntryOut]
    finished: list[QueueEntryOut]


class QueueDisplay(BaseModel):
    """Today's queue for the public display."""
    business_name: str
    now_serving: Optional[QueueTicketPublic] = None
    upcoming: list[QueueTicketPublic]


class DashboardStats(BaseModel):
    active_queue: int
    completed_today: int
    upcoming_appointments_today: int
    now_serving_number: Optional[int] = None
