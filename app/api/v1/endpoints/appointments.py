"""Appointment endpoints for staff and admins."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action
from app.models.business import Business
from app.models.user import User
from app.schemas.appointment import (
    AppointmentOut,
    AppointmentStatusUpdate,
    OverdueCompletionResult,
    StaffAppointmentBook,
)
from app.schemas.auth import MessageResponse
from app.schemas.notification import ResendEmailRequest
from app.services import appointments as appointment_service
from app.services.notifications import deliver_appointment_email, load_email_payload, schedule_confirmation

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=list[AppointmentOut])
async def list_appointments(
    start_date: Optional[date] = Query(None, description="First day, defaults to today"),
    end_date: Optional[date] = Query(None, description="Day after the last, defaults to a week ahead"),
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    if start_date and end_date and end_date <= start_date:
        raise HTTPException(status_code=400, detail="end_date must be after start_date")
    return await appointment_service.list_appointments(db, business, start_date, end_date)


@router.post("/", response_model=AppointmentOut, status_code=201)
async def create_appointment(
    booking: StaffAppointmentBook,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    """Book on a customer's behalf (phone or walk-up booking)."""
    appointment = await appointment_service.book_appointment(db, business, booking, booking.status)
    await schedule_confirmation(background_tasks, db, business, appointment)
    return appointment


@router.post("/complete-overdue", response_model=OverdueCompletionResult)
async def complete_overdue(
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    """Close out in-progress appointments whose service time has run out."""
    completed = await appointment_service.complete_overdue(db, business)
    return OverdueCompletionResult(completed=completed)


@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    return await appointment_service.get_appointment(db, business.id, appointment_id)


@router.patch("/{appointment_id}/status", response_model=AppointmentOut)
async def update_status(
    appointment_id: UUID,
    update: AppointmentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    return await appointment_service.update_appointment_status(db, business.id, appointment_id, update.status)


@router.post("/{appointment_id}/send-email", response_model=MessageResponse)
async def resend_email(
    appointment_id: UUID,
    request: ResendEmailRequest,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    """Send a confirmation or reminder email right now and report whether it went out."""
    appointment = await appointment_service.get_appointment(db, business.id, appointment_id)
    if not appointment.customer_email:
        raise HTTPException(status_code=400, detail="Appointment has no customer email")

    payload = await load_email_payload(db, appointment)
    sent = await deliver_appointment_email(request.type, appointment.customer_email, payload)
    if not sent:
        raise HTTPException(status_code=502, detail="Failed to send email")

    return MessageResponse(message=f"{request.type.value.capitalize()} email sent to {appointment.customer_email}")
