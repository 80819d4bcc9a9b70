"""Public, slug-addressed endpoints used by customers. No authentication."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.appointment import AppointmentStatus
from app.models.service import Service
from app.models.staff import Staff
from app.schemas.appointment import AppointmentBook, AppointmentOut, AvailableSlotsResponse, CustomerCancel
from app.schemas.business import BusinessPublic
from app.schemas.queue import QueueDisplay, QueueEntryOut, QueueJoin
from app.schemas.settings import BusinessSettings
from app.schemas.staff import ServiceOut, StaffPublic
from app.services import appointments as appointment_service
from app.services import queue as queue_service
from app.services.notifications import schedule_confirmation

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{slug}", response_model=BusinessPublic)
async def get_business_page(slug: str, db: AsyncSession = Depends(get_db)):
    """Everything the booking page shows: hours, bookable staff and services."""
    business = await appointment_service.get_business_by_slug(db, slug)

    staff = (
        await db.execute(
            select(Staff).where(Staff.business_id == business.id, Staff.is_active == True).order_by(Staff.name)  # noqa: E712
        )
    ).scalars().all()
    services = (
        await db.execute(
            select(Service).where(Service.business_id == business.id, Service.is_active == True).order_by(Service.name)  # noqa: E712
        )
    ).scalars().all()

    return BusinessPublic(
        id=business.id,
        name=business.name,
        slug=business.slug,
        phone=business.phone,
        address=business.address,
        timezone=business.timezone,
        hours=BusinessSettings.from_storage(business.settings).hours,
        staff=[StaffPublic.model_validate(s) for s in staff],
        services=[ServiceOut.model_validate(s) for s in services],
    )


@router.get("/{slug}/slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    slug: str,
    staff_id: UUID = Query(...),
    date: date = Query(..., description="Date in YYYY-MM-DD format"),
    db: AsyncSession = Depends(get_db),
):
    """Bookable start times for one staff member on one day."""
    business = await appointment_service.get_business_by_slug(db, slug)
    staff = await appointment_service.get_active_staff(db, business.id, staff_id)
    slots = await appointment_service.available_slots(db, business, staff, date)
    return AvailableSlotsResponse(date=date, staff_id=staff.id, slots=slots)


@router.post("/{slug}/appointments", response_model=AppointmentOut, status_code=201)
async def book_appointment(
    slug: str,
    booking: AppointmentBook,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Book an appointment.

    The confirmation email goes out after the response; a delivery failure
    never affects the booking.
    """
    business = await appointment_service.get_business_by_slug(db, slug)
    appointment = await appointment_service.book_appointment(db, business, booking, AppointmentStatus.CONFIRMED)
    await schedule_confirmation(background_tasks, db, business, appointment)
    return appointment


@router.get("/{slug}/my-appointments", response_model=list[AppointmentOut])
async def my_appointments(
    slug: str,
    phone: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    business = await appointment_service.get_business_by_slug(db, slug)
    return await appointment_service.find_customer_appointments(db, business, phone, email)


@router.post("/{slug}/appointments/{appointment_id}/cancel", response_model=AppointmentOut)
async def cancel_appointment(
    slug: str,
    appointment_id: UUID,
    proof: CustomerCancel,
    db: AsyncSession = Depends(get_db),
):
    business = await appointment_service.get_business_by_slug(db, slug)
    return await appointment_service.cancel_by_customer(
        db, business, appointment_id, proof.customer_phone, proof.customer_email
    )


@router.post("/{slug}/queue", response_model=QueueEntryOut, status_code=201)
async def join_queue(slug: str, data: QueueJoin, db: AsyncSession = Depends(get_db)):
    """Take a ticket for the walk-in queue."""
    business = await appointment_service.get_business_by_slug(db, slug)
    return await queue_service.join_queue(db, business, data)


@router.get("/{slug}/queue", response_model=QueueDisplay)
async def queue_display(slug: str, db: AsyncSession = Depends(get_db)):
    business = await appointment_service.get_business_by_slug(db, slug)
    return await queue_service.queue_display(db, business)
