"""Appointment booking, availability and status changes.

All functions are scoped to one business; callers resolve the business
(from the public slug or the authenticated user) before calling in.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.appointment import Appointment, AppointmentStatus, ACTIVE_APPOINTMENT_STATUSES
from app.models.business import Business
from app.models.service import Service
from app.models.staff import Staff
from app.schemas.appointment import AppointmentBook, AppointmentOut
from app.schemas.settings import BusinessSettings
from app.services.realtime import change_feed, APPOINTMENTS
from app.services.slots import effective_hours, generate_slots
from app.services.transitions import InvalidTransition, ensure_appointment_transition
from app.utils.timeutils import business_now, business_today

logger = logging.getLogger(__name__)


# ============================================================================
# LOOKUPS
# ============================================================================

async def get_business(db: AsyncSession, business_id: UUID) -> Business:
    result = await db.execute(select(Business).where(Business.id == business_id))
    business = result.scalar_one_or_none()
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return business


async def get_business_by_slug(db: AsyncSession, slug: str) -> Business:
    result = await db.execute(
        select(Business).where(Business.slug == slug.lower(), Business.is_active == True)  # noqa: E712
    )
    business = result.scalar_one_or_none()
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return business


async def get_active_staff(db: AsyncSession, business_id: UUID, staff_id: UUID) -> Staff:
    result = await db.execute(
        select(Staff)
        .options(selectinload(Staff.services))
        .where(Staff.id == staff_id, Staff.business_id == business_id)
    )
    staff = result.scalar_one_or_none()
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found")
    if not staff.is_active:
        raise HTTPException(status_code=400, detail="Staff member is not currently taking bookings")
    return staff


async def get_active_service(db: AsyncSession, business_id: UUID, service_id: UUID) -> Service:
    result = await db.execute(
        select(Service).where(Service.id == service_id, Service.business_id == business_id)
    )
    service = result.scalar_one_or_none()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    if not service.is_active:
        raise HTTPException(status_code=400, detail="Service is no longer offered")
    return service


async def get_appointment(db: AsyncSession, business_id: UUID, appointment_id: UUID) -> Appointment:
    result = await db.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.business_id == business_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


# ============================================================================
# SLOT AVAILABILITY
# ============================================================================

async def fetch_booked_starts(db: AsyncSession, staff_id: UUID, target_date: date) -> list[datetime]:
    """Start times of the staff member's active appointments on `target_date`."""
    day_start = datetime.combine(target_date, time.min)
    day_end = day_start + timedelta(days=1)
    result = await db.execute(
        select(Appointment.appointment_time).where(
            Appointment.staff_id == staff_id,
            Appointment.appointment_time >= day_start,
            Appointment.appointment_time < day_end,
            Appointment.status.in_(ACTIVE_APPOINTMENT_STATUSES),
        )
    )
    return list(result.scalars().all())


async def available_slots(db: AsyncSession, business: Business, staff: Staff, target_date: date) -> list[str]:
    """Bookable HH:MM start times for a staff member on a date."""
    business_settings = BusinessSettings.from_storage(business.settings)
    hours = effective_hours(business_settings.hours, staff.working_hours)
    booked = await fetch_booked_starts(db, staff.id, target_date)
    return generate_slots(hours, target_date, booked, settings.SLOT_GRANULARITY_MINUTES)


# ============================================================================
# BOOKING
# ============================================================================

async def publish_appointment(appointment: Appointment, event: str) -> None:
    await change_feed.publish(
        APPOINTMENTS,
        appointment.business_id,
        event,
        AppointmentOut.model_validate(appointment).model_dump(mode="json"),
    )


async def book_appointment(
    db: AsyncSession,
    business: Business,
    booking: AppointmentBook,
    initial_status: AppointmentStatus = AppointmentStatus.CONFIRMED,
) -> Appointment:
    """Validate a booking request against current availability and store it."""
    staff = await get_active_staff(db, business.id, booking.staff_id)
    service = await get_active_service(db, business.id, booking.service_id)

    if staff.services and service.id not in {s.id for s in staff.services}:
        raise HTTPException(status_code=400, detail=f"{staff.name} does not offer {service.name}")

    requested_time = booking.appointment_time.strftime("%H:%M")
    start = datetime.combine(booking.appointment_date, booking.appointment_time.replace(second=0, microsecond=0))

    if start < business_now(business.timezone):
        raise HTTPException(status_code=400, detail="Cannot book an appointment in the past")

    slots = await available_slots(db, business, staff, booking.appointment_date)
    if requested_time not in slots:
        raise HTTPException(
            status_code=409,
            detail=f"Time slot {requested_time} is not available. Please pick another time.",
        )

    appointment = Appointment(
        business_id=business.id,
        customer_name=booking.customer_name,
        customer_phone=booking.customer_phone,
        customer_email=booking.customer_email,
        service_id=service.id,
        staff_id=staff.id,
        appointment_time=start,
        status=initial_status,
        notes=booking.notes,
    )
    db.add(appointment)
    try:
        await db.commit()
    except IntegrityError:
        # Another booking for the same staff and start time committed first
        await db.rollback()
        logger.warning("Double booking rejected: staff %s at %s", booking.staff_id, start)
        raise HTTPException(
            status_code=409,
            detail=f"Time slot {requested_time} was just taken. Please pick another time.",
        )
    await db.refresh(appointment)

    logger.info(
        "Appointment %s booked for %s with %s at %s",
        appointment.id, business.slug, staff.name, start,
    )
    await publish_appointment(appointment, "INSERT")
    return appointment


# ============================================================================
# LISTING
# ============================================================================

async def list_appointments(
    db: AsyncSession,
    business: Business,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Appointment]:
    """Appointments in [start_date, end_date), defaulting to today plus the configured window."""
    start_date = start_date or business_today(business.timezone)
    end_date = end_date or start_date + timedelta(days=settings.APPOINTMENT_LIST_DAYS_AHEAD)

    result = await db.execute(
        select(Appointment)
        .where(
            Appointment.business_id == business.id,
            Appointment.appointment_time >= datetime.combine(start_date, time.min),
            Appointment.appointment_time < datetime.combine(end_date, time.min),
        )
        .order_by(Appointment.appointment_time, Appointment.created_at)
    )
    return list(result.scalars().all())


async def find_customer_appointments(
    db: AsyncSession,
    business: Business,
    phone: Optional[str] = None,
    email: Optional[str] = None,
) -> list[Appointment]:
    """Upcoming pending/confirmed appointments for a customer, looked up by phone or email."""
    if bool(phone) == bool(email):
        raise HTTPException(status_code=400, detail="Provide exactly one of phone or email")

    query = select(Appointment).where(
        Appointment.business_id == business.id,
        Appointment.appointment_time >= business_now(business.timezone),
        Appointment.status.in_((AppointmentStatus.CONFIRMED, AppointmentStatus.PENDING)),
    )
    if phone:
        query = query.where(Appointment.customer_phone == phone.strip())
    else:
        query = query.where(func.lower(Appointment.customer_email) == email.strip().lower())

    result = await db.execute(query.order_by(Appointment.appointment_time))
    return list(result.scalars().all())


# ============================================================================
# STATUS CHANGES
# ============================================================================

async def update_appointment_status(
    db: AsyncSession,
    business_id: UUID,
    appointment_id: UUID,
    new_status: AppointmentStatus,
) -> Appointment:
    appointment = await get_appointment(db, business_id, appointment_id)

    try:
        ensure_appointment_transition(appointment.status, new_status)
    except InvalidTransition as e:
        raise HTTPException(status_code=400, detail=str(e))

    appointment.status = new_status
    await db.commit()
    await db.refresh(appointment)

    logger.info("Appointment %s → %s", appointment.id, new_status.value)
    await publish_appointment(appointment, "UPDATE")
    return appointment


async def cancel_by_customer(
    db: AsyncSession,
    business: Business,
    appointment_id: UUID,
    phone: Optional[str] = None,
    email: Optional[str] = None,
) -> Appointment:
    """Cancel on the customer's behalf once they prove they booked it."""
    appointment = await get_appointment(db, business.id, appointment_id)

    phone_matches = bool(phone) and phone.strip() == appointment.customer_phone
    email_matches = (
        bool(email) and bool(appointment.customer_email)
        and email.strip().lower() == appointment.customer_email.lower()
    )
    if not (phone_matches or email_matches):
        # Same answer as an unknown id: don't confirm the appointment exists
        raise HTTPException(status_code=404, detail="Appointment not found")

    return await update_appointment_status(db, business.id, appointment_id, AppointmentStatus.CANCELLED)


async def complete_overdue(db: AsyncSession, business: Business, now: Optional[datetime] = None) -> int:
    """Mark in-progress appointments whose service time has fully elapsed as completed."""
    now = now or business_now(business.timezone)
    result = await db.execute(
        select(Appointment)
        .options(selectinload(Appointment.service))
        .where(
            Appointment.business_id == business.id,
            Appointment.status == AppointmentStatus.IN_PROGRESS,
            Appointment.appointment_time < now,
        )
    )

    finished = []
    for appointment in result.scalars().all():
        ends_at = appointment.appointment_time + timedelta(minutes=appointment.service.duration_minutes)
        if ends_at < now:
            appointment.status = AppointmentStatus.COMPLETED
            finished.append(appointment)

    if not finished:
        return 0

    await db.commit()
    for appointment in finished:
        await db.refresh(appointment)
        await publish_appointment(appointment, "UPDATE")

    logger.info("Auto-completed %d overdue appointments for %s", len(finished), business.slug)
    return len(finished)
