"""Staff management endpoints."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action
from app.models.business import Business
from app.models.service import Service
from app.models.staff import Staff
from app.models.user import User
from app.schemas.appointment import AvailableSlotsResponse
from app.schemas.staff import StaffCreate, StaffOut, StaffServicesUpdate, StaffUpdate, ServiceOut
from app.services.appointments import available_slots, get_active_staff

router = APIRouter()
logger = logging.getLogger(__name__)


def _hours_to_storage(working_hours) -> Optional[dict]:
    if working_hours is None:
        return None
    return {day: hours.model_dump() for day, hours in working_hours.items()}


async def _get_staff(db: AsyncSession, business_id: UUID, staff_id: UUID) -> Staff:
    result = await db.execute(
        select(Staff)
        .options(selectinload(Staff.services))
        .where(Staff.id == staff_id, Staff.business_id == business_id)
    )
    staff = result.scalar_one_or_none()
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return staff


async def _load_services(db: AsyncSession, business_id: UUID, service_ids: list[UUID]) -> list[Service]:
    if not service_ids:
        return []
    result = await db.execute(
        select(Service).where(Service.id.in_(service_ids), Service.business_id == business_id)
    )
    services = list(result.scalars().all())
    if len(services) != len(set(service_ids)):
        raise HTTPException(status_code=404, detail="One or more services not found")
    return services


@router.get("/", response_model=list[StaffOut])
async def list_staff(
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
):
    query = select(Staff).where(Staff.business_id == business.id)
    if not include_inactive:
        query = query.where(Staff.is_active == True)  # noqa: E712
    result = await db.execute(query.order_by(Staff.name))
    return result.scalars().all()


@router.post("/", response_model=StaffOut, status_code=201)
async def create_staff(
    data: StaffCreate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_STAFF)),
):
    staff = Staff(
        business_id=business.id,
        name=data.name,
        phone=data.phone,
        working_hours=_hours_to_storage(data.working_hours),
        services=await _load_services(db, business.id, data.service_ids),
    )
    db.add(staff)
    await db.commit()
    await db.refresh(staff)

    logger.info("Staff member %s added to %s", staff.name, business.slug)
    return staff


@router.patch("/{staff_id}", response_model=StaffOut)
async def update_staff(
    staff_id: UUID,
    data: StaffUpdate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_STAFF)),
):
    staff = await _get_staff(db, business.id, staff_id)
    update_data = data.model_dump(exclude_unset=True)

    if "name" in update_data and data.name is not None:
        staff.name = data.name
    if "phone" in update_data:
        staff.phone = data.phone
    if "working_hours" in update_data:
        # null clears the override; the staff member then follows business hours
        staff.working_hours = _hours_to_storage(data.working_hours)
    if "is_active" in update_data and data.is_active is not None:
        staff.is_active = data.is_active

    await db.commit()
    await db.refresh(staff)
    return staff


@router.delete("/{staff_id}", response_model=StaffOut)
async def deactivate_staff(
    staff_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_STAFF)),
):
    """Stop taking bookings for a staff member. Existing appointments are kept."""
    staff = await _get_staff(db, business.id, staff_id)
    staff.is_active = False
    await db.commit()
    await db.refresh(staff)
    logger.info("Staff member %s deactivated", staff.id)
    return staff


@router.get("/{staff_id}/services", response_model=list[ServiceOut])
async def get_staff_services(
    staff_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
):
    staff = await _get_staff(db, business.id, staff_id)
    return staff.services


@router.put("/{staff_id}/services", response_model=list[ServiceOut])
async def set_staff_services(
    staff_id: UUID,
    data: StaffServicesUpdate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_STAFF)),
):
    """Replace the set of services this staff member performs."""
    staff = await _get_staff(db, business.id, staff_id)
    staff.services = await _load_services(db, business.id, data.service_ids)
    await db.commit()
    staff = await _get_staff(db, business.id, staff_id)
    return staff.services


@router.get("/{staff_id}/slots", response_model=AvailableSlotsResponse)
async def get_staff_slots(
    staff_id: UUID,
    date: date = Query(..., description="Date in YYYY-MM-DD format"),
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_APPOINTMENTS)),
):
    staff = await get_active_staff(db, business.id, staff_id)
    slots = await available_slots(db, business, staff, date)
    return AvailableSlotsResponse(date=date, staff_id=staff.id, slots=slots)
