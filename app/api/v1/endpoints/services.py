"""Service catalogue endpoints."""

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action
from app.models.business import Business
from app.models.service import Service
from app.models.user import User
from app.schemas.staff import ServiceCreate, ServiceOut, ServiceUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_service(db: AsyncSession, business_id: UUID, service_id: UUID) -> Service:
    result = await db.execute(
        select(Service).where(Service.id == service_id, Service.business_id == business_id)
    )
    service = result.scalar_one_or_none()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.get("/", response_model=list[ServiceOut])
async def list_services(
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
):
    query = select(Service).where(Service.business_id == business.id)
    if not include_inactive:
        query = query.where(Service.is_active == True)  # noqa: E712
    result = await db.execute(query.order_by(Service.name))
    return result.scalars().all()


@router.post("/", response_model=ServiceOut, status_code=201)
async def create_service(
    data: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_SERVICES)),
):
    service = Service(business_id=business.id, **data.model_dump())
    db.add(service)
    await db.commit()
    await db.refresh(service)

    logger.info("Service %s (%d min) added to %s", service.name, service.duration_minutes, business.slug)
    return service


@router.patch("/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: UUID,
    data: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_SERVICES)),
):
    service = await _get_service(db, business.id, service_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(service, key, value)

    await db.commit()
    await db.refresh(service)
    return service


@router.delete("/{service_id}", response_model=ServiceOut)
async def deactivate_service(
    service_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_SERVICES)),
):
    """Withdraw a service from booking. Past appointments keep pointing at it."""
    service = await _get_service(db, business.id, service_id)
    service.is_active = False
    await db.commit()
    await db.refresh(service)
    logger.info("Service %s deactivated", service.id)
    return service
