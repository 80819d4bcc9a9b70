"""Business endpoints: super admin onboarding and per-business profile/settings."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action
from app.models.business import Business
from app.models.user import User
from app.schemas.business import BusinessCreate, BusinessOut, BusinessUpdate
from app.schemas.settings import BusinessSettings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=list[BusinessOut])
async def list_businesses(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.MANAGE_BUSINESSES)),
):
    result = await db.execute(select(Business).order_by(Business.created_at))
    return result.scalars().all()


@router.post("/", response_model=BusinessOut, status_code=201)
async def create_business(
    biz: BusinessCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.MANAGE_BUSINESSES)),
):
    """Onboard a new business. The slug becomes its public booking address."""
    existing = await db.execute(select(Business).where(Business.slug == biz.slug))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Slug '{biz.slug}' is already taken")

    business = Business(
        name=biz.name,
        slug=biz.slug,
        phone=biz.phone,
        address=biz.address,
        timezone=biz.timezone,
        settings=(biz.settings or BusinessSettings()).to_storage(),
    )
    db.add(business)
    await db.commit()
    await db.refresh(business)

    logger.info("Business created: %s (%s) by %s", business.slug, business.id, current_user.email)
    return business


@router.get("/me", response_model=BusinessOut)
async def get_my_business(
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
):
    return business


@router.patch("/me", response_model=BusinessOut)
async def update_my_business(
    update: BusinessUpdate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_SETTINGS)),
):
    for key, value in update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(business, key, value)

    await db.commit()
    await db.refresh(business)
    return business


@router.get("/me/settings", response_model=BusinessSettings)
async def get_settings(
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
):
    """Operating hours and notification toggles, with stored gaps filled in."""
    return BusinessSettings.from_storage(business.settings)


@router.put("/me/settings", response_model=BusinessSettings)
async def replace_settings(
    new_settings: BusinessSettings,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_SETTINGS)),
):
    business.settings = new_settings.to_storage()
    await db.commit()
    await db.refresh(business)

    logger.info("Settings updated for %s by %s", business.slug, current_user.email)
    return BusinessSettings.from_storage(business.settings)
