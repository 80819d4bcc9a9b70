"""User management endpoints: staff logins for a business."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action, Role
from app.models.business import Business
from app.models.staff import Staff
from app.models.user import User
from app.schemas.auth import StaffUserCreate, StaffUserOut, UserOut
from app.services.auth import hash_password, get_user_by_email

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=list[UserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.MANAGE_USERS)),
):
    result = await db.execute(
        select(User).where(User.business_id == business.id).order_by(User.created_at)
    )
    return result.scalars().all()


@router.post("/", response_model=StaffUserOut, status_code=201)
async def create_staff_user(
    data: StaffUserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.MANAGE_USERS)),
):
    """Create a login and, for business roles, the matching staff record.

    Both rows are written in one transaction. Business admins may only add
    staff or admins to their own business; super admins name the business
    in the body.
    """
    is_super = current_user.role == Role.SUPER_ADMIN.value

    if data.role == Role.SUPER_ADMIN and not is_super:
        raise HTTPException(status_code=403, detail="Only super admins can create super admins")

    if data.role == Role.SUPER_ADMIN:
        business_id = None
    elif is_super:
        if data.business_id is None:
            raise HTTPException(status_code=400, detail="business_id is required")
        business_id = data.business_id
    else:
        if data.business_id is not None and data.business_id != current_user.business_id:
            raise HTTPException(status_code=404, detail="Business not found")
        business_id = current_user.business_id

    if business_id is not None:
        business = await db.get(Business, business_id)
        if not business:
            raise HTTPException(status_code=404, detail="Business not found")

    if await get_user_by_email(db, data.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=data.email.lower(),
        hashed_password=hash_password(data.password),
        full_name=data.name,
        business_id=business_id,
        role=data.role.value,
        is_active=True,
    )
    db.add(user)
    await db.flush()  # Get user.id without committing

    staff = None
    if business_id is not None:
        staff = Staff(business_id=business_id, user_id=user.id, name=data.name, phone=data.phone)
        db.add(staff)

    await db.commit()
    await db.refresh(user)

    logger.info("User %s (%s) created by %s", user.email, user.role, current_user.email)
    return StaffUserOut(user=UserOut.model_validate(user), staff_id=staff.id if staff else None)
