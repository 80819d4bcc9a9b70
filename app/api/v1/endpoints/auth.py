"""Authentication endpoints for SalonQueue."""

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.permissions import allowed_actions
from app.models.user import User
from app.schemas.auth import UserLogin, Token, MeOut
from app.services.auth import authenticate_user, create_access_token

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Log in with email and password, returns a JWT."""
    user = await authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is disabled")

    user.last_login_at = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

    logger.info("User logged in: %s (%s)", user.email, user.role)
    return Token(
        access_token=create_access_token(user),
        business_id=user.business_id,
        user_id=user.id,
        role=user.role,
        full_name=user.full_name,
        email=user.email,
    )


@router.get("/me", response_model=MeOut)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current user info plus what their role may do."""
    me = MeOut.model_validate(current_user)
    me.permissions = allowed_actions(current_user.role)
    return me
