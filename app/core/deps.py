"""FastAPI dependencies for authentication and authorization."""

from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.permissions import Action, Role, is_allowed
from app.models.business import Business
from app.models.user import User
from app.services.auth import decode_access_token

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the current user from JWT token.

    Raises 401 if no token or invalid token.
    """
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id: Optional[str] = payload.get("sub")
    try:
        user_uuid = UUID(user_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


def require_action(action: Action):
    """Dependency factory that checks the permission table.

    Usage:
        @router.post("/staff")
        async def create_staff(user: User = Depends(require_action(Action.MANAGE_STAFF))):
            ...
    """
    async def action_checker(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Your role cannot {action.value.replace('_', ' ')}",
            )
        return current_user

    return action_checker


async def get_business_scope(
    business_id: Optional[UUID] = Query(None, description="Target business (super admins only)"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Business:
    """Resolve which business a request acts on.

    Super admins must name the business explicitly. Everyone else is pinned
    to their own business; naming a different one looks like a missing
    business.
    """
    if current_user.role == Role.SUPER_ADMIN.value:
        if business_id is None:
            raise HTTPException(status_code=400, detail="business_id query parameter is required")
        target_id = business_id
    else:
        if current_user.business_id is None:
            raise HTTPException(status_code=403, detail="User is not attached to a business")
        if business_id is not None and business_id != current_user.business_id:
            raise HTTPException(status_code=404, detail="Business not found")
        target_id = current_user.business_id

    result = await db.execute(select(Business).where(Business.id == target_id))
    business = result.scalar_one_or_none()
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return business
