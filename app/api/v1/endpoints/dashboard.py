"""Dashboard summary for the admin home page."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action
from app.models.business import Business
from app.models.user import User
from app.schemas.queue import DashboardStats
from app.services.queue import dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
):
    """Today's queue and appointment counts for the business."""
    return await dashboard_stats(db, business)
