"""Scheduled job triggers, called by an external scheduler."""

import logging
import secrets
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.schemas.appointment import ReminderSweepResult
from app.services.reminders import send_reminders

router = APIRouter()
logger = logging.getLogger(__name__)


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Require `Authorization: Bearer <CRON_SECRET>`. An unset secret rejects everything."""
    expected = f"Bearer {settings.CRON_SECRET}".encode()
    # Bytes comparison: compare_digest rejects non-ASCII str with TypeError
    if not settings.CRON_SECRET or not authorization or not secrets.compare_digest(authorization.encode(), expected):
        logger.warning("Rejected cron call with bad or missing credentials")
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get("/send-reminders", response_model=ReminderSweepResult, dependencies=[Depends(verify_cron_secret)])
async def trigger_reminders(db: AsyncSession = Depends(get_db)):
    """Email tomorrow's confirmed customers."""
    return await send_reminders(db)
