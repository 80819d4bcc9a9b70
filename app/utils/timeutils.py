"""Business-local time helpers.

Appointment times are stored as naive wall-clock timestamps in the
business timezone. Row creation timestamps (queue tickets) are naive UTC.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def business_zone(tz_name: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", tz_name)
        return ZoneInfo("UTC")


def business_now(tz_name: Optional[str]) -> datetime:
    """Current wall-clock time in the business timezone (naive)."""
    return datetime.now(business_zone(tz_name)).replace(tzinfo=None)


def business_today(tz_name: Optional[str]) -> date:
    return business_now(tz_name).date()


def local_day_bounds_utc(tz_name: Optional[str], day: Optional[date] = None) -> tuple[datetime, datetime]:
    """[start, end) of a business-local day, as naive UTC timestamps."""
    zone = business_zone(tz_name)
    day = day or business_today(tz_name)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return (
        start.astimezone(timezone.utc).replace(tzinfo=None),
        end.astimezone(timezone.utc).replace(tzinfo=None),
    )


def format_email_date(value: datetime) -> str:
    return value.strftime("%A, %B %d, %Y")


def format_email_time(value: datetime) -> str:
    return value.strftime("%I:%M %p")
