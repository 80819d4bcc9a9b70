"""Day-before appointment reminders.

Run on a schedule through the cron endpoint. Each business is swept in its
own timezone: confirmed appointments that start between
REMINDER_WINDOW_START_HOURS and REMINDER_WINDOW_END_HOURS from now (both
ends inclusive) get one reminder email.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.appointment import Appointment, AppointmentStatus
from app.models.business import Business
from app.models.service import Service
from app.schemas.appointment import ReminderResult, ReminderSweepResult
from app.schemas.notification import EmailTemplate
from app.schemas.settings import BusinessSettings
from app.services.email_service import email_service
from app.services.notifications import build_email_payload
from app.utils.timeutils import business_zone

logger = logging.getLogger(__name__)


def reminder_window(local_now: datetime) -> tuple[datetime, datetime]:
    return (
        local_now + timedelta(hours=settings.REMINDER_WINDOW_START_HOURS),
        local_now + timedelta(hours=settings.REMINDER_WINDOW_END_HOURS),
    )


async def _remind(appointment: Appointment, business: Business, service: Service) -> ReminderResult:
    if not appointment.customer_email:
        return ReminderResult(appointment_id=appointment.id, outcome="skipped", error="No email address")

    payload = build_email_payload(appointment, business, service)
    try:
        sent = await email_service.send_appointment_email(
            EmailTemplate.REMINDER, appointment.customer_email, payload
        )
    except Exception as e:
        logger.error("Reminder for appointment %s failed: %s", appointment.id, e)
        return ReminderResult(appointment_id=appointment.id, outcome="failed", error=str(e))

    if not sent:
        return ReminderResult(appointment_id=appointment.id, outcome="failed", error="Email not delivered")
    return ReminderResult(appointment_id=appointment.id, outcome="sent")


async def send_reminders(db: AsyncSession, now: Optional[datetime] = None) -> ReminderSweepResult:
    """Send reminders for every active business.

    `now` is an aware instant (defaults to the current time); each business
    converts it to its own wall clock before computing the window.
    """
    now = now or datetime.now(timezone.utc)

    businesses = (
        await db.execute(select(Business).where(Business.is_active == True))  # noqa: E712
    ).scalars().all()

    results: list[ReminderResult] = []
    for business in businesses:
        if not BusinessSettings.from_storage(business.settings).notifications.email_reminders:
            logger.info("Reminders disabled for %s, skipping", business.slug)
            continue

        local_now = now.astimezone(business_zone(business.timezone)).replace(tzinfo=None)
        window_start, window_end = reminder_window(local_now)

        rows = (
            await db.execute(
                select(Appointment, Service)
                .join(Service, Appointment.service_id == Service.id)
                .where(
                    Appointment.business_id == business.id,
                    Appointment.status == AppointmentStatus.CONFIRMED,
                    Appointment.appointment_time >= window_start,
                    Appointment.appointment_time <= window_end,
                )
                .order_by(Appointment.appointment_time)
            )
        ).all()

        for appointment, service in rows:
            results.append(await _remind(appointment, business, service))

    successful = sum(1 for r in results if r.outcome == "sent")
    failed = sum(1 for r in results if r.outcome == "failed")
    skipped = sum(1 for r in results if r.outcome == "skipped")

    logger.info(
        "Reminder sweep: %d appointments, %d sent, %d failed, %d skipped",
        len(results), successful, failed, skipped,
    )
    return ReminderSweepResult(
        message=f"Processed {len(results)} reminders",
        total=len(results),
        successful=successful,
        failed=failed,
        skipped=skipped,
        results=results,
    )
