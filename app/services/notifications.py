"""Appointment notification fan-out.

Builds the display payload from stored rows and hands it to the email
service. Callers schedule `deliver_appointment_email` as a background task
after their commit so a slow or failing provider never blocks or undoes
the booking.
"""

import logging
from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment
from app.models.business import Business
from app.models.service import Service
from app.schemas.notification import AppointmentEmailPayload, EmailTemplate
from app.schemas.settings import BusinessSettings
from app.services.email_service import email_service
from app.utils.timeutils import format_email_date, format_email_time

logger = logging.getLogger(__name__)


def build_email_payload(appointment: Appointment, business: Business, service: Service) -> AppointmentEmailPayload:
    return AppointmentEmailPayload(
        customer_name=appointment.customer_name,
        business_name=business.name,
        service_name=service.name,
        appointment_date=format_email_date(appointment.appointment_time),
        appointment_time=format_email_time(appointment.appointment_time),
        business_phone=business.phone,
        business_address=business.address,
    )


async def load_email_payload(db: AsyncSession, appointment: Appointment) -> AppointmentEmailPayload:
    """Fetch the business and service rows an appointment email refers to."""
    business = await db.get(Business, appointment.business_id)
    service = await db.get(Service, appointment.service_id)
    return build_email_payload(appointment, business, service)


async def deliver_appointment_email(
    template: EmailTemplate,
    to: str,
    payload: AppointmentEmailPayload,
) -> bool:
    """Fire-and-forget delivery: logs and swallows every failure."""
    try:
        sent = await email_service.send_appointment_email(template, to, payload)
    except Exception as e:
        logger.error("Failed to send %s email to %s: %s", template.value, to, e)
        return False
    if not sent:
        logger.warning("%s email to %s was not delivered", template.value.capitalize(), to)
    return sent



async def schedule_confirmation(
    background_tasks: BackgroundTasks,
    db: AsyncSession,
    business: Business,
    appointment: Appointment,
) -> bool:
    """Queue the confirmation email for a fresh booking, if the business wants one."""
    if not appointment.customer_email:
        return False
    if not BusinessSettings.from_storage(business.settings).notifications.email_confirmation:
        logger.info("Confirmation emails disabled for %s", business.slug)
        return False

    payload = await load_email_payload(db, appointment)
    background_tasks.add_task(
        deliver_appointment_email, EmailTemplate.CONFIRMATION, appointment.customer_email, payload
    )
    return True
