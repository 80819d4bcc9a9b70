"""Payloads handed to the notification collaborators."""

import enum
from typing import Optional
from pydantic import BaseModel


class EmailTemplate(str, enum.Enum):
    CONFIRMATION = "confirmation"
    REMINDER = "reminder"


class AppointmentEmailPayload(BaseModel):
    """Everything an appointment email needs, already formatted for display."""
    customer_name: str
    business_name: str
    service_name: str
    appointment_date: str  # "Monday, January 05, 2026"
    appointment_time: str  # "02:30 PM"
    business_phone: str
    business_address: Optional[str] = None


class ResendEmailRequest(BaseModel):
    type: EmailTemplate = EmailTemplate.CONFIRMATION
