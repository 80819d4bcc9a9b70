"""Tests for appointment email rendering."""

import threading
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from app.schemas.notification import AppointmentEmailPayload, EmailTemplate
from app.services.email_service import EmailService
from app.services.email_templates import render
from app.utils.timeutils import format_email_date, format_email_time


def _payload(**overrides):
    data = dict(
        customer_name="Sam",
        business_name="Luxe Salon",
        service_name="Haircut",
        appointment_date="Monday, January 05, 2026",
        appointment_time="02:30 PM",
        business_phone="+15550001111",
        business_address=None,
    )
    data.update(overrides)
    return AppointmentEmailPayload(**data)


def test_display_formats():
    when = datetime(2026, 1, 5, 14, 30)
    assert format_email_date(when) == "Monday, January 05, 2026"
    assert format_email_time(when) == "02:30 PM"


def test_confirmation():
    subject, html_body, plain_body = render(EmailTemplate.CONFIRMATION, _payload())
    assert subject == "Appointment Confirmed - Luxe Salon"
    assert "Monday, January 05, 2026" in html_body
    assert "02:30 PM" in plain_body
    assert "Address:" not in plain_body


def test_reminder_includes_address_when_known():
    subject, html_body, plain_body = render(EmailTemplate.REMINDER, _payload(business_address="1 Main St"))
    assert subject == "Reminder: Your appointment tomorrow at Luxe Salon"
    assert "1 Main St" in html_body
    assert "Address: 1 Main St" in plain_body


def test_html_is_escaped():
    _, html_body, _ = render(EmailTemplate.CONFIRMATION, _payload(customer_name="<b>Sam</b>"))
    assert "<b>Sam</b>" not in html_body
    assert "&lt;b&gt;Sam&lt;/b&gt;" in html_body


@pytest.mark.asyncio
async def test_sendgrid_call_runs_off_the_event_loop():
    loop_thread = threading.get_ident()
    seen = {}

    def fake_send(message):
        seen["thread"] = threading.get_ident()
        return MagicMock(status_code=202)

    service = EmailService()
    service.enabled = True
    service.client = MagicMock()
    service.client.send.side_effect = fake_send

    sent = await service.send_appointment_email(EmailTemplate.CONFIRMATION, "sam@example.com", _payload())

    assert sent is True
    assert seen["thread"] != loop_thread


@pytest.mark.asyncio
async def test_sendgrid_error_reported_as_false():
    service = EmailService()
    service.enabled = True
    service.client = MagicMock()
    service.client.send.side_effect = RuntimeError("timeout")

    assert await service.send_email("sam@example.com", "Hi", "<p>Hi</p>") is False
