"""Tests for SMS service: verifies behavior when Twilio is not configured."""

import threading
from unittest.mock import MagicMock, patch

import pytest
from app.core.config import settings
from app.services.sms import send_queue_called


@pytest.mark.asyncio
async def test_sms_skipped_when_no_credentials():
    """SMS should gracefully return False when Twilio creds are empty."""
    result = await send_queue_called("+15551234567", "Luxe Salon", 3)
    assert result is False


@pytest.mark.asyncio
async def test_sms_sent_with_ticket_number():
    fake_client = MagicMock()
    fake_client.messages.create.return_value.sid = "SM123"

    with patch.object(settings, "TWILIO_ACCOUNT_SID", "AC123"), \
         patch.object(settings, "TWILIO_AUTH_TOKEN", "token"), \
         patch.object(settings, "TWILIO_PHONE_NUMBER", "+15550000000"), \
         patch("app.services.sms._get_twilio_client", return_value=fake_client):
        result = await send_queue_called("+15551234567", "Luxe Salon", 3)

    assert result is True
    kwargs = fake_client.messages.create.call_args.kwargs
    assert kwargs["to"] == "+15551234567"
    assert "#3" in kwargs["body"]
    assert "Luxe Salon" in kwargs["body"]


@pytest.mark.asyncio
async def test_sms_provider_error_returns_false():
    fake_client = MagicMock()
    fake_client.messages.create.side_effect = RuntimeError("network down")

    with patch.object(settings, "TWILIO_ACCOUNT_SID", "AC123"), \
         patch.object(settings, "TWILIO_AUTH_TOKEN", "token"), \
         patch.object(settings, "TWILIO_PHONE_NUMBER", "+15550000000"), \
         patch("app.services.sms._get_twilio_client", return_value=fake_client):
        result = await send_queue_called("+15551234567", "Luxe Salon", 3)

    assert result is False


@pytest.mark.asyncio
async def test_twilio_call_runs_off_the_event_loop():
    loop_thread = threading.get_ident()
    seen = {}

    def fake_create(**kwargs):
        seen["thread"] = threading.get_ident()
        return MagicMock(sid="SM456")

    fake_client = MagicMock()
    fake_client.messages.create.side_effect = fake_create

    with patch.object(settings, "TWILIO_ACCOUNT_SID", "AC123"), \
         patch.object(settings, "TWILIO_AUTH_TOKEN", "token"), \
         patch.object(settings, "TWILIO_PHONE_NUMBER", "+15550000000"), \
         patch("app.services.sms._get_twilio_client", return_value=fake_client):
        assert await send_queue_called("+15551234567", "Luxe Salon", 7) is True

    assert seen["thread"] != loop_thread
