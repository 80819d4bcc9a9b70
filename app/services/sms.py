"""Twilio SMS service.

Used to tell a walk-in customer their ticket has been called.
"""

import logging
from fastapi.concurrency import run_in_threadpool
from twilio.rest import Client
from twilio.http.http_client import TwilioHttpClient
from twilio.base.exceptions import TwilioRestException
from app.core.config import settings

logger = logging.getLogger(__name__)


def _get_twilio_client() -> Client:
    return Client(
        settings.TWILIO_ACCOUNT_SID,
        settings.TWILIO_AUTH_TOKEN,
        http_client=TwilioHttpClient(timeout=settings.SMS_TIMEOUT_SECONDS),
    )


async def send_queue_called(customer_phone: str, business_name: str, queue_number: int) -> bool:
    """Let a walk-in know it's their turn."""
    body = (
        f"{business_name}: ticket #{queue_number}, it's your turn! "
        f"Please head to the front desk."
    )
    return await _send_sms(customer_phone, body)


async def _send_sms(to: str, body: str) -> bool:
    """Send an SMS via Twilio. Returns True on success."""
    if not all([settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN, settings.TWILIO_PHONE_NUMBER]):
        logger.warning("Twilio credentials not configured, skipping SMS to %s", to)
        return False

    try:
        client = _get_twilio_client()
        message = await run_in_threadpool(
            client.messages.create,
            body=body,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=to,
        )
        logger.info("SMS sent to %s, SID: %s", to, message.sid)
        return True
    except TwilioRestException as e:
        logger.error("Twilio error sending SMS to %s: %s", to, e)
        return False
    except Exception as e:
        logger.error("Unexpected error sending SMS to %s: %s", to, e)
        return False
