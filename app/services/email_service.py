"""Email notification service using SendGrid."""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.core.config import settings
from app.schemas.notification import AppointmentEmailPayload, EmailTemplate
from app.services.email_templates import render

logger = logging.getLogger(__name__)


class EmailService:
    """Email service for sending appointment notifications.

    Delivery is best-effort: every failure is logged and reported as
    False, never raised, so a booking is never undone by a mail outage.
    """

    def __init__(self):
        """Initialize email service."""
        self.api_key = settings.SENDGRID_API_KEY
        self.from_email = settings.SENDGRID_FROM_EMAIL
        self.from_name = settings.SENDGRID_FROM_NAME

        if not self.api_key:
            logger.warning("SENDGRID_API_KEY not configured. Emails will not be sent.")
            self.enabled = False
        else:
            self.client = SendGridAPIClient(self.api_key)
            # python_http_client reads this on every request
            self.client.client.timeout = settings.EMAIL_TIMEOUT_SECONDS
            self.enabled = True
            logger.info("Email service initialized successfully")

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        plain_body: Optional[str] = None,
    ) -> bool:
        """
        Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            html_body: HTML body content
            plain_body: Plain text body (optional)

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.info("Email service disabled. Would have sent to %s: %s", to, subject)
            return False

        try:
            message = Mail(
                from_email=(self.from_email, self.from_name),
                to_emails=to,
                subject=subject,
                html_content=html_body,
            )

            if plain_body:
                message.plain_text_content = plain_body

            # The SendGrid client is blocking; keep it off the event loop
            response = await run_in_threadpool(self.client.send, message)

            if 200 <= response.status_code < 300:
                logger.info("Email sent successfully to %s: %s", to, subject)
                return True
            logger.error("Failed to send email to %s: %s %s", to, response.status_code, response.body)
            return False

        except Exception as e:
            logger.error("Error sending email to %s: %s", to, e)
            return False

    async def send_appointment_email(
        self,
        template: EmailTemplate,
        to: str,
        payload: AppointmentEmailPayload,
    ) -> bool:
        """Render a confirmation or reminder and send it to the customer."""
        subject, html_body, plain_body = render(template, payload)
        return await self.send_email(to, subject, html_body, plain_body)


# Global email service instance
email_service = EmailService()
