"""HTML and plain-text bodies for appointment emails."""

from html import escape

from app.schemas.notification import AppointmentEmailPayload, EmailTemplate


def _details_html(p: AppointmentEmailPayload) -> str:
    address_row = (
        f"<p><strong>Address:</strong> {escape(p.business_address)}</p>" if p.business_address else ""
    )
    return f"""
                    <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0;">
                        <p><strong>Date:</strong> {escape(p.appointment_date)}</p>
                        <p><strong>Time:</strong> {escape(p.appointment_time)}</p>
                        <p><strong>Service:</strong> {escape(p.service_name)}</p>
                        <p><strong>Location:</strong> {escape(p.business_name)}</p>
                        {address_row}
                    </div>"""


def _details_plain(p: AppointmentEmailPayload) -> str:
    lines = [
        f"Date: {p.appointment_date}",
        f"Time: {p.appointment_time}",
        f"Service: {p.service_name}",
        f"Location: {p.business_name}",
    ]
    if p.business_address:
        lines.append(f"Address: {p.business_address}")
    return "\n".join(lines)


def _wrap(heading: str, intro: str, p: AppointmentEmailPayload, footer: str) -> str:
    return f"""
        <html>
            <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                    <h2 style="color: #3b82f6;">{heading}</h2>

                    <p>Hi {escape(p.customer_name)},</p>

                    <p>{intro}</p>
                    {_details_html(p)}

                    <p style="color: #666; font-size: 14px; margin-top: 40px;">
                        {footer} Call us at {escape(p.business_phone)}.
                    </p>
                </div>
            </body>
        </html>
        """


def render_confirmation(p: AppointmentEmailPayload) -> tuple[str, str, str]:
    subject = f"Appointment Confirmed - {p.business_name}"
    html_body = _wrap(
        "Appointment Confirmed",
        f"Your appointment with {escape(p.business_name)} has been confirmed. Here are your details:",
        p,
        "Need to reschedule or cancel?",
    )
    plain_body = (
        f"Appointment Confirmed\n\nHi {p.customer_name},\n\n"
        f"Your appointment with {p.business_name} has been confirmed.\n\n"
        f"{_details_plain(p)}\n\n"
        f"Need to reschedule or cancel? Call us at {p.business_phone}."
    )
    return subject, html_body, plain_body


def render_reminder(p: AppointmentEmailPayload) -> tuple[str, str, str]:
    subject = f"Reminder: Your appointment tomorrow at {p.business_name}"
    html_body = _wrap(
        "See You Tomorrow",
        "This is a friendly reminder about your appointment tomorrow:",
        p,
        "Can't make it? Please let us know as soon as possible.",
    )
    plain_body = (
        f"See You Tomorrow\n\nHi {p.customer_name},\n\n"
        f"This is a friendly reminder about your appointment tomorrow.\n\n"
        f"{_details_plain(p)}\n\n"
        f"Can't make it? Call us at {p.business_phone}."
    )
    return subject, html_body, plain_body


RENDERERS = {
    EmailTemplate.CONFIRMATION: render_confirmation,
    EmailTemplate.REMINDER: render_reminder,
}


def render(template: EmailTemplate, payload: AppointmentEmailPayload) -> tuple[str, str, str]:
    """Return (subject, html_body, plain_body) for the chosen template."""
    return RENDERERS[template](payload)
