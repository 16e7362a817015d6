"""Email notifications via the Resend API.

Every form submission sends two emails: a notification to the team inbox
(reply-to set to the submitter) and a confirmation to the submitter.
Senders return True/False and never raise; they run as background tasks.
"""

import logging
from html import escape

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from whitehatlink.api.config import Settings
from whitehatlink.api.schemas import ContactRequest, InquiryRequest

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

_ROW = '<tr><td style="padding:8px 0"><strong>{label}:</strong></td><td style="padding:8px 0">{value}</td></tr>'


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
async def _post_email(payload: dict, api_key: str) -> httpx.Response:
    async with httpx.AsyncClient() as client:
        return await client.post(
            RESEND_API_URL,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=10.0,
        )


async def send_email(
    settings: Settings,
    to: str,
    subject: str,
    html: str,
    text: str,
    reply_to: str | None = None,
) -> bool:
    """Send one email through Resend.

    Returns True if Resend accepted it, False otherwise (including when
    RESEND_API_KEY is not configured).
    """
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not configured, skipping email %r", subject)
        return False

    payload = {
        "from": settings.resend_from_email,
        "to": [to],
        "subject": subject,
        "html": html,
        "text": text,
    }
    if reply_to:
        payload["reply_to"] = reply_to

    try:
        resp = await _post_email(payload, settings.resend_api_key)
    except httpx.HTTPError as e:
        logger.error("Failed to send email %r: %s", subject, e)
        return False

    if resp.status_code == 200:
        logger.info("Email %r sent", subject)
        return True
    logger.error("Resend API error %d: %s", resp.status_code, resp.text)
    return False


def _layout(title: str, body: str, settings: Settings) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title></head>"
        "<body style=\"font-family:-apple-system,'Segoe UI',Roboto,Arial,sans-serif;"
        "line-height:1.6;color:#333;max-width:600px;margin:0 auto;padding:20px\">"
        f"<h1 style=\"font-size:22px;color:#3b5bdb\">{escape(title)}</h1>"
        f"{body}"
        f"<p style=\"color:#6b7280;font-size:14px\"><a href=\"{escape(settings.site_url)}\">"
        f"{escape(settings.site_domain)}</a> | {escape(settings.team_email)}</p>"
        "</body></html>"
    )


def _details_table(rows: list[tuple[str, str]]) -> str:
    cells = "".join(_ROW.format(label=escape(label), value=escape(value)) for label, value in rows)
    return f'<table style="width:100%;border-collapse:collapse">{cells}</table>'


def _message_block(message: str) -> str:
    return (
        '<div style="background:#f9fafb;padding:15px;border-left:4px solid #3b5bdb">'
        f'<p style="margin:0;white-space:pre-wrap">{escape(message or "No message provided")}</p></div>'
    )


def _inquiry_rows(inquiry: InquiryRequest) -> list[tuple[str, str]]:
    rows = [
        ("Name", inquiry.name or "Not provided"),
        ("Email", inquiry.email),
        ("Website", inquiry.url or "Not provided"),
    ]
    for label, value in (("Budget", inquiry.budget), ("Item ID", inquiry.item_id), ("Source", inquiry.source)):
        if value:
            rows.append((label, value))
    return rows


async def send_inquiry_notification(inquiry: InquiryRequest, settings: Settings) -> bool:
    """Notify the team of a new placement inquiry."""
    rows = _inquiry_rows(inquiry)
    subject = f"New Inquiry from {inquiry.name or inquiry.email} - {inquiry.budget or 'No budget specified'}"
    html = _layout(
        "New Inquiry Received",
        _details_table(rows) + "<h2>Message</h2>" + _message_block(inquiry.message),
        settings,
    )
    text = "\n".join(
        ["New Inquiry Received", ""]
        + [f"{label}: {value}" for label, value in rows]
        + ["", "Message:", inquiry.message or "No message provided", "", f"Reply to: {inquiry.email}"]
    )
    return await send_email(settings, settings.team_email, subject, html, text, reply_to=inquiry.email)


async def send_inquiry_confirmation(inquiry: InquiryRequest, settings: Settings) -> bool:
    """Confirm receipt of an inquiry to the customer."""
    name = inquiry.name or "there"
    intro = (
        f"Hi {name},\n\n"
        "Thank you for your interest in White Hat Link! We've received your inquiry "
        "and our team will review it shortly.\n\n"
        "Expected response time: within 12 hours.\n\n"
        f"To make sure our reply reaches you, add {settings.reply_to_email} to your contacts."
    )
    html = _layout(
        "We Received Your Inquiry!",
        "".join(f"<p>{escape(p)}</p>" for p in intro.split("\n\n")),
        settings,
    )
    text = f"We Received Your Inquiry!\n\n{intro}\n\nBest regards,\nThe White Hat Link Team"
    return await send_email(
        settings,
        inquiry.email,
        "We received your inquiry - White Hat Link",
        html,
        text,
        reply_to=settings.reply_to_email,
    )


async def send_contact_notification(contact: ContactRequest, settings: Settings) -> bool:
    """Notify the team of a contact form message."""
    rows = [("Name", contact.name), ("Email", contact.email), ("Subject", contact.subject)]
    html = _layout(
        "New Contact Form Submission",
        _details_table(rows) + "<h2>Message</h2>" + _message_block(contact.message),
        settings,
    )
    text = "\n".join(
        ["New Contact Form Submission", ""]
        + [f"{label}: {value}" for label, value in rows]
        + ["", "Message:", contact.message, "", f"Reply to: {contact.email}"]
    )
    return await send_email(
        settings,
        settings.team_email,
        f"Contact Form: {contact.subject} - {contact.name}",
        html,
        text,
        reply_to=contact.email,
    )


async def send_contact_confirmation(contact: ContactRequest, settings: Settings) -> bool:
    """Confirm receipt of a contact message to the sender."""
    intro = (
        f"Hi {contact.name},\n\n"
        "Thank you for reaching out to White Hat Link! We've received your message "
        "and will get back to you as soon as possible.\n\n"
        "Expected response time: within 24 hours.\n\n"
        f"Our team is reviewing your message regarding: {contact.subject}"
    )
    html = _layout(
        "Thank You for Contacting Us!",
        "".join(f"<p>{escape(p)}</p>" for p in intro.split("\n\n")),
        settings,
    )
    text = f"Thank You for Contacting Us!\n\n{intro}\n\nBest regards,\nThe White Hat Link Team"
    return await send_email(
        settings,
        contact.email,
        "We received your message - White Hat Link",
        html,
        text,
        reply_to=settings.reply_to_email,
    )
