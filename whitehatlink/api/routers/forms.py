"""Contact and inquiry form endpoints.

Flow for both forms: rate limit -> honeypot -> validation -> log ->
background emails (team notification + submitter confirmation).
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from whitehatlink.api.config import get_settings
from whitehatlink.api.deps import SettingsDep
from whitehatlink.api.middleware.rate_limit import get_client_ip, limiter
from whitehatlink.api.schemas import ContactRequest, FormAccepted, InquiryRequest, validation_errors
from whitehatlink.api.services import email as email_service
from whitehatlink.monitoring import get_logger

router = APIRouter(tags=["forms"])
log = get_logger(__name__)

HONEYPOT_FIELD = "company_name"
INQUIRY_RECEIVED = "Your request has been received. We will respond within 12 hours."
CONTACT_RECEIVED = "Thank you for your message. We will respond within 24 hours."
METHOD_NOT_ALLOWED = {"error": "Method not allowed"}


class FormRejected(Exception):
    """Raised when a form body cannot be validated; carries the 400 response."""

    def __init__(self, response: JSONResponse):
        self.response = response


FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _read_body(request: Request) -> dict[str, Any]:
    """Form fields from a multipart/urlencoded body (what the site posts), else JSON.

    File parts are ignored; only text fields reach validation.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        body = await request.json()
    except ValueError:
        raise FormRejected(JSONResponse(
            {"error": "Validation failed", "errors": [{"field": "body", "message": "Invalid JSON body"}]},
            status_code=400,
        ))
    if not isinstance(body, dict):
        raise FormRejected(JSONResponse(
            {"error": "Validation failed", "errors": [{"field": "body", "message": "Expected an object"}]},
            status_code=400,
        ))
    return body


def _is_bot(body: dict[str, Any]) -> bool:
    """Humans never see the honeypot field, so any value means a bot."""
    return bool(str(body.get(HONEYPOT_FIELD) or "").strip())


def _validate(model: type[BaseModel], body: dict[str, Any]):
    try:
        return model.model_validate({k: v for k, v in body.items() if k != HONEYPOT_FIELD})
    except ValidationError as e:
        raise FormRejected(JSONResponse(
            {"error": "Validation failed", "errors": validation_errors(e)},
            status_code=400,
        ))


@router.post("/inquire", response_model=FormAccepted)
@limiter.limit(lambda: get_settings().inquiry_rate_limit)
async def submit_inquiry(request: Request, background_tasks: BackgroundTasks, settings: SettingsDep):
    """Accept a placement inquiry and notify the team."""
    try:
        body = await _read_body(request)
        if _is_bot(body):
            # Silently accept so bots do not learn about the trap
            log.info("honeypot_triggered", form="inquire")
            return FormAccepted()
        inquiry = _validate(InquiryRequest, body)
    except FormRejected as rejected:
        return rejected.response

    log.info(
        "inquiry_received",
        email=inquiry.email,
        url=inquiry.url,
        name=inquiry.name,
        message=inquiry.message[:100],
        budget=inquiry.budget,
        item_id=inquiry.item_id,
        source=inquiry.source,
        ip=get_client_ip(request),
    )

    background_tasks.add_task(email_service.send_inquiry_notification, inquiry, settings)
    background_tasks.add_task(email_service.send_inquiry_confirmation, inquiry, settings)

    return FormAccepted(message=INQUIRY_RECEIVED)


@router.post("/contact", response_model=FormAccepted)
@limiter.limit(lambda: get_settings().contact_rate_limit)
async def submit_contact(request: Request, background_tasks: BackgroundTasks, settings: SettingsDep):
    """Accept a contact form message and notify the team."""
    try:
        body = await _read_body(request)
        if _is_bot(body):
            log.info("honeypot_triggered", form="contact")
            return FormAccepted(message=CONTACT_RECEIVED)
        contact = _validate(ContactRequest, body)
    except FormRejected as rejected:
        return rejected.response

    log.info(
        "contact_received",
        email=contact.email,
        name=contact.name,
        subject=contact.subject,
        message=contact.message[:100],
        ip=get_client_ip(request),
    )

    background_tasks.add_task(email_service.send_contact_notification, contact, settings)
    background_tasks.add_task(email_service.send_contact_confirmation, contact, settings)

    return FormAccepted(message=CONTACT_RECEIVED)


@router.get("/inquire", include_in_schema=False)
@router.get("/contact", include_in_schema=False)
async def form_method_not_allowed():
    return JSONResponse(METHOD_NOT_ALLOWED, status_code=405)
