"""Pydantic v2 request/response models for the API."""

import re
from typing import Literal, Optional
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from whitehatlink.inventory.models import InventoryItem

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validate_email(v: str) -> str:
    v = v.strip()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Please enter a valid email address")
    return v


def validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten a ValidationError into [{"field", "message"}] for API responses."""
    errors = []
    for err in exc.errors():
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(str(p) for p in err["loc"]), "message": message})
    return errors


# --- Forms ---

class InquiryRequest(BaseModel):
    """Placement inquiry from the inventory page or pricing dialog."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=5, max_length=255)
    url: str = Field(default="", max_length=500)
    name: str = Field(default="", max_length=100)
    message: str = Field(default="", max_length=5000)
    budget: str = Field(default="", max_length=50)
    item_id: str = Field(default="", max_length=50, validation_alias=AliasChoices("item_id", "itemId"))
    source: str = Field(default="", max_length=50)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Optional website; when given it must be an absolute http(s) URL."""
        v = v.strip()
        if not v:
            return v
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("Please enter a valid URL")
        if len(v) < 10:
            raise ValueError("URL is required")
        return v


class ContactRequest(BaseModel):
    """General contact form submission."""

    email: str = Field(..., min_length=5, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("name", "subject", "message")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v


class FormAccepted(BaseModel):
    ok: bool = True
    message: Optional[str] = None


# --- CSP reports ---

class CSPViolation(BaseModel):
    """Body of a browser CSP report (the object under "csp-report")."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    blocked_uri: Optional[str] = Field(default=None, alias="blocked-uri")
    document_uri: Optional[str] = Field(default=None, alias="document-uri")
    effective_directive: Optional[str] = Field(default=None, alias="effective-directive")
    original_policy: Optional[str] = Field(default=None, alias="original-policy")
    referrer: Optional[str] = None
    status_code: Optional[int] = Field(default=None, alias="status-code")
    violated_directive: Optional[str] = Field(default=None, alias="violated-directive")
    source_file: Optional[str] = Field(default=None, alias="source-file")
    line_number: Optional[int] = Field(default=None, alias="line-number")
    column_number: Optional[int] = Field(default=None, alias="column-number")


class CSPReport(BaseModel):
    csp_report: CSPViolation = Field(..., alias="csp-report")


# --- Revalidation ---

class RevalidateRequest(BaseModel):
    type: Literal["path", "tag"] = "path"
    path: Optional[str] = Field(default=None, max_length=500)
    tag: Optional[str] = Field(default=None, max_length=100)


class RevalidateResponse(BaseModel):
    revalidated: bool = True
    type: str
    path: Optional[str] = None
    tag: Optional[str] = None
    paths: Optional[list[str]] = None
    now: int


# --- Health ---

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    timestamp: str


# --- Inventory ---

class InventoryListResponse(BaseModel):
    items: list[InventoryItem]
    total: int
    limit: int
    offset: int


class NichesResponse(BaseModel):
    niches: list[str]


class RegionsResponse(BaseModel):
    regions: list[str]
