"""CSP violation report endpoint.

Browsers POST here (Content-Type: application/csp-report) when a page
served with a report-uri policy violates it. Always answers 204: a
failing report endpoint would only make browsers retry.
"""

import json

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from whitehatlink.api.deps import SettingsDep
from whitehatlink.api.schemas import CSPReport
from whitehatlink.monitoring import get_logger

router = APIRouter(tags=["csp"])
log = get_logger(__name__)


@router.post("/csp-report", status_code=204)
async def csp_report(request: Request, settings: SettingsDep):
    """Log a CSP violation report."""
    try:
        report = CSPReport.model_validate(json.loads(await request.body()))
    except (ValueError, ValidationError) as e:
        log.error("csp_report_invalid", error=str(e))
        return Response(status_code=204)

    violation = report.csp_report
    if settings.environment == "production":
        log.warning(
            "csp_violation",
            blocked_uri=violation.blocked_uri or "unknown",
            violated_directive=violation.violated_directive or violation.effective_directive or "unknown",
            document_uri=violation.document_uri or "unknown",
            source_file=violation.source_file or "unknown",
        )
    else:
        log.warning("csp_violation", report=violation.model_dump(by_alias=True, exclude_none=True))

    return Response(status_code=204)


@router.get("/csp-report", include_in_schema=False)
async def csp_report_method_not_allowed():
    return JSONResponse({"error": "Method not allowed"}, status_code=405)
