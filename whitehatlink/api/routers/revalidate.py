"""On-demand cache revalidation.

POST /api/revalidate
Headers: Authorization: Bearer <REVALIDATE_SECRET>
Body: {"type": "path", "path": "/inventory"} or {"type": "tag", "tag": "inventory"}

Called by the content pipeline after inventory imports and post publishes.
"""

import secrets
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from whitehatlink.api.deps import CacheDep, SettingsDep
from whitehatlink.api.schemas import RevalidateRequest, RevalidateResponse, validation_errors
from whitehatlink.api.state import ResponseCache
from whitehatlink.monitoring import get_logger

router = APIRouter(tags=["revalidate"])
log = get_logger(__name__)

DEFAULT_PATHS = ["/", "/inventory", "/blog"]


def _authorized(request: Request, secret: str) -> bool:
    if not secret:
        return False
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    return scheme.lower() == "bearer" and secrets.compare_digest(token.strip(), secret)


def _revalidate_path(cache: ResponseCache, path: str) -> int:
    """Invalidate a page path and the API path that feeds it."""
    removed = cache.invalidate_path(path)
    if path != "/":
        removed += cache.invalidate_path(f"/api{path}")
    return removed


def _now_ms() -> int:
    return int(time.time() * 1000)


@router.post("/revalidate", response_model=RevalidateResponse)
async def revalidate(request: Request, settings: SettingsDep, cache: CacheDep):
    """Invalidate cached responses by path or tag."""
    if not _authorized(request, settings.revalidate_secret):
        return JSONResponse({"message": "Unauthorized"}, status_code=401)

    try:
        raw = await request.json()
    except ValueError:
        raw = {}
    try:
        body = RevalidateRequest.model_validate(raw if isinstance(raw, dict) else {})
    except ValidationError as e:
        return JSONResponse({"message": "Invalid request", "errors": validation_errors(e)}, status_code=400)

    if body.type == "tag" and body.tag:
        removed = cache.invalidate_tag(body.tag)
        log.info("revalidated", type="tag", tag=body.tag, removed=removed)
        return RevalidateResponse(type="tag", tag=body.tag, now=_now_ms())

    if body.type == "path" and body.path:
        removed = _revalidate_path(cache, body.path)
        log.info("revalidated", type="path", path=body.path, removed=removed)
        return RevalidateResponse(type="path", path=body.path, now=_now_ms())

    if not body.path and not body.tag:
        removed = sum(_revalidate_path(cache, p) for p in DEFAULT_PATHS)
        log.info("revalidated", type="multiple", paths=DEFAULT_PATHS, removed=removed)
        return RevalidateResponse(type="multiple", paths=DEFAULT_PATHS, now=_now_ms())

    return JSONResponse({"message": "Missing path or tag parameter"}, status_code=400)


@router.get("/revalidate")
async def revalidate_status():
    """Usage description for humans poking at the endpoint."""
    return {
        "status": "ok",
        "message": "Revalidation API is running",
        "usage": {
            "method": "POST",
            "headers": {"Authorization": "Bearer YOUR_SECRET"},
            "body": {
                "type": "path or tag",
                "path": "/inventory (for path type)",
                "tag": "inventory (for tag type)",
            },
        },
    }
