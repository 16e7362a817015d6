"""Rate limiting using SlowAPI, keyed by the real client IP."""

import math

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

__all__ = ["limiter", "get_client_ip", "RateLimitExceeded", "rate_limit_exceeded_handler"]


def get_client_ip(request: Request) -> str:
    """Resolve the client IP behind Cloudflare or a reverse proxy.

    Priority: CF-Connecting-IP, first X-Forwarded-For hop, X-Real-IP,
    then the socket peer.
    """
    cf_connecting_ip = request.headers.get("cf-connecting-ip")
    if cf_connecting_ip:
        return cf_connecting_ip.strip()

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host
    return "unknown"


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 with a JSON body and Retry-After in seconds."""
    retry_after = math.ceil(exc.limit.limit.get_expiry())
    return JSONResponse(
        {
            "error": "Too many requests. Please try again later.",
            "retryAfter": retry_after,
        },
        status_code=429,
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Remaining": "0",
        },
    )


# Module-level limiter; limits are declared per route
limiter = Limiter(key_func=get_client_ip)
