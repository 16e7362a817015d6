"""Middleware package for canonical URLs, security headers, logging and rate limits."""

from .logging import RequestLoggingMiddleware
from .rate_limit import limiter
from .security import SecurityHeadersMiddleware

__all__ = ["SecurityHeadersMiddleware", "RequestLoggingMiddleware", "limiter"]
