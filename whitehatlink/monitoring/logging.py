"""Structured logging configuration using structlog.

- JSON output in production mode (one event per line, easy to ship)
- Colored console output in development and test modes
- Request-scoped fields (request_id, path, client_ip) merged from contextvars

Usage:
    from whitehatlink.monitoring import configure_logging, get_logger

    # Configure once at app startup
    configure_logging("production")  # or "development"

    log = get_logger()
    log.info("inquiry_received", item_id="1234", budget="$500-1000")
    log.warning("csp_violation", blocked_uri="https://evil.example")
"""

import logging
import sys

import structlog


def configure_logging(mode: str = "development") -> None:
    """Configure structlog for the application.

    Args:
        mode: "production" for JSON output, anything else for colored console
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if mode == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdlib logging carries structlog output (and uvicorn's own records)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.INFO,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller's module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
