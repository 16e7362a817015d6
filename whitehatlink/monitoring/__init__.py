"""Monitoring module for structured logging.

Production emits JSON lines, development emits colored console output.
"""

from whitehatlink.monitoring.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
