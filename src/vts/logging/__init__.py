"""Structured logging module for vts.

Provides configurable logging with JSON format support, file rotation and
per-run context tagging.
"""

from vts.logging.config import configure_logging
from vts.logging.context import RunContextFilter, get_run_context, run_context
from vts.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "RunContextFilter",
    "configure_logging",
    "get_run_context",
    "run_context",
]
