"""Logging infrastructure for deliveryflow.

Structured JSON logging with synthesis context tracking. Every record
emitted while a delivery stream is assembled carries the stack and
construct path it was produced for.
"""

from deliveryflow.logging.filters import (
    ContextFilter,
    clear_synthesis_context,
    set_synthesis_context,
)
from deliveryflow.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_synthesis_context",
    "clear_synthesis_context",
]
