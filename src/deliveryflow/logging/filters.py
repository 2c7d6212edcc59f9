"""Logging filters for context injection.

Synthesis is single-threaded, but the construct being bound changes as the
assembler walks the tree. The filter below stamps each record with the
current stack and construct path so log lines can be correlated with the
template resources they describe.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Optional

from deliveryflow.__version__ import __version__

stack_var: ContextVar[Optional[str]] = ContextVar("stack", default=None)
construct_var: ContextVar[Optional[str]] = ContextVar("construct", default=None)


class ContextFilter(logging.Filter):
    """Logging filter that adds synthesis context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        setattr(record, "stack", stack_var.get())
        setattr(record, "construct", construct_var.get())
        setattr(record, "sdk_name", "deliveryflow")
        setattr(record, "sdk_version", __version__)

        return True


def set_synthesis_context(
    stack: Optional[str] = None,
    construct: Optional[str] = None,
) -> None:
    """Set synthesis context variables."""
    if stack is not None:
        stack_var.set(stack)
    if construct is not None:
        construct_var.set(construct)


def clear_synthesis_context() -> None:
    """Clear all synthesis context variables."""
    stack_var.set(None)
    construct_var.set(None)
