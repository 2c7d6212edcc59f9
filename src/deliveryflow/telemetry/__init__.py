"""OpenTelemetry tracing for template synthesis.

Only the API package is required. Without a configured tracer provider the
spans are no-ops, so synthesis pays nothing unless the host application
installs an SDK.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from deliveryflow.__version__ import __version__

__all__ = [
    "INSTRUMENTATION_NAME",
    "get_tracer",
    "synthesis_span",
]

INSTRUMENTATION_NAME = "deliveryflow"


def get_tracer(name: str = INSTRUMENTATION_NAME, version: Optional[str] = None):
    """Return a tracer from the active provider, versioned with the package by default."""
    return trace.get_tracer(name, version or __version__)


@contextmanager
def synthesis_span(name: str, attributes: Optional[Dict[str, Any]] = None) -> Iterator[Span]:
    """Run a synthesis step inside a span.

    Attributes whose value is None are skipped. An exception escaping the
    block is recorded on the span, marks it as failed and is re-raised.

    Args:
        name: Span name.
        attributes: Initial span attributes.

    Yields:
        The active span, for attributes only known once the step finishes.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name, record_exception=False, set_status_on_exception=False) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
