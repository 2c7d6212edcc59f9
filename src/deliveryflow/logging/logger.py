"""Structured logging for template synthesis.

Records are rendered as one JSON object per line. The synthesis context
stamped by :class:`~deliveryflow.logging.filters.ContextFilter` is grouped
under ``synthesis`` and ``sdk`` so a line can be traced back to the stack and
construct it was produced for. Configuration goes through
``logging.config.dictConfig`` and only touches the ``deliveryflow`` logger,
leaving the host application's root logger alone.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional

PACKAGE_LOGGER = "deliveryflow"

# Attributes stamped by ContextFilter, regrouped by the formatter.
_SYNTHESIS_FIELDS = {"stack": "stack", "construct": "construct"}
_SDK_FIELDS = {"sdk_name": "name", "sdk_version": "version"}

# OpenTelemetry logging instrumentation attribute -> output key.
_TRACE_FIELDS = {"otelTraceID": "trace_id", "otelSpanID": "span_id"}

_STANDARD_ATTRIBUTES: FrozenSet[str] = frozenset(
    vars(logging.makeLogRecord({})).keys() | {"asctime", "message", "otelServiceName", "otelTraceSampled"}
)
_GROUPED_ATTRIBUTES: FrozenSet[str] = frozenset(_SYNTHESIS_FIELDS) | frozenset(_SDK_FIELDS) | frozenset(_TRACE_FIELDS)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _group(record: logging.LogRecord, fields: Dict[str, str]) -> Dict[str, Any]:
    return {
        target: getattr(record, source)
        for source, target in fields.items()
        if getattr(record, source, None) is not None
    }


class CustomJsonFormatter(logging.Formatter):
    """Render a record, its ``extra`` fields and its synthesis context as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in vars(record).items():
            if key in _STANDARD_ATTRIBUTES or key in _GROUPED_ATTRIBUTES:
                continue
            entry.setdefault(key, value)

        synthesis = _group(record, _SYNTHESIS_FIELDS)
        if synthesis:
            entry["synthesis"] = synthesis
        sdk = _group(record, _SDK_FIELDS)
        if sdk:
            entry["sdk"] = sdk
        entry.update(_group(record, _TRACE_FIELDS))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None, *, propagate: bool = False) -> None:
    """Send ``deliveryflow`` log records to stdout as JSON lines.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to ``DELIVERYFLOW_LOG_LEVEL`` from settings.
        propagate: Also hand records to the root logger's handlers.
    """
    if level is None:
        from deliveryflow.settings import get_settings
        level = get_settings().log_level
    level = level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "deliveryflow_json": {"()": "deliveryflow.logging.logger.CustomJsonFormatter"},
            },
            "filters": {
                "deliveryflow_context": {"()": "deliveryflow.logging.filters.ContextFilter"},
            },
            "handlers": {
                "deliveryflow_console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "deliveryflow_json",
                    "filters": ["deliveryflow_context"],
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "level": level,
                    "handlers": ["deliveryflow_console"],
                    "propagate": propagate,
                },
            },
        }
    )
