import json
import logging
import sys
from unittest.mock import patch

from deliveryflow.logging.logger import CustomJsonFormatter, get_logger, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="deliveryflow.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=20,
        msg="Bound %s",
        args=("destination",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_renders_json():
    payload = json.loads(CustomJsonFormatter().format(_record()))

    assert payload["message"] == "Bound destination"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "deliveryflow.test"
    assert "timestamp" in payload


def test_formatter_flattens_extra():
    payload = json.loads(CustomJsonFormatter().format(_record(property_name="RedshiftDestinationConfiguration")))

    assert payload["property_name"] == "RedshiftDestinationConfiguration"
    assert "lineno" not in payload


def test_formatter_copies_trace_ids():
    payload = json.loads(CustomJsonFormatter().format(_record(otelTraceID="abc", otelSpanID="def")))

    assert payload["trace_id"] == "abc"
    assert payload["span_id"] == "def"


def test_formatter_serializes_unknown_values():
    payload = json.loads(CustomJsonFormatter().format(_record(target=object())))

    assert payload["target"].startswith("<object object")


def test_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(CustomJsonFormatter().format(record))

    assert "ValueError: boom" in payload["exception"]


def test_get_logger_returns_named_logger():
    assert get_logger("deliveryflow.stream").name == "deliveryflow.stream"


def test_setup_logging_uses_settings_level():
    with patch("logging.config.dictConfig") as dict_config:
        setup_logging()

    config = dict_config.call_args[0][0]
    assert config["loggers"]["deliveryflow"]["level"] == "INFO"
    assert config["loggers"]["deliveryflow"]["propagate"] is False
    assert "root" not in config
    assert config["handlers"]["deliveryflow_console"]["formatter"] == "deliveryflow_json"
    assert config["handlers"]["deliveryflow_console"]["filters"] == ["deliveryflow_context"]


def test_setup_logging_explicit_level():
    with patch("logging.config.dictConfig") as dict_config:
        setup_logging("debug")

    assert dict_config.call_args[0][0]["loggers"]["deliveryflow"]["level"] == "DEBUG"


def test_formatter_groups_synthesis_context():
    record = _record(stack="Pipeline", construct="Pipeline/Orders", sdk_name="deliveryflow", sdk_version="1.0.0")

    payload = json.loads(CustomJsonFormatter().format(record))

    assert payload["synthesis"] == {"stack": "Pipeline", "construct": "Pipeline/Orders"}
    assert payload["sdk"] == {"name": "deliveryflow", "version": "1.0.0"}
    assert "stack" not in payload


def test_formatter_omits_empty_synthesis_context():
    payload = json.loads(CustomJsonFormatter().format(_record(stack=None, construct=None)))

    assert "synthesis" not in payload


def test_setup_logging_propagate():
    with patch("logging.config.dictConfig") as dict_config:
        setup_logging("warning", propagate=True)

    assert dict_config.call_args[0][0]["loggers"]["deliveryflow"]["propagate"] is True
