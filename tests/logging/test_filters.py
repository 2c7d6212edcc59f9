import logging

from deliveryflow.__version__ import __version__
from deliveryflow.logging.filters import (
    ContextFilter,
    clear_synthesis_context,
    set_synthesis_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="sample",
        args=(),
        exc_info=None,
    )


def test_context_filter_adds_sdk_fields():
    record = _record()
    assert ContextFilter().filter(record)
    assert record.sdk_name == "deliveryflow"
    assert record.sdk_version == __version__


def test_context_filter_uses_synthesis_context():
    set_synthesis_context(stack="Pipeline", construct="Pipeline/Stream")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.stack == "Pipeline"
        assert record.construct == "Pipeline/Stream"
    finally:
        clear_synthesis_context()


def test_partial_context_keeps_other_value():
    set_synthesis_context(stack="Pipeline", construct="Pipeline/First")
    set_synthesis_context(construct="Pipeline/Second")
    try:
        record = _record()
        ContextFilter().filter(record)
        assert record.stack == "Pipeline"
        assert record.construct == "Pipeline/Second"
    finally:
        clear_synthesis_context()


def test_context_filter_no_context_is_graceful():
    clear_synthesis_context()
    record = _record()
    assert ContextFilter().filter(record)
    assert record.stack is None
    assert record.construct is None
