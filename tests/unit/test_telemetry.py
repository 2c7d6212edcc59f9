"""Tests for synthesis tracing helpers."""

from unittest.mock import MagicMock, patch

import pytest

from deliveryflow.__version__ import __version__
from deliveryflow.telemetry import INSTRUMENTATION_NAME, get_tracer, synthesis_span


class TestGetTracer:
    """Test tracer lookup."""

    def test_defaults_to_package_scope(self):
        """Test that the package name and version identify the tracer."""
        with patch("opentelemetry.trace.get_tracer") as otel_get_tracer:
            get_tracer()

        otel_get_tracer.assert_called_once_with(INSTRUMENTATION_NAME, __version__)

    def test_without_provider_spans_are_noops(self):
        """Test that the API-only tracer still yields usable spans."""
        with synthesis_span("deliveryflow.test", {"deliveryflow.construct": "Stack/Stream"}) as span:
            span.set_attribute("deliveryflow.property_name", "ExtendedS3DestinationConfiguration")


class TestSynthesisSpan:
    """Test the span context manager."""

    @pytest.fixture
    def tracer(self):
        tracer = MagicMock()
        with patch("deliveryflow.telemetry.get_tracer", return_value=tracer):
            yield tracer

    def test_none_attributes_skipped(self, tracer):
        """Test that only attributes with values are set."""
        span = tracer.start_as_current_span.return_value.__enter__.return_value

        with synthesis_span("deliveryflow.test", {"present": "yes", "missing": None}):
            pass

        span.set_attribute.assert_called_once_with("present", "yes")

    def test_exception_recorded_and_reraised(self, tracer):
        """Test that failures mark the span and propagate."""
        span = tracer.start_as_current_span.return_value.__enter__.return_value
        error = ValueError("invalid destination")

        with pytest.raises(ValueError):
            with synthesis_span("deliveryflow.test"):
                raise error

        span.record_exception.assert_called_once_with(error)
        status = span.set_status.call_args[0][0]
        assert status.description == "invalid destination"
