"""Tests for buffering hints validation."""

import pytest
from aws_cdk import Duration, Size

from deliveryflow.common.exceptions import ConfigurationError, ErrorCode
from deliveryflow.destinations.buffering import create_buffering_hints


class TestCreateBufferingHints:
    """Test the buffering hints helper."""

    def test_nothing_supplied(self):
        """Test that no hints are produced without inputs."""
        assert create_buffering_hints() is None
        assert create_buffering_hints(None, None) is None

    def test_interval_only(self):
        """Test that only the supplied interval is populated."""
        hints = create_buffering_hints(interval=Duration.minutes(5))

        assert hints.interval_in_seconds == 300
        assert hints.size_in_m_bs is None

    def test_size_only(self):
        """Test that only the supplied size is populated."""
        hints = create_buffering_hints(size=Size.mebibytes(8))

        assert hints.interval_in_seconds is None
        assert hints.size_in_m_bs == 8

    def test_both(self):
        """Test that both fields are populated when supplied."""
        hints = create_buffering_hints(Duration.seconds(60), Size.kibibytes(1024))

        assert hints.interval_in_seconds == 60
        assert hints.size_in_m_bs == 1

    @pytest.mark.parametrize("interval", [Duration.seconds(60), Duration.minutes(15)])
    def test_interval_bounds_are_inclusive(self, interval):
        """Test the interval boundaries."""
        assert create_buffering_hints(interval=interval) is not None

    @pytest.mark.parametrize("size", [Size.mebibytes(1), Size.mebibytes(128)])
    def test_size_bounds_are_inclusive(self, size):
        """Test the size boundaries."""
        assert create_buffering_hints(size=size) is not None

    def test_interval_too_short(self):
        """Test the lower interval bound."""
        with pytest.raises(ConfigurationError) as exc_info:
            create_buffering_hints(interval=Duration.seconds(59))

        assert exc_info.value.message == (
            "Buffering interval must be between 60 and 900 seconds. "
            "Buffering interval provided was 59 seconds."
        )
        assert exc_info.value.error_code == ErrorCode.CONFIG_RANGE

    def test_interval_too_long(self):
        """Test the upper interval bound."""
        with pytest.raises(ConfigurationError) as exc_info:
            create_buffering_hints(interval=Duration.seconds(901))

        assert exc_info.value.message == (
            "Buffering interval must be between 60 and 900 seconds. "
            "Buffering interval provided was 901 seconds."
        )

    def test_size_too_small(self):
        """Test the lower size bound."""
        with pytest.raises(ConfigurationError) as exc_info:
            create_buffering_hints(size=Size.mebibytes(0))

        assert exc_info.value.message == (
            "Buffering size must be between 1 and 128 MiBs. Buffering size provided was 0 MiBs."
        )

    def test_size_too_large(self):
        """Test the upper size bound."""
        with pytest.raises(ConfigurationError) as exc_info:
            create_buffering_hints(size=Size.mebibytes(129))

        assert exc_info.value.message == (
            "Buffering size must be between 1 and 128 MiBs. Buffering size provided was 129 MiBs."
        )
        assert exc_info.value.details["maximum"] == 128
