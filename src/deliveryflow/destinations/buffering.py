"""Buffering hints shared by every destination."""

from typing import Optional

from aws_cdk import Duration, Size, aws_kinesisfirehose as firehose

from deliveryflow.common.exceptions import range_error
from deliveryflow.constants import limits


def create_buffering_hints(
    interval: Optional[Duration] = None,
    size: Optional[Size] = None,
) -> Optional[firehose.CfnDeliveryStream.BufferingHintsProperty]:
    """Validate buffering inputs and build the hints fragment.

    Only the supplied fields are populated; the service applies its own
    default for the other one.

    Args:
        interval: How long incoming data is buffered
        size: How much incoming data is buffered

    Returns:
        BufferingHintsProperty, or None when neither input is supplied

    Raises:
        ConfigurationError: If the interval is outside [60, 900] seconds or
            the size is outside [1, 128] MiB
    """
    if interval is None and size is None:
        return None

    interval_seconds = None
    if interval is not None:
        interval_seconds = interval.to_seconds()
        if not limits.BUFFERING_INTERVAL_MIN_SECONDS <= interval_seconds <= limits.BUFFERING_INTERVAL_MAX_SECONDS:
            raise range_error(
                f"Buffering interval must be between {limits.BUFFERING_INTERVAL_MIN_SECONDS} and "
                f"{limits.BUFFERING_INTERVAL_MAX_SECONDS} seconds. "
                f"Buffering interval provided was {interval_seconds} seconds.",
                field="buffering_interval",
                value=interval_seconds,
                minimum=limits.BUFFERING_INTERVAL_MIN_SECONDS,
                maximum=limits.BUFFERING_INTERVAL_MAX_SECONDS,
            )

    size_mebibytes = None
    if size is not None:
        size_mebibytes = size.to_mebibytes()
        if not limits.BUFFERING_SIZE_MIN_MIB <= size_mebibytes <= limits.BUFFERING_SIZE_MAX_MIB:
            raise range_error(
                f"Buffering size must be between {limits.BUFFERING_SIZE_MIN_MIB} and "
                f"{limits.BUFFERING_SIZE_MAX_MIB} MiBs. "
                f"Buffering size provided was {size_mebibytes} MiBs.",
                field="buffering_size",
                value=size_mebibytes,
                minimum=limits.BUFFERING_SIZE_MIN_MIB,
                maximum=limits.BUFFERING_SIZE_MAX_MIB,
            )

    return firehose.CfnDeliveryStream.BufferingHintsProperty(
        interval_in_seconds=interval_seconds,
        size_in_m_bs=size_mebibytes,
    )
