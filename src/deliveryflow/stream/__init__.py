"""Delivery streams: the resource that ties a source, encryption and one
destination together."""

from deliveryflow.stream.base import DeliveryStreamAttributes, DeliveryStreamBase
from deliveryflow.stream.delivery_stream import (
    DeliveryStream,
    ResolvedEncryption,
    resolve_stream_encryption,
)

__all__ = [
    "DeliveryStream",
    "DeliveryStreamAttributes",
    "DeliveryStreamBase",
    "ResolvedEncryption",
    "resolve_stream_encryption",
]
