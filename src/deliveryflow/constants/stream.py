"""Delivery stream constants and enumerations."""

from enum import Enum


class StreamEncryption(str, Enum):
    """Server-side encryption options for a delivery stream.

    Values:
        UNENCRYPTED: Data in the stream is stored unencrypted.
        CUSTOMER_MANAGED: Data is encrypted with a KMS key managed by the
            customer. A key is created when none is provided.
        AWS_OWNED: Data is encrypted with a KMS key owned by AWS.
    """

    UNENCRYPTED = "unencrypted"
    CUSTOMER_MANAGED = "customer_managed"
    AWS_OWNED = "aws_owned"


class DeliveryStreamType(str, Enum):
    """How records enter the delivery stream."""

    DIRECT_PUT = "DirectPut"
    KINESIS_STREAM_AS_SOURCE = "KinesisStreamAsSource"


class KeyType(str, Enum):
    """Key type tag written to the stream encryption configuration."""

    CUSTOMER_MANAGED_CMK = "CUSTOMER_MANAGED_CMK"
    AWS_OWNED_CMK = "AWS_OWNED_CMK"
