"""Configuration models shared by all destinations.

Fields holding CDK resources are typed ``Any``: the CDK interfaces
(``IBucket``, ``IKey``, ``ILogGroup``) are protocols and cannot be
checked with ``isinstance``.
"""

from typing import Any, List, Optional

from aws_cdk import Duration, Size
from pydantic import ConfigDict, Field

from deliveryflow.constants import BackupMode, Compression
from deliveryflow.processor import DataProcessor
from deliveryflow.types.base import DFBaseModel


class DestinationLoggingProps(DFBaseModel):
    """Logging of delivery and transformation errors.

    Unknown keyword arguments are rejected, so a misspelled property fails
    at construction instead of being dropped.

    Attributes:
        logging: False disables logging. Defaults to enabled.
        log_group: ``aws_logs.ILogGroup`` receiving the error logs. Created
            when logging is enabled and none is given.
    """

    model_config = ConfigDict(extra="forbid")

    logging: Optional[bool] = None
    log_group: Optional[Any] = None


class DestinationBufferingProps(DFBaseModel):
    """How long and how much data is buffered before delivery.

    Attributes:
        buffering_interval: Between 60 and 900 seconds
        buffering_size: Between 1 and 128 MiB
    """

    model_config = ConfigDict(extra="forbid")

    buffering_interval: Optional[Duration] = None
    buffering_size: Optional[Size] = None


class CommonDestinationS3Props(DestinationBufferingProps):
    """Properties of any S3 bucket the delivery stream writes to.

    Attributes:
        compression: Compression applied to delivered objects
        encryption_key: ``aws_kms.IKey`` encrypting delivered objects
        error_output_prefix: Prefix of objects holding failed records
        data_output_prefix: Prefix of delivered objects
    """

    compression: Optional[Compression] = None
    encryption_key: Optional[Any] = None
    error_output_prefix: Optional[str] = None
    data_output_prefix: Optional[str] = None


class DestinationS3BackupProps(DestinationLoggingProps, CommonDestinationS3Props):
    """Backup of source records to S3.

    Attributes:
        mode: Which records are backed up. Defaults to ALL when a bucket is
            given, otherwise to the destination's default mode.
        bucket: ``aws_s3.IBucket`` holding the backup. Created when backup
            is active and none is given.
    """

    mode: Optional[BackupMode] = None
    bucket: Optional[Any] = None


class DestinationProps(DestinationLoggingProps):
    """Properties every destination accepts.

    Attributes:
        processors: At most one processor transforming records before delivery
        s3_backup: Backup of source records to S3
    """

    processors: List[DataProcessor] = Field(default_factory=list)
    s3_backup: Optional[DestinationS3BackupProps] = None
