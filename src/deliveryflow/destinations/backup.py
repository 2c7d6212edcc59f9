"""Backup of source records to S3.

Backup settings are resolved once, when the destination is constructed,
into a ``ResolvedBackup``. Both the backup configuration and the
destination-level backup mode flag are derived from that same struct.
"""

from typing import Any, Optional

from aws_cdk import aws_kinesisfirehose as firehose, aws_s3 as s3
from constructs import Construct
from pydantic import ConfigDict

from deliveryflow.common.exceptions import contradiction_error
from deliveryflow.constants import (
    DEFAULT_BACKUP_MODES,
    SUPPORTED_BACKUP_MODES,
    BackupMode,
    DestinationKind,
)
from deliveryflow.destinations.buffering import create_buffering_hints
from deliveryflow.destinations.encryption import create_encryption_config
from deliveryflow.destinations.logging_options import LoggingBinding
from deliveryflow.destinations.props import DestinationS3BackupProps
from deliveryflow.destinations.result import BindingResult, split_result
from deliveryflow.logging import get_logger
from deliveryflow.types.base import DFBaseModel

logger = get_logger(__name__)

BACKUP_LOG_STREAM_ID = "S3Backup"


class ResolvedBackup(DFBaseModel):
    """Backup settings with every default applied.

    Attributes:
        mode: Effective backup mode
        props: The backup properties as given, if any
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    mode: BackupMode
    props: DestinationS3BackupProps

    @property
    def active(self) -> bool:
        return self.mode != BackupMode.DISABLED


def resolve_backup(
    kind: DestinationKind,
    props: Optional[DestinationS3BackupProps] = None,
) -> ResolvedBackup:
    """Apply the backup defaults of a destination kind.

    The effective mode is the explicit mode, else ALL when a bucket is
    given, else the default mode of ``kind``.

    Raises:
        ConfigurationError: If backup is disabled but a bucket is given
    """
    props = props or DestinationS3BackupProps()
    if props.mode == BackupMode.DISABLED and props.bucket is not None:
        raise contradiction_error(
            "Destination backup cannot be set to DISABLED when bucket is provided",
            fields=["mode", "bucket"],
        )

    if props.mode is not None:
        mode = BackupMode(props.mode)
    elif props.bucket is not None:
        mode = BackupMode.ALL
    else:
        mode = DEFAULT_BACKUP_MODES[kind]
    return ResolvedBackup(mode=mode, props=props)


def validate_backup_mode(kind: DestinationKind, display_name: str, backup: ResolvedBackup) -> None:
    """Reject backup modes the destination kind does not support.

    Raises:
        ConfigurationError: If the resolved mode is not supported by ``kind``
    """
    supported = SUPPORTED_BACKUP_MODES[kind]
    if backup.mode not in supported:
        modes = " and ".join(m.name for m in BackupMode if m in supported)
        raise contradiction_error(
            f"{display_name} destination only supports {modes} backup modes, given {backup.mode.name}",
            fields=["s3_backup.mode"],
            details={"kind": kind.value, "supported": [m.name for m in BackupMode if m in supported]},
        )


def create_backup_config(
    scope: Construct,
    principal: Any,
    backup: ResolvedBackup,
    logging: LoggingBinding,
) -> Optional[BindingResult]:
    """Build the S3 configuration source records are backed up to.

    Args:
        scope: Construct owning the backup bucket when one is created
        principal: Principal granted access to the bucket, logs and key
        backup: Resolved backup settings
        logging: The destination's logging state

    Returns:
        BindingResult with the S3 configuration and the bucket, logging and
        key grants, or None when backup is disabled
    """
    if not backup.active:
        return None

    props = backup.props
    bucket = props.bucket
    if bucket is None:
        bucket = s3.Bucket(scope, "BackupBucket")
        logger.debug("Created backup bucket", extra={"path": bucket.node.path})
    bucket_grant = bucket.grant_read_write(principal)

    logging_options, logging_dependables = split_result(
        logging.create_logging_options(
            scope,
            principal,
            BACKUP_LOG_STREAM_ID,
            logging=props.logging,
            log_group=props.log_group,
        )
    )
    encryption, encryption_dependables = split_result(
        create_encryption_config(principal, props.encryption_key)
    )

    config = firehose.CfnDeliveryStream.S3DestinationConfigurationProperty(
        bucket_arn=bucket.bucket_arn,
        role_arn=principal.role_arn,
        buffering_hints=create_buffering_hints(props.buffering_interval, props.buffering_size),
        cloud_watch_logging_options=logging_options,
        compression_format=props.compression,
        encryption_configuration=encryption,
        error_output_prefix=props.error_output_prefix,
        prefix=props.data_output_prefix,
    )
    return BindingResult(
        config=config,
        dependables=[bucket_grant, *logging_dependables, *encryption_dependables],
    )
