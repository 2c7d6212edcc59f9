"""Delivery stream destinations.

Every destination extends ``DestinationBinder`` and reuses the shared
buffering, logging, backup and processing helpers.
"""

from deliveryflow.destinations.backup import (
    ResolvedBackup,
    create_backup_config,
    resolve_backup,
    validate_backup_mode,
)
from deliveryflow.destinations.base import (
    DestinationBinder,
    DestinationBindOptions,
    DestinationConfig,
)
from deliveryflow.destinations.buffering import create_buffering_hints
from deliveryflow.destinations.elasticsearch_domain import ElasticsearchDomain, ElasticsearchDomainProps
from deliveryflow.destinations.encryption import create_encryption_config
from deliveryflow.destinations.logging_options import LoggingBinding
from deliveryflow.destinations.processing import create_processing_config
from deliveryflow.destinations.props import (
    CommonDestinationS3Props,
    DestinationBufferingProps,
    DestinationLoggingProps,
    DestinationProps,
    DestinationS3BackupProps,
)
from deliveryflow.destinations.redshift import RedshiftDestination, RedshiftDestinationProps, RedshiftUser
from deliveryflow.destinations.result import BindingResult
from deliveryflow.destinations.s3_bucket import S3Bucket, S3BucketProps

__all__ = [
    "BindingResult",
    "CommonDestinationS3Props",
    "DestinationBinder",
    "DestinationBindOptions",
    "DestinationBufferingProps",
    "DestinationConfig",
    "DestinationLoggingProps",
    "DestinationProps",
    "DestinationS3BackupProps",
    "ElasticsearchDomain",
    "ElasticsearchDomainProps",
    "LoggingBinding",
    "RedshiftDestination",
    "RedshiftDestinationProps",
    "RedshiftUser",
    "ResolvedBackup",
    "S3Bucket",
    "S3BucketProps",
    "create_backup_config",
    "create_buffering_hints",
    "create_encryption_config",
    "create_processing_config",
    "resolve_backup",
    "validate_backup_mode",
]
