"""Destination-related constants and enumerations.

This module defines the enumerations shared by every delivery stream
destination: backup modes, compression formats, index rotation periods
and the destination kinds used to look up per-kind validation rules.
"""

from enum import Enum
from typing import Dict, FrozenSet


class BackupMode(str, Enum):
    """Policy for mirroring source records to a backup S3 bucket.

    Values:
        ALL: Every incoming record is backed up.
        FAILED_ONLY: Only records that failed to transform or deliver
            are backed up.
        DISABLED: No records are backed up.
    """

    ALL = "all"
    FAILED_ONLY = "failed_only"
    DISABLED = "disabled"


class Compression(str, Enum):
    """Compression formats Kinesis Data Firehose can apply on delivery.

    The values are the literal strings expected by the service. Note that
    Snappy is spelled with a capital S only, unlike the other formats.
    """

    GZIP = "GZIP"
    HADOOP_SNAPPY = "HADOOP_SNAPPY"
    SNAPPY = "Snappy"
    UNCOMPRESSED = "UNCOMPRESSED"
    ZIP = "ZIP"


class IndexRotationPeriod(str, Enum):
    """Rotation periods for Elasticsearch destination indexes."""

    NO_ROTATION = "NoRotation"
    ONE_HOUR = "OneHour"
    ONE_DAY = "OneDay"
    ONE_WEEK = "OneWeek"
    ONE_MONTH = "OneMonth"


class DestinationKind(str, Enum):
    """Kind of destination a binder produces configuration for.

    Values:
        S3: Extended S3 bucket destination
        ELASTICSEARCH: Amazon Elasticsearch Service domain
        REDSHIFT: Amazon Redshift cluster
        CUSTOM: Any user-defined destination
    """

    S3 = "s3"
    ELASTICSEARCH = "elasticsearch"
    REDSHIFT = "redshift"
    CUSTOM = "custom"


# Destinations disagree on which backup modes they accept: S3 and Redshift
# cannot back up failed records only, Elasticsearch always keeps a backup.
SUPPORTED_BACKUP_MODES: Dict[DestinationKind, FrozenSet[BackupMode]] = {
    DestinationKind.S3: frozenset({BackupMode.ALL, BackupMode.DISABLED}),
    DestinationKind.ELASTICSEARCH: frozenset({BackupMode.ALL, BackupMode.FAILED_ONLY}),
    DestinationKind.REDSHIFT: frozenset({BackupMode.ALL, BackupMode.DISABLED}),
    DestinationKind.CUSTOM: frozenset(BackupMode),
}

DEFAULT_BACKUP_MODES: Dict[DestinationKind, BackupMode] = {
    DestinationKind.S3: BackupMode.DISABLED,
    DestinationKind.ELASTICSEARCH: BackupMode.FAILED_ONLY,
    DestinationKind.REDSHIFT: BackupMode.DISABLED,
    DestinationKind.CUSTOM: BackupMode.DISABLED,
}
