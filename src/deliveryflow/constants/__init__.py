"""Constants module for deliveryflow.

This module contains all constant values and enumerations used throughout
deliveryflow. It has no dependencies on other deliveryflow modules.

Organization:
    - destinations: Backup modes, compression, index rotation, destination kinds
    - stream: Delivery stream encryption and source types
    - limits: Service-enforced numeric bounds
"""

from deliveryflow.constants.destinations import (
    BackupMode,
    Compression,
    IndexRotationPeriod,
    DestinationKind,
    SUPPORTED_BACKUP_MODES,
    DEFAULT_BACKUP_MODES,
)

from deliveryflow.constants.stream import (
    StreamEncryption,
    DeliveryStreamType,
    KeyType,
)

from deliveryflow.constants import limits

__all__ = [
    # Destinations
    "BackupMode",
    "Compression",
    "IndexRotationPeriod",
    "DestinationKind",
    "SUPPORTED_BACKUP_MODES",
    "DEFAULT_BACKUP_MODES",
    # Stream
    "StreamEncryption",
    "DeliveryStreamType",
    "KeyType",
    # Limits
    "limits",
]
