
from deliveryflow.__version__ import __version__

from deliveryflow.stream import (
    DeliveryStream,
    DeliveryStreamAttributes,
    DeliveryStreamBase,
)

from deliveryflow.destinations import (
    DestinationBinder,
    DestinationBindOptions,
    DestinationConfig,
    DestinationS3BackupProps,
    S3Bucket,
    ElasticsearchDomain,
    RedshiftDestination,
    RedshiftUser,
)

from deliveryflow.processor import (
    DataProcessor,
    DataProcessorConfig,
    DataProcessorIdentifier,
    LambdaFunctionProcessor,
)

from deliveryflow.constants import (
    BackupMode,
    Compression,
    IndexRotationPeriod,
    StreamEncryption,
)

from deliveryflow.common.exceptions import DeliveryFlowError, ConfigurationError, ErrorCode


__all__ = [
    "__version__",

    # Delivery stream
    "DeliveryStream",
    "DeliveryStreamAttributes",
    "DeliveryStreamBase",

    # Destinations
    "DestinationBinder",
    "DestinationBindOptions",
    "DestinationConfig",
    "DestinationS3BackupProps",
    "S3Bucket",
    "ElasticsearchDomain",
    "RedshiftDestination",
    "RedshiftUser",

    # Processors
    "DataProcessor",
    "DataProcessorConfig",
    "DataProcessorIdentifier",
    "LambdaFunctionProcessor",

    # Constants
    "BackupMode",
    "Compression",
    "IndexRotationPeriod",
    "StreamEncryption",

    # Exceptions (public API)
    "DeliveryFlowError",
    "ConfigurationError",
    "ErrorCode",
]
