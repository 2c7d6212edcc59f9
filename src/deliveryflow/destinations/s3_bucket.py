"""S3 bucket destination."""

from typing import Any, Optional

from aws_cdk import aws_kinesisfirehose as firehose, aws_s3 as s3
from constructs import Construct

from deliveryflow.constants import DestinationKind
from deliveryflow.destinations.base import DestinationBinder, DestinationBindOptions, DestinationConfig
from deliveryflow.destinations.props import CommonDestinationS3Props, DestinationProps
from deliveryflow.destinations.result import split_result


class S3BucketProps(DestinationProps, CommonDestinationS3Props):
    """Properties of an S3 bucket destination."""


class S3Bucket(DestinationBinder):
    """Deliver records to an S3 bucket.

    Args:
        bucket: The destination bucket
        **props: Fields of ``S3BucketProps``

    Example:
        ```python
        destination = S3Bucket(
            bucket,
            buffering_interval=cdk.Duration.minutes(5),
            compression=Compression.GZIP,
            s3_backup={"mode": BackupMode.ALL},
        )
        ```
    """

    kind = DestinationKind.S3
    display_name = "S3"
    props_class = S3BucketProps
    property_name = "extended_s3_destination_configuration"
    log_stream_id = "S3Destination"

    def __init__(self, bucket: s3.IBucket, **props: Any):
        super().__init__(**props)
        self.bucket = bucket

    def bind(self, scope: Construct, options: DestinationBindOptions) -> DestinationConfig:
        principal = options.delivery_stream.grant_principal
        bucket_grant = self.bucket.grant_read_write(principal)

        logging_options, logging_dependables = split_result(
            self._create_logging_options(scope, principal, self.log_stream_id)
        )
        processing, processing_dependables = split_result(self._create_processing_config(principal))
        backup, backup_dependables = split_result(self._create_backup_config(scope, principal))
        encryption, encryption_dependables = split_result(
            self._create_encryption_config(principal, self.props.encryption_key)
        )

        configuration = firehose.CfnDeliveryStream.ExtendedS3DestinationConfigurationProperty(
            bucket_arn=self.bucket.bucket_arn,
            role_arn=principal.role_arn,
            buffering_hints=self._create_buffering_hints(
                self.props.buffering_interval,
                self.props.buffering_size,
            ),
            cloud_watch_logging_options=logging_options,
            compression_format=self.props.compression,
            encryption_configuration=encryption,
            error_output_prefix=self.props.error_output_prefix,
            prefix=self.props.data_output_prefix,
            processing_configuration=processing,
            s3_backup_configuration=backup,
            s3_backup_mode=self._s3_backup_mode(),
        )
        return self._destination_config(
            self.property_name,
            configuration,
            [
                bucket_grant,
                *logging_dependables,
                *processing_dependables,
                *backup_dependables,
                *encryption_dependables,
            ],
        )

    def _s3_backup_mode(self) -> Optional[str]:
        return "Enabled" if self.backup.active else None
