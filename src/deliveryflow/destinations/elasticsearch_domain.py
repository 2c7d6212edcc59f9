"""Amazon Elasticsearch Service domain destination."""

import re
from typing import Any, Optional

from aws_cdk import Duration, aws_elasticsearch as elasticsearch, aws_iam as iam, aws_kinesisfirehose as firehose
from constructs import Construct

from deliveryflow.common.exceptions import ConfigurationError, domain_validation_error, range_error
from deliveryflow.constants import BackupMode, DestinationKind, IndexRotationPeriod, limits
from deliveryflow.destinations.base import DestinationBinder, DestinationBindOptions, DestinationConfig
from deliveryflow.destinations.props import DestinationBufferingProps, DestinationProps
from deliveryflow.destinations.result import split_result

DESCRIBE_DOMAIN_ACTIONS = [
    "es:DescribeElasticsearchDomain",
    "es:DescribeElasticsearchDomains",
    "es:DescribeElasticsearchDomainConfig",
]

_STARTS_WITH_UNDERSCORE = re.compile(r"^_")
_CAPITAL_LETTERS = re.compile(r"[A-Z]")
_COMMAS = re.compile(r",")


class ElasticsearchDomainProps(DestinationProps, DestinationBufferingProps):
    """Properties of an Elasticsearch domain destination.

    Attributes:
        index_name: Index records are added to. Must be lower-case, must not
            begin with an underscore and must not contain commas.
        index_rotation: How often the index is rotated
        type_name: Type name added to documents when indexing
        retry_interval: Total time delivery is retried after a failure,
            between 0 and 7200 seconds. 0 disables retries.
    """

    index_name: str
    index_rotation: Optional[IndexRotationPeriod] = None
    type_name: Optional[str] = None
    retry_interval: Optional[Duration] = None


class ElasticsearchDomain(DestinationBinder):
    """Deliver records to an Elasticsearch domain.

    Documents that cannot be indexed are always backed up to S3; setting the
    backup mode to ALL backs up every document.

    Args:
        domain: The destination domain
        **props: Fields of ``ElasticsearchDomainProps``
    """

    kind = DestinationKind.ELASTICSEARCH
    display_name = "Elasticsearch"
    props_class = ElasticsearchDomainProps
    property_name = "elasticsearch_destination_configuration"
    log_stream_id = "ElasticsearchDestination"

    def __init__(self, domain: elasticsearch.IDomain, **props: Any):
        super().__init__(**props)
        self.domain = domain
        self._validate_retry_interval()
        self._validate_index_name()

    def bind(self, scope: Construct, options: DestinationBindOptions) -> DestinationConfig:
        principal = options.delivery_stream.grant_principal
        domain_grant = self.domain.grant_read_write(principal)
        describe_grant = iam.Grant.add_to_principal(
            grantee=principal,
            actions=DESCRIBE_DOMAIN_ACTIONS,
            resource_arns=[self.domain.domain_arn, f"{self.domain.domain_arn}/*"],
        )

        logging_options, logging_dependables = split_result(
            self._create_logging_options(scope, principal, self.log_stream_id)
        )
        processing, processing_dependables = split_result(self._create_processing_config(principal))
        backup, backup_dependables = split_result(self._create_backup_config(scope, principal))
        if backup is None:
            raise ConfigurationError("Failed to create S3 backup configuration for Elasticsearch destination")

        retry_options = None
        if self.props.retry_interval is not None:
            retry_options = firehose.CfnDeliveryStream.ElasticsearchRetryOptionsProperty(
                duration_in_seconds=self.props.retry_interval.to_seconds(),
            )

        configuration = firehose.CfnDeliveryStream.ElasticsearchDestinationConfigurationProperty(
            buffering_hints=self._elasticsearch_buffering_hints(),
            cloud_watch_logging_options=logging_options,
            domain_arn=self.domain.domain_arn,
            index_name=self.props.index_name,
            index_rotation_period=self.props.index_rotation,
            processing_configuration=processing,
            retry_options=retry_options,
            role_arn=principal.role_arn,
            s3_backup_mode=self._s3_backup_mode(),
            s3_configuration=backup,
            type_name=self.props.type_name,
        )
        return self._destination_config(
            self.property_name,
            configuration,
            [
                domain_grant,
                describe_grant,
                *logging_dependables,
                *processing_dependables,
                *backup_dependables,
            ],
        )

    def _elasticsearch_buffering_hints(self):
        hints = self._create_buffering_hints(self.props.buffering_interval, self.props.buffering_size)
        if hints is None:
            return None
        return firehose.CfnDeliveryStream.ElasticsearchBufferingHintsProperty(
            interval_in_seconds=hints.interval_in_seconds,
            size_in_m_bs=hints.size_in_m_bs,
        )

    def _s3_backup_mode(self) -> str:
        return "AllDocuments" if self.backup.mode == BackupMode.ALL else "FailedDocumentsOnly"

    def _validate_retry_interval(self) -> None:
        if self.props.retry_interval is None:
            return
        seconds = self.props.retry_interval.to_seconds()
        if seconds > limits.ELASTICSEARCH_RETRY_MAX_SECONDS:
            raise range_error(
                f"Retry interval must be between 0 and {limits.ELASTICSEARCH_RETRY_MAX_SECONDS} seconds. "
                f"Retry interval provided was {seconds} seconds.",
                field="retry_interval",
                value=seconds,
                minimum=0,
                maximum=limits.ELASTICSEARCH_RETRY_MAX_SECONDS,
            )

    def _validate_index_name(self) -> None:
        index_name = self.props.index_name
        if _STARTS_WITH_UNDERSCORE.search(index_name):
            raise domain_validation_error(
                f"Elasticsearch index name must not begin with an underscore. index_name provided: {index_name}",
                field="index_name",
                value=index_name,
            )
        if _CAPITAL_LETTERS.search(index_name):
            raise domain_validation_error(
                f"Elasticsearch index name must be lower-case. index_name provided: {index_name}",
                field="index_name",
                value=index_name,
            )
        if _COMMAS.search(index_name):
            raise domain_validation_error(
                f"Elasticsearch index name must not contain commas. index_name provided: {index_name}",
                field="index_name",
                value=index_name,
            )
