"""The delivery stream resource.

``DeliveryStream`` owns the role the service assumes, wires the optional
source stream and server-side encryption, and merges the single
destination's property into its ``aws_kinesisfirehose.CfnDeliveryStream``.
"""

from typing import Any, Dict, Optional, Sequence

from aws_cdk import (
    ArnFormat,
    Stack,
    Token,
    aws_iam as iam,
    aws_kinesis as kinesis,
    aws_kinesisfirehose as firehose,
    aws_kms as kms,
)
from constructs import Construct

from deliveryflow.common.exceptions import (
    cardinality_error,
    contradiction_error,
    unresolved_reference_error,
)
from deliveryflow.constants import DeliveryStreamType, KeyType, StreamEncryption
from deliveryflow.destinations.base import DestinationBinder, DestinationBindOptions, DestinationConfig
from deliveryflow.logging import clear_synthesis_context, get_logger, set_synthesis_context
from deliveryflow.settings import get_settings
from deliveryflow.stream.base import DeliveryStreamAttributes, DeliveryStreamBase, _ImportedDeliveryStream
from deliveryflow.telemetry import synthesis_span
from deliveryflow.types.base import DFBaseModel

logger = get_logger(__name__)

BIND_SPAN_NAME = "deliveryflow.destination.bind"


class ResolvedEncryption(DFBaseModel):
    """Server-side encryption settings with every default applied.

    Attributes:
        encryption: Effective encryption mode, None when not requested
        encryption_key: ``aws_kms.IKey`` given by the caller
    """

    encryption: Optional[StreamEncryption] = None
    encryption_key: Optional[Any] = None


def resolve_stream_encryption(
    source_stream: Optional[kinesis.IStream] = None,
    encryption: Optional[StreamEncryption] = None,
    encryption_key: Optional[kms.IKey] = None,
) -> ResolvedEncryption:
    """Validate the encryption inputs against each other.

    A key implies customer-managed encryption.

    Raises:
        ConfigurationError: If encryption is requested for a stream reading
            from a Kinesis data stream, or a key is given with a mode other
            than customer-managed
    """
    if source_stream is not None and (encryption is not None or encryption_key is not None):
        raise contradiction_error(
            "Requested server-side encryption but delivery stream source is a Kinesis data stream. "
            "Specify server-side encryption on the data stream instead.",
            fields=["source_stream", "encryption"],
        )
    if encryption in (StreamEncryption.AWS_OWNED, StreamEncryption.UNENCRYPTED) and encryption_key is not None:
        raise contradiction_error(
            f"Specified stream encryption as {StreamEncryption(encryption).name} but provided a customer-managed key",
            fields=["encryption", "encryption_key"],
        )
    if encryption_key is not None:
        encryption = StreamEncryption.CUSTOMER_MANAGED
    return ResolvedEncryption(encryption=encryption, encryption_key=encryption_key)


class DeliveryStream(DeliveryStreamBase):
    """A Kinesis Data Firehose delivery stream.

    Args:
        scope: Owning construct
        id: Construct id
        destinations: Exactly one destination
        delivery_stream_name: Physical name, generated when omitted
        source_stream: ``aws_kinesis.IStream`` to read from. Records are put
            directly when omitted.
        role: ``aws_iam.IRole`` the service assumes, created when omitted
        encryption: Server-side encryption mode. Not allowed together with
            a source stream.
        encryption_key: Customer-managed ``aws_kms.IKey``; implies
            CUSTOMER_MANAGED. Created when encryption is CUSTOMER_MANAGED
            and none is given.

    Example:
        ```python
        stack = cdk.Stack(app, "Pipeline")
        DeliveryStream(
            stack,
            "Stream",
            destinations=[S3Bucket(s3.Bucket(stack, "Destination"))],
            encryption=StreamEncryption.AWS_OWNED,
        )
        ```
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        destinations: Sequence[DestinationBinder],
        delivery_stream_name: Optional[str] = None,
        source_stream: Optional[kinesis.IStream] = None,
        role: Optional[iam.IRole] = None,
        encryption: Optional[StreamEncryption] = None,
        encryption_key: Optional[kms.IKey] = None,
    ):
        super().__init__(scope, id, physical_name=delivery_stream_name)

        if len(destinations) != 1:
            raise cardinality_error(
                f"Exactly one destination must be provided per delivery stream, given {len(destinations)}",
                field="destinations",
                count=len(destinations),
            )
        resolved = resolve_stream_encryption(source_stream, encryption, encryption_key)

        settings = get_settings()
        self.role = role or iam.Role(
            self,
            "ServiceRole",
            assumed_by=iam.ServicePrincipal(settings.firehose_service_principal),
        )
        self._grant_principal = self.role

        self.encryption_key = resolved.encryption_key
        if self.encryption_key is None and resolved.encryption == StreamEncryption.CUSTOMER_MANAGED:
            self.encryption_key = kms.Key(self, "Key")
        encryption_config = None
        if self.encryption_key is not None:
            self.encryption_key.grant_encrypt_decrypt(self.role)
            encryption_config = firehose.CfnDeliveryStream.DeliveryStreamEncryptionConfigurationInputProperty(
                key_arn=self.encryption_key.key_arn,
                key_type=KeyType.CUSTOMER_MANAGED_CMK.value,
            )
        elif resolved.encryption == StreamEncryption.AWS_OWNED:
            encryption_config = firehose.CfnDeliveryStream.DeliveryStreamEncryptionConfigurationInputProperty(
                key_type=KeyType.AWS_OWNED_CMK.value,
            )

        source_config = None
        if source_stream is not None:
            source_stream.grant_read(self.role)
            source_config = firehose.CfnDeliveryStream.KinesisStreamSourceConfigurationProperty(
                kinesis_stream_arn=source_stream.stream_arn,
                role_arn=self.role.role_arn,
            )

        destination_config = self._bind_destination(destinations[0])

        properties: Dict[str, Any] = {
            "delivery_stream_encryption_configuration_input": encryption_config,
            "delivery_stream_name": delivery_stream_name,
            "delivery_stream_type": (
                DeliveryStreamType.KINESIS_STREAM_AS_SOURCE.value
                if source_stream is not None
                else DeliveryStreamType.DIRECT_PUT.value
            ),
            "kinesis_stream_source_configuration": source_config,
        }
        properties.update(self._merge_destination(properties, destination_config))

        self._resource = firehose.CfnDeliveryStream(self, "Resource", **properties)
        self._resource.node.add_dependency(self.role)
        if destination_config.dependables:
            self._resource.node.add_dependency(*destination_config.dependables)

        self._delivery_stream_arn = self._get_resource_arn_attribute(
            self._resource.attr_arn,
            service="firehose",
            resource="deliverystream",
            resource_name=self._physical_name,
        )
        self._delivery_stream_name = self._get_resource_name_attribute(self._resource.ref)

        logger.info(
            "Assembled delivery stream",
            extra={
                "path": self.node.path,
                "destination_property": destination_config.property_name,
                "delivery_stream_type": properties["delivery_stream_type"],
                "encryption": resolved.encryption,
            },
        )

    @property
    def resource(self) -> firehose.CfnDeliveryStream:
        return self._resource

    def _bind_destination(self, destination: DestinationBinder) -> DestinationConfig:
        set_synthesis_context(stack=Stack.of(self).stack_name, construct=self.node.path)
        attributes = {
            "deliveryflow.construct": self.node.path,
            "deliveryflow.destination": type(destination).__name__,
        }
        try:
            with synthesis_span(BIND_SPAN_NAME, attributes) as span:
                destination_config = destination.bind(self, DestinationBindOptions(delivery_stream=self))
                span.set_attribute("deliveryflow.property_name", destination_config.property_name)
                return destination_config
        finally:
            clear_synthesis_context()

    @staticmethod
    def _merge_destination(properties: Dict[str, Any], destination_config: DestinationConfig) -> Dict[str, Any]:
        destination_properties = destination_config.to_properties()
        collisions = sorted(
            name for name in destination_properties
            if properties.get(name) is not None
        )
        if collisions:
            raise contradiction_error(
                f"Destination property {', '.join(collisions)} collides with a delivery stream property",
                fields=collisions,
            )
        return destination_properties

    @classmethod
    def from_delivery_stream_name(cls, scope: Construct, id: str, delivery_stream_name: str) -> DeliveryStreamBase:
        """Import an existing delivery stream from its name."""
        return cls.from_delivery_stream_attributes(
            scope, id, DeliveryStreamAttributes(delivery_stream_name=delivery_stream_name)
        )

    @classmethod
    def from_delivery_stream_arn(cls, scope: Construct, id: str, delivery_stream_arn: str) -> DeliveryStreamBase:
        """Import an existing delivery stream from its ARN."""
        return cls.from_delivery_stream_attributes(
            scope, id, DeliveryStreamAttributes(delivery_stream_arn=delivery_stream_arn)
        )

    @classmethod
    def from_delivery_stream_attributes(
        cls,
        scope: Construct,
        id: str,
        attrs: DeliveryStreamAttributes,
    ) -> DeliveryStreamBase:
        """Import an existing delivery stream from its attributes.

        Raises:
            ConfigurationError: If neither name nor ARN is given, or the
                name cannot be read from the ARN
        """
        if not attrs.delivery_stream_name and not attrs.delivery_stream_arn:
            raise unresolved_reference_error(
                "Either delivery_stream_name or delivery_stream_arn must be provided in DeliveryStreamAttributes"
            )

        stack = Stack.of(scope)
        delivery_stream_name = attrs.delivery_stream_name or _resource_name(stack, attrs.delivery_stream_arn)
        if not delivery_stream_name:
            raise unresolved_reference_error(
                f"Could not import delivery stream from malformatted ARN {attrs.delivery_stream_arn}: "
                f"could not determine resource name",
                reference=attrs.delivery_stream_arn,
            )

        delivery_stream_arn = attrs.delivery_stream_arn or stack.format_arn(
            service="firehose",
            resource="deliverystream",
            resource_name=delivery_stream_name,
        )
        return _ImportedDeliveryStream(
            scope,
            id,
            delivery_stream_name=delivery_stream_name,
            delivery_stream_arn=delivery_stream_arn,
            role=attrs.role,
        )


def _resource_name(stack: Stack, arn: str) -> Optional[str]:
    """The resource name of ``arn``, None when the ARN has no name."""
    if not Token.is_unresolved(arn) and len(arn.split(":", 5)) < 6:
        return None
    return stack.split_arn(arn, ArnFormat.SLASH_RESOURCE_NAME).resource_name
