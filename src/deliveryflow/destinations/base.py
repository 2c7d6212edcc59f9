"""Destination binding contract.

A destination turns its configuration into one keyword argument of
``aws_kinesisfirehose.CfnDeliveryStream``. The delivery stream only
reads the property name of the returned ``DestinationConfig``; everything
destination specific stays behind ``bind``.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Type

from aws_cdk import Duration, Size, aws_kinesisfirehose as firehose, aws_kms as kms
from constructs import Construct
from pydantic import Field

from deliveryflow.constants import DestinationKind
from deliveryflow.destinations.backup import (
    ResolvedBackup,
    create_backup_config,
    resolve_backup,
    validate_backup_mode,
)
from deliveryflow.destinations.buffering import create_buffering_hints
from deliveryflow.destinations.encryption import create_encryption_config
from deliveryflow.destinations.logging_options import LoggingBinding
from deliveryflow.destinations.processing import create_processing_config
from deliveryflow.destinations.props import DestinationProps
from deliveryflow.destinations.result import BindingResult
from deliveryflow.logging import get_logger
from deliveryflow.types.base import DFBaseModel

logger = get_logger(__name__)


class DestinationBindOptions(DFBaseModel):
    """Context handed to ``DestinationBinder.bind``.

    Attributes:
        delivery_stream: The delivery stream being assembled. Its
            ``grant_principal`` is the role the service assumes.
    """

    delivery_stream: Any


class DestinationConfig(DFBaseModel):
    """The property a destination contributes to the delivery stream.

    Attributes:
        property_name: ``CfnDeliveryStream`` keyword argument, e.g.
            ``extended_s3_destination_configuration``
        configuration: The property struct
        dependables: Grants and constructs the delivery stream must wait on
    """

    property_name: str
    configuration: Any
    dependables: List[Any] = Field(default_factory=list)

    def to_properties(self) -> Dict[str, Any]:
        return {self.property_name: self.configuration}


class DestinationBinder(ABC):
    """Base class of every delivery stream destination.

    Subclasses declare their kind and props model, implement ``bind`` and
    compose the protected helpers. Construction resolves and validates the
    backup settings eagerly, so misconfiguration surfaces before binding.

    Class Attributes:
        kind: Kind used to look up backup mode rules
        display_name: Name used in error messages
        props_class: Pydantic model validating the keyword arguments
    """

    kind: ClassVar[DestinationKind] = DestinationKind.CUSTOM
    display_name: ClassVar[str] = "Custom"
    props_class: ClassVar[Type[DestinationProps]] = DestinationProps

    def __init__(self, **props: Any):
        self.props = self.props_class(**props)
        self._logging = LoggingBinding()
        self._backup = resolve_backup(self.kind, self.props.s3_backup)
        validate_backup_mode(self.kind, self.display_name, self._backup)

    @abstractmethod
    def bind(self, scope: Construct, options: DestinationBindOptions) -> DestinationConfig:
        """Create the destination's resources and grants and describe it.

        Args:
            scope: Construct owning resources created for the destination
            options: Binding context

        Returns:
            DestinationConfig holding one delivery stream property
        """
        pass

    @property
    def backup(self) -> ResolvedBackup:
        return self._backup

    @property
    def log_group(self):
        """The log group used by this destination, None before the first bind."""
        return self._logging.log_group

    def _create_buffering_hints(
        self,
        interval: Optional[Duration] = None,
        size: Optional[Size] = None,
    ) -> Optional[firehose.CfnDeliveryStream.BufferingHintsProperty]:
        return create_buffering_hints(interval, size)

    def _create_logging_options(self, scope: Construct, principal: Any, stream_id: str) -> Optional[BindingResult]:
        return self._logging.create_logging_options(
            scope,
            principal,
            stream_id,
            logging=self.props.logging,
            log_group=self.props.log_group,
        )

    def _create_backup_config(self, scope: Construct, principal: Any) -> Optional[BindingResult]:
        return create_backup_config(scope, principal, self._backup, self._logging)

    def _create_processing_config(self, principal: Any) -> Optional[BindingResult]:
        return create_processing_config(principal, self.props.processors)

    def _create_encryption_config(self, principal: Any, encryption_key: Optional[kms.IKey]) -> BindingResult:
        return create_encryption_config(principal, encryption_key)

    def _destination_config(
        self,
        property_name: str,
        configuration: Any,
        dependables: List[Any],
    ) -> DestinationConfig:
        logger.info(
            "Bound delivery stream destination",
            extra={
                "destination_kind": self.kind.value,
                "property_name": property_name,
                "backup_mode": self._backup.mode.value,
                "dependable_count": len(dependables),
            },
        )
        return DestinationConfig(
            property_name=property_name,
            configuration=configuration,
            dependables=dependables,
        )
