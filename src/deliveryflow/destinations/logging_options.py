"""CloudWatch logging of delivery errors."""

from typing import Any, Optional

from aws_cdk import aws_kinesisfirehose as firehose, aws_logs as logs
from constructs import Construct

from deliveryflow.common.exceptions import contradiction_error
from deliveryflow.destinations.result import BindingResult
from deliveryflow.logging import get_logger

logger = get_logger(__name__)

LOG_GROUP_ID = "LogGroup"


class LoggingBinding:
    """Per-destination logging state.

    The first log group used while binding into a scope is kept for the rest
    of that bind, so every call site without its own group logs into the
    same group through its own log stream. Binding into another scope starts
    over, since a group owned by one stream cannot be referenced from
    another stack.

    Attributes:
        log_group: The log group of the most recent bind, None until first use
    """

    def __init__(self):
        self.log_group: Optional[logs.ILogGroup] = None
        self._scope: Optional[Construct] = None

    def create_logging_options(
        self,
        scope: Construct,
        principal: Any,
        stream_id: str,
        logging: Optional[bool] = None,
        log_group: Optional[logs.ILogGroup] = None,
    ) -> Optional[BindingResult]:
        """Build the logging options for one call site.

        Args:
            scope: Construct owning any log group that has to be created
            principal: Principal granted permission to write the logs
            stream_id: Id of the log stream for this call site
            logging: False disables logging; None and True enable it
            log_group: Log group to use for this call

        Returns:
            BindingResult with the logging options and the write grant, or
            None when logging is disabled

        Raises:
            ConfigurationError: If logging is disabled but a log group is given
        """
        if logging is False and log_group is not None:
            raise contradiction_error(
                "Destination logging cannot be set to false when log_group is provided",
                fields=["logging", "log_group"],
            )

        if logging is False:
            return None

        if self._scope is not scope:
            self._scope = scope
            self.log_group = None

        group = log_group or self.log_group or self._owned_log_group(scope)
        if self.log_group is None:
            self.log_group = group

        grant = group.grant_write(principal)
        stream = group.node.try_find_child(stream_id) or group.add_stream(stream_id)
        options = firehose.CfnDeliveryStream.CloudWatchLoggingOptionsProperty(
            enabled=True,
            log_group_name=group.log_group_name,
            log_stream_name=stream.log_stream_name,
        )
        return BindingResult(config=options, dependables=[grant])

    @staticmethod
    def _owned_log_group(scope: Construct) -> logs.ILogGroup:
        existing = scope.node.try_find_child(LOG_GROUP_ID)
        if existing is not None:
            return existing
        group = logs.LogGroup(scope, LOG_GROUP_ID)
        logger.debug("Created destination log group", extra={"path": group.node.path})
        return group
