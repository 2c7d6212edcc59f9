"""Record transformation before delivery."""

from typing import Any, List, Optional, Sequence

from aws_cdk import aws_kinesisfirehose as firehose

from deliveryflow.common.exceptions import cardinality_error
from deliveryflow.destinations.result import BindingResult
from deliveryflow.processor import DataProcessor

MAX_PROCESSORS = 1

ProcessorParameter = firehose.CfnDeliveryStream.ProcessorParameterProperty


def create_processing_config(
    principal: Any,
    processors: Optional[Sequence[DataProcessor]] = None,
) -> Optional[BindingResult]:
    """Bind the destination's processor and assemble its parameters.

    Parameters are emitted in a fixed order: ``RoleArn``, the processor's
    identifying parameter, then ``BufferIntervalInSeconds``,
    ``BufferSizeInMBs`` and ``NumberOfRetries`` when supplied. Values are
    decimal strings.

    Args:
        principal: Principal granted permission to invoke the processor
        processors: Zero or one processor

    Returns:
        BindingResult with the processing configuration and the invoke
        grant, or None when there is no processor

    Raises:
        ConfigurationError: If more than one processor is given
    """
    processors = list(processors or [])
    if len(processors) > MAX_PROCESSORS:
        raise cardinality_error(
            f"Only one processor is allowed per delivery stream destination, given {len(processors)}",
            field="processors",
            count=len(processors),
        )
    if not processors:
        return None

    processor_config = processors[0].bind(principal)
    identifier = processor_config.processor_identifier
    parameters: List[ProcessorParameter] = [
        ProcessorParameter(parameter_name="RoleArn", parameter_value=principal.role_arn),
        ProcessorParameter(
            parameter_name=identifier.parameter_name,
            parameter_value=identifier.parameter_value,
        ),
    ]
    if processor_config.buffer_interval is not None:
        parameters.append(ProcessorParameter(
            parameter_name="BufferIntervalInSeconds",
            parameter_value=str(processor_config.buffer_interval.to_seconds()),
        ))
    if processor_config.buffer_size is not None:
        parameters.append(ProcessorParameter(
            parameter_name="BufferSizeInMBs",
            parameter_value=str(processor_config.buffer_size.to_mebibytes()),
        ))
    if processor_config.retries is not None:
        parameters.append(ProcessorParameter(
            parameter_name="NumberOfRetries",
            parameter_value=str(processor_config.retries),
        ))

    config = firehose.CfnDeliveryStream.ProcessingConfigurationProperty(
        enabled=True,
        processors=[firehose.CfnDeliveryStream.ProcessorProperty(
            type=processor_config.processor_type,
            parameters=parameters,
        )],
    )
    dependables = [processor_config.grant] if processor_config.grant is not None else []
    return BindingResult(config=config, dependables=dependables)
