"""Data processors that transform records before delivery."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from aws_cdk import Duration, Size, aws_iam as iam, aws_lambda as lambda_
from pydantic import Field

from deliveryflow.types.base import DFBaseModel


class DataProcessorIdentifier(DFBaseModel):
    """The parameter that tells the service which processor to call."""

    parameter_name: str
    parameter_value: Any


class DataProcessorProps(DFBaseModel):
    """Optional tuning of how records are handed to a processor.

    Attributes:
        buffer_interval: How long records are buffered before the processor is called
        buffer_size: How much data is buffered before the processor is called
        retries: Invocation retries on network timeouts or invocation limits
    """

    buffer_interval: Optional[Duration] = None
    buffer_size: Optional[Size] = None
    retries: Optional[int] = Field(default=None, ge=0)


class DataProcessorConfig(DataProcessorProps):
    """Result of binding a processor to a delivery stream principal."""

    processor_type: str
    processor_identifier: DataProcessorIdentifier
    grant: Optional[iam.Grant] = None


class DataProcessor(ABC):
    """A processor the delivery stream calls to transform records."""

    @abstractmethod
    def bind(self, principal: Any) -> DataProcessorConfig:
        """Grant ``principal`` permission to call the processor and describe it."""
        pass


class LambdaFunctionProcessor(DataProcessor):
    """Transform records with a Lambda function.

    Args:
        lambda_function: The function to invoke
        buffer_interval: Buffering interval before invocation
        buffer_size: Buffering size before invocation
        retries: Number of invocation retries; 0 disables retries

    Example:
        ```python
        fn = lambda_.Function.from_function_arn(stack, "Transform", function_arn)
        processor = LambdaFunctionProcessor(fn, retries=5)
        S3Bucket(bucket, processors=[processor])
        ```
    """

    processor_type = "Lambda"

    def __init__(
        self,
        lambda_function: lambda_.IFunction,
        buffer_interval: Optional[Duration] = None,
        buffer_size: Optional[Size] = None,
        retries: Optional[int] = None,
    ):
        self.lambda_function = lambda_function
        self.props = DataProcessorProps(
            buffer_interval=buffer_interval,
            buffer_size=buffer_size,
            retries=retries,
        )
        self.processor_identifier = DataProcessorIdentifier(
            parameter_name="LambdaArn",
            parameter_value=lambda_function.function_arn,
        )

    def bind(self, principal: Any) -> DataProcessorConfig:
        grant = self.lambda_function.grant_invoke(principal)
        return DataProcessorConfig(
            processor_type=self.processor_type,
            processor_identifier=self.processor_identifier,
            buffer_interval=self.props.buffer_interval,
            buffer_size=self.props.buffer_size,
            retries=self.props.retries,
            grant=grant,
        )
