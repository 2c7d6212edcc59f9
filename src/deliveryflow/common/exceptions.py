from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for deliveryflow.

    Every failure raised while assembling a delivery stream is a
    configuration error: the input is unsatisfiable or contradictory and
    synthesis stops. The codes categorize those errors without a separate
    exception class per category.

    Attributes:
        CONFIG_*: Synthesis-time configuration errors (1xxx)
    """
    # Configuration errors (1xxx)
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_RANGE = "CONFIG_002"
    CONFIG_CONTRADICTION = "CONFIG_003"
    CONFIG_CARDINALITY = "CONFIG_004"
    CONFIG_LOOKUP = "CONFIG_005"
    CONFIG_DOMAIN_VALIDATION = "CONFIG_006"


class DeliveryFlowError(Exception):
    """Base exception for all deliveryflow errors.

    Attributes:
        message: Error message, verbatim
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize deliveryflow error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from deliveryflow.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
            },
            exc_info=cause,
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


class ConfigurationError(DeliveryFlowError):
    """Raised when a delivery stream or destination cannot be assembled.

    All configuration errors are fatal to the current synthesis and are
    never retried.
    """


# Helper functions for common error scenarios
def range_error(
    message: str,
    field: str,
    value: Any,
    minimum: Optional[Any] = None,
    maximum: Optional[Any] = None,
    **kwargs
) -> ConfigurationError:
    """Create an error for a numeric input outside its allowed interval.

    Args:
        message: Error message stating the field, value and bound
        field: Name of the offending field
        value: Provided value
        minimum: Lower bound, inclusive
        maximum: Upper bound, inclusive

    Returns:
        ConfigurationError with CONFIG_RANGE code
    """
    details = kwargs.get('details', {})
    details["field"] = field
    details["value"] = value
    if minimum is not None:
        details["minimum"] = minimum
    if maximum is not None:
        details["maximum"] = maximum

    return ConfigurationError(
        message=message,
        error_code=ErrorCode.CONFIG_RANGE,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def contradiction_error(
    message: str,
    fields: Optional[list] = None,
    **kwargs
) -> ConfigurationError:
    """Create an error for optional inputs that imply exclusive intents.

    Args:
        message: Error message
        fields: Names of the conflicting fields

    Returns:
        ConfigurationError with CONFIG_CONTRADICTION code
    """
    details = kwargs.get('details', {})
    if fields:
        details["fields"] = list(fields)

    return ConfigurationError(
        message=message,
        error_code=ErrorCode.CONFIG_CONTRADICTION,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def cardinality_error(
    message: str,
    field: str,
    count: int,
    **kwargs
) -> ConfigurationError:
    """Create an error for a collection with the wrong number of items.

    Args:
        message: Error message
        field: Collection-valued field
        count: Number of items provided

    Returns:
        ConfigurationError with CONFIG_CARDINALITY code
    """
    details = kwargs.get('details', {})
    details["field"] = field
    details["count"] = count

    return ConfigurationError(
        message=message,
        error_code=ErrorCode.CONFIG_CARDINALITY,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def unresolved_reference_error(
    message: str,
    reference: Optional[str] = None,
    **kwargs
) -> ConfigurationError:
    """Create an error for a reference that cannot be resolved.

    Args:
        message: Error message
        reference: The identifier that could not be resolved

    Returns:
        ConfigurationError with CONFIG_LOOKUP code
    """
    details = kwargs.get('details', {})
    if reference:
        details["reference"] = reference

    return ConfigurationError(
        message=message,
        error_code=ErrorCode.CONFIG_LOOKUP,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def domain_validation_error(
    message: str,
    field: str,
    value: Any = None,
    **kwargs
) -> ConfigurationError:
    """Create an error for a destination-specific syntactic rule violation.

    Args:
        message: Error message
        field: Field that failed validation
        value: Invalid value

    Returns:
        ConfigurationError with CONFIG_DOMAIN_VALIDATION code
    """
    details = kwargs.get('details', {})
    details["field"] = field
    if value is not None:
        details["value"] = str(value)

    return ConfigurationError(
        message=message,
        error_code=ErrorCode.CONFIG_DOMAIN_VALIDATION,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )
