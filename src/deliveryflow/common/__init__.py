from deliveryflow.common.exceptions import (
    ErrorCode,
    DeliveryFlowError,
    ConfigurationError,
    range_error,
    contradiction_error,
    cardinality_error,
    unresolved_reference_error,
    domain_validation_error,
)

__all__ = [
    "ErrorCode",
    "DeliveryFlowError",
    "ConfigurationError",
    "range_error",
    "contradiction_error",
    "cardinality_error",
    "unresolved_reference_error",
    "domain_validation_error",
]
