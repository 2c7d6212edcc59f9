"""Immutable results of the binding helpers."""

from typing import Any, List, Optional, Tuple

from pydantic import ConfigDict, Field

from deliveryflow.types.base import DFBaseModel


class BindingResult(DFBaseModel):
    """A configuration fragment and the resources it depends on.

    Attributes:
        config: The property fragment
        dependables: Grants and constructs the delivery stream must wait on
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    config: Any
    dependables: List[Any] = Field(default_factory=list)


def split_result(result: Optional[BindingResult]) -> Tuple[Any, List[Any]]:
    """Unpack an optional result into its fragment and dependables."""
    if result is None:
        return None, []
    return result.config, list(result.dependables)
