"""Base model for deliveryflow props and configuration objects."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class DFBaseModel(BaseModel):
    """Base for props, configs and other value objects.

    Props routinely hold resources (buckets, roles, log groups), so arbitrary
    types are allowed and stored by reference. Enum fields keep their string
    value, which is what ends up in a template. Assignments are validated so
    that props mutated after construction still satisfy their constraints.
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Dump the model, nested models included, without unset optional fields.

        Resource references are returned as is and are not serialized.
        """
        return self.model_dump(exclude_none=True)
