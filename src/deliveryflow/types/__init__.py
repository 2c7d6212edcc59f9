"""Core data types for deliveryflow."""

from deliveryflow.types.base import DFBaseModel

__all__ = [
    "DFBaseModel",
]
