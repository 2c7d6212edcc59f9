"""Settings module for deliveryflow.

Configuration is built on Pydantic Settings and read from environment
variables prefixed with ``DELIVERYFLOW_`` or from a local ``.env`` file.

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file in the working directory
    3. Default Values in code (lowest priority)

Quick Start:
    >>> from deliveryflow.settings import get_settings
    >>>
    >>> settings = get_settings()
    >>> settings.firehose_service_principal
    'firehose.amazonaws.com'
"""

from .main import DeliveryFlowSettings, get_settings, _reload_settings
from .base import DeliveryFlowBaseSettings

__all__ = [
    "get_settings",
    "DeliveryFlowSettings",
    "DeliveryFlowBaseSettings",
]
