import logging
from typing import Optional

from pydantic import Field

from .base import DeliveryFlowBaseSettings


class DeliveryFlowSettings(DeliveryFlowBaseSettings):
    """Synthesis-time configuration.

    Account, region and partition come from the stack environment, not
    from settings.
    """

    firehose_service_principal: str = Field(
        default="firehose.amazonaws.com",
        description="Service principal allowed to assume the delivery stream role"
    )
    redshift_service_principal: str = Field(
        default="redshift.amazonaws.com",
        description="Service principal allowed to assume the Redshift bucket access role"
    )

    def model_post_init(self, __context) -> None:
        super().model_post_init(__context)
        logger = logging.getLogger(__name__)
        logger.debug(
            "Loaded deliveryflow settings",
            extra={
                "firehose_service_principal": self.firehose_service_principal,
                "redshift_service_principal": self.redshift_service_principal,
            },
        )


# Singleton instance
_settings: Optional[DeliveryFlowSettings] = None


def get_settings(force_reload: bool = False) -> DeliveryFlowSettings:
    """Get the singleton settings instance.

    Args:
        force_reload: If True, creates a new settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        DeliveryFlowSettings: The singleton settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()

        # Pick up environment changes
        new_settings = get_settings(force_reload=True)
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = DeliveryFlowSettings()

    return _settings


def _reload_settings() -> DeliveryFlowSettings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
