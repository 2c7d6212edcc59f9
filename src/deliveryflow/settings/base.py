from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class DeliveryFlowBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DELIVERYFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    log_level: str = Field(
        default="INFO",
        description="Base log level applied by setup_logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name.

        Args:
            v: The log level value

        Returns:
            Upper-cased log level name
        """
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. "
                f"Expected one of: {', '.join(sorted(_LOG_LEVELS))}"
            )
        return level

    def model_post_init(self, __context: Any) -> None:
        """Post initialization hook for additional setup."""
        super().model_post_init(__context)
