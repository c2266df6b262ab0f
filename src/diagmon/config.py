"""Configuration management for diagmon.

Loads monitor settings from environment variables (prefix ``DIAGMON_``)
using Pydantic. Nothing here is secret, so every field has a default and
the module-level instance can be built safely at import.

Usage:
    from diagmon.config import settings

    print(settings.module_names)  # e.g. ["map", "sensing", "localization"]
    print(settings.hardware_id)

List fields are read as JSON from the environment:

    DIAGMON_MODULE_NAMES='["sensing", "perception"]'
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Hardware identifier attached to every diagnostic bundle
DEFAULT_HARDWARE_ID = "autoware_state_monitor"


class Settings(BaseSettings):
    """diagmon configuration from environment variables.

    Loads from .env file automatically. Validates on instantiation.

    Attributes:
        module_names: Modules that get a ``{module}_topic_status`` rule
        hardware_id: Identifier the host attaches to the report bundle
        node_name: Prefix for status names in the bundle
        update_rate: Periodic update frequency in Hz
        max_workers: Worker threads used to evaluate rules within one tick
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIAGMON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    module_names: list[str] = Field(
        default_factory=list,
        description="Module names registered for topic status reporting",
    )
    hardware_id: str = Field(
        default=DEFAULT_HARDWARE_ID,
        min_length=1,
        description="Hardware identifier for the diagnostic bundle",
    )
    node_name: str = Field(
        default="autoware_state_monitor",
        min_length=1,
        description="Node name prefixed to every status name",
    )
    update_rate: float = Field(default=10.0, gt=0, description="Update frequency [Hz]")
    max_workers: int = Field(default=1, ge=1, le=32, description="Rule evaluation threads")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("module_names")
    @classmethod
    def validate_module_names(cls, v: list[str]) -> list[str]:
        """Ensure module names are non-empty strings."""
        for name in v:
            if not name.strip():
                raise ValueError("module_names must not contain empty names")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper

    @property
    def update_period(self) -> float:
        """Seconds between two updates."""
        return 1.0 / self.update_rate


# Global settings instance, loaded once at import
settings = Settings()
