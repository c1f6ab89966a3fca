"""
Application configuration using Pydantic Settings.

Loads configuration from NAVGUARD_* environment variables and .env file.
"""

import logging
import re
from typing import List

import structlog
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from navguard.sanitization.domain.enums import FailSafePolicy, LocationPropertyPolicy
from navguard.shared.domain.exceptions import ConfigurationError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="NAVGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="navguard", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")

    # API Server
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=3000, description="API port")
    max_request_bytes: int = Field(
        default=1024 * 1024,
        gt=0,
        description="Maximum accepted request body size in bytes",
    )

    # Sanitizer
    fail_safe_policy: FailSafePolicy = Field(
        default=FailSafePolicy.EMPTY,
        description="Result for unparseable input (empty/passthrough)",
    )
    location_property_policy: LocationPropertyPolicy = Field(
        default=LocationPropertyPolicy.ANY_PROPERTY,
        description="Which location properties count as navigation writes",
    )
    global_object_names: List[str] = Field(
        default=["window"],
        description="Identifiers treated as the global navigation object",
    )

    # Logging / Privacy
    log_redaction_enabled: bool = Field(default=True, description="Redact code and secrets in logs")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"Unknown log level: {value}")
        return value.upper()

    @field_validator("global_object_names")
    @classmethod
    def _validate_global_object_names(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("global_object_names must not be empty")
        invalid = [name for name in value if not _IDENTIFIER_RE.match(name)]
        if invalid:
            raise ValueError(f"Not JavaScript identifiers: {', '.join(invalid)}")
        return value

    @model_validator(mode="after")
    def _warn_unsafe_production_settings(self) -> "Settings":
        """Passthrough on parse failure is legal but must be loud in production."""
        if self.is_production and self.fail_safe_policy == FailSafePolicy.PASSTHROUGH:
            structlog.get_logger(__name__).warning(
                "passthrough_fail_safe_in_production",
                message="Unparseable input will be returned unchanged. "
                "Callers must treat rejected results as unsanitized.",
            )
        return self


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment.

    Raises:
        ConfigurationError: If any setting fails validation
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid navguard configuration: {e.error_count()} error(s)",
            context={"errors": e.errors(include_url=False)},
        ) from e


# Global settings instance
settings = load_settings()
