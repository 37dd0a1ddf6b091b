"""
Settings for msp-authz.
Provides the runtime configuration using Pydantic settings.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import SCHEMA_NAME_PATTERN, StoreFailurePolicy


class AuthzSettings(BaseSettings):
    """
    Configuration for the authorization core and its storage adapters.

    Every field can be set through an ``AUTHZ_``-prefixed environment variable
    or a ``.env`` file, e.g. ``AUTHZ_STORE_FAILURE_POLICY=raise``.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True
    )

    # Decision behaviour
    store_failure_policy: StoreFailurePolicy = Field(default=StoreFailurePolicy.DENY)
    strict_permission_keys: bool = Field(default=False)

    # PostgreSQL adapters
    database_url: Optional[str] = Field(default=None)
    db_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=1, ge=0)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=5.0, gt=0)

    # Logging configuration
    log_level: Optional[str] = Field(default=None)
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")

    @field_validator("db_schema")
    @classmethod
    def validate_db_schema(cls, value: str) -> str:
        """Schema names are interpolated into SQL, so only plain identifiers pass."""
        if not SCHEMA_NAME_PATTERN.match(value):
            raise ValueError(f"Invalid schema name: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level

    @property
    def fail_closed(self) -> bool:
        """True when store failures resolve to a denial instead of raising."""
        return self.store_failure_policy == StoreFailurePolicy.DENY


@lru_cache()
def get_settings() -> AuthzSettings:
    """Get cached settings instance."""
    return AuthzSettings()
