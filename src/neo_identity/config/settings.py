"""
Identity gateway settings.
Loaded from environment variables (and an optional .env file) using Pydantic settings.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError
from ..core.value_objects import PoolConfig

logger = logging.getLogger(__name__)


class IdentitySettings(BaseSettings):
    """Identity gateway configuration.

    Field names map to environment variables case-insensitively, e.g.
    ``COGNITO_USER_POOL_ID`` populates ``cognito_user_pool_id``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # User pool and app client
    cognito_user_pool_id: str = Field(default="", description="User pool identifier")
    cognito_client_id: str = Field(default="", description="App client identifier")
    cognito_client_secret: Optional[SecretStr] = Field(
        default=None, description="App client secret, when the client has one"
    )
    aws_region: Optional[str] = Field(
        default=None, description="Region; derived from the pool id when unset"
    )
    cognito_endpoint_url: Optional[str] = Field(
        default=None, description="Endpoint override (local emulators)"
    )

    # Provider session storage
    session_storage_url: Optional[str] = Field(
        default=None, description="Redis URL; in-memory storage when unset"
    )
    session_storage_prefix: str = Field(default="neo_identity:session:")
    session_storage_ttl: int = Field(default=2592000, ge=1, description="Seconds")

    # Provider binding
    provider_max_workers: int = Field(default=8, ge=1, le=64)
    device_name: str = Field(default="neo-identity-gateway")

    @field_validator("cognito_user_pool_id", "cognito_client_id", mode="before")
    @classmethod
    def strip_identifier(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("aws_region", "cognito_endpoint_url", "session_storage_url", mode="before")
    @classmethod
    def blank_as_unset(cls, value: Any) -> Any:
        """Treat whitespace-only values as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def get_validation_errors(self) -> List[str]:
        """List configuration problems that prevent building a pool config."""
        errors = []
        if not self.cognito_user_pool_id:
            errors.append("COGNITO_USER_POOL_ID is required")
        if not self.cognito_client_id:
            errors.append("COGNITO_CLIENT_ID is required")
        return errors

    def is_valid(self) -> bool:
        return not self.get_validation_errors()

    def to_pool_config(self) -> PoolConfig:
        """Build the immutable pool configuration.

        Raises:
            ConfigurationError: If the pool or client identifier is missing
        """
        errors = self.get_validation_errors()
        if errors:
            missing = []
            if not self.cognito_user_pool_id:
                missing.append("cognito_user_pool_id")
            if not self.cognito_client_id:
                missing.append("cognito_client_id")
            raise ConfigurationError("; ".join(errors), missing=missing)

        secret = self.cognito_client_secret.get_secret_value() if self.cognito_client_secret else None
        return PoolConfig(
            user_pool_id=self.cognito_user_pool_id,
            client_id=self.cognito_client_id,
            client_secret=secret or None,
            region=self.aws_region,
            endpoint_url=self.cognito_endpoint_url,
        )

    def summary(self) -> Dict[str, Any]:
        """Loggable view of the settings; the client secret is never included."""
        return {
            "user_pool_id": self.cognito_user_pool_id,
            "client_id": self.cognito_client_id,
            "has_client_secret": self.cognito_client_secret is not None,
            "region": self.aws_region,
            "endpoint_url": self.cognito_endpoint_url,
            "session_storage": "redis" if self.session_storage_url else "memory",
            "provider_max_workers": self.provider_max_workers,
        }


@lru_cache()
def get_settings() -> IdentitySettings:
    """Get cached settings instance."""
    settings = IdentitySettings()
    logger.debug(f"Identity settings loaded: {settings.summary()}")
    return settings
