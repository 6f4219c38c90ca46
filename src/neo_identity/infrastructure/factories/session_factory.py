"""Identity session factory."""

import logging

from ...config.logging_config import mask_identifier
from ...core.exceptions import ConfigurationError
from ...core.protocols import UserHandle, UserPool
from ...core.value_objects import IdentityReference, PoolConfig

logger = logging.getLogger(__name__)


class IdentitySessionFactory:
    """Builds provider session handles following maximum separation principle.

    Handles ONLY handle construction from an identity reference.
    Does not cache handles: every call returns a new one, so concurrent
    operations never share provider state through this factory.
    """

    def __init__(self, pool_config: PoolConfig, user_pool: UserPool):
        """Initialize session factory.

        Args:
            pool_config: Pool and client identifiers resolved at startup
            user_pool: Provider user pool bound to the same identifiers

        Raises:
            ConfigurationError: If pool or client identifier is missing
        """
        if pool_config is None or not pool_config.is_complete:
            missing = pool_config.missing_fields if pool_config else ["user_pool_id", "client_id"]
            raise ConfigurationError(
                "User pool and client identifiers are required",
                missing=missing,
            )
        if user_pool is None:
            raise ConfigurationError("Identity provider user pool is required", missing=["user_pool"])

        self._pool_config = pool_config
        self._user_pool = user_pool

    @property
    def pool_config(self) -> PoolConfig:
        return self._pool_config

    @property
    def user_pool(self) -> UserPool:
        return self._user_pool

    def reference(self, email: str) -> IdentityReference:
        """Bind an email to the configured pool."""
        return IdentityReference(email=email, pool=self._pool_config)

    def create_handle(self, reference: IdentityReference) -> UserHandle:
        """Create a fresh provider handle for one operation.

        Args:
            reference: Validated identity reference

        Returns:
            New session handle bound to the configured pool

        Raises:
            ConfigurationError: If the reference targets another pool
        """
        if reference.pool != self._pool_config:
            raise ConfigurationError(
                "Identity reference is bound to a different pool configuration",
                missing=[],
            )
        logger.debug(f"Creating session handle for {mask_identifier(reference.username)}")
        return self._user_pool.user(reference.username)

    def handle_for(self, email: str) -> UserHandle:
        """Shortcut for ``create_handle(reference(email))``."""
        return self.create_handle(self.reference(email))
