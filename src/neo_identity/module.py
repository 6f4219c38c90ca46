"""Composition of the identity gateway.

Wires settings, the provider binding, the session factory and the service
together. Settings are read once; the resulting service keeps no per-user
state.
"""

import logging
from typing import Optional

from .application.services import IdentityService
from .config.settings import IdentitySettings, get_settings
from .core.protocols import UserPool
from .infrastructure.adapters import ChallengeResponseAdapter
from .infrastructure.factories import IdentitySessionFactory
from .infrastructure.providers.cognito import (
    CognitoUserPool,
    MemorySessionStorage,
    RedisSessionStorage,
    SessionStorage,
)

logger = logging.getLogger(__name__)


def create_session_storage(settings: IdentitySettings) -> SessionStorage:
    """Redis storage when ``SESSION_STORAGE_URL`` is set, in-memory otherwise."""
    if settings.session_storage_url:
        return RedisSessionStorage(
            url=settings.session_storage_url,
            prefix=settings.session_storage_prefix,
            ttl=settings.session_storage_ttl,
        )
    return MemorySessionStorage()


def create_identity_service(
    settings: Optional[IdentitySettings] = None,
    user_pool: Optional[UserPool] = None,
) -> IdentityService:
    """Build a ready-to-use identity service.

    Args:
        settings: Gateway settings; the cached environment settings when omitted
        user_pool: Provider pool to use instead of the Cognito binding

    Returns:
        IdentityService bound to the configured pool

    Raises:
        ConfigurationError: If the pool or client identifier is missing
    """
    settings = settings or get_settings()
    pool_config = settings.to_pool_config()

    if user_pool is None:
        user_pool = CognitoUserPool(
            pool_config,
            storage=create_session_storage(settings),
            max_workers=settings.provider_max_workers,
            device_name=settings.device_name,
        )

    session_factory = IdentitySessionFactory(pool_config, user_pool)
    logger.info(f"Identity gateway ready for pool {pool_config.user_pool_id}")
    return IdentityService(session_factory, ChallengeResponseAdapter())
