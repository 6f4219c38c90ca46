"""Identity provider protocols."""

from .provider import (
    ChallengeCallback,
    NodeCallback,
    ProviderCallbacks,
    ProviderSession,
    UserHandle,
    UserPool,
)

__all__ = [
    "ChallengeCallback",
    "NodeCallback",
    "ProviderCallbacks",
    "ProviderSession",
    "UserHandle",
    "UserPool",
]
