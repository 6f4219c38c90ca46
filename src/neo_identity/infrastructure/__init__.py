"""Infrastructure layer: callback adapter, session factory and provider bindings."""

from .adapters import ChallengeResponseAdapter, classify_provider_error
from .factories import IdentitySessionFactory

__all__ = [
    "ChallengeResponseAdapter",
    "classify_provider_error",
    "IdentitySessionFactory",
]
