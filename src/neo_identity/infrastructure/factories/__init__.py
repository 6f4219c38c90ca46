"""Infrastructure factories."""

from .session_factory import IdentitySessionFactory

__all__ = ["IdentitySessionFactory"]
