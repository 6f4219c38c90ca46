"""Identity gateway application layer: requests, validation, commands, services."""

from . import requests
from .validators import RequestValidator
from .commands import AuthenticateUser, AuthenticationFlow, ChangePassword, RespondToMfaChallenge
from .services import IdentityService

__all__ = [
    "requests",
    "RequestValidator",
    "AuthenticateUser",
    "AuthenticationFlow",
    "ChangePassword",
    "RespondToMfaChallenge",
    "IdentityService",
]
