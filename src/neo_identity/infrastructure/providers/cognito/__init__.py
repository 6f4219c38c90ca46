"""Amazon Cognito binding of the identity provider protocols."""

from .session_storage import MemorySessionStorage, RedisSessionStorage, SessionStorage
from .user import CognitoSession, CognitoUser, access_token_expired
from .user_pool import DEFAULT_DEVICE_NAME, CognitoUserPool

__all__ = [
    "MemorySessionStorage",
    "RedisSessionStorage",
    "SessionStorage",
    "CognitoSession",
    "CognitoUser",
    "access_token_expired",
    "DEFAULT_DEVICE_NAME",
    "CognitoUserPool",
]
