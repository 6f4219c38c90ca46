"""Neo-Identity - async identity operations gateway.

Exposes registration, authentication with MFA challenges, credential
recovery, MFA preferences, trusted devices and attribute management for a
challenge-based identity provider behind one uniform contract: every
operation returns its value or raises one typed error.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import IdentitySettings, get_settings

from .core.exceptions import (
    IdentityGatewayError,
    ValidationError,
    FieldViolation,
    ConfigurationError,
    AuthenticationError,
    ProviderError,
    create_error_response,
)

from .core.value_objects import (
    PoolConfig,
    TokenPair,
    AuthenticationState,
    AuthenticationResult,
    ChallengeName,
    MfaChallenge,
    CodeDeliveryDetails,
    UserAttribute,
    AttributeUpdateResult,
    DeviceDescriptor,
    DevicePage,
    DeviceStatus,
    MfaPreference,
    UserData,
    RegistrationResult,
)

from .application import requests
from .application.services import IdentityService
from .infrastructure.factories import IdentitySessionFactory
from .module import create_identity_service

__all__ = [
    "__version__",
    "IdentitySettings",
    "get_settings",
    "IdentityGatewayError",
    "ValidationError",
    "FieldViolation",
    "ConfigurationError",
    "AuthenticationError",
    "ProviderError",
    "create_error_response",
    "PoolConfig",
    "TokenPair",
    "AuthenticationState",
    "AuthenticationResult",
    "ChallengeName",
    "MfaChallenge",
    "CodeDeliveryDetails",
    "UserAttribute",
    "AttributeUpdateResult",
    "DeviceDescriptor",
    "DevicePage",
    "DeviceStatus",
    "MfaPreference",
    "UserData",
    "RegistrationResult",
    "requests",
    "IdentityService",
    "IdentitySessionFactory",
    "create_identity_service",
]
