"""Identity gateway exceptions.

Caller-facing taxonomy: every public operation either returns its value or
raises exactly one of ValidationError, ConfigurationError,
AuthenticationError or ProviderError.
"""

from .base import IdentityGatewayError, create_error_response
from .validation_error import FieldViolation, ValidationError
from .configuration_error import ConfigurationError
from .authentication_error import AuthenticationError
from .provider_error import ProviderError, THROTTLE_CODES

__all__ = [
    "IdentityGatewayError",
    "create_error_response",
    "FieldViolation",
    "ValidationError",
    "ConfigurationError",
    "AuthenticationError",
    "ProviderError",
    "THROTTLE_CODES",
]
