"""Core domain objects and contracts of the identity gateway."""

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    FieldViolation,
    IdentityGatewayError,
    ProviderError,
    ValidationError,
    create_error_response,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "FieldViolation",
    "IdentityGatewayError",
    "ProviderError",
    "ValidationError",
    "create_error_response",
]
