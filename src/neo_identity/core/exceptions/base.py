"""Base exceptions for neo-identity.

Defines the root of the gateway exception hierarchy. Every error surfaced to a
caller inherits from IdentityGatewayError and carries an error code plus
structured details for logging.
"""

from typing import Any, Dict, Optional


class IdentityGatewayError(Exception):
    """Base exception for all identity gateway errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
    ):
        super().__init__(message, *args)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: IdentityGatewayError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The gateway exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
