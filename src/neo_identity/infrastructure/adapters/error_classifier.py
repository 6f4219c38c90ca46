"""Normalisation of provider errors into the gateway taxonomy."""

import logging
from typing import Any, Mapping, Optional

from ...core.exceptions import AuthenticationError, IdentityGatewayError, ProviderError

logger = logging.getLogger(__name__)

# Codes that mean "challenge rejected" during an authentication step. They are
# collapsed into one AuthenticationError so callers cannot tell an unknown
# user from a wrong password or a wrong code.
REJECTION_CODES = frozenset({
    "NotAuthorizedException",
    "UserNotFoundException",
    "UserNotConfirmedException",
    "PasswordResetRequiredException",
    "CodeMismatchException",
    "ExpiredCodeException",
})


def extract_error_code(error: Any) -> Optional[str]:
    """Find the provider's classification code on an error of any shape.

    Handles botocore ``ClientError`` (``response["Error"]["Code"]``),
    objects exposing ``code`` or ``name``, and plain mappings.
    """
    response = getattr(error, "response", None)
    if isinstance(response, Mapping):
        code = response.get("Error", {}).get("Code")
        if code:
            return code

    if isinstance(error, Mapping):
        for key in ("code", "name", "__type"):
            value = error.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    for attr in ("code", "name"):
        value = getattr(error, attr, None)
        if isinstance(value, str) and value:
            return value

    if isinstance(error, BaseException):
        return type(error).__name__
    return None


def extract_error_message(error: Any) -> str:
    """Human-readable provider message, for logs only."""
    response = getattr(error, "response", None)
    if isinstance(response, Mapping):
        message = response.get("Error", {}).get("Message")
        if message:
            return message
    if isinstance(error, Mapping):
        return str(error.get("message", error))
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


def classify_provider_error(
    error: Any,
    operation: str,
    *,
    authentication_stage: Optional[str] = None,
) -> IdentityGatewayError:
    """Classify a provider error into the gateway taxonomy.

    Args:
        error: Whatever the provider handed to its failure callback
        operation: Gateway operation name, for context
        authentication_stage: ``primary`` or ``mfa`` when the call was an
            authentication challenge; rejection codes then become
            AuthenticationError

    Returns:
        The classified exception (not raised)
    """
    if isinstance(error, IdentityGatewayError):
        return error

    code = extract_error_code(error)

    if authentication_stage and code in REJECTION_CODES:
        logger.info(f"Authentication rejected during {operation} (stage={authentication_stage})")
        logger.debug(f"Rejection code during {operation}: {code}")
        rejected = AuthenticationError.rejected(operation=operation, stage=authentication_stage)
        rejected.__cause__ = None
        rejected.__suppress_context__ = True
        return rejected

    message = extract_error_message(error)
    logger.warning(f"Provider error during {operation}: code={code} message={message}")
    classified = ProviderError(
        operation=operation,
        provider_code=code,
        context={"provider_message": message},
    )
    if isinstance(error, BaseException):
        classified.__cause__ = error
    return classified
