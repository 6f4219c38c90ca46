"""Any other failure reported by the identity provider."""

from typing import Any, Dict, Optional

from .base import IdentityGatewayError

THROTTLE_CODES = frozenset({
    "TooManyRequestsException",
    "LimitExceededException",
    "TooManyFailedAttemptsException",
    "ThrottlingException",
})


class ProviderError(IdentityGatewayError):
    """Raised for provider-reported failures outside authentication rejection.

    Expired codes, unknown devices, throttling and transport faults all land
    here. ``provider_code`` is the provider's own classification, kept
    opaque for logging; callers should only branch on "operation failed".
    """

    def __init__(
        self,
        message: str = "Identity provider operation failed",
        *,
        operation: Optional[str] = None,
        provider_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        self.provider_code = provider_code
        self.context = context or {}
        super().__init__(
            message,
            error_code="provider_error",
            details={
                "operation": operation,
                "provider_code": provider_code,
                **self.context,
            },
        )

    @property
    def is_throttled(self) -> bool:
        """Check if the provider rejected the call for rate reasons."""
        return self.provider_code in THROTTLE_CODES

    def __str__(self) -> str:
        parts = []
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.provider_code:
            parts.append(f"code={self.provider_code}")
        if parts:
            return f"{self.message} ({', '.join(parts)})"
        return self.message
