"""Authentication rejection without enumeration detail."""

from typing import Optional

from .base import IdentityGatewayError


class AuthenticationError(IdentityGatewayError):
    """Raised when a primary or MFA challenge is rejected.

    The caller-visible message and code are identical for unknown users,
    wrong passwords and wrong codes. ``stage`` only tells which step of the
    flow was rejected (``primary`` or ``mfa``). The provider's own error is
    not chained; its code is only logged at debug level.
    """

    def __init__(
        self,
        message: str = "Authentication rejected",
        *,
        stage: str = "primary",
        operation: Optional[str] = None,
    ) -> None:
        self.stage = stage
        self.operation = operation
        super().__init__(
            message,
            error_code="authentication_rejected",
            details={"stage": stage, "operation": operation},
        )

    @classmethod
    def rejected(cls, operation: Optional[str] = None, stage: str = "primary") -> "AuthenticationError":
        """Create the generic rejection error."""
        return cls(stage=stage, operation=operation)

    @classmethod
    def mfa_required(cls, operation: Optional[str] = None) -> "AuthenticationError":
        """Create error for a flow that cannot complete a required MFA step."""
        return cls(
            "Additional verification required",
            stage="mfa",
            operation=operation,
        )
