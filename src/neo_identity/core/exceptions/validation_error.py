"""Input validation failure with every violated field."""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .base import IdentityGatewayError


@dataclass(frozen=True)
class FieldViolation:
    """A single violated constraint on one request field."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(IdentityGatewayError):
    """Raised when a request violates one or more declared constraints.

    Always raised before any provider call is made. Carries one violation per
    failed rule so callers see every problem at once, not just the first.
    """

    def __init__(
        self,
        violations: Iterable[FieldViolation],
        message: Optional[str] = None,
    ) -> None:
        self.violations: List[FieldViolation] = list(violations)
        super().__init__(
            message or "Request validation failed",
            error_code="validation_failed",
            details={
                "violations": [
                    {"field": v.field, "message": v.message} for v in self.violations
                ]
            },
        )

    @property
    def fields(self) -> List[str]:
        """Names of the violated fields, in order, without duplicates."""
        seen: List[str] = []
        for violation in self.violations:
            if violation.field not in seen:
                seen.append(violation.field)
        return seen

    def messages_for(self, field: str) -> List[str]:
        """Messages reported for one field."""
        return [v.message for v in self.violations if v.field == field]

    def __str__(self) -> str:
        return f"{self.message}: " + "; ".join(str(v) for v in self.violations)
