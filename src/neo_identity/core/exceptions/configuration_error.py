"""Missing or invalid process-wide configuration."""

from typing import Iterable, Optional

from .base import IdentityGatewayError


class ConfigurationError(IdentityGatewayError):
    """Raised when required configuration is absent.

    Fatal: surfaced immediately at startup (or factory construction) and
    never retried.
    """

    def __init__(
        self,
        message: str = "Identity provider configuration is incomplete",
        *,
        missing: Optional[Iterable[str]] = None,
    ) -> None:
        self.missing = list(missing or [])
        super().__init__(
            message,
            error_code="configuration_error",
            details={"missing": self.missing},
        )
