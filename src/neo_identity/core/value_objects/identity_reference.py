"""Pool configuration and identity reference value objects."""

import re
from dataclasses import dataclass, field
from typing import Optional

_POOL_ID_PATTERN = re.compile(r"^(?P<region>[a-z]{2}(-[a-z]+)+-\d+)_[A-Za-z0-9]+$")


@dataclass(frozen=True)
class PoolConfig:
    """Identifiers of the provider user pool and app client.

    Built once at startup from settings and passed by reference into the
    session factory. Immutable thereafter.
    """

    user_pool_id: str
    client_id: str
    client_secret: Optional[str] = field(default=None, repr=False)
    region: Optional[str] = None
    endpoint_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.region is None and self.user_pool_id:
            match = _POOL_ID_PATTERN.match(self.user_pool_id)
            if match:
                object.__setattr__(self, "region", match.group("region"))

    @property
    def is_complete(self) -> bool:
        """Check that both required identifiers are present."""
        return bool(self.user_pool_id) and bool(self.client_id)

    @property
    def missing_fields(self) -> list:
        """Names of required identifiers that are absent."""
        missing = []
        if not self.user_pool_id:
            missing.append("user_pool_id")
        if not self.client_id:
            missing.append("client_id")
        return missing


@dataclass(frozen=True)
class IdentityReference:
    """An email identifier bound to one pool configuration.

    Used to derive a session handle; never persisted.
    """

    email: str
    pool: PoolConfig

    @property
    def username(self) -> str:
        """Provider username (the email address)."""
        return self.email


@dataclass(frozen=True)
class Credentials:
    """Username and password for a single authentication attempt."""

    username: str
    password: str = field(repr=False)
