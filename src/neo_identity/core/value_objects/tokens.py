"""Token pair value object returned by successful authentication."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jose import jwt


def _mask(token: Optional[str]) -> str:
    if not token:
        return "None"
    if len(token) <= 20:
        return "***"
    return f"{token[:8]}...{token[-8:]}"


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh tokens extracted from a provider session.

    Token values are masked in ``repr`` so a TokenPair can be logged safely.
    """

    access_token: str = field(repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    id_token: Optional[str] = field(default=None, repr=False)
    expires_in: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.access_token:
            raise ValueError("Access token cannot be empty")

    @classmethod
    def from_session(cls, session: Any) -> "TokenPair":
        """Build a token pair from a provider session object."""
        return cls(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            id_token=getattr(session, "id_token", None),
            expires_in=getattr(session, "expires_in", None),
        )

    def access_claims(self) -> Dict[str, Any]:
        """Read the access token claims without verifying the signature.

        Verification belongs to whoever consumes the token; this is only for
        display and bookkeeping (subject, expiry).
        """
        return jwt.get_unverified_claims(self.access_token)

    def __repr__(self) -> str:
        return (
            f"TokenPair(access_token='{_mask(self.access_token)}', "
            f"refresh_token='{_mask(self.refresh_token)}', expires_in={self.expires_in})"
        )
