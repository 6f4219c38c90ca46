"""Authentication states, MFA challenges and code delivery details."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .tokens import TokenPair


class AuthenticationState(str, Enum):
    """States of the authentication flow."""
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    MFA_CHALLENGE = "mfa_challenge"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class ChallengeName(str, Enum):
    """Secondary challenges the gateway can answer."""
    SMS_MFA = "SMS_MFA"
    SOFTWARE_TOKEN_MFA = "SOFTWARE_TOKEN_MFA"


@dataclass(frozen=True)
class MfaChallenge:
    """A pending secondary challenge issued by the provider.

    ``session`` is the provider's opaque continuation string. It is handed
    to the caller so the challenge can be answered from a later call without
    the gateway keeping any state.
    """

    challenge_name: ChallengeName
    session: Optional[str] = field(default=None, repr=False)
    username: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=dict)

    @property
    def destination(self) -> Optional[str]:
        """Masked delivery destination for SMS codes, when provided."""
        return self.parameters.get("CODE_DELIVERY_DESTINATION")


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of an authentication attempt that was not rejected."""

    state: AuthenticationState
    tokens: Optional[TokenPair] = None
    challenge: Optional[MfaChallenge] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthenticationState.AUTHENTICATED

    @property
    def requires_mfa(self) -> bool:
        return self.state == AuthenticationState.MFA_CHALLENGE


@dataclass(frozen=True)
class CodeDeliveryDetails:
    """Where the provider sent a verification code."""

    destination: Optional[str] = None
    delivery_medium: Optional[str] = None
    attribute_name: Optional[str] = None

    @classmethod
    def from_provider(cls, payload: Optional[Mapping[str, Any]]) -> "CodeDeliveryDetails":
        """Build from a provider payload, wrapped or bare."""
        if not payload:
            return cls()
        details = payload.get("CodeDeliveryDetails", payload)
        return cls(
            destination=details.get("Destination"),
            delivery_medium=details.get("DeliveryMedium"),
            attribute_name=details.get("AttributeName"),
        )
