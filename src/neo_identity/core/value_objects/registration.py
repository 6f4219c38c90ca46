"""Registration result value object."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .challenges import CodeDeliveryDetails


@dataclass(frozen=True)
class RegistrationResult:
    """A newly registered user as reported by the provider."""

    username: str
    user_confirmed: bool = False
    user_sub: Optional[str] = None
    code_delivery: Optional[CodeDeliveryDetails] = None

    @classmethod
    def from_provider(cls, username: str, payload: Mapping[str, Any]) -> "RegistrationResult":
        delivery = payload.get("CodeDeliveryDetails")
        return cls(
            username=username,
            user_confirmed=bool(payload.get("UserConfirmed", False)),
            user_sub=payload.get("UserSub"),
            code_delivery=CodeDeliveryDetails.from_provider(delivery) if delivery else None,
        )
