"""Identity gateway request records.

Plain data records accepted by every public operation. They carry only
primitive and structured values, never provider types. Records are checked
by the validation pipeline before anything reaches the provider.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.value_objects import ChallengeName


@dataclass(frozen=True)
class BaseRequest:
    """Base request identifying a user by email."""

    email: str


@dataclass(frozen=True)
class RegisterUserRequest(BaseRequest):
    """Register a new user; each extra attribute becomes a provider attribute."""

    password: str = field(repr=False)
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RegisterUserRequest":
        """Split a flat payload into credentials and extra attributes."""
        extra = {key: value for key, value in payload.items() if key not in ("email", "password")}
        return cls(
            email=payload.get("email"),
            password=payload.get("password"),
            attributes=extra,
        )


@dataclass(frozen=True)
class ConfirmRegistrationRequest(BaseRequest):
    confirmation_code: str
    force_alias_creation: bool = True


@dataclass(frozen=True)
class ResendConfirmationRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class AuthenticateUserRequest(BaseRequest):
    password: str = field(repr=False)


@dataclass(frozen=True)
class RespondToMfaChallengeRequest(BaseRequest):
    """Answer a pending MFA challenge returned by ``authenticate``."""

    code: str = field(repr=False)
    session: str = field(repr=False)
    challenge_name: str = ChallengeName.SOFTWARE_TOKEN_MFA.value


@dataclass(frozen=True)
class GetUserDataRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class ForgotPasswordRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class ConfirmPasswordRequest(BaseRequest):
    confirmation_code: str
    new_password: str = field(repr=False)


@dataclass(frozen=True)
class ChangePasswordRequest(BaseRequest):
    current_password: str = field(repr=False)
    new_password: str = field(repr=False)


@dataclass(frozen=True)
class SignOutRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class GlobalSignOutRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class SetUserMfaPreferenceRequest(BaseRequest):
    type: str


@dataclass(frozen=True)
class DisableMfaRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class GetDeviceRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class ListDevicesRequest(BaseRequest):
    limit: int
    pagination_token: Optional[str] = None


@dataclass(frozen=True)
class SetDeviceStatusRememberedRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class SetDeviceStatusNotRememberedRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class ForgetDeviceRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class DeleteUserRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class GetUserAttributesRequest(BaseRequest):
    pass


@dataclass(frozen=True)
class UpdateAttributesRequest(BaseRequest):
    attributes: Mapping[str, Any]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UpdateAttributesRequest":
        """Every key other than ``email`` is an attribute to update."""
        return cls(
            email=payload.get("email"),
            attributes={key: value for key, value in payload.items() if key != "email"},
        )


@dataclass(frozen=True)
class DeleteAttributesRequest(BaseRequest):
    attribute_list: Sequence[str]
