"""Identity provider protocol contracts.

The provider delivers every outcome through callbacks, never through return
values. Two shapes are used:

* node-style callables invoked as ``callback(error, *results)`` where a
  non-``None`` error means failure;
* a ``ProviderCallbacks`` bundle with ``on_success`` / ``on_failure`` and,
  for interactive operations, optional intermediate hooks.

Callbacks may be invoked from any thread. Implementations are expected to
invoke exactly one terminal callback per call but consumers must not rely
on it.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from ..value_objects import Credentials, MfaSettings, UserAttribute

NodeCallback = Callable[..., None]
ChallengeCallback = Callable[[str, Dict[str, Any], Optional[str]], None]


@dataclass
class ProviderCallbacks:
    """Callback bundle for object-style provider operations.

    ``mfa_required`` / ``totp_required`` receive
    ``(challenge_name, challenge_parameters, session)``.
    ``input_verification_code`` receives the code delivery payload of a
    credential-recovery request.
    """

    on_success: Callable[..., None]
    on_failure: Callable[[Any], None]
    mfa_required: Optional[ChallengeCallback] = None
    totp_required: Optional[ChallengeCallback] = None
    input_verification_code: Optional[Callable[[Any], None]] = None


@runtime_checkable
class ProviderSession(Protocol):
    """Tokens of an established provider session."""

    access_token: str
    refresh_token: Optional[str]
    id_token: Optional[str]


@runtime_checkable
class UserHandle(Protocol):
    """Provider-side handle for one user within one pool.

    Created fresh per gateway operation. Operations that need an established
    session (devices, attributes, MFA preferences, sign-out) rely on the
    provider's own session context for this user.
    """

    @property
    def username(self) -> str:
        ...

    def confirm_registration(
        self, confirmation_code: str, force_alias_creation: bool, callback: NodeCallback
    ) -> None:
        ...

    def resend_confirmation_code(self, callback: NodeCallback) -> None:
        ...

    def authenticate_user(self, credentials: Credentials, callbacks: ProviderCallbacks) -> None:
        """Primary challenge; ``on_success`` receives a ProviderSession."""
        ...

    def send_mfa_code(
        self,
        code: str,
        challenge_name: str,
        session: Optional[str],
        callbacks: ProviderCallbacks,
    ) -> None:
        """Answer a secondary challenge; ``on_success`` receives a ProviderSession."""
        ...

    def get_user_data(self, callback: NodeCallback) -> None:
        ...

    def forgot_password(self, callbacks: ProviderCallbacks) -> None:
        ...

    def confirm_password(
        self, confirmation_code: str, new_password: str, callbacks: ProviderCallbacks
    ) -> None:
        ...

    def change_password(
        self, old_password: str, new_password: str, callback: NodeCallback
    ) -> None:
        ...

    def sign_out(self, callback: Callable[[], None]) -> None:
        ...

    def global_sign_out(self, callbacks: ProviderCallbacks) -> None:
        ...

    def set_user_mfa_preference(
        self,
        sms_settings: Optional[MfaSettings],
        totp_settings: Optional[MfaSettings],
        callback: NodeCallback,
    ) -> None:
        ...

    def get_device(self, callbacks: ProviderCallbacks) -> None:
        ...

    def list_devices(
        self, limit: int, pagination_token: Optional[str], callbacks: ProviderCallbacks
    ) -> None:
        ...

    def set_device_status_remembered(self, callbacks: ProviderCallbacks) -> None:
        ...

    def set_device_status_not_remembered(self, callbacks: ProviderCallbacks) -> None:
        ...

    def forget_device(self, callbacks: ProviderCallbacks) -> None:
        ...

    def delete_user(self, callback: NodeCallback) -> None:
        ...

    def get_user_attributes(self, callback: NodeCallback) -> None:
        ...

    def update_attributes(self, attributes: List[UserAttribute], callback: NodeCallback) -> None:
        """Node-style callback invoked as ``callback(error, result, details)``."""
        ...

    def delete_attributes(self, attribute_names: Sequence[str], callback: NodeCallback) -> None:
        ...


@runtime_checkable
class UserPool(Protocol):
    """Provider user pool bound to one app client."""

    @property
    def user_pool_id(self) -> str:
        ...

    @property
    def client_id(self) -> str:
        ...

    def sign_up(
        self,
        username: str,
        password: str,
        user_attributes: List[UserAttribute],
        validation_data: Optional[List[UserAttribute]],
        callback: NodeCallback,
    ) -> None:
        """Node-style callback; the result is the provider sign-up response
        (``UserConfirmed``, ``UserSub``, ``CodeDeliveryDetails``)."""
        ...

    def user(self, username: str) -> UserHandle:
        """Create a fresh handle for one user."""
        ...
