"""Cognito user handle: per-user operations over the boto3 client."""

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from botocore.exceptions import ClientError
from jose import jwt
from jose.exceptions import JWTError

from ....config.logging_config import mask_identifier
from ....core.protocols import NodeCallback, ProviderCallbacks
from ....core.value_objects import Credentials, MfaSettings, UserAttribute
from .session_storage import SessionRecord

if TYPE_CHECKING:
    from .user_pool import CognitoUserPool

logger = logging.getLogger(__name__)

# Refresh a little before the access token actually expires
EXPIRY_LEEWAY_SECONDS = 30

_CHALLENGE_CODE_KEYS = {
    "SMS_MFA": "SMS_MFA_CODE",
    "SOFTWARE_TOKEN_MFA": "SOFTWARE_TOKEN_MFA_CODE",
}


@dataclass
class CognitoSession:
    """Tokens of an established Cognito session."""

    access_token: str = field(repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    id_token: Optional[str] = field(default=None, repr=False)
    expires_in: Optional[int] = None


def _client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def _mfa_settings(settings: Optional[MfaSettings]) -> Optional[Dict[str, bool]]:
    if settings is None:
        return None
    return {"Enabled": settings.enabled, "PreferredMfa": settings.preferred}


def access_token_expired(access_token: str, now: Optional[float] = None) -> bool:
    """Check the ``exp`` claim of an access token without verifying it.

    Tokens whose claims cannot be read are treated as valid; the provider
    rejects them if they are not.
    """
    try:
        claims = jwt.get_unverified_claims(access_token)
    except JWTError:
        return False
    expires_at = claims.get("exp")
    if expires_at is None:
        return False
    current = time.time() if now is None else now
    return float(expires_at) <= current + EXPIRY_LEEWAY_SECONDS


class CognitoUser:
    """Handle for one user of a Cognito user pool.

    Session tokens (and the remembered device key) live in the pool's
    session storage under ``<client_id>:<username>``, so a fresh handle for
    the same user sees the session established by an earlier one.
    """

    def __init__(self, pool: "CognitoUserPool", username: str):
        self._pool = pool
        self._username = username

    @property
    def username(self) -> str:
        return self._username

    @property
    def _client(self) -> Any:
        return self._pool.client

    @property
    def _storage_key(self) -> str:
        return f"{self._pool.client_id}:{self._username}"

    # Session bookkeeping

    def _load_session(self) -> Optional[SessionRecord]:
        return self._pool.storage.get(self._storage_key)

    def _store_session(self, record: SessionRecord) -> None:
        self._pool.storage.set(self._storage_key, record)

    def _clear_session(self) -> None:
        self._pool.storage.delete(self._storage_key)

    def _with_secret_hash(self, parameters: Dict[str, Any], key: str = "SECRET_HASH") -> Dict[str, Any]:
        secret_hash = self._pool.secret_hash(self._username)
        if secret_hash:
            parameters[key] = secret_hash
        return parameters

    def _access_token(self, operation: str) -> str:
        """Return a usable access token, refreshing it when expired.

        Raises:
            ClientError: NotAuthorizedException when no session exists
        """
        record = self._load_session()
        if not record or not record.get("access_token"):
            raise _client_error("NotAuthorizedException", "User is not authenticated", operation)

        if access_token_expired(record["access_token"]):
            if not record.get("refresh_token"):
                self._clear_session()
                raise _client_error("NotAuthorizedException", "Access token has expired", operation)
            record = self._refresh(record)
        return record["access_token"]

    def _refresh(self, record: SessionRecord) -> SessionRecord:
        logger.debug(f"Refreshing session for {mask_identifier(self._username)}")
        parameters = self._with_secret_hash({"REFRESH_TOKEN": record["refresh_token"]})
        if record.get("device_key"):
            parameters["DEVICE_KEY"] = record["device_key"]
        response = self._client.initiate_auth(
            ClientId=self._pool.client_id,
            AuthFlow="REFRESH_TOKEN_AUTH",
            AuthParameters=parameters,
        )
        result = response["AuthenticationResult"]
        refreshed = dict(record)
        refreshed["access_token"] = result["AccessToken"]
        refreshed["id_token"] = result.get("IdToken", record.get("id_token"))
        # Cognito returns no new refresh token on this flow
        refreshed["refresh_token"] = result.get("RefreshToken", record["refresh_token"])
        self._store_session(refreshed)
        return refreshed

    def _device_key(self, operation: str) -> str:
        record = self._load_session() or {}
        device_key = record.get("device_key")
        if not device_key:
            raise _client_error(
                "InvalidParameterException",
                "No device is associated with the current session",
                operation,
            )
        return device_key

    def _run(
        self,
        operation: str,
        call: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Any], None],
    ) -> None:
        self._pool.dispatch(operation, call, on_success, on_failure)

    def _run_node(self, operation: str, call: Callable[[], Any], callback: NodeCallback) -> None:
        self._run(operation, call, lambda result: callback(None, result), callback)

    # Authentication

    def _complete_authentication(self, response: Dict[str, Any], callbacks: ProviderCallbacks) -> None:
        challenge_name = response.get("ChallengeName")
        if challenge_name:
            parameters = response.get("ChallengeParameters") or {}
            session = response.get("Session")
            if challenge_name == "SMS_MFA" and callbacks.mfa_required is not None:
                callbacks.mfa_required(challenge_name, parameters, session)
            elif challenge_name == "SOFTWARE_TOKEN_MFA" and callbacks.totp_required is not None:
                callbacks.totp_required(challenge_name, parameters, session)
            else:
                callbacks.on_failure(
                    _client_error(
                        "UnsupportedChallenge",
                        f"Challenge {challenge_name} is not supported",
                        "InitiateAuth",
                    )
                )
            return

        result = response["AuthenticationResult"]
        record: SessionRecord = {
            "access_token": result["AccessToken"],
            "refresh_token": result.get("RefreshToken"),
            "id_token": result.get("IdToken"),
        }
        previous = self._load_session() or {}
        if previous.get("device_key"):
            record["device_key"] = previous["device_key"]

        device = result.get("NewDeviceMetadata")
        if device:
            record["device_key"] = device["DeviceKey"]
            record["device_group_key"] = device.get("DeviceGroupKey")
            self._confirm_device(result["AccessToken"], device["DeviceKey"])

        self._store_session(record)
        logger.info(f"Cognito session established for {mask_identifier(self._username)}")
        callbacks.on_success(
            CognitoSession(
                access_token=record["access_token"],
                refresh_token=record["refresh_token"],
                id_token=record["id_token"],
                expires_in=result.get("ExpiresIn"),
            )
        )

    def _confirm_device(self, access_token: str, device_key: str) -> None:
        try:
            self._client.confirm_device(
                AccessToken=access_token,
                DeviceKey=device_key,
                DeviceName=self._pool.device_name,
            )
        except ClientError as e:
            # The session itself is valid; device tracking stays unconfirmed
            logger.warning(f"Device confirmation failed: {e.response['Error'].get('Code')}")

    def authenticate_user(self, credentials: Credentials, callbacks: ProviderCallbacks) -> None:
        parameters = self._with_secret_hash(
            {"USERNAME": credentials.username, "PASSWORD": credentials.password}
        )

        def call() -> Dict[str, Any]:
            return self._client.initiate_auth(
                ClientId=self._pool.client_id,
                AuthFlow="USER_PASSWORD_AUTH",
                AuthParameters=parameters,
            )

        self._run(
            "authenticate_user",
            call,
            lambda response: self._complete_authentication(response, callbacks),
            callbacks.on_failure,
        )

    def send_mfa_code(
        self,
        code: str,
        challenge_name: str,
        session: Optional[str],
        callbacks: ProviderCallbacks,
    ) -> None:
        responses = self._with_secret_hash(
            {"USERNAME": self._username, _CHALLENGE_CODE_KEYS.get(challenge_name, "SMS_MFA_CODE"): code}
        )
        params: Dict[str, Any] = {
            "ClientId": self._pool.client_id,
            "ChallengeName": challenge_name,
            "ChallengeResponses": responses,
        }
        if session:
            params["Session"] = session

        self._run(
            "send_mfa_code",
            lambda: self._client.respond_to_auth_challenge(**params),
            lambda response: self._complete_authentication(response, callbacks),
            callbacks.on_failure,
        )

    # Registration

    def confirm_registration(
        self, confirmation_code: str, force_alias_creation: bool, callback: NodeCallback
    ) -> None:
        params = self._with_secret_hash(
            {
                "ClientId": self._pool.client_id,
                "Username": self._username,
                "ConfirmationCode": confirmation_code,
                "ForceAliasCreation": force_alias_creation,
            },
            key="SecretHash",
        )

        def call() -> str:
            self._client.confirm_sign_up(**params)
            return "SUCCESS"

        self._run_node("confirm_registration", call, callback)

    def resend_confirmation_code(self, callback: NodeCallback) -> None:
        params = self._with_secret_hash(
            {"ClientId": self._pool.client_id, "Username": self._username}, key="SecretHash"
        )
        self._run_node(
            "resend_confirmation_code",
            lambda: self._client.resend_confirmation_code(**params),
            callback,
        )

    # Passwords

    def forgot_password(self, callbacks: ProviderCallbacks) -> None:
        params = self._with_secret_hash(
            {"ClientId": self._pool.client_id, "Username": self._username}, key="SecretHash"
        )

        def on_success(response: Dict[str, Any]) -> None:
            if callbacks.input_verification_code is not None:
                callbacks.input_verification_code(response)
            else:
                callbacks.on_success(response)

        self._run(
            "forgot_password",
            lambda: self._client.forgot_password(**params),
            on_success,
            callbacks.on_failure,
        )

    def confirm_password(
        self, confirmation_code: str, new_password: str, callbacks: ProviderCallbacks
    ) -> None:
        params = self._with_secret_hash(
            {
                "ClientId": self._pool.client_id,
                "Username": self._username,
                "ConfirmationCode": confirmation_code,
                "Password": new_password,
            },
            key="SecretHash",
        )

        def call() -> str:
            self._client.confirm_forgot_password(**params)
            return "SUCCESS"

        self._run("confirm_password", call, callbacks.on_success, callbacks.on_failure)

    def change_password(self, old_password: str, new_password: str, callback: NodeCallback) -> None:
        def call() -> str:
            self._client.change_password(
                PreviousPassword=old_password,
                ProposedPassword=new_password,
                AccessToken=self._access_token("ChangePassword"),
            )
            return "SUCCESS"

        self._run_node("change_password", call, callback)

    # Sessions

    def sign_out(self, callback: Callable[[], None]) -> None:
        """Forget the local session, revoking its refresh token when possible."""

        def revoke() -> None:
            record = self._load_session()
            self._clear_session()
            if not record or not record.get("refresh_token"):
                return
            params: Dict[str, Any] = {
                "Token": record["refresh_token"],
                "ClientId": self._pool.client_id,
            }
            if self._pool.pool_config.client_secret:
                params["ClientSecret"] = self._pool.pool_config.client_secret
            self._client.revoke_token(**params)

        def on_failure(error: Any) -> None:
            logger.warning(f"Refresh token revocation failed for {mask_identifier(self._username)}")
            callback()

        self._run("sign_out", revoke, lambda _: callback(), on_failure)

    def global_sign_out(self, callbacks: ProviderCallbacks) -> None:
        def call() -> str:
            self._client.global_sign_out(AccessToken=self._access_token("GlobalSignOut"))
            self._clear_session()
            return "SUCCESS"

        self._run("global_sign_out", call, callbacks.on_success, callbacks.on_failure)

    # User data and MFA

    def get_user_data(self, callback: NodeCallback) -> None:
        self._run_node(
            "get_user_data",
            lambda: self._client.get_user(AccessToken=self._access_token("GetUser")),
            callback,
        )

    def set_user_mfa_preference(
        self,
        sms_settings: Optional[MfaSettings],
        totp_settings: Optional[MfaSettings],
        callback: NodeCallback,
    ) -> None:
        def call() -> str:
            params: Dict[str, Any] = {"AccessToken": self._access_token("SetUserMFAPreference")}
            if sms_settings is not None:
                params["SMSMfaSettings"] = _mfa_settings(sms_settings)
            if totp_settings is not None:
                params["SoftwareTokenMfaSettings"] = _mfa_settings(totp_settings)
            self._client.set_user_mfa_preference(**params)
            return "SUCCESS"

        self._run_node("set_user_mfa_preference", call, callback)

    # Devices

    def get_device(self, callbacks: ProviderCallbacks) -> None:
        def call() -> Dict[str, Any]:
            return self._client.get_device(
                AccessToken=self._access_token("GetDevice"),
                DeviceKey=self._device_key("GetDevice"),
            )

        self._run("get_device", call, callbacks.on_success, callbacks.on_failure)

    def list_devices(
        self, limit: int, pagination_token: Optional[str], callbacks: ProviderCallbacks
    ) -> None:
        def call() -> Dict[str, Any]:
            params: Dict[str, Any] = {
                "AccessToken": self._access_token("ListDevices"),
                "Limit": limit,
            }
            if pagination_token:
                params["PaginationToken"] = pagination_token
            return self._client.list_devices(**params)

        self._run("list_devices", call, callbacks.on_success, callbacks.on_failure)

    def _update_device_status(self, status: str, callbacks: ProviderCallbacks) -> None:
        def call() -> str:
            self._client.update_device_status(
                AccessToken=self._access_token("UpdateDeviceStatus"),
                DeviceKey=self._device_key("UpdateDeviceStatus"),
                DeviceRememberedStatus=status,
            )
            return "SUCCESS"

        self._run(f"update_device_status:{status}", call, callbacks.on_success, callbacks.on_failure)

    def set_device_status_remembered(self, callbacks: ProviderCallbacks) -> None:
        self._update_device_status("remembered", callbacks)

    def set_device_status_not_remembered(self, callbacks: ProviderCallbacks) -> None:
        self._update_device_status("not_remembered", callbacks)

    def forget_device(self, callbacks: ProviderCallbacks) -> None:
        def call() -> str:
            self._client.forget_device(
                AccessToken=self._access_token("ForgetDevice"),
                DeviceKey=self._device_key("ForgetDevice"),
            )
            record = self._load_session()
            if record:
                record.pop("device_key", None)
                record.pop("device_group_key", None)
                self._store_session(record)
            return "SUCCESS"

        self._run("forget_device", call, callbacks.on_success, callbacks.on_failure)

    # Account and attributes

    def delete_user(self, callback: NodeCallback) -> None:
        def call() -> str:
            self._client.delete_user(AccessToken=self._access_token("DeleteUser"))
            self._clear_session()
            return "SUCCESS"

        self._run_node("delete_user", call, callback)

    def get_user_attributes(self, callback: NodeCallback) -> None:
        def call() -> List[Dict[str, Any]]:
            response = self._client.get_user(AccessToken=self._access_token("GetUser"))
            return response.get("UserAttributes", [])

        self._run_node("get_user_attributes", call, callback)

    def update_attributes(self, attributes: List[UserAttribute], callback: NodeCallback) -> None:
        def call() -> Dict[str, Any]:
            return self._client.update_user_attributes(
                UserAttributes=[attribute.to_provider() for attribute in attributes],
                AccessToken=self._access_token("UpdateUserAttributes"),
            )

        self._run(
            "update_attributes",
            call,
            lambda response: callback(None, "SUCCESS", response),
            callback,
        )

    def delete_attributes(self, attribute_names: Sequence[str], callback: NodeCallback) -> None:
        def call() -> str:
            self._client.delete_user_attributes(
                UserAttributeNames=list(attribute_names),
                AccessToken=self._access_token("DeleteUserAttributes"),
            )
            return "SUCCESS"

        self._run_node("delete_attributes", call, callback)
