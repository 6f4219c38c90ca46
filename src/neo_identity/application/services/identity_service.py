"""Identity gateway service - entry point for every identity operation."""

import logging
from typing import Any, Callable, List, Optional

from ...config.logging_config import mask_identifier
from ...core.exceptions import ProviderError
from ...core.value_objects import (
    AttributeUpdateResult,
    AuthenticationResult,
    CodeDeliveryDetails,
    DeviceDescriptor,
    DevicePage,
    MfaPreference,
    RegistrationResult,
    UserAttribute,
    UserData,
    attributes_from_mapping,
    attributes_from_provider,
    settings_for_preference,
)
from ...infrastructure.adapters import ChallengeResponseAdapter
from ...infrastructure.factories import IdentitySessionFactory
from .. import requests as rq
from ..commands import AuthenticateUser, ChallengeHandler, ChangePassword, RespondToMfaChallenge
from ..validators import RequestValidator

logger = logging.getLogger(__name__)

VerificationPrompt = Callable[[Any], Any]


def _status(result: Any = None, *_: Any) -> str:
    """Provider status string; operations without one report SUCCESS."""
    return result if isinstance(result, str) and result else "SUCCESS"


class IdentityService:
    """Identity operations gateway.

    Every public method takes a request record, validates it, builds a
    fresh provider handle and returns exactly one outcome: the value, or one
    of ValidationError, ConfigurationError, AuthenticationError,
    ProviderError. Nothing is cached between calls.
    """

    def __init__(
        self,
        session_factory: IdentitySessionFactory,
        adapter: Optional[ChallengeResponseAdapter] = None,
        validator: Optional[RequestValidator] = None,
    ):
        """Initialize identity service.

        Args:
            session_factory: Builds provider handles for the configured pool
            adapter: Callback-to-result adapter
            validator: Request validation pipeline
        """
        self._session_factory = session_factory
        self._adapter = adapter or ChallengeResponseAdapter()
        self._validator = validator or RequestValidator()

        self._authenticate_user = AuthenticateUser(session_factory, self._adapter)
        self._respond_to_mfa_challenge = RespondToMfaChallenge(session_factory, self._adapter)
        self._change_password = ChangePassword(session_factory, self._adapter)

    # Registration

    async def register(self, request: rq.RegisterUserRequest) -> RegistrationResult:
        """Register a new user; extra attributes become provider attributes."""
        self._validator.validate(request)
        logger.info(f"Registering user {mask_identifier(request.email)}")

        def to_result(payload: Any = None, *_: Any) -> RegistrationResult:
            if not payload:
                raise ProviderError("Empty sign-up response", operation="register")
            return RegistrationResult.from_provider(request.email, payload)

        return await self._adapter.call_node(
            "register",
            self._session_factory.user_pool.sign_up,
            request.email,
            request.password,
            attributes_from_mapping(request.attributes),
            None,
            transform=to_result,
        )

    async def confirm_registration(self, request: rq.ConfirmRegistrationRequest) -> str:
        """Confirm a registered, unauthenticated user with the emailed code."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "confirm_registration",
            handle.confirm_registration,
            request.confirmation_code,
            request.force_alias_creation,
            transform=_status,
        )

    async def resend_confirmation(self, request: rq.ResendConfirmationRequest) -> CodeDeliveryDetails:
        """Resend the confirmation code to an unconfirmed user."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "resend_confirmation",
            handle.resend_confirmation_code,
            transform=lambda payload=None, *_: CodeDeliveryDetails.from_provider(payload),
        )

    # Authentication

    async def authenticate(
        self,
        request: rq.AuthenticateUserRequest,
        challenge_handler: Optional[ChallengeHandler] = None,
    ) -> AuthenticationResult:
        """Authenticate with email and password.

        Args:
            request: Credentials
            challenge_handler: Optional source of MFA codes; see AuthenticateUser

        Returns:
            AUTHENTICATED result carrying the token pair, or MFA_CHALLENGE
            result carrying the challenge to answer later
        """
        self._validator.validate(request)
        return await self._authenticate_user.execute(request, challenge_handler)

    async def respond_to_mfa_challenge(
        self, request: rq.RespondToMfaChallengeRequest
    ) -> AuthenticationResult:
        """Answer a challenge returned by ``authenticate``."""
        self._validator.validate(request)
        return await self._respond_to_mfa_challenge.execute(request)

    async def get_user_data(self, request: rq.GetUserDataRequest) -> UserData:
        """Retrieve user attributes and MFA settings."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "get_user_data",
            handle.get_user_data,
            transform=lambda payload, *_: UserData.from_provider(payload),
        )

    # Passwords

    async def forgot_password(
        self,
        request: rq.ForgotPasswordRequest,
        input_verification_code: Optional[VerificationPrompt] = None,
    ) -> CodeDeliveryDetails:
        """Start the forgot-password flow for an unauthenticated user.

        Args:
            request: User to recover
            input_verification_code: Optional prompt hook, invoked
                synchronously with the provider's code delivery payload
                before the provider continues

        Returns:
            Where the verification code was sent
        """
        self._validator.validate(request)
        logger.info(f"Password recovery requested for {mask_identifier(request.email)}")
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_interactive(
            "forgot_password",
            handle.forgot_password,
            prompt_handler=input_verification_code,
            transform=lambda payload=None, *_: CodeDeliveryDetails.from_provider(payload),
        )

    async def confirm_password(self, request: rq.ConfirmPasswordRequest) -> str:
        """Set a new password using the recovery code."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_callbacks(
            "confirm_password",
            handle.confirm_password,
            request.confirmation_code,
            request.new_password,
            transform=_status,
        )

    async def change_password(
        self,
        request: rq.ChangePasswordRequest,
        challenge_handler: Optional[ChallengeHandler] = None,
    ) -> str:
        """Re-authenticate with the current password, then change it."""
        self._validator.validate(request)
        return await self._change_password.execute(request, challenge_handler)

    # Sessions

    async def sign_out(self, request: rq.SignOutRequest) -> None:
        """Sign out locally. Always resolves."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        await self._adapter.call_completion("sign_out", handle.sign_out)
        logger.info(f"User {mask_identifier(request.email)} signed out")

    async def global_sign_out(self, request: rq.GlobalSignOutRequest) -> str:
        """Invalidate every token issued to the user."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        status = await self._adapter.call_callbacks(
            "global_sign_out",
            handle.global_sign_out,
            transform=_status,
        )
        logger.info(f"User {mask_identifier(request.email)} signed out globally")
        return status

    # MFA

    async def set_user_mfa_preference(self, request: rq.SetUserMfaPreferenceRequest) -> str:
        """Prefer SMS or TOTP; the competing factor's preference is cleared."""
        self._validator.validate(request)
        sms_settings, totp_settings = settings_for_preference(MfaPreference(request.type))
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "set_user_mfa_preference",
            handle.set_user_mfa_preference,
            sms_settings,
            totp_settings,
            transform=_status,
        )

    async def disable_mfa(self, request: rq.DisableMfaRequest) -> str:
        """Disable both MFA factors."""
        self._validator.validate(request)
        sms_settings, totp_settings = settings_for_preference(MfaPreference.DISABLED)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "disable_mfa",
            handle.set_user_mfa_preference,
            sms_settings,
            totp_settings,
            transform=_status,
        )

    # Devices

    async def get_device(self, request: rq.GetDeviceRequest) -> DeviceDescriptor:
        """Describe the device of the current session."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_callbacks(
            "get_device",
            handle.get_device,
            transform=lambda payload, *_: DeviceDescriptor.from_provider(payload),
        )

    async def list_devices(self, request: rq.ListDevicesRequest) -> DevicePage:
        """List remembered devices, one page at a time."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_callbacks(
            "list_devices",
            handle.list_devices,
            request.limit,
            request.pagination_token,
            transform=lambda payload=None, *_: DevicePage.from_provider(payload),
        )

    async def set_device_status_remembered(self, request: rq.SetDeviceStatusRememberedRequest) -> str:
        """Remember the device of the current session."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_callbacks(
            "set_device_status_remembered",
            handle.set_device_status_remembered,
            transform=_status,
        )

    async def set_device_status_not_remembered(
        self, request: rq.SetDeviceStatusNotRememberedRequest
    ) -> str:
        """Stop remembering the device of the current session."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_callbacks(
            "set_device_status_not_remembered",
            handle.set_device_status_not_remembered,
            transform=_status,
        )

    async def forget_device(self, request: rq.ForgetDeviceRequest) -> str:
        """Forget the device of the current session entirely."""
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_callbacks(
            "forget_device",
            handle.forget_device,
            transform=_status,
        )

    # Account and attributes

    async def delete_user(self, request: rq.DeleteUserRequest) -> str:
        """Delete the authenticated user."""
        self._validator.validate(request)
        logger.info(f"Deleting user {mask_identifier(request.email)}")
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "delete_user",
            handle.delete_user,
            transform=_status,
        )

    async def get_user_attributes(self, request: rq.GetUserAttributesRequest) -> List[UserAttribute]:
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "get_user_attributes",
            handle.get_user_attributes,
            transform=lambda payload=None, *_: attributes_from_provider(payload),
        )

    async def update_attributes(self, request: rq.UpdateAttributesRequest) -> AttributeUpdateResult:
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)

        def to_result(result: Any = None, details: Any = None, *_: Any) -> AttributeUpdateResult:
            deliveries = (details or {}).get("CodeDeliveryDetailsList") or []
            return AttributeUpdateResult(
                status=_status(result),
                code_deliveries=[CodeDeliveryDetails.from_provider(item) for item in deliveries],
            )

        return await self._adapter.call_node(
            "update_attributes",
            handle.update_attributes,
            attributes_from_mapping(request.attributes),
            transform=to_result,
        )

    async def delete_attributes(self, request: rq.DeleteAttributesRequest) -> str:
        self._validator.validate(request)
        handle = self._session_factory.handle_for(request.email)
        return await self._adapter.call_node(
            "delete_attributes",
            handle.delete_attributes,
            list(request.attribute_list),
            transform=_status,
        )
