"""Authentication state machine and authentication commands."""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ...config.logging_config import mask_identifier
from ...core.exceptions import FieldViolation, ProviderError, ValidationError
from ...core.protocols import UserHandle
from ...core.value_objects import (
    AuthenticationResult,
    AuthenticationState,
    ChallengeName,
    Credentials,
    MfaChallenge,
    TokenPair,
)
from ...infrastructure.adapters import ChallengeResponseAdapter
from ...infrastructure.factories import IdentitySessionFactory
from ..requests import AuthenticateUserRequest, RespondToMfaChallengeRequest
from ..validators import rules

logger = logging.getLogger(__name__)

ChallengeHandler = Callable[[MfaChallenge], Union[str, Awaitable[str]]]

_TRANSITIONS = {
    AuthenticationState.IDLE: {AuthenticationState.AUTHENTICATING},
    AuthenticationState.AUTHENTICATING: {
        AuthenticationState.MFA_CHALLENGE,
        AuthenticationState.AUTHENTICATED,
        AuthenticationState.FAILED,
    },
    AuthenticationState.MFA_CHALLENGE: {AuthenticationState.AUTHENTICATING},
    AuthenticationState.AUTHENTICATED: set(),
    AuthenticationState.FAILED: set(),
}


class AuthenticationFlow:
    """One authentication attempt on one session handle.

    States: IDLE -> AUTHENTICATING -> {MFA_CHALLENGE | AUTHENTICATED | FAILED};
    from MFA_CHALLENGE a code moves the flow back to AUTHENTICATING. The flow
    lives for a single operation and is never shared.
    """

    def __init__(
        self,
        handle: UserHandle,
        adapter: ChallengeResponseAdapter,
        operation: str = "authenticate",
    ):
        self._handle = handle
        self._adapter = adapter
        self.operation = operation
        self.state = AuthenticationState.IDLE
        self.challenge: Optional[MfaChallenge] = None
        self.tokens: Optional[TokenPair] = None

    @classmethod
    def resume(
        cls,
        handle: UserHandle,
        adapter: ChallengeResponseAdapter,
        challenge: MfaChallenge,
        operation: str = "respond_to_mfa_challenge",
    ) -> "AuthenticationFlow":
        """Rebuild a flow waiting on a challenge issued by an earlier call."""
        flow = cls(handle, adapter, operation)
        flow.state = AuthenticationState.MFA_CHALLENGE
        flow.challenge = challenge
        return flow

    def _transition(self, new_state: AuthenticationState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid authentication transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state

    def _tokens(self, session: Any, *_: Any) -> TokenPair:
        return TokenPair.from_session(session)

    def _challenge(self, challenge_name: str, parameters: Dict[str, Any], session: Optional[str]) -> MfaChallenge:
        try:
            name = ChallengeName(challenge_name)
        except ValueError:
            raise ProviderError(
                "Unsupported authentication challenge",
                operation=self.operation,
                provider_code=challenge_name,
            )
        return MfaChallenge(
            challenge_name=name,
            session=session,
            username=self._handle.username,
            parameters=dict(parameters),
        )

    async def start(self, credentials: Credentials) -> AuthenticationResult:
        """Issue the primary credential challenge.

        Raises:
            AuthenticationError: If the credentials are rejected
            ProviderError: For any other provider failure
        """
        self._transition(AuthenticationState.AUTHENTICATING)
        return await self._settle(
            self._adapter.call_authentication(
                self.operation,
                self._handle.authenticate_user,
                credentials,
                stage="primary",
                transform=self._tokens,
                challenge_transform=self._challenge,
            )
        )

    async def respond(self, code: str) -> AuthenticationResult:
        """Answer the pending secondary challenge with a one-time code.

        Raises:
            RuntimeError: If no challenge is pending
            AuthenticationError: If the code is rejected
        """
        if self.state != AuthenticationState.MFA_CHALLENGE or self.challenge is None:
            raise RuntimeError(f"No MFA challenge pending (state={self.state.value})")

        challenge = self.challenge
        self._transition(AuthenticationState.AUTHENTICATING)
        return await self._settle(
            self._adapter.call_authentication(
                self.operation,
                self._handle.send_mfa_code,
                code,
                challenge.challenge_name.value,
                challenge.session,
                stage="mfa",
                transform=self._tokens,
                challenge_transform=self._challenge,
            )
        )

    async def _settle(self, outcome: Awaitable[Any]) -> AuthenticationResult:
        try:
            value = await outcome
        except Exception:
            self._transition(AuthenticationState.FAILED)
            raise

        if isinstance(value, MfaChallenge):
            self._transition(AuthenticationState.MFA_CHALLENGE)
            self.challenge = value
            logger.info(
                f"{value.challenge_name.value} challenge issued for "
                f"{mask_identifier(self._handle.username)}"
            )
            return AuthenticationResult(state=self.state, challenge=value)

        self._transition(AuthenticationState.AUTHENTICATED)
        self.challenge = None
        self.tokens = value
        return AuthenticationResult(state=self.state, tokens=value)


async def answer_challenges(
    flow: AuthenticationFlow,
    challenge_handler: ChallengeHandler,
) -> AuthenticationResult:
    """Ask the handler for codes until the flow leaves MFA_CHALLENGE.

    The handler may be a plain function or a coroutine function.

    Raises:
        ValidationError: If the handler returns a malformed code
        AuthenticationError: If a code is rejected
    """
    result = AuthenticationResult(state=flow.state, challenge=flow.challenge)
    while flow.state == AuthenticationState.MFA_CHALLENGE:
        code = challenge_handler(flow.challenge)
        if inspect.isawaitable(code):
            code = await code

        messages = rules.confirmation_code(code)
        if messages:
            raise ValidationError(FieldViolation(field="code", message=m) for m in messages)

        result = await flow.respond(code)
    return result


class AuthenticateUser:
    """Command to authenticate a user following maximum separation principle.

    Handles ONLY the primary challenge and, when a handler is supplied, the
    secondary MFA challenge. Does not validate input or keep any state
    between calls.
    """

    def __init__(self, session_factory: IdentitySessionFactory, adapter: ChallengeResponseAdapter):
        self._session_factory = session_factory
        self._adapter = adapter

    async def execute(
        self,
        request: AuthenticateUserRequest,
        challenge_handler: Optional[ChallengeHandler] = None,
    ) -> AuthenticationResult:
        """Execute authentication.

        Args:
            request: Validated authentication request
            challenge_handler: Optional callable returning the one-time code
                for an MFA challenge; without it a pending challenge is
                returned for ``respond_to_mfa_challenge``

        Returns:
            AUTHENTICATED result with tokens, or MFA_CHALLENGE result

        Raises:
            AuthenticationError: Credentials or code rejected (no detail
                about which, and no difference for unknown users)
            ProviderError: Any other provider failure
        """
        logger.info(f"Authenticating user {mask_identifier(request.email)}")

        handle = self._session_factory.handle_for(request.email)
        flow = AuthenticationFlow(handle, self._adapter, operation="authenticate")
        result = await flow.start(Credentials(username=request.email, password=request.password))

        if result.requires_mfa and challenge_handler is not None:
            result = await answer_challenges(flow, challenge_handler)

        if result.is_authenticated:
            logger.info(f"User {mask_identifier(request.email)} authenticated")
        return result


class RespondToMfaChallenge:
    """Command answering an MFA challenge issued by an earlier authenticate call."""

    def __init__(self, session_factory: IdentitySessionFactory, adapter: ChallengeResponseAdapter):
        self._session_factory = session_factory
        self._adapter = adapter

    async def execute(self, request: RespondToMfaChallengeRequest) -> AuthenticationResult:
        handle = self._session_factory.handle_for(request.email)
        challenge = MfaChallenge(
            challenge_name=ChallengeName(request.challenge_name),
            session=request.session,
            username=request.email,
        )
        flow = AuthenticationFlow.resume(handle, self._adapter, challenge)
        result = await flow.respond(request.code)

        if result.is_authenticated:
            logger.info(f"User {mask_identifier(request.email)} passed MFA challenge")
        return result
