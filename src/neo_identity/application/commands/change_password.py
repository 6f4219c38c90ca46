"""Change password composite command."""

import logging
from typing import Optional

from ...config.logging_config import mask_identifier
from ...core.exceptions import AuthenticationError
from ...core.value_objects import Credentials
from ...infrastructure.adapters import ChallengeResponseAdapter
from ...infrastructure.factories import IdentitySessionFactory
from ..requests import ChangePasswordRequest
from .authenticate_user import AuthenticationFlow, ChallengeHandler, answer_challenges

logger = logging.getLogger(__name__)


class ChangePassword:
    """Command to change a password following maximum separation principle.

    Composite of two provider steps on the same handle: re-authentication
    with the current password, then the password change. The change is only
    dispatched once the flow is AUTHENTICATED, so a rejected current password
    (or an MFA step that cannot be completed) leaves the account untouched.
    """

    def __init__(self, session_factory: IdentitySessionFactory, adapter: ChallengeResponseAdapter):
        self._session_factory = session_factory
        self._adapter = adapter

    async def execute(
        self,
        request: ChangePasswordRequest,
        challenge_handler: Optional[ChallengeHandler] = None,
    ) -> str:
        """Execute the password change.

        Args:
            request: Validated change-password request
            challenge_handler: Supplies the MFA code if re-authentication
                raises a challenge

        Returns:
            Provider status string

        Raises:
            AuthenticationError: Re-authentication rejected or MFA required
                without a handler
            ProviderError: The change itself failed
        """
        handle = self._session_factory.handle_for(request.email)
        flow = AuthenticationFlow(handle, self._adapter, operation="change_password")

        result = await flow.start(
            Credentials(username=request.email, password=request.current_password)
        )
        if result.requires_mfa:
            if challenge_handler is None:
                logger.info(
                    f"Password change for {mask_identifier(request.email)} needs MFA, no handler given"
                )
                raise AuthenticationError.mfa_required(operation="change_password")
            result = await answer_challenges(flow, challenge_handler)

        status = await self._adapter.call_node(
            "change_password",
            handle.change_password,
            request.current_password,
            request.new_password,
            transform=lambda value=None, *_: value or "SUCCESS",
        )
        logger.info(f"Password changed for {mask_identifier(request.email)}")
        return status
