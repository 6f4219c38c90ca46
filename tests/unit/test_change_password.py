"""Tests for the change-password composite command."""

import pytest

from neo_identity.application.commands import ChangePassword
from neo_identity.application.requests import ChangePasswordRequest
from neo_identity.core.exceptions import AuthenticationError, ProviderError

from tests.conftest import NEW_PASSWORD, USER_EMAIL, USER_PASSWORD
from tests.fakes import FakeProviderError


@pytest.fixture
def command(session_factory, adapter):
    return ChangePassword(session_factory, adapter)


class TestChangePassword:
    """Test re-authentication followed by password change."""

    @pytest.mark.asyncio
    async def test_changes_password_after_reauthentication(self, command, fake_pool, account):
        status = await command.execute(
            ChangePasswordRequest(email=USER_EMAIL, current_password=USER_PASSWORD, new_password=NEW_PASSWORD)
        )

        assert status == "SUCCESS"
        assert account.password == NEW_PASSWORD
        operations = [call[0] for call in fake_pool.calls]
        assert operations == ["authenticate_user", "change_password"]

    @pytest.mark.asyncio
    async def test_wrong_current_password_has_no_effect(self, command, fake_pool, account):
        with pytest.raises(AuthenticationError):
            await command.execute(
                ChangePasswordRequest(email=USER_EMAIL, current_password="Wrong!Pass1", new_password=NEW_PASSWORD)
            )

        assert account.password == USER_PASSWORD
        assert fake_pool.calls_for("change_password") == []

    @pytest.mark.asyncio
    async def test_mfa_without_handler_fails_without_change(self, command, fake_pool, mfa_account):
        with pytest.raises(AuthenticationError) as exc_info:
            await command.execute(
                ChangePasswordRequest(email=USER_EMAIL, current_password=USER_PASSWORD, new_password=NEW_PASSWORD)
            )

        assert exc_info.value.stage == "mfa"
        assert mfa_account.password == USER_PASSWORD
        assert fake_pool.calls_for("change_password") == []

    @pytest.mark.asyncio
    async def test_mfa_with_handler(self, command, mfa_account):
        status = await command.execute(
            ChangePasswordRequest(email=USER_EMAIL, current_password=USER_PASSWORD, new_password=NEW_PASSWORD),
            challenge_handler=lambda challenge: mfa_account.mfa_code,
        )

        assert status == "SUCCESS"
        assert mfa_account.password == NEW_PASSWORD

    @pytest.mark.asyncio
    async def test_change_rejected_by_provider(self, command, fake_pool, account):
        fake_pool.fail_next("change_password", FakeProviderError("InvalidPasswordException", "Password reused"))

        with pytest.raises(ProviderError) as exc_info:
            await command.execute(
                ChangePasswordRequest(email=USER_EMAIL, current_password=USER_PASSWORD, new_password=NEW_PASSWORD)
            )
        assert exc_info.value.provider_code == "InvalidPasswordException"
        assert account.password == USER_PASSWORD

    @pytest.mark.asyncio
    async def test_change_uses_reauthenticated_handle(self, command, fake_pool, account):
        await command.execute(
            ChangePasswordRequest(email=USER_EMAIL, current_password=USER_PASSWORD, new_password=NEW_PASSWORD)
        )
        assert len(fake_pool.handles) == 1
