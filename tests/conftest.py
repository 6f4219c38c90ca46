"""Pytest configuration and fixtures for neo-identity tests."""

import pytest

from neo_identity.application.services import IdentityService
from neo_identity.core.value_objects import PoolConfig
from neo_identity.infrastructure.adapters import ChallengeResponseAdapter
from neo_identity.infrastructure.factories import IdentitySessionFactory

from tests.fakes import FakeUserPool

USER_EMAIL = "user@acme.io"
USER_PASSWORD = "Str0ng!Pass"
NEW_PASSWORD = "N3w.Secret#"


@pytest.fixture
def pool_config():
    """Pool configuration matching the fake pool."""
    return PoolConfig(user_pool_id="us-east-1_AbCdEf123", client_id="client-123")


@pytest.fixture
def fake_pool():
    """In-memory provider pool delivering callbacks synchronously."""
    return FakeUserPool()


@pytest.fixture
def threaded_pool():
    """In-memory provider pool delivering callbacks from other threads."""
    return FakeUserPool(threaded=True)


@pytest.fixture
def session_factory(pool_config, fake_pool):
    return IdentitySessionFactory(pool_config, fake_pool)


@pytest.fixture
def adapter():
    return ChallengeResponseAdapter()


@pytest.fixture
def service(session_factory, adapter):
    """Identity service backed by the synchronous fake pool."""
    return IdentityService(session_factory, adapter)


@pytest.fixture
def threaded_service(pool_config, threaded_pool):
    """Identity service backed by the threaded fake pool."""
    return IdentityService(IdentitySessionFactory(pool_config, threaded_pool))


@pytest.fixture
def account(fake_pool):
    """Confirmed account without MFA."""
    return fake_pool.add_account(USER_EMAIL, USER_PASSWORD, attributes={"email": USER_EMAIL})


@pytest.fixture
def mfa_account(fake_pool):
    """Confirmed account with TOTP as second factor."""
    return fake_pool.add_account(
        USER_EMAIL,
        USER_PASSWORD,
        attributes={"email": USER_EMAIL},
        mfa_challenge="SOFTWARE_TOKEN_MFA",
        preferred_mfa="SOFTWARE_TOKEN_MFA",
        mfa_settings=["SOFTWARE_TOKEN_MFA"],
    )


@pytest.fixture
def signed_in_account(fake_pool, account):
    """Account with an established provider session."""
    fake_pool.establish_session(account)
    return account
