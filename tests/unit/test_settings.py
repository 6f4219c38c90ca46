"""Tests for settings and service composition."""

import pytest

from neo_identity.application.services import IdentityService
from neo_identity.config import IdentitySettings, get_settings
from neo_identity.core.exceptions import ConfigurationError
from neo_identity.infrastructure.providers.cognito import MemorySessionStorage, RedisSessionStorage
from neo_identity.module import create_identity_service, create_session_storage

from tests.fakes import FakeUserPool

_ENV_VARS = (
    "COGNITO_USER_POOL_ID",
    "COGNITO_CLIENT_ID",
    "COGNITO_CLIENT_SECRET",
    "AWS_REGION",
    "COGNITO_ENDPOINT_URL",
    "SESSION_STORAGE_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestIdentitySettings:
    """Test environment-driven settings."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("COGNITO_USER_POOL_ID", "eu-central-1_AbC123")
        monkeypatch.setenv("COGNITO_CLIENT_ID", "client-123")
        monkeypatch.setenv("COGNITO_CLIENT_SECRET", "s3cr3t")

        settings = IdentitySettings(_env_file=None)
        pool_config = settings.to_pool_config()

        assert pool_config.user_pool_id == "eu-central-1_AbC123"
        assert pool_config.client_secret == "s3cr3t"
        assert pool_config.region == "eu-central-1"
        assert "s3cr3t" not in repr(settings)
        assert "s3cr3t" not in str(settings.summary())

    def test_missing_identifiers(self):
        settings = IdentitySettings(_env_file=None)

        with pytest.raises(ConfigurationError) as exc_info:
            settings.to_pool_config()
        assert exc_info.value.missing == ["cognito_user_pool_id", "cognito_client_id"]
        assert not settings.is_valid()

    def test_blank_optional_values_are_unset(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "  ")
        monkeypatch.setenv("SESSION_STORAGE_URL", "")

        settings = IdentitySettings(_env_file=None)

        assert settings.aws_region is None
        assert settings.session_storage_url is None

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestComposition:
    """Test service wiring."""

    @pytest.fixture
    def settings(self):
        return IdentitySettings(
            _env_file=None,
            cognito_user_pool_id="us-east-1_AbCdEf123",
            cognito_client_id="client-123",
        )

    def test_with_injected_pool(self, settings):
        pool = FakeUserPool()
        service = create_identity_service(settings, user_pool=pool)

        assert isinstance(service, IdentityService)

    def test_missing_configuration(self):
        with pytest.raises(ConfigurationError):
            create_identity_service(IdentitySettings(_env_file=None), user_pool=FakeUserPool())

    def test_session_storage_selection(self, settings):
        assert isinstance(create_session_storage(settings), MemorySessionStorage)

        redis_settings = settings.model_copy(update={"session_storage_url": "redis://localhost:6379/0"})
        assert isinstance(create_session_storage(redis_settings), RedisSessionStorage)
