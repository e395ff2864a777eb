"""Unit tests for the application settings and their grouped views."""

import pytest
from pydantic import ValidationError

from booktalks_buddy.server.core.config import Settings, SubscriptionConfig


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "AUTH_JWT_SECRET",
        "ROLE_ENFORCEMENT_ENABLED",
        "CLUB_JOIN_LIMIT",
        "CORS_ORIGINS",
        "SUBSCRIPTION_VALIDATION_TIMEOUT_MS",
        "SUBSCRIPTION_CACHE_TTL_SECONDS",
        "SUBSCRIPTION_CACHE_MAX_SIZE",
        "ENTITLEMENTS_CACHE_MAX_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./booktalks.db"
        assert settings.auth.jwt_algorithm == "HS256"
        assert settings.auth.jwt_audience == "authenticated"
        assert settings.entitlements.club_create_limit == 3
        assert settings.entitlements.club_join_limit == 5
        assert settings.entitlements.role_enforcement_enabled is False
        assert settings.subscription.validation_timeout_ms == 5000

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("AUTH_JWT_SECRET", "s3cret")
        clean_env.setenv("ROLE_ENFORCEMENT_ENABLED", "true")
        clean_env.setenv("CLUB_JOIN_LIMIT", "8")
        clean_env.setenv("CORS_ORIGINS", '["https://books.example.com"]')

        settings = Settings(_env_file=None)

        assert settings.auth.jwt_secret == "s3cret"
        assert settings.entitlements.role_enforcement_enabled is True
        assert settings.entitlements.club_join_limit == 8
        assert settings.cors.origins == ["https://books.example.com"]

    @pytest.mark.parametrize(
        "name,value",
        [
            ("SUBSCRIPTION_VALIDATION_TIMEOUT_MS", "20000"),
            ("SUBSCRIPTION_CACHE_TTL_SECONDS", "10"),
            ("SUBSCRIPTION_CACHE_MAX_SIZE", "0"),
            ("ENTITLEMENTS_CACHE_MAX_SIZE", "0"),
        ],
    )
    def test_out_of_range_values_fail_at_load(self, clean_env, name, value):
        clean_env.setenv(name, value)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_cache_sizes_are_grouped(self, clean_env):
        clean_env.setenv("ENTITLEMENTS_CACHE_MAX_SIZE", "500")

        settings = Settings(_env_file=None)

        assert settings.entitlements.cache_max_size == 500
        assert settings.subscription.cache_max_size == 10000


def test_subscription_cache_ttl_minimum():
    with pytest.raises(ValidationError):
        SubscriptionConfig(cache_ttl_seconds=10)
