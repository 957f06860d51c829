"""
Unit tests for Settings validation.
"""

import pytest
from pydantic import ValidationError

from orderflow.config.settings import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.unit
class TestSweepIntervalValidation:
    def test_defaults_are_valid(self):
        settings = make_settings()
        assert settings.SWEEP_INTERVAL_SECONDS <= settings.PENDING_ORDER_TTL_MINUTES * 60
        assert settings.LOW_STOCK_THRESHOLD == 10
        assert settings.PENDING_ORDER_TTL_MINUTES == 30

    def test_interval_longer_than_staleness_window_fails(self):
        with pytest.raises(ValidationError):
            make_settings(SWEEP_INTERVAL_SECONDS=86400, PENDING_ORDER_TTL_MINUTES=30)

    def test_interval_equal_to_staleness_window_is_allowed(self):
        settings = make_settings(SWEEP_INTERVAL_SECONDS=1800, PENDING_ORDER_TTL_MINUTES=30)
        assert settings.SWEEP_INTERVAL_SECONDS == 1800

    def test_non_positive_interval_fails(self):
        with pytest.raises(ValidationError):
            make_settings(SWEEP_INTERVAL_SECONDS=0)


@pytest.mark.unit
class TestOtherValidation:
    def test_negative_threshold_fails(self):
        with pytest.raises(ValidationError):
            make_settings(LOW_STOCK_THRESHOLD=-1)

    def test_unknown_log_format_fails(self):
        with pytest.raises(ValidationError):
            make_settings(LOG_FORMAT="xml")

    def test_database_url_override(self):
        settings = make_settings(DB_URL="sqlite+aiosqlite:///./dev.db")
        assert settings.async_database_url == "sqlite+aiosqlite:///./dev.db"

    def test_database_url_escapes_credentials(self):
        settings = make_settings(DB_USER="shop", DB_PASSWORD="p@ss:word", DB_HOST="db", DB_NAME="orders")
        assert settings.async_database_url == "postgresql+asyncpg://shop:p%40ss%3Aword@db:5432/orders"

    def test_redis_url(self):
        settings = make_settings(REDIS_HOST="cache", REDIS_PORT=6380, REDIS_DB=2)
        assert settings.redis_url == "redis://cache:6380/2"

    def test_environment_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("LOW_STOCK_THRESHOLD", "4")
        monkeypatch.setenv("PENDING_ORDER_TTL_MINUTES", "45")
        settings = make_settings(LOW_STOCK_THRESHOLD=2)
        assert settings.LOW_STOCK_THRESHOLD == 2
        assert settings.PENDING_ORDER_TTL_MINUTES == 45
