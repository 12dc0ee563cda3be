"""Tests for environment-driven settings."""

import pytest
from medstock.config import Settings, get_settings, reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "MEDSTOCK_LOCK_TIMEOUT",
            "MEDSTOCK_USAGE_WINDOW_DAYS",
            "MEDSTOCK_HIGH_USAGE_MONTHLY_UNITS",
            "MEDSTOCK_PREDICTIVE_HORIZON_DAYS",
            "MEDSTOCK_QUERY_PAGE_SIZE",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()
        assert settings == Settings()
        assert settings.high_usage_monthly_units == 100
        assert settings.predictive_horizon_days == 14

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MEDSTOCK_LOCK_TIMEOUT", "0.5")
        monkeypatch.setenv("MEDSTOCK_PREDICTIVE_HORIZON_DAYS", "7")

        settings = get_settings()
        assert settings.lock_timeout == 0.5
        assert settings.predictive_horizon_days == 7

    def test_settings_are_cached(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("MEDSTOCK_USAGE_WINDOW_DAYS", "60")
        assert get_settings() is first
