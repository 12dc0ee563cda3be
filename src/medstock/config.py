"""Runtime tunables for the medstock core.

Infrastructure (databases, brokers, event store) is configured through the
Protean ``domain.toml`` of a deployment. The values here cover the ledger and
analytics behaviour and are read from the environment once.
"""

import os
from dataclasses import dataclass

_settings_instance = None


def _env_float(name, default):
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else default


def _env_int(name, default):
    value = os.environ.get(name)
    return int(value) if value not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    lock_timeout: float = 5.0
    usage_window_days: int = 30
    high_usage_monthly_units: int = 100
    predictive_horizon_days: int = 14
    query_page_size: int = 500

    @classmethod
    def from_env(cls):
        return cls(
            lock_timeout=_env_float("MEDSTOCK_LOCK_TIMEOUT", cls.lock_timeout),
            usage_window_days=_env_int("MEDSTOCK_USAGE_WINDOW_DAYS", cls.usage_window_days),
            high_usage_monthly_units=_env_int("MEDSTOCK_HIGH_USAGE_MONTHLY_UNITS", cls.high_usage_monthly_units),
            predictive_horizon_days=_env_int("MEDSTOCK_PREDICTIVE_HORIZON_DAYS", cls.predictive_horizon_days),
            query_page_size=_env_int("MEDSTOCK_QUERY_PAGE_SIZE", cls.query_page_size),
        )


def get_settings():
    """Return the process-wide settings (singleton), read from the environment on first use."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings.from_env()
    return _settings_instance


def reset_settings():
    """Forget the cached settings so the next call re-reads the environment (useful for testing)."""
    global _settings_instance
    _settings_instance = None
