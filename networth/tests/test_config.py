from __future__ import annotations

import pytest
from pydantic import ValidationError

from networth.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings()
    assert settings.default_inflation_rate == 3.5
    assert settings.default_forecast_months == 120
    assert settings.max_months == 480
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NETWORTH_DEFAULT_INFLATION_RATE", "2.25")
    monkeypatch.setenv("NETWORTH_MAX_MONTHS", "240")
    monkeypatch.setenv("NETWORTH_LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.default_inflation_rate == 2.25
    assert settings.max_months == 240
    assert settings.log_level == "DEBUG"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("NETWORTH_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings()
