"""
Unit Tests for Configuration
=============================

Tests for bridge/app/config.py
"""

import pytest
from pydantic import ValidationError

from bridge.app.config import DEFAULT_CASTAI_API_BASE, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of the settings under test"""
    for name in ("HOST", "PORT", "CASTAI_API_BASE", "OPENAPI_SPEC_PATH", "ALLOWED_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.PORT == 3000
    assert settings.CASTAI_API_BASE == DEFAULT_CASTAI_API_BASE == "https://api.cast.ai"
    assert settings.OPENAPI_SPEC_PATH == "openapi-spec.yaml"
    assert settings.allowed_origins_list == ["*"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8081")
    monkeypatch.setenv("CASTAI_API_BASE", "https://api.eu.cast.ai/")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8081
    assert settings.CASTAI_API_BASE == "https://api.eu.cast.ai"
    assert settings.LOG_LEVEL == "DEBUG"


def test_rejects_non_http_base():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, CASTAI_API_BASE="ftp://api.cast.ai")


def test_rejects_unknown_log_level():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="LOUD")


def test_rejects_out_of_range_port():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, PORT=70000)


def test_settings_are_immutable():
    settings = Settings(_env_file=None)

    with pytest.raises(ValidationError):
        settings.PORT = 4000


def test_allowed_origins_list_parsing():
    settings = Settings(
        _env_file=None,
        ALLOWED_ORIGINS=" http://localhost:5173, https://agent.example.com ,,"
    )

    assert settings.allowed_origins_list == [
        "http://localhost:5173",
        "https://agent.example.com",
    ]
