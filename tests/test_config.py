"""Unit tests for core/config.py -- Settings and ClientSettings.

Covers:
- DEBUG=true without SECRET_KEY generates a long random key
- production mode without SECRET_KEY refuses to start
- short keys are rejected in both modes
- defaults: 24h token lifetime, bcrypt cost 10
- ClientSettings reads SESSIONGATE_* variables and needs no server secret
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import ClientSettings, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("DEBUG", "SECRET_KEY", "TOKEN_EXPIRE_SECONDS", "BCRYPT_ROUNDS", "SESSIONGATE_API_URL"):
        monkeypatch.delenv(var, raising=False)
    # Keep a developer's .env out of the picture.
    monkeypatch.chdir(tmp_path)


def test_debug_mode_generates_key(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    settings = Settings()
    assert len(settings.secret_key) >= 32


def test_production_requires_key() -> None:
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings()


def test_short_key_rejected(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("SECRET_KEY", "too-short")
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings()


def test_explicit_key_and_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SECRET_KEY", "k" * 40)
    settings = Settings()
    assert settings.secret_key == "k" * 40
    assert settings.token_expire_seconds == 86400
    assert settings.bcrypt_rounds == 10


def test_bcrypt_rounds_bounds(monkeypatch) -> None:
    monkeypatch.setenv("SECRET_KEY", "k" * 40)
    monkeypatch.setenv("BCRYPT_ROUNDS", "3")
    with pytest.raises(ValidationError):
        Settings()


def test_client_settings_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SESSIONGATE_API_URL", "http://api.internal:8080")
    monkeypatch.setenv("SESSIONGATE_STATE_PATH", str(tmp_path / "s.json"))
    settings = ClientSettings()
    assert settings.api_url == "http://api.internal:8080"
    assert settings.state_path == Path(tmp_path / "s.json")
