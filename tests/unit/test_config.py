"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pyrus_client.core.config import PyrusSettings

_ENV_VARS = (
    "PYRUS_LOGIN",
    "PYRUS_SECURITY_KEY",
    "PYRUS_BASE_URL",
    "PYRUS_TIMEOUT_SECONDS",
    "PYRUS_EVENT_BUFFER_SIZE",
    "PYRUS_WEBHOOK_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "PYRUS_LOGIN=bot@example.com",
                "PYRUS_SECURITY_KEY=secret",
                "PYRUS_EVENT_BUFFER_SIZE=5",
                "LOG_LEVEL=DEBUG",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = PyrusSettings()

    assert settings.login == "bot@example.com"
    assert settings.security_key == "secret"
    assert settings.event_buffer_size == 5
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYRUS_LOGIN", "bot@example.com")
    monkeypatch.setenv("PYRUS_SECURITY_KEY", "secret")

    settings = PyrusSettings()

    assert settings.base_url == "https://api.pyrus.com/v4"
    assert settings.timeout_seconds == 60
    assert settings.event_buffer_size == 100
    assert settings.webhook_path == "/webhook"
    assert settings.log_level == "INFO"


def test_environment_overrides_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text(
        "PYRUS_LOGIN=file@example.com\nPYRUS_SECURITY_KEY=file-key\n", encoding="utf-8"
    )
    monkeypatch.setenv("PYRUS_LOGIN", "env@example.com")

    settings = PyrusSettings()

    assert settings.login == "env@example.com"
    assert settings.security_key == "file-key"


@pytest.mark.parametrize(
    "env",
    [
        {"PYRUS_SECURITY_KEY": "secret"},
        {"PYRUS_LOGIN": "bot@example.com"},
        {"PYRUS_LOGIN": "bot@example.com", "PYRUS_SECURITY_KEY": "   "},
    ],
)
def test_missing_credentials_are_rejected(
    env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    for name, value in env.items():
        monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        PyrusSettings()


def test_event_buffer_size_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYRUS_LOGIN", "bot@example.com")
    monkeypatch.setenv("PYRUS_SECURITY_KEY", "secret")
    monkeypatch.setenv("PYRUS_EVENT_BUFFER_SIZE", "0")

    with pytest.raises(ValidationError):
        PyrusSettings()
