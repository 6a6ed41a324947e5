"""Client configuration.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Pydantic-settings supports overriding the env file in tests via
`PyrusSettings(_env_file=path_to_env)`.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pyrus_client.transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from pyrus_client.webhook import DEFAULT_EVENT_BUFFER_SIZE


class PyrusSettings(BaseSettings):
    """Settings for the API client and the webhook server.

    Environment variables:
    - PYRUS_LOGIN
    - PYRUS_SECURITY_KEY
    - PYRUS_BASE_URL          (optional)
    - PYRUS_TIMEOUT_SECONDS   (optional)
    - PYRUS_EVENT_BUFFER_SIZE (optional)
    - PYRUS_WEBHOOK_PATH      (optional)
    - LOG_LEVEL               (optional)
    """

    login: str = Field(
        default="",
        validation_alias="PYRUS_LOGIN",
        description="Login (email) of the bot or user the client acts as",
    )
    security_key: str = Field(
        default="",
        validation_alias="PYRUS_SECURITY_KEY",
        description="Security key used for authentication and webhook signatures",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias="PYRUS_BASE_URL",
        description="Pyrus API base URL, including the version segment",
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        validation_alias="PYRUS_TIMEOUT_SECONDS",
        description="Timeout applied to every HTTP call",
    )
    event_buffer_size: int = Field(
        default=DEFAULT_EVENT_BUFFER_SIZE,
        ge=1,
        validation_alias="PYRUS_EVENT_BUFFER_SIZE",
        description="Capacity of the webhook event queue",
    )
    webhook_path: str = Field(
        default="/webhook",
        validation_alias="PYRUS_WEBHOOK_PATH",
        description="Route the webhook server listens on",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_credentials(self) -> PyrusSettings:
        if not self.login.strip():
            raise ValueError("PYRUS_LOGIN is required")
        if not self.security_key.strip():
            raise ValueError("PYRUS_SECURITY_KEY is required")
        if not self.webhook_path.startswith("/"):
            self.webhook_path = "/" + self.webhook_path
        return self
