"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

The mail relay credentials are mandatory. ``load_settings`` turns a missing
or invalid value into a ``ConfigurationError`` so the process can stop before
binding the listener.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None

# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_FRONTEND_URL = "https://portfolio-mi4lu9x1m-abhishekroshans-projects.vercel.app"


class MailSettings(BaseSettings):
    """Mail relay configuration.

    ``email``, ``password`` and ``receiver_email`` have no defaults and are
    read from ``EMAIL``, ``PASSWORD`` and ``RECEIVER_EMAIL``.
    """

    email: str = Field(
        ...,
        min_length=1,
        description="SMTP login, also used as the sender address",
    )
    password: str = Field(
        ...,
        min_length=1,
        description="SMTP credential for the sender account",
    )
    receiver_email: str = Field(
        ...,
        min_length=1,
        description="Address that receives contact form submissions",
    )
    sender_name: str = Field(
        "Portfolio Contact",
        description="Display label used in the From header",
    )
    anonymous_reply_to: str = Field(
        "anonymous@portfolio.com",
        description="Reply-To address used when the submitter gave no email",
    )
    smtp_host: str = Field(
        "smtp.gmail.com",
        description="SMTP relay hostname",
    )
    smtp_port: int = Field(
        465,
        description="SMTP relay port",
        ge=1,
        le=65535,
    )
    smtp_use_tls: bool = Field(
        True,
        description="Connect with implicit TLS (SMTPS, usually port 465)",
    )
    smtp_start_tls: bool = Field(
        False,
        description="Upgrade a plain connection with STARTTLS (usually port 587)",
    )
    smtp_timeout_seconds: float = Field(
        20.0,
        description="Upper bound for a single send, in seconds",
        gt=0,
    )
    smtp_verify_on_startup: bool = Field(
        True,
        description="Log in to the relay once at startup and log the result",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    @field_validator("smtp_start_tls")
    @classmethod
    def _single_tls_mode(cls, value: bool, info: ValidationInfo) -> bool:
        # smtp_use_tls is declared first, so it is already in info.data
        if value and info.data.get("smtp_use_tls"):
            raise ValueError("SMTP_USE_TLS and SMTP_START_TLS cannot both be enabled")
        return value


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    node_env: str | None = Field(
        None,
        description="Runtime environment name; 'development' exposes error details",
    )
    frontend_url: str = Field(
        DEFAULT_FRONTEND_URL,
        description="Only origin allowed to call the API cross-origin",
    )
    bind_host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP listener binds to",
    )
    port: int = Field(
        8000,
        description="HTTP listen port",
        ge=1,
        le=65535,
    )
    max_body_bytes: int = Field(
        100 * 1024,
        description="Maximum accepted request body size in bytes",
        ge=1,
    )

    rate_limit_requests: int = Field(
        5,
        description="Maximum number of submissions allowed per window (per client)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        15 * 60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_max_clients: int = Field(
        10000,
        description="Maximum number of client windows kept in memory",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    @field_validator("frontend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        # Browsers send the Origin header without a trailing slash
        return value.rstrip("/")

    @property
    def environment(self) -> str:
        return self.node_env or "development"

    @property
    def expose_error_details(self) -> bool:
        """Whether transport error details may be returned to clients."""
        return self.node_env == "development"


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate the log file at this size (0 disables)")
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseModel):
    """Main application settings container.

    Sections are built by ``load_settings`` so that a problem in any of them
    surfaces as a single ConfigurationError.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    mail: MailSettings
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)


def _describe_validation_error(exc: ValidationError) -> list[str]:
    """Return the environment variable names behind a settings ValidationError."""

    names: list[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        name = str(loc[0]).upper() if loc else "UNKNOWN"
        if name not in names:
            names.append(name)
    return names


def load_settings() -> Settings:
    """Build settings from the environment.

    Returns:
        Fully populated Settings.

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid.
    """

    try:
        mail = MailSettings()  # type: ignore[call-arg]
        app = AppSettings()
        log = LogSettings()
    except ValidationError as exc:
        variables = _describe_validation_error(exc)
        raise ConfigurationError(
            code="invalid_configuration",
            message=(
                "Missing or invalid required environment variable(s): "
                + ", ".join(variables)
            ),
            details={"variables": variables},
        ) from exc

    return Settings(mail=mail, app=app, log=log)


# Global settings instance - composed from domain-specific settings
settings = load_settings()
