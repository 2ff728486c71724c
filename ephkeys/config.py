"""Ephemeral key settings and logging configuration."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_CONTEXT: dict[str, str] = {"environment": "development", "service": "ephkeys"}


class ManagerSettings(BaseModel):
    """Key manager refresh settings."""

    buffer_seconds: int = Field(default=30, ge=0)


class IssuerSettings(BaseModel):
    """HTTP key issuer settings."""

    base_url: str = "http://localhost:8000"
    endpoint: str = "/ephemeral_keys"
    api_version: str = "2017-06-05"
    timeout_seconds: float = Field(default=5.0, gt=0)
    api_key: SecretStr | None = None

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Ensure the issuer URL uses a supported scheme."""
        if not value.startswith(("http://", "https://")):
            raise ValueError("issuer.base_url must start with 'http://' or 'https://'.")
        return value.rstrip("/")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, value: str) -> str:
        """Ensure the endpoint is an absolute path."""
        if not value.startswith("/"):
            raise ValueError("issuer.endpoint must start with '/'.")
        return value


class LoggingSettings(BaseModel):
    """Structured logging settings."""

    environment: Literal["development", "staging", "production"] = "development"
    service: str = "ephkeys"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class Settings(BaseSettings):
    """Root settings loaded from ``EPHKEYS_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EPHKEYS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    manager: ManagerSettings = Field(default_factory=ManagerSettings)
    issuer: IssuerSettings = Field(default_factory=IssuerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _standard_log_fields(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Inject required structured logging fields."""
    event_dict.setdefault("environment", _LOG_CONTEXT["environment"])
    event_dict.setdefault("service", _LOG_CONTEXT["service"])
    event_dict.setdefault("timestamp", datetime.now(UTC).isoformat())
    return event_dict


def configure_structlog(settings: Settings) -> None:
    """Configure structlog for JSON output with required fields."""
    _LOG_CONTEXT["environment"] = settings.logging.environment
    _LOG_CONTEXT["service"] = settings.logging.service

    log_level = getattr(logging, settings.logging.log_level, logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            _standard_log_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Load and cache settings from environment variables."""
    return Settings()
