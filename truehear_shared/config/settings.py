"""
Environment configuration for the truehear-shared SDK.

Only SDK-level needs live here: AES key material for the shared
EncryptionService, the deployment environment, and logger options.
Backend- or service-specific configuration (databases, APIs) does not
belong in this module.

Values are read from the process environment and an optional `.env`
file in the working directory. Validation happens when `get_settings()`
is first called, never at import time, so importing the SDK is always
safe. Missing AES key material is a valid state ("encryption not yet
configured"); malformed key material is a ConfigurationError.

Usage:
    from truehear_shared.config import get_settings

    settings = get_settings()
    if settings.encryption_configured:
        ...
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from truehear_shared.lib.exceptions import ConfigurationError

AES_SECRET_KEY_PATTERN = re.compile(r"^[a-fA-F0-9]{64}$")
AES_IV_PATTERN = re.compile(r"^[a-fA-F0-9]{32}$")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # =========================
    # Encryption
    # =========================
    aes_secret_key: str | None = Field(
        default=None,
        description="Hex-encoded 256-bit key for AES-256-CBC encryption",
    )
    aes_iv: str | None = Field(
        default=None,
        description="Hex-encoded 128-bit IV for AES-256-CBC encryption",
    )

    # =========================
    # Environment
    # =========================
    environment: Literal["development", "test", "staging", "production"] = "development"

    # =========================
    # Logging
    # =========================
    log_level: LogLevel = "INFO"
    service_name: str = "truehear-service"
    log_redact_keys: Annotated[list[str], NoDecode] = Field(default_factory=list)
    log_file_path: str | None = None

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def is_staging(self) -> bool:
        return self.environment == "staging"

    @property
    def encryption_configured(self) -> bool:
        return bool(self.aes_secret_key and self.aes_iv)

    # ============================================================
    # Validators
    # ============================================================

    @field_validator("aes_secret_key", "aes_iv", "log_file_path", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("aes_secret_key")
    @classmethod
    def _validate_aes_secret_key(cls, value: str | None) -> str | None:
        if value is not None and not AES_SECRET_KEY_PATTERN.match(value):
            raise ValueError("AES_SECRET_KEY must be a 64-character hex string (32 bytes)")
        return value

    @field_validator("aes_iv")
    @classmethod
    def _validate_aes_iv(cls, value: str | None) -> str | None:
        if value is not None and not AES_IV_PATTERN.match(value):
            raise ValueError("AES_IV must be a 32-character hex string (16 bytes)")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        if isinstance(value, str):
            value = value.strip().upper()
            if value == "WARN":
                return "WARNING"
        return value

    @field_validator("log_redact_keys", mode="before")
    @classmethod
    def _parse_redact_keys(cls, value: str | list[str] | None) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            raw_items = [item.strip() for item in value.split(",")]
            return [item for item in raw_items if item]
        return value


def _format_validation_error(exc: ValidationError) -> str:
    problems = [
        f"  {'.'.join(str(part) for part in error['loc']).upper()}: {error['msg']}"
        for error in exc.errors()
    ]
    return "\n".join(
        [
            "Missing or invalid environment variables for truehear-shared SDK.",
            "Ensure your `.env` file includes valid values:",
            "  AES_SECRET_KEY=<64 hex characters>",
            "  AES_IV=<32 hex characters>",
            "Problems:",
            *problems,
        ]
    )


@lru_cache()
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e
