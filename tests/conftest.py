"""
Shared test fixtures for truehear-shared.

This module provides common fixtures used across all test modules:
- Environment isolation (no AES/LOG variables leak in from the host)
- Deterministic AES key material
- EncryptionService built from the test key
- Settings factory that ignores any `.env` file
- Logging state restoration (root handlers, structlog configuration)

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

import logging

import pytest
import structlog

from truehear_shared.config.settings import Settings, get_settings
from truehear_shared.lib.encryption import EncryptionService
from truehear_shared.lib.encryption_factory import reset_encryption_service

# Deterministic keys for reproducible tests. NEVER use these in production.
SECRET_KEY = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"  # 64 hex chars
IV = "abcdef9876543210abcdef9876543210"  # 32 hex chars

ENV_VARS = (
    "AES_SECRET_KEY",
    "AES_IV",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "SERVICE_NAME",
    "LOG_REDACT_KEYS",
    "LOG_FILE_PATH",
)


# ---------------------------------------------------------------------------
# 1. Environment isolation -- every test starts unconfigured
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Remove SDK variables from the environment, run from an empty directory
    so no `.env` is picked up, and clear cached settings and the shared
    EncryptionService before and after each test.
    """
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    get_settings.cache_clear()
    reset_encryption_service()

    yield

    get_settings.cache_clear()
    reset_encryption_service()


# ---------------------------------------------------------------------------
# 2. Logging state -- setup_logging() mutates global state
# ---------------------------------------------------------------------------

@pytest.fixture()
def restore_logging():
    """Drop handlers installed by setup_logging() and restore root level and structlog defaults."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level

    yield

    installed = [
        handler
        for handler in root.handlers
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
    ]
    if installed:
        for handler in installed:
            root.removeHandler(handler)
            handler.close()
        for handler in handlers:
            if handler not in root.handlers:
                root.addHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# 3. Key material and services
# ---------------------------------------------------------------------------

@pytest.fixture()
def secret_key() -> str:
    return SECRET_KEY


@pytest.fixture()
def iv() -> str:
    return IV


@pytest.fixture()
def encryption_service() -> EncryptionService:
    """Provide an ``EncryptionService`` initialised with the fixed test key/IV."""
    return EncryptionService(secret_key=SECRET_KEY, iv=IV)


@pytest.fixture()
def make_settings():
    """
    Build ``Settings`` without reading a `.env` file.

    Example usage in a test::

        def test_something(make_settings):
            settings = make_settings(aes_secret_key=SECRET_KEY, aes_iv=IV)
    """

    def factory(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return factory
