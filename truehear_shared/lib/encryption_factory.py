"""
Lifecycle management for the shared EncryptionService.

Provides an SDK-friendly, fault-tolerant initialization model:
- Lazy initialization from environment settings (AES_SECRET_KEY / AES_IV)
- Explicit runtime configuration via `initialize()`
- Importing never fails when keys are missing; a descriptive
  NotInitializedError is raised only when encryption is actually used

The state lives in an `EncryptionServiceProvider` object that callers can
own and inject. A process-wide default provider backs the module-level
helpers (`init_encryption_service`, `get_encryption_service`, ...) and the
`encryption_service` handle.

Usage:
    from truehear_shared.lib.encryption_factory import (
        encryption_service,
        init_encryption_service,
    )

    init_encryption_service()  # optional, at startup
    ciphertext = encryption_service.encrypt("SensitiveData")
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

from truehear_shared.config.settings import Settings, get_settings
from truehear_shared.lib.encryption import EncryptionService
from truehear_shared.lib.exceptions import ConfigurationError, NotInitializedError

logger = structlog.get_logger(__name__)


class EncryptionServiceProvider:
    """
    Owns at most one active EncryptionService.

    States: uninitialized (no instance) and initialized. `initialize()`
    replaces the instance, `reset()` clears it, and `get_instance()`
    lazily builds one from settings when none exists.

    Thread-safe: every read-modify-write of the instance holds a
    re-entrant lock.

    Args:
        settings_factory: Callable returning the Settings to read key
            material from. Defaults to the cached environment settings.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = get_settings) -> None:
        self._settings_factory = settings_factory
        self._instance: EncryptionService | None = None
        self._lock = threading.RLock()

    def _configured_key_material(self) -> tuple[str | None, str | None]:
        """Read key material from settings; an invalid environment counts as missing."""
        try:
            settings = self._settings_factory()
        except ConfigurationError as e:
            logger.warning("encryption_settings_invalid", error=str(e))
            return None, None
        return settings.aes_secret_key, settings.aes_iv

    def _build_from_settings(self) -> EncryptionService | None:
        secret_key, iv = self._configured_key_material()
        if not secret_key or not iv:
            return None
        return EncryptionService(secret_key=secret_key, iv=iv)

    def initialize(self, secret_key: str | None = None, iv: str | None = None) -> None:
        """
        Initialize (or re-initialize) the shared EncryptionService.

        Overrides take precedence over settings; an override left as None
        falls back to settings, an empty string does not. If no complete key/IV
        pair can be resolved, a warning is logged and encryption stays
        disabled until initialized; nothing is raised.

        Args:
            secret_key: Optional hex-encoded key overriding AES_SECRET_KEY
            iv: Optional hex-encoded IV overriding AES_IV

        Raises:
            ConfigurationError: If the resolved key material is malformed
        """
        with self._lock:
            # Only None falls back; an explicit empty string disables encryption
            if secret_key is None or iv is None:
                configured_key, configured_iv = self._configured_key_material()
                if secret_key is None:
                    secret_key = configured_key
                if iv is None:
                    iv = configured_iv

            if not secret_key or not iv:
                logger.warning(
                    "encryption_service_not_configured",
                    detail="encryption and decryption disabled until initialized",
                )
                self._instance = None
                return

            self._instance = EncryptionService(secret_key=secret_key, iv=iv)
            logger.info("encryption_service_initialized")

    def get_instance(self) -> EncryptionService:
        """
        Get the active EncryptionService, building it from settings if needed.

        Returns:
            The configured EncryptionService

        Raises:
            NotInitializedError: If no instance exists and settings hold no
                usable key material
        """
        return self._resolve()

    def _resolve(self, operation: str | None = None) -> EncryptionService:
        with self._lock:
            if self._instance is not None:
                return self._instance

            try:
                instance = self._build_from_settings()
            except ConfigurationError as e:
                raise NotInitializedError(self._not_initialized_message(operation)) from e

            if instance is None:
                raise NotInitializedError(self._not_initialized_message(operation))

            self._instance = instance
            logger.debug("encryption_service_lazily_initialized", operation=operation)
            return instance

    @staticmethod
    def _not_initialized_message(operation: str | None) -> str:
        hint = (
            "Call initialize() / init_encryption_service() "
            "or set AES_SECRET_KEY and AES_IV in the environment."
        )
        if operation:
            return (
                f"EncryptionService accessed before initialization, "
                f'cannot call "{operation}". {hint}'
            )
        return f"EncryptionService not initialized. {hint}"

    def is_ready(self) -> bool:
        """Check whether an EncryptionService instance is currently held."""
        return self._instance is not None

    def reset(self) -> None:
        """Return to the uninitialized state. Intended for tests and reconfiguration."""
        with self._lock:
            self._instance = None
        logger.debug("encryption_service_reset")


class LazyEncryptionService:
    """
    Handle exposing the EncryptionService API on top of a provider.

    The instance is resolved on every call, so the handle can be created
    (and imported) before any key material exists. Once an instance is
    available each method behaves exactly like the same method on it.
    """

    def __init__(self, provider: EncryptionServiceProvider) -> None:
        self._provider = provider

    def encrypt(self, plaintext: str) -> str:
        return self._provider._resolve("encrypt").encrypt(plaintext)

    def decrypt(self, ciphertext: str) -> str:
        return self._provider._resolve("decrypt").decrypt(ciphertext)

    def hash(self, value: str) -> str:
        return self._provider._resolve("hash").hash(value)


# =============================================================================
# Process-wide default provider
# =============================================================================

_default_provider = EncryptionServiceProvider()

encryption_service = LazyEncryptionService(_default_provider)


def get_default_provider() -> EncryptionServiceProvider:
    """Get the process-wide provider backing the module-level helpers."""
    return _default_provider


def init_encryption_service(secret_key: str | None = None, iv: str | None = None) -> None:
    """Initialize the process-wide EncryptionService. See EncryptionServiceProvider.initialize."""
    _default_provider.initialize(secret_key=secret_key, iv=iv)


def get_encryption_service() -> EncryptionService:
    """Get the process-wide EncryptionService, lazily built from the environment."""
    return _default_provider.get_instance()


def is_encryption_service_ready() -> bool:
    return _default_provider.is_ready()


def reset_encryption_service() -> None:
    _default_provider.reset()
