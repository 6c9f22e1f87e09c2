"""
truehear-shared SDK.

Provides:
- Centralized configuration and environment validation
- Shared services (AES-256-CBC encryption, SHA-256 hashing)
- Structured logging for unified diagnostics

Safe to import in any service, producer or consumer: nothing here reads
or validates the environment until it is actually needed.
"""

# lib must load before config: settings imports lib.exceptions
from truehear_shared.lib import (
    ConfigurationError,
    DecryptionError,
    EncryptionError,
    EncryptionService,
    EncryptionServiceProvider,
    HashingError,
    LazyEncryptionService,
    NotInitializedError,
    TruehearSharedError,
    create_logger,
    encryption_service,
    get_default_provider,
    get_encryption_service,
    get_logger,
    init_encryption_service,
    is_encryption_service_ready,
    reset_encryption_service,
    setup_logging,
)
from truehear_shared.config import Settings, get_settings  # noqa: I001

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "create_logger",
    "TruehearSharedError",
    "ConfigurationError",
    "EncryptionError",
    "DecryptionError",
    "HashingError",
    "NotInitializedError",
    "EncryptionService",
    "EncryptionServiceProvider",
    "LazyEncryptionService",
    "encryption_service",
    "get_default_provider",
    "get_encryption_service",
    "init_encryption_service",
    "is_encryption_service_ready",
    "reset_encryption_service",
]
