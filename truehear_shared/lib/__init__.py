"""
Lib package for the truehear-shared SDK.

Contains shared utilities:
- encryption.py: AES-256-CBC encryption and SHA-256 hashing
- encryption_factory.py: Lazy, resettable shared EncryptionService
- exceptions.py: SDK exception hierarchy
- logging.py: structlog configuration and contextual loggers
"""

from truehear_shared.lib.encryption import EncryptionService
from truehear_shared.lib.encryption_factory import (
    EncryptionServiceProvider,
    LazyEncryptionService,
    encryption_service,
    get_default_provider,
    get_encryption_service,
    init_encryption_service,
    is_encryption_service_ready,
    reset_encryption_service,
)
from truehear_shared.lib.exceptions import (
    ConfigurationError,
    DecryptionError,
    EncryptionError,
    HashingError,
    NotInitializedError,
    TruehearSharedError,
)
from truehear_shared.lib.logging import create_logger, get_logger, setup_logging

__all__ = [
    # Encryption
    "EncryptionService",
    "EncryptionServiceProvider",
    "LazyEncryptionService",
    "encryption_service",
    "get_default_provider",
    "get_encryption_service",
    "init_encryption_service",
    "is_encryption_service_ready",
    "reset_encryption_service",
    # Exceptions
    "TruehearSharedError",
    "ConfigurationError",
    "EncryptionError",
    "DecryptionError",
    "HashingError",
    "NotInitializedError",
    # Logging
    "setup_logging",
    "get_logger",
    "create_logger",
]
