"""
Exception hierarchy for the truehear-shared SDK.

Provides structured exception types for the SDK subsystems:
- Configuration (environment settings, key material)
- Encryption, decryption and hashing
- Encryption service lifecycle

All exceptions inherit from TruehearSharedError, enabling a
catch-all for SDK errors while keeping the ability to catch
specific error types.
"""

from __future__ import annotations


class TruehearSharedError(Exception):
    """Base exception for all truehear-shared errors."""


class ConfigurationError(TruehearSharedError):
    """Missing or malformed key material, or invalid environment settings."""


class EncryptionError(TruehearSharedError):
    """Encryption of a plaintext value failed."""


class DecryptionError(TruehearSharedError):
    """Ciphertext could not be decrypted (not hex, not block aligned, bad padding, not UTF-8)."""


class HashingError(TruehearSharedError):
    """Hashing of a value failed."""


class NotInitializedError(TruehearSharedError):
    """The shared encryption service was used before any key material was available."""
