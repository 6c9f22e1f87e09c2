"""
Encryption Foundation for the truehear-shared SDK.

AES-256-CBC reversible encryption plus SHA-256 hashing for sensitive
fields (model attributes, e-mail addresses, tokens) shared between
producer and consumer services.

Key Features:
- AES-256-CBC with PKCS7 padding, hex-encoded ciphertext
- SHA-256 hashing for search/indexing without storing plaintext
- Key material supplied as hex strings (64 chars key, 32 chars IV)

Dependencies:
- cryptography (for AES-256-CBC and PKCS7 padding)

SECURITY NOTE:
    The IV is static and reused for every message under a given key.
    Identical plaintexts therefore produce identical ciphertexts, which
    leaks equality patterns. This matches the data already written by
    existing services and is kept for compatibility only. Do not use this
    class for new data formats.

Usage:
    from truehear_shared.lib.encryption import EncryptionService

    service = EncryptionService(secret_key="<64 hex chars>", iv="<32 hex chars>")
    ciphertext = service.encrypt("sensitive data")
    plaintext = service.decrypt(ciphertext)
    digest = service.hash("user@example.com")
"""

from __future__ import annotations

import hashlib
import re

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from truehear_shared.lib.exceptions import (
    ConfigurationError,
    DecryptionError,
    EncryptionError,
    HashingError,
)


HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


def _is_hex(value: object) -> bool:
    # bytes.fromhex() alone would also accept whitespace
    return isinstance(value, str) and HEX_PATTERN.fullmatch(value) is not None


def _decode_hex(value: str, name: str) -> bytes:
    if not _is_hex(value) or len(value) % 2:
        raise ConfigurationError(f"{name} must be a hex-encoded string")
    return bytes.fromhex(value)


class EncryptionService:
    """
    AES-256-CBC encryption and SHA-256 hashing bound to one key/IV pair.

    The key material is fixed at construction and never changes for the
    lifetime of the instance. Several instances with different keys may
    coexist; the shared, lazily configured instance is managed by
    `truehear_shared.lib.encryption_factory`.

    Example:
        >>> service = EncryptionService(secret_key=SECRET_KEY, iv=IV)
        >>> ciphertext = service.encrypt("SensitiveMessage123!")
        >>> service.decrypt(ciphertext)
        'SensitiveMessage123!'
    """

    ALGORITHM = "aes-256-cbc"

    KEY_SIZE = 32  # 256 bits for AES-256
    IV_SIZE = 16  # 128 bits, one AES block
    BLOCK_SIZE = 128  # PKCS7 block size in bits

    __slots__ = ("_secret_key", "_iv")

    def __init__(self, secret_key: str, iv: str) -> None:
        """
        Initialize the encryption service.

        Args:
            secret_key: Hex-encoded 256-bit key (64 hex chars)
            iv: Hex-encoded 128-bit IV (32 hex chars)

        Raises:
            ConfigurationError: If either value is missing, not hex, or
                decodes to the wrong length
        """
        if not secret_key or not iv:
            raise ConfigurationError("EncryptionService requires secret_key and iv")

        secret_key_bytes = _decode_hex(secret_key, "secret_key")
        iv_bytes = _decode_hex(iv, "iv")

        if len(secret_key_bytes) != self.KEY_SIZE:
            raise ConfigurationError(
                f"AES-256 requires a {self.KEY_SIZE}-byte secret key "
                f"({self.KEY_SIZE * 2} hex chars), got {len(secret_key_bytes)} bytes"
            )
        if len(iv_bytes) != self.IV_SIZE:
            raise ConfigurationError(
                f"AES-256-CBC requires a {self.IV_SIZE}-byte IV "
                f"({self.IV_SIZE * 2} hex chars), got {len(iv_bytes)} bytes"
            )

        object.__setattr__(self, "_secret_key", secret_key_bytes)
        object.__setattr__(self, "_iv", iv_bytes)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(algorithm={self.ALGORITHM!r})"

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._secret_key), modes.CBC(self._iv))

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext into hex ciphertext.

        Args:
            plaintext: Input string to encrypt (may be empty)

        Returns:
            Lowercase hex-encoded ciphertext

        Raises:
            EncryptionError: If the value cannot be encoded or encrypted
        """
        try:
            padder = padding.PKCS7(self.BLOCK_SIZE).padder()
            padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

            encryptor = self._cipher().encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except Exception as e:
            raise EncryptionError(f"Encryption failed: {type(e).__name__}") from e

        return ciphertext.hex()

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt hex ciphertext back to plaintext.

        Args:
            ciphertext: Hex-encoded ciphertext produced by `encrypt`

        Returns:
            UTF-8 plaintext string

        Raises:
            DecryptionError: If the input is not hex, not block aligned,
                has invalid padding, or does not decode as UTF-8
        """
        if not _is_hex(ciphertext) or len(ciphertext) % 2:
            raise DecryptionError("Decryption failed: ciphertext is not valid hex")
        data = bytes.fromhex(ciphertext)

        if not data or len(data) % (self.BLOCK_SIZE // 8):
            raise DecryptionError(
                "Decryption failed: ciphertext is not a multiple of the block size"
            )

        try:
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(data) + decryptor.finalize()

            unpadder = padding.PKCS7(self.BLOCK_SIZE).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            # Raw library text is never surfaced to callers
            raise DecryptionError("Decryption failed: invalid ciphertext") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decryption failed: plaintext is not valid UTF-8") from e

    def hash(self, value: str) -> str:
        """
        Create a SHA-256 hash of the input.

        Useful for search/indexing without storing plaintext. Independent
        of the bound key material.

        Args:
            value: Input string to hash

        Returns:
            64-character lowercase hex digest

        Raises:
            HashingError: If the value cannot be hashed
        """
        try:
            return hashlib.sha256(value.encode("utf-8")).hexdigest()
        except Exception as e:
            raise HashingError(f"Hashing failed: {type(e).__name__}") from e
