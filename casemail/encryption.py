"""
SMTP password encryption at rest.

Tokens are ``iv_hex:ciphertext_hex`` - AES-256-CBC with a random 16-byte IV
and PKCS7 padding. The key comes from ENCRYPTION_KEY (exactly 32 bytes) unless
one is passed in explicitly.
"""

import logging
import os
import re
from typing import Optional, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from . import config

logger = logging.getLogger(__name__)

IV_LENGTH = 16
KEY_LENGTH = 32
BLOCK_SIZE_BITS = algorithms.AES.block_size
SEPARATOR = ":"
_HEX_RE = re.compile(r"[0-9a-fA-F]*")


class EncryptionKeyError(ValueError):
    """Encryption key is missing or has the wrong length"""


class DecryptionError(ValueError):
    """Encrypted token could not be decoded"""


def _resolve_key(key: Optional[Union[str, bytes]] = None) -> bytes:
    if key is None:
        key = config.ENCRYPTION_KEY
    if not key:
        raise EncryptionKeyError("ENCRYPTION_KEY not configured")

    key_bytes = key.encode("utf-8") if isinstance(key, str) else key
    if len(key_bytes) != KEY_LENGTH:
        raise EncryptionKeyError(
            f"Encryption key must be {KEY_LENGTH} bytes, got {len(key_bytes)}"
        )
    return key_bytes


def encrypt(plaintext: str, key: Optional[Union[str, bytes]] = None) -> str:
    """Encrypt a string and return an ``iv_hex:ciphertext_hex`` token"""
    key_bytes = _resolve_key(key)
    iv = os.urandom(IV_LENGTH)

    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key_bytes), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return f"{iv.hex()}{SEPARATOR}{ciphertext.hex()}"


def decrypt(token: str, key: Optional[Union[str, bytes]] = None) -> str:
    """
    Decrypt a token produced by encrypt().

    Raises DecryptionError for anything that is not a valid token under this
    key, and EncryptionKeyError when the key itself is unusable.
    """
    key_bytes = _resolve_key(key)

    if not token or SEPARATOR not in token:
        raise DecryptionError("Malformed encrypted token: missing separator")

    iv_hex, ciphertext_hex = token.split(SEPARATOR, 1)
    # bytes.fromhex() would also accept whitespace between digit pairs
    if not _HEX_RE.fullmatch(iv_hex) or not _HEX_RE.fullmatch(ciphertext_hex):
        raise DecryptionError("Malformed encrypted token: invalid hex")
    try:
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(ciphertext_hex)
    except ValueError as e:
        raise DecryptionError("Malformed encrypted token: invalid hex") from e

    if len(iv) != IV_LENGTH:
        raise DecryptionError(f"Malformed encrypted token: IV must be {IV_LENGTH} bytes")
    if not ciphertext or len(ciphertext) % (BLOCK_SIZE_BITS // 8):
        raise DecryptionError("Malformed encrypted token: bad ciphertext length")

    decryptor = Cipher(algorithms.AES(key_bytes), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    try:
        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return plaintext.decode("utf-8")
    except ValueError as e:
        # Bad padding or non-UTF-8 output: wrong key or corrupted token
        logger.warning("Failed to decrypt token (wrong key or corrupted data)")
        raise DecryptionError("Could not decrypt token") from e
