"""
API Key Encryption

AES-256-CBC encryption for third-party API keys stored at rest, plus
masking for display.

Format: hex(IV):hex(ciphertext), with a fresh random 16-byte IV per call.
The key comes from API_KEY_ENCRYPTION_KEY and must be exactly 64 hex
characters (32 bytes).
"""
import os
import re

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .config import Config

IV_LENGTH = 16          # AES block size in bytes
MASK_PREFIX_LENGTH = 4
MASK_SUFFIX_LENGTH = 4
MASK_MIN_LENGTH = 8

_KEY_PATTERN = re.compile(r"^[a-f0-9]{64}$", re.IGNORECASE)


def get_encryption_key() -> bytes:
    """
    Load the encryption key from the environment.

    Raises:
        RuntimeError: If the key is missing or not 64 hex characters
    """
    key = Config.get_encryption_key()
    if not key:
        raise RuntimeError("Encryption key not configured")

    if not _KEY_PATTERN.match(key):
        raise RuntimeError(
            "Encryption key must be exactly 64 hex characters (32 bytes for AES-256). "
            "Generate with: openssl rand -hex 32"
        )

    return bytes.fromhex(key)


def encrypt_api_key(api_key: str) -> str:
    """
    Encrypt an API key.

    Args:
        api_key: Plain API key

    Returns:
        "hex(iv):hex(ciphertext)"

    Raises:
        ValueError: If api_key is empty
        RuntimeError: If the encryption key is not configured
    """
    if not api_key or not api_key.strip():
        raise ValueError("API key cannot be empty")

    key = get_encryption_key()
    iv = os.urandom(IV_LENGTH)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(api_key.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return iv.hex() + ":" + ciphertext.hex()


def decrypt_api_key(encrypted_data: str) -> str:
    """
    Decrypt a value produced by encrypt_api_key.

    Raises:
        ValueError: If the data is not in iv:ciphertext form or fails to decrypt
        RuntimeError: If the encryption key is not configured
    """
    key = get_encryption_key()

    parts = encrypted_data.split(":")
    if len(parts) != 2:
        raise ValueError("Invalid encrypted data format")

    try:
        iv = bytes.fromhex(parts[0])
        ciphertext = bytes.fromhex(parts[1])
    except ValueError:
        raise ValueError("Invalid encrypted data format")

    if len(iv) != IV_LENGTH:
        raise ValueError("Invalid encrypted data format")

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    data = unpadder.update(padded) + unpadder.finalize()
    return data.decode("utf-8")


def mask_api_key(api_key: str) -> str:
    """
    Mask an API key for display.

    "sk-test-1234567890" -> "sk-t...7890", keys of 8 chars or fewer -> "***",
    empty -> "".
    """
    if not api_key:
        return ""

    if len(api_key) <= MASK_MIN_LENGTH:
        return "***"

    return api_key[:MASK_PREFIX_LENGTH] + "..." + api_key[-MASK_SUFFIX_LENGTH:]
