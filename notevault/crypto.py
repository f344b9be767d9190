"""
notevault - Cryptography Module

Every cryptographic operation of the vault lives in this file:
- Password -> working key (one SHA-256 pass)
- Note content -> AES-256-GCM ciphertext + random nonce
- Ciphertext + nonce -> content, only if the tag verifies
- base64 text encoding so records fit in a JSON file

Security Architecture:
    1. Password -> SHA-256 -> Working Key (32 bytes, never stored)
    2. Each note: fresh 12-byte random nonce -> AES-GCM encryption
    3. Ciphertext and nonce stored as base64 next to the plaintext title

Known limits:
    - The key is unsalted and un-iterated. Anyone holding vault.json can
      test one password guess per SHA-256 evaluation.
    - The title is not authenticated. A ciphertext/nonce pair can be moved
      under another title without detection.
"""

import base64
import binascii
import os
from typing import Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionFailed


# =============================================================================
# Configuration
# =============================================================================

KEY_SIZE = 32            # 256-bit key (SHA-256 digest size)
NONCE_SIZE = 12          # 96-bit nonce for AES-GCM
TAG_SIZE = 16            # 128-bit authentication tag


# =============================================================================
# Key Derivation
# =============================================================================

def derive_key(password: Union[str, bytes]) -> bytes:
    """
    Derive the working key from a password with a single SHA-256 pass.

    Deterministic: the same password always gives the same key, which is
    what lets a later invocation open notes written by an earlier one.
    There is no salt and no iteration count, so offline guessing costs one
    hash per guess.

    Args:
        password: Password text (encoded as UTF-8, undecodable terminal
            bytes passed through as-is) or raw bytes

    Returns:
        32-byte working key
    """
    if isinstance(password, str):
        password = password.encode('utf-8', 'surrogateescape')

    digest = hashes.Hash(hashes.SHA256())
    digest.update(password)
    return digest.finalize()


# =============================================================================
# Encryption (AES-256-GCM)
# =============================================================================

def encrypt(plaintext: bytes, key: bytes) -> Tuple[bytes, bytes]:
    """
    Encrypt data with AES-256-GCM.

    A new random nonce is drawn for every call. Never pass a nonce in and
    never reuse one: a repeated nonce under the same key breaks both
    confidentiality and integrity.

    Args:
        plaintext: Data to encrypt
        key: 32-byte working key

    Returns:
        (ciphertext, nonce) tuple
        - ciphertext: encrypted data + 16-byte tag
        - nonce: 12 random bytes (must be stored with ciphertext)
    """
    nonce = os.urandom(NONCE_SIZE)

    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)

    return ciphertext, nonce


def decrypt(ciphertext: bytes, nonce: bytes, key: bytes) -> bytes:
    """
    Decrypt AES-256-GCM ciphertext.

    Args:
        ciphertext: Encrypted data (includes tag)
        nonce: Nonce stored with the ciphertext
        key: 32-byte working key

    Returns:
        Plaintext bytes

    Raises:
        DecryptionFailed: Wrong key, tampered/truncated ciphertext or nonce.
            All of these look the same.
    """
    try:
        aesgcm = AESGCM(key)
        return aesgcm.decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError):
        # ValueError: nonce or key length the cipher refuses
        raise DecryptionFailed("authentication failed") from None


# =============================================================================
# Text Encoding
# =============================================================================

def encode(data: bytes) -> str:
    """Bytes -> standard base64 text."""
    return base64.b64encode(data).decode('ascii')


def decode(text: str) -> bytes:
    """
    Standard base64 text -> bytes.

    Raises:
        DecryptionFailed: Malformed base64. Treated like a failed tag check.
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise DecryptionFailed("authentication failed") from None


# =============================================================================
# Note Operations
# =============================================================================

def seal_note(content: str, key: bytes) -> Tuple[str, str]:
    """
    Encrypt note content for storage.

    Returns:
        (ciphertext_b64, nonce_b64) ready to put in a Note record
    """
    ciphertext, nonce = encrypt(content.encode('utf-8'), key)
    return encode(ciphertext), encode(nonce)


def open_note(ciphertext_b64: str, nonce_b64: str, key: bytes) -> str:
    """
    Decrypt a stored note back to its text.

    Bad base64, a failed tag and plaintext that is not UTF-8 all raise
    the same DecryptionFailed.
    """
    plaintext = decrypt(decode(ciphertext_b64), decode(nonce_b64), key)
    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError:
        raise DecryptionFailed("authentication failed") from None


def can_open(ciphertext_b64: str, nonce_b64: str, key: bytes) -> bool:
    """True if the note decrypts under key."""
    try:
        open_note(ciphertext_b64, nonce_b64, key)
    except DecryptionFailed:
        return False
    return True
