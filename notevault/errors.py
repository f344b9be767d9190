class NoteVaultError(Exception):
    """Base class for notevault errors."""


class DecryptionFailed(NoteVaultError):
    """Ciphertext did not verify under the working key.

    Raised for a wrong password, a corrupted or truncated ciphertext,
    a damaged nonce, or malformed base64. The causes are indistinguishable.
    """


class NoteNotFound(NoteVaultError):
    pass


class VaultLockedError(NoteVaultError):
    pass


# Storage
class StoreError(NoteVaultError):
    """The vault file could not be read or written."""


class StoreCorruptedError(StoreError):
    """The vault file exists but does not hold a valid note collection."""
