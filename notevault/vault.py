"""
notevault - Vault Module

This file binds the crypto envelope to the note store:
- Unlocking (password -> working key, load all notes)
- Adding, listing, reading and deleting notes

Notes carry no owner field. Whether a note "belongs" to the current
password is decided by trying to decrypt it, so a wrong password simply
shows an empty vault.

Title matching:
- read_note() uses the FIRST note with the title and stops there
- delete_note() visits EVERY note with the title and removes each one
  that decrypts
"""

import logging
from typing import List, NamedTuple, Optional

from . import crypto
from .errors import NoteNotFound, VaultLockedError
from .store import Note, NoteStore

log = logging.getLogger(__name__)


class DeleteOutcome(NamedTuple):
    """Result for one note whose title matched a delete request."""

    title: str
    index: int       # position in the collection before the delete
    deleted: bool


class Vault:
    """
    Encrypted note vault backed by one JSON file.

    Usage:
        vault = Vault("vault.json")
        vault.unlock("password")

        vault.add_note("shopping", "milk, eggs")
        vault.list_titles()            # ['shopping']
        vault.read_note("shopping")    # 'milk, eggs'
        vault.delete_note("shopping")  # [DeleteOutcome('shopping', 0, True)]

        vault.lock()
    """

    def __init__(self, path: str):
        """
        Create vault handle (doesn't unlock it yet).

        Args:
            path: Path to the JSON vault file
        """
        self.path = path
        self.store = NoteStore(path)
        self.notes: List[Note] = []

        # Only present when unlocked
        self.key: Optional[bytes] = None

    @property
    def is_unlocked(self) -> bool:
        return self.key is not None

    def unlock(self, password: str) -> None:
        """
        Derive the working key and load every note.

        Never fails on a wrong password: there is nothing to check it
        against. Notes that don't decrypt are just invisible.

        Raises:
            StoreError: Vault file unreadable or corrupted
        """
        key = crypto.derive_key(password)
        self.notes = self.store.load()
        self.key = key
        log.debug("Vault unlocked with %d stored notes", len(self.notes))

    def lock(self) -> None:
        """Forget the key and the loaded notes."""
        self.key = None
        self.notes = []

    def add_note(self, title: str, content: str) -> Note:
        """
        Encrypt content under the working key and persist a new note.

        Duplicate titles are allowed; the new note goes to the end.

        Returns:
            The stored Note record
        """
        self._require_unlocked()
        if not title:
            raise ValueError("Title is required")

        ciphertext, nonce = crypto.seal_note(content, self.key)
        note = Note(title=title, ciphertext=ciphertext, nonce=nonce)
        self.notes.append(note)
        self.store.save(self.notes)
        log.debug("Added note %r", title)
        return note

    def list_titles(self) -> List[str]:
        """Titles of the notes that decrypt under the working key, in storage order."""
        self._require_unlocked()
        return [n.title for n in self.notes if self._opens(n)]

    def read_note(self, title: str) -> str:
        """
        Decrypt the first note with this title.

        Raises:
            NoteNotFound: No note has this title
            DecryptionFailed: First match does not decrypt (later matches
                are not tried)
        """
        self._require_unlocked()
        note = self.find(title)
        if note is None:
            raise NoteNotFound(title)
        return crypto.open_note(note.ciphertext, note.nonce, self.key)

    def delete_note(self, title: str) -> List[DeleteOutcome]:
        """
        Remove every note with this title that decrypts under the working key.

        Matches that fail to decrypt are kept. The file is rewritten only if
        at least one note was removed.

        Returns:
            One DeleteOutcome per matching note, in storage order.
            Empty if nothing had this title.
        """
        self._require_unlocked()
        outcomes = []
        kept = []
        for index, note in enumerate(self.notes):
            if note.title != title:
                kept.append(note)
                continue
            if self._opens(note):
                outcomes.append(DeleteOutcome(note.title, index, True))
            else:
                outcomes.append(DeleteOutcome(note.title, index, False))
                kept.append(note)

        removed = len(self.notes) - len(kept)
        if removed:
            self.store.save(kept)
            self.notes = kept
            log.debug("Deleted %d notes titled %r", removed, title)
        return outcomes

    def find(self, title: str) -> Optional[Note]:
        """First note with this title, or None."""
        for note in self.notes:
            if note.title == title:
                return note
        return None

    def _opens(self, note: Note) -> bool:
        if crypto.can_open(note.ciphertext, note.nonce, self.key):
            return True
        log.debug("Note %r does not decrypt under this key", note.title)
        return False

    def _require_unlocked(self) -> None:
        """Raise if vault is locked."""
        if not self.is_unlocked:
            raise VaultLockedError("Vault is locked. Call unlock() first.")
