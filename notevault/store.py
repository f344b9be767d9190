"""
notevault - Note Store

Whole-collection persistence of note records in a single JSON file.

File format (pretty-printed JSON array, storage order = insertion order):

    [
      {
        "title": "shopping",
        "content": "<base64 ciphertext + tag>",
        "nonce": "<base64 12-byte nonce>"
      }
    ]

The store only loads and saves the full list. Lookup and removal by title
are done by the Vault on the in-memory list.
"""

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .errors import StoreCorruptedError, StoreError

log = logging.getLogger(__name__)

FIELDS = ("title", "content", "nonce")


@dataclass
class Note:
    """One persisted note. ciphertext and nonce are base64 text."""

    title: str
    ciphertext: str
    nonce: str

    def to_dict(self) -> dict:
        return {"title": self.title, "content": self.ciphertext, "nonce": self.nonce}

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(title=data["title"], ciphertext=data["content"], nonce=data["nonce"])


def _parse(text: str, path: str) -> List[Note]:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        raise StoreCorruptedError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise StoreCorruptedError(f"{path} must hold a JSON array of notes")

    notes = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or not all(isinstance(item.get(f), str) for f in FIELDS):
            raise StoreCorruptedError(
                f"{path}: entry {i} must be an object with string fields {', '.join(FIELDS)}"
            )
        notes.append(Note.from_dict(item))
    return notes


class NoteStore:
    """
    File-backed note collection.

    Usage:
        store = NoteStore("vault.json")
        notes = store.load()        # [] if the file does not exist yet
        notes.append(note)
        store.save(notes)           # full rewrite
    """

    def __init__(self, path: str):
        self.path = path

    @contextmanager
    def _acquire(self) -> Iterator[str]:
        """
        Scope of all file access for one load or save.

        Translates OS errors into StoreError. An advisory lock would be
        taken and released here.
        """
        try:
            yield self.path
        except OSError as e:
            raise StoreError(f"cannot access {self.path}: {e}") from e

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> List[Note]:
        """
        Read every note from disk.

        Returns:
            Notes in storage order, or [] if the file does not exist

        Raises:
            StoreCorruptedError: File exists but cannot be parsed (fatal,
                nothing is silently dropped)
            StoreError: File exists but cannot be read
        """
        with self._acquire() as path:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    text = f.read()
            except FileNotFoundError:
                log.debug("No vault file at %s, starting empty", path)
                return []
            except UnicodeDecodeError as e:
                raise StoreCorruptedError(f"{path} is not UTF-8 text") from e

        notes = _parse(text, path)
        log.debug("Loaded %d notes from %s", len(notes), path)
        return notes

    def save(self, notes: Sequence[Note]) -> None:
        """
        Overwrite the vault file with the full collection.

        Written to a temporary file in the same directory and renamed into
        place, so an interrupted save leaves the previous file as it was.

        Raises:
            StoreError: Disk full, permission denied, etc.
        """
        payload = json.dumps([n.to_dict() for n in notes], indent=2, ensure_ascii=False) + "\n"

        with self._acquire() as path:
            directory = os.path.dirname(os.path.abspath(path))
            os.makedirs(directory, exist_ok=True)

            fd, tmp_path = tempfile.mkstemp(prefix=".notevault-", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except BaseException:
                _remove_quietly(tmp_path)
                raise

        log.debug("Saved %d notes to %s", len(notes), path)


def _remove_quietly(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        try:
            os.unlink(path)
        except OSError as exc:
            log.warning("Could not remove temporary file %s: %s", path, exc)
