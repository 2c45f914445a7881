"""
JSON document persistence adapter.

A single JSON document on disk holds every collection. DocumentStore keeps
the one canonical in-memory copy, re-reads it before each operation and
rewrites the whole file on commit. All access goes through one lock, so
read-modify-write cycles from concurrent requests never interleave.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import copy
import json
import logging
import os
import tempfile
import threading

from sherlouk_api.core.errors import PersistenceError

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "tables", "audit")


def default_document() -> dict:
    return {name: [] for name in COLLECTIONS}


def _reject_constant(token: str):
    raise ValueError(f"Non-finite number {token} is not valid JSON")


def db_defaults(db: dict) -> dict:
    for name in COLLECTIONS:
        if db.get(name) is None:
            db[name] = []
        elif not isinstance(db[name], list):
            raise PersistenceError(f"Collection '{name}' is not an array")
    return db


class DocumentStore:
    """Owns the in-memory document and keeps it in sync with ``path``."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.data: dict | None = None
        self._lock = threading.RLock()

    # -------------------------- disk --------------------------
    def _read_file(self) -> dict | None:
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Could not read {self.path}: {exc}") from exc
        if not raw.strip():
            return None
        try:
            db = json.loads(raw, parse_constant=_reject_constant)
        except ValueError as exc:
            raise PersistenceError(f"Malformed JSON in {self.path}: {exc}") from exc
        if not isinstance(db, dict):
            raise PersistenceError(f"Root of {self.path} must be a JSON object")
        return db_defaults(db)

    def _write_file(self, db: dict) -> None:
        try:
            payload = json.dumps(db, ensure_ascii=False, indent=2, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Document is not serialisable as JSON: {exc}") from exc
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Commit to %s failed: %s", self.path, exc)
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc

    # -------------------------- api --------------------------
    def load(self) -> dict:
        """Initialise from disk, writing the default document when absent or empty."""
        with self._lock:
            try:
                db = self._read_file()
            except PersistenceError as exc:
                logger.error("Refusing to start on corrupt store: %s", exc)
                raise
            if db is None:
                logger.info("Initialising empty document at %s", self.path)
                self.data = default_document()
                self.commit()
            else:
                self.data = db
            return self.data

    def reload(self) -> dict:
        """Re-read the backing file, discarding in-memory state."""
        with self._lock:
            db = self._read_file()
            if db is None:
                return self.load()
            self.data = db
            return self.data

    def commit(self) -> None:
        """Atomically replace the backing file with the in-memory document."""
        with self._lock:
            if self.data is None:
                raise PersistenceError("Store was never loaded")
            self._write_file(self.data)

    @contextmanager
    def transaction(self) -> Iterator[dict]:
        """Reload, hand out the live document, commit if the block succeeds."""
        with self._lock:
            db = self.reload()
            yield db
            self.commit()

    def read(self) -> dict:
        """Fresh deep copy of the document."""
        with self._lock:
            return copy.deepcopy(self.reload())
