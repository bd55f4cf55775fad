"""SQL-backed key/value storage used for every durable SkinTrack artifact."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from skintrack_backend.models import StoreEntry

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the key/value store cannot be read or written."""


class KeyValueStore:
    """Durable string-to-string store with whole-value writes.

    Nothing above this class talks to the database directly. Every write
    replaces the full value for its key; there are no partial updates.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def read(self, key: str) -> str | None:
        """Return the stored value for ``key`` or ``None`` when absent."""

        try:
            with self._session_factory() as session:
                entry = session.get(StoreEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to read {key!r}") from exc

    def write(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``."""

        try:
            with self._session_factory() as session:
                entry = session.get(StoreEntry, key)
                if entry is None:
                    session.add(StoreEntry(key=key, value=value))
                else:
                    entry.value = value
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to write {key!r}") from exc

    def remove(self, key: str) -> None:
        """Delete ``key``; removing a missing key is a no-op."""

        try:
            with self._session_factory() as session:
                entry = session.get(StoreEntry, key)
                if entry is not None:
                    session.delete(entry)
                    session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to remove {key!r}") from exc

    def read_json(self, key: str) -> Any:
        raw = self.read(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.error("corrupt value in store", extra={"key": key})
            raise StorageError(f"stored value for {key!r} is not valid JSON") from exc

    def write_json(self, key: str, value: Any) -> None:
        self.write(key, json.dumps(value))


def init_key_value_store(session_factory: sessionmaker) -> KeyValueStore:
    """Factory to mirror the init_* pattern used across services."""

    return KeyValueStore(session_factory)
