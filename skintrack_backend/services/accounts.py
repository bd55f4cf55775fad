"""Durable registry of every SkinTrack account, keyed by email."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Mapping

from werkzeug.security import check_password_hash, generate_password_hash

from skintrack_backend.config import ACCOUNT_COLLECTION_KEY
from skintrack_backend.services.profile import Profile
from skintrack_backend.services.storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(f"email already exists: {email}")
        self.email = email


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair does not match a stored account."""

    def __init__(self) -> None:
        super().__init__("invalid credentials")


@dataclass(slots=True)
class Account:
    """A registered account: the public profile plus credential material."""

    profile: Profile
    password_hash: str

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def email(self) -> str:
        return self.profile.email

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Account":
        try:
            return cls(
                profile=Profile.from_dict(record),
                password_hash=record["password_hash"],
            )
        except (KeyError, TypeError) as exc:
            raise StorageError("stored account record is incomplete") from exc

    def to_record(self) -> dict[str, Any]:
        record = self.profile.to_dict()
        record["password_hash"] = self.password_hash
        return record


class AccountRegistry:
    """Owns the persisted account collection and all credential checks.

    The whole collection is read from and written back to the key/value
    store on every operation. Check-then-act pairs run under one lock.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._lock = threading.RLock()

    def accounts(self) -> list[Account]:
        """Return every registered account in insertion order."""

        return [Account.from_record(record) for record in self._load()]

    def find_by_email(self, email: str) -> Account | None:
        for record in self._load():
            if record.get("email") == email:
                return Account.from_record(record)
        return None

    def find_by_id(self, account_id: str) -> Account | None:
        for record in self._load():
            if record.get("id") == account_id:
                return Account.from_record(record)
        return None

    def create(self, email: str, password: str, name: str) -> Account:
        """Register a new account with default profile fields."""

        with self._lock:
            records = self._load()
            if any(record.get("email") == email for record in records):
                raise DuplicateEmailError(email)

            account = Account(
                profile=Profile(id=uuid.uuid4().hex, email=email, name=name),
                password_hash=generate_password_hash(password),
            )
            records.append(account.to_record())
            self._save(records)

        logger.info(
            "registered account",
            extra={"account_id": account.id, "email": email},
        )
        return account

    def verify(self, email: str, password: str) -> Account:
        """Return the account for matching credentials or raise."""

        with self._lock:
            account = self.find_by_email(email)
            if account is not None and check_password_hash(
                account.password_hash, password
            ):
                return account

        logger.info("rejected credentials", extra={"email": email})
        raise InvalidCredentialsError()

    def apply_update(self, account_id: str, fields: Mapping[str, Any]) -> bool:
        """Merge ``fields`` over the stored record for ``account_id``.

        A missing account is not an error: the call returns ``False`` and
        leaves the collection untouched.
        """

        with self._lock:
            records = self._load()
            for index, record in enumerate(records):
                if record.get("id") == account_id:
                    records[index] = {**record, **fields}
                    self._save(records)
                    return True

        logger.debug(
            "account missing during update; skipping",
            extra={"account_id": account_id},
        )
        return False

    def _load(self) -> list[dict[str, Any]]:
        records = self._store.read_json(ACCOUNT_COLLECTION_KEY)
        if records is None:
            return []
        if not isinstance(records, list) or not all(
            isinstance(record, dict) for record in records
        ):
            raise StorageError(
                "stored account collection is not a list of objects"
            )
        return records

    def _save(self, records: list[dict[str, Any]]) -> None:
        self._store.write_json(ACCOUNT_COLLECTION_KEY, records)
