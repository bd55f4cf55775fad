"""The single logged-in profile and its persisted mirror."""

from __future__ import annotations

import logging
import secrets
import threading
from typing import Any, Mapping

from skintrack_backend.config import (
    DEMO_ACCOUNT_EMAIL,
    DEMO_ACCOUNT_NAME,
    SESSION_MIRROR_KEY,
)
from skintrack_backend.models import AllergySeverity
from skintrack_backend.services import profile as profile_fields
from skintrack_backend.services.accounts import Account, AccountRegistry
from skintrack_backend.services.profile import Profile
from skintrack_backend.services.storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds at most one authenticated profile, credentials stripped.

    This is the only object the rest of the app asks "who is logged in".
    Every change to the live profile is mirrored to the key/value store
    before the call returns.
    """

    def __init__(
        self,
        store: KeyValueStore,
        registry: AccountRegistry,
        *,
        auto_create_demo: bool = True,
    ) -> None:
        self._store = store
        self._registry = registry
        self._auto_create_demo = auto_create_demo
        self._current: Profile | None = None
        self._lock = threading.RLock()

    @property
    def current(self) -> Profile | None:
        """A copy of the live profile, or ``None`` when logged out."""

        with self._lock:
            if self._current is None:
                return None
            return Profile.from_dict(self._current.to_dict())

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    def bootstrap(self) -> None:
        """Load the persisted session, or start one for the demo account."""

        with self._lock:
            stored = self._store.read_json(SESSION_MIRROR_KEY)
            if stored is not None:
                self._current = _profile_from_mirror(stored)
                logger.info(
                    "restored session", extra={"account_id": self._current.id}
                )
                return

            if not self._auto_create_demo:
                logger.info("no stored session; demo auto-creation disabled")
                return

            account = self._registry.find_by_email(DEMO_ACCOUNT_EMAIL)
            if account is None:
                # Nobody knows this password; the demo account is reachable
                # only through bootstrap.
                account = self._registry.create(
                    DEMO_ACCOUNT_EMAIL,
                    secrets.token_urlsafe(16),
                    DEMO_ACCOUNT_NAME,
                )
            self._start(account)
            logger.info(
                "started demo session", extra={"account_id": account.id}
            )

    def login(self, email: str, password: str) -> Profile:
        """Authenticate against the registry and replace the session."""

        with self._lock:
            account = self._registry.verify(email, password)
            self._start(account)
            logger.info("logged in", extra={"account_id": account.id})
            return self.current

    def signup(self, email: str, password: str, name: str) -> Profile:
        """Register a new account and log straight into it."""

        with self._lock:
            account = self._registry.create(email, password, name)
            self._start(account)
            return self.current

    def logout(self) -> None:
        """End the session; calling this while logged out does nothing."""

        with self._lock:
            if self._current is not None:
                logger.info("logged out", extra={"account_id": self._current.id})
            self._current = None
            self._store.remove(SESSION_MIRROR_KEY)

    def update_profile(self, fields: Mapping[str, Any]) -> Profile | None:
        """Merge ``fields`` into the live profile and the stored account.

        Returns ``None`` without touching anything when nobody is logged in.
        The registry write is best-effort: a session whose account has
        vanished from the registry still gets updated.
        """

        with self._lock:
            if self._current is None:
                return None

            cleaned = profile_fields.validate_profile_update(fields)
            updated = self._current.merged(cleaned)
            self._store.write_json(SESSION_MIRROR_KEY, updated.to_dict())
            self._current = updated
            self._registry.apply_update(updated.id, cleaned)
            return self.current

    def toggle_goal(self, goal: str) -> Profile | None:
        with self._lock:
            if self._current is None:
                return None
            goals = profile_fields.toggle_goal(self._current.goals, goal)
            return self.update_profile({"goals": goals})

    def add_allergy(
        self, ingredient: str, severity: str = AllergySeverity.MEDIUM.value
    ) -> Profile | None:
        with self._lock:
            if self._current is None:
                return None
            allergies = list(self._current.allergies)
            allergies.append({"ingredient": ingredient, "severity": severity})
            return self.update_profile({"allergies": allergies})

    def remove_allergy(self, index: int) -> Profile | None:
        """Drop the allergy at ``index``; raises ``IndexError`` if absent."""

        with self._lock:
            if self._current is None:
                return None
            allergies = list(self._current.allergies)
            del allergies[index]
            return self.update_profile({"allergies": allergies})

    def _start(self, account: Account) -> None:
        # The live session only changes once the mirror write succeeded.
        profile = Profile.from_dict(account.profile.to_dict())
        self._store.write_json(SESSION_MIRROR_KEY, profile.to_dict())
        self._current = profile


def _profile_from_mirror(stored: Any) -> Profile:
    if not isinstance(stored, dict):
        raise StorageError("stored session is not an object")
    try:
        return Profile.from_dict(stored)
    except TypeError as exc:
        raise StorageError("stored session is missing profile fields") from exc
