"""Shared API dependencies and helpers."""

from flask import current_app

from skintrack_backend.services.history import ScanHistory
from skintrack_backend.services.session import SessionStore


def get_session_store() -> SessionStore:
    """Return the application's session store."""

    store: SessionStore | None = current_app.extensions.get("session_store")
    if store is None:
        raise RuntimeError("session store is not configured")
    return store


def get_scan_history() -> ScanHistory:
    """Return the application's in-memory scan history."""

    history: ScanHistory | None = current_app.extensions.get("scan_history")
    if history is None:
        raise RuntimeError("scan history is not configured")
    return history
