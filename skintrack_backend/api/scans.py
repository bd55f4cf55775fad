"""Endpoints for the in-memory scan history."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from skintrack_backend.api.deps import get_scan_history
from skintrack_backend.services.history import (
    InvalidScanError,
    NoActiveSessionError,
)

bp = Blueprint("scans", __name__, url_prefix="/api/scans")


@bp.get("")
def list_scans():
    """Return every scan recorded this session, newest first."""

    history = get_scan_history()
    return jsonify(scans=[record.to_dict() for record in history.records])


@bp.post("")
def record_scan():
    """Prepend a scanned product to the history."""

    payload = request.get_json(silent=True)
    history = get_scan_history()
    try:
        record = history.append(payload)
    except NoActiveSessionError:
        return jsonify(error="no active session"), 401
    except InvalidScanError as exc:
        return jsonify(error=str(exc)), 400

    return jsonify(scan=record.to_dict()), 201


@bp.delete("")
def clear_scans():
    get_scan_history().clear()
    return jsonify(status="ok")


@bp.get("/summary")
def scan_summary():
    return jsonify(get_scan_history().summary())
