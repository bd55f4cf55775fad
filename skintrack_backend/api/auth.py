"""Signup, login and logout endpoints backed by the session store."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from skintrack_backend.api.deps import get_session_store
from skintrack_backend.services.accounts import (
    DuplicateEmailError,
    InvalidCredentialsError,
)
from skintrack_backend.services.profile import (
    Profile,
    order_goals,
    profile_completion,
)
from skintrack_backend.services.storage import StorageError

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/signup")
def signup():
    """Create a new account and log into it."""

    payload = json_object()
    if payload is None:
        return jsonify(error="request body must be a JSON object"), 400

    email = _clean_text(payload.get("email"))
    password = _password(payload.get("password"))
    name = _clean_text(payload.get("name"))

    if not email or not password or not name:
        return jsonify(error="email, password and name are required"), 400

    store = get_session_store()
    try:
        user = store.signup(email, password, name)
    except DuplicateEmailError:
        return jsonify(error="email already exists"), 409
    except StorageError:
        current_app.logger.exception("failed to create account")
        return jsonify(error="storage failure while creating account"), 500

    return jsonify(user=serialize_user(user)), 201


@bp.post("/login")
def login():
    """Check credentials and replace the current session."""

    payload = json_object()
    if payload is None:
        return jsonify(error="request body must be a JSON object"), 400

    email = _clean_text(payload.get("email"))
    password = _password(payload.get("password"))

    if not email or not password:
        return jsonify(error="email and password are required"), 400

    store = get_session_store()
    try:
        user = store.login(email, password)
    except InvalidCredentialsError:
        return jsonify(error="invalid credentials"), 401
    except StorageError:
        current_app.logger.exception("failed to authenticate account")
        return jsonify(error="storage failure during login"), 500

    return jsonify(user=serialize_user(user))


@bp.post("/logout")
def logout():
    """End the current session, if any."""

    try:
        get_session_store().logout()
    except StorageError:
        current_app.logger.exception("failed to clear session")
        return jsonify(error="storage failure during logout"), 500
    return jsonify(status="ok")


@bp.get("/me")
def get_me():
    """Return the currently logged-in user's profile."""

    user = get_session_store().current
    if user is None:
        return jsonify(error="unauthorized"), 401
    return jsonify(user=serialize_user(user))


def serialize_user(user: Profile) -> dict[str, object]:
    data = user.to_dict()
    data["goals"] = order_goals(user.goals)
    data["completion"] = profile_completion(user)
    return data


def json_object() -> dict | None:
    """Return the JSON body as a dict; an absent body counts as empty."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        return None
    return payload


def _password(value) -> str | None:
    if not isinstance(value, str) or not value:
        return None
    return value


def _clean_text(value) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None
