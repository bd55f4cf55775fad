"""Endpoints for editing the logged-in user's profile."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from skintrack_backend.api.auth import json_object, serialize_user
from skintrack_backend.api.deps import get_session_store
from skintrack_backend.services.profile import InvalidProfileUpdateError
from skintrack_backend.services.storage import StorageError

bp = Blueprint("profile", __name__, url_prefix="/api/profile")


@bp.patch("")
def update_profile():
    """Merge the posted fields into the current profile."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not payload:
        return jsonify(error="profile fields are required"), 400

    return _apply(lambda store: store.update_profile(payload))


@bp.post("/goals/toggle")
def toggle_goal():
    payload = json_object()
    if payload is None:
        return jsonify(error="request body must be a JSON object"), 400

    goal = payload.get("goal")
    if not isinstance(goal, str) or not goal.strip():
        return jsonify(error="goal is required"), 400

    return _apply(lambda store: store.toggle_goal(goal.strip()))


@bp.post("/allergies")
def add_allergy():
    payload = json_object()
    if payload is None:
        return jsonify(error="request body must be a JSON object"), 400

    ingredient = payload.get("ingredient")
    severity = payload.get("severity", "medium")

    return _apply(lambda store: store.add_allergy(ingredient, severity))


@bp.delete("/allergies/<int:index>")
def remove_allergy(index: int):
    store = get_session_store()
    user = store.current
    if user is None:
        return jsonify(error="unauthorized"), 401
    if index >= len(user.allergies):
        return jsonify(error="allergy not found"), 404

    return _apply(lambda store: store.remove_allergy(index))


def _apply(action):
    store = get_session_store()
    try:
        user = action(store)
    except InvalidProfileUpdateError as exc:
        return jsonify(error=str(exc)), 400
    except StorageError:
        current_app.logger.exception("failed to update profile")
        return jsonify(error="storage failure while updating profile"), 500

    if user is None:
        return jsonify(error="unauthorized"), 401
    return jsonify(user=serialize_user(user))
