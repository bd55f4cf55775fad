"""API package wiring for SkinTrack backend."""

from flask import Flask

from .auth import bp as auth_bp
from .profile import bp as profile_bp
from .scans import bp as scans_bp


def init_app(app: Flask) -> None:
    """Register all API blueprints on the given application."""

    app.register_blueprint(auth_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(scans_bp)
