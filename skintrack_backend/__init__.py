import logging
import os

from flask import Flask, jsonify
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skintrack_backend.api import init_app as init_api
from skintrack_backend.models import Base, get_database_url
from skintrack_backend.services.accounts import AccountRegistry
from skintrack_backend.services.history import ScanHistory
from skintrack_backend.services.session import SessionStore
from skintrack_backend.services.storage import init_key_value_store

_FALSEY = {"0", "false", "no", "off"}


def create_app(database_url: str | None = None) -> Flask:
    """Application factory for the SkinTrack backend."""
    app = Flask(__name__)

    _configure_logging(app)
    session_factory = _init_database(app, database_url or get_database_url())

    store = init_key_value_store(session_factory)
    registry = AccountRegistry(store)
    session_store = SessionStore(
        store,
        registry,
        auto_create_demo=_auto_create_demo_enabled(),
    )
    session_store.bootstrap()

    app.extensions["key_value_store"] = store
    app.extensions["account_registry"] = registry
    app.extensions["session_store"] = session_store
    app.extensions["scan_history"] = ScanHistory(session_store)

    @app.get("/healthz")
    def healthcheck():
        return jsonify(status="ok")

    @app.get("/api/healthz")
    def api_healthcheck():
        return jsonify(status="ok")

    init_api(app)

    return app


def _configure_logging(app: Flask) -> None:
    """Ensure application and root loggers emit INFO-level logs."""

    logging.basicConfig(level=logging.INFO)
    logging.getLogger().setLevel(logging.INFO)
    app.logger.setLevel(logging.INFO)


def _init_database(app: Flask, database_url: str) -> sessionmaker:
    """Create the engine and tables, returning the session factory."""

    engine_options: dict[str, object] = {"pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        engine_options["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # Every connection to an in-memory database is a fresh database.
            engine_options["poolclass"] = StaticPool

    engine = create_engine(database_url, **engine_options)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    app.extensions["db_engine"] = engine
    app.extensions["db_sessionmaker"] = SessionLocal
    app.logger.info(
        "database ready", extra={"dialect": engine.dialect.name}
    )
    return SessionLocal


def _auto_create_demo_enabled() -> bool:
    raw = os.environ.get("SKINTRACK_AUTO_CREATE_DEMO", "1")
    return raw.strip().lower() not in _FALSEY
