"""SQLAlchemy models and shared enums for SkinTrack."""

from __future__ import annotations

import os
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from skintrack_backend.config import DEFAULT_DATABASE_URL


class Base(DeclarativeBase):
    """Declarative base shared by every SkinTrack table."""


class StoreEntry(Base):
    """A single durable key/value pair written by the persistence adapter."""

    __tablename__ = "store_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class _ValuesMixin:
    @classmethod
    def values(cls) -> set[str]:
        return {entry.value for entry in cls}  # type: ignore[attr-defined]


class OnboardingStatus(_ValuesMixin, str, Enum):
    """How far a user got through the onboarding flow."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class AllergySeverity(_ValuesMixin, str, Enum):
    """Severity attached to an ingredient allergy."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ScanVerdict(_ValuesMixin, str, Enum):
    """Overall verdict shown for a scanned product."""

    GOOD = "good"
    CAUTION = "caution"
    AVOID = "avoid"


def get_database_url() -> str:
    """Return the configured DATABASE_URL, defaulting to a local SQLite file."""

    database_url = os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL

    # Normalize common Postgres URL forms to the psycopg v3 driver.
    if database_url.startswith("postgres://"):
        return "postgresql+psycopg://" + database_url[len("postgres://") :]
    if database_url.startswith("postgresql://"):
        return "postgresql+psycopg://" + database_url[len("postgresql://") :]
    if database_url.startswith("postgresql+psycopg2://"):
        return (
            "postgresql+psycopg://"
            + database_url[len("postgresql+psycopg2://") :]
        )

    return database_url
