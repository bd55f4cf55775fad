"""In-memory log of products scanned during the current process."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Mapping, TypedDict

from skintrack_backend.models import ScanVerdict
from skintrack_backend.services.session import SessionStore

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("id", "name", "brand", "image")


class NoActiveSessionError(Exception):
    """Raised when recording a scan while nobody is logged in."""

    def __init__(self) -> None:
        super().__init__("no active session")


class InvalidScanError(ValueError):
    """Raised when a scan payload is missing fields or carries bad values."""


class ScanSummary(TypedDict):
    total_scans: int
    average_score: float
    verdicts: dict[str, int]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ScanRecord:
    """A scanned product as shown in the history list."""

    id: str
    name: str
    brand: str
    image: str
    score: float
    verdict: str
    scanned_at: datetime

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], scanned_at: datetime
    ) -> "ScanRecord":
        """Validate a caller payload; any ``scanned_at`` in it is ignored."""

        if not isinstance(payload, Mapping):
            raise InvalidScanError("scan must be an object")

        missing = [
            name
            for name in _TEXT_FIELDS + ("score", "verdict")
            if name not in payload
        ]
        if missing:
            raise InvalidScanError(f"missing scan fields: {', '.join(missing)}")

        for name in _TEXT_FIELDS:
            if not isinstance(payload[name], str):
                raise InvalidScanError(f"{name} must be a string")

        score = payload["score"]
        if isinstance(score, bool) or not isinstance(score, Real):
            raise InvalidScanError("score must be a number")
        if isinstance(score, float) and not math.isfinite(score):
            raise InvalidScanError("score must be a finite number")

        verdict = payload["verdict"]
        if not isinstance(verdict, str) or verdict not in ScanVerdict.values():
            raise InvalidScanError(f"unknown verdict {verdict!r}")

        return cls(
            id=payload["id"],
            name=payload["name"],
            brand=payload["brand"],
            image=payload["image"],
            score=score,
            verdict=verdict,
            scanned_at=scanned_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "image": self.image,
            "score": self.score,
            "verdict": self.verdict,
            "scanned_at": self.scanned_at.isoformat(),
        }


class ScanHistory:
    """Newest-first list of scans, kept only for the process lifetime.

    Appending requires an authenticated session. The list grows without
    bound until ``clear`` is called.
    """

    def __init__(self, session_store: SessionStore) -> None:
        self._session_store = session_store
        self._records: list[ScanRecord] = []
        self._lock = threading.Lock()

    @property
    def records(self) -> tuple[ScanRecord, ...]:
        return tuple(self._records)

    def append(self, payload: Mapping[str, Any]) -> ScanRecord:
        if not self._session_store.is_authenticated:
            raise NoActiveSessionError()

        record = ScanRecord.from_payload(payload, scanned_at=_now())
        with self._lock:
            self._records.insert(0, record)
        logger.info(
            "recorded scan",
            extra={"product_id": record.id, "verdict": record.verdict},
        )
        return record

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def summary(self) -> ScanSummary:
        """Totals for the dashboard scan card."""

        records = self.records
        verdicts = {verdict.value: 0 for verdict in ScanVerdict}
        for record in records:
            verdicts[record.verdict] += 1
        average = (
            round(sum(record.score for record in records) / len(records), 2)
            if records
            else 0
        )
        return {
            "total_scans": len(records),
            "average_score": average,
            "verdicts": verdicts,
        }
