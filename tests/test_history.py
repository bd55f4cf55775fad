import unittest
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skintrack_backend.models import Base
from skintrack_backend.services.accounts import AccountRegistry
from skintrack_backend.services.history import (
    InvalidScanError,
    NoActiveSessionError,
    ScanHistory,
)
from skintrack_backend.services.session import SessionStore
from skintrack_backend.services.storage import KeyValueStore


def _build_sessions() -> SessionStore:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    store = KeyValueStore(sessionmaker(bind=engine, expire_on_commit=False))
    return SessionStore(store, AccountRegistry(store), auto_create_demo=False)


def _scan(name: str, **overrides) -> dict:
    payload = {
        "id": f"prod-{name}",
        "name": name,
        "brand": "GlowLab",
        "image": "https://images.test/serum.jpg",
        "score": 92,
        "verdict": "good",
    }
    payload.update(overrides)
    return payload


class ScanHistoryTests(unittest.TestCase):
    def setUp(self):
        self.sessions = _build_sessions()
        self.sessions.signup("a@b.com", "pw", "A")
        self.history = ScanHistory(self.sessions)

    def test_records_are_newest_first(self):
        for name in ("X", "Y", "Z"):
            self.history.append(_scan(name))

        self.assertEqual(
            [record.name for record in self.history.records], ["Z", "Y", "X"]
        )

    def test_append_stamps_current_time_and_ignores_supplied_timestamp(self):
        before = datetime.now(timezone.utc)

        record = self.history.append(
            _scan("X", scanned_at="1999-01-01T00:00:00+00:00")
        )

        self.assertGreaterEqual(record.scanned_at, before)
        self.assertLessEqual(record.scanned_at, datetime.now(timezone.utc))
        self.assertEqual(record.to_dict()["scanned_at"], record.scanned_at.isoformat())

    def test_append_without_session_raises(self):
        self.sessions.logout()

        with self.assertRaises(NoActiveSessionError):
            self.history.append(_scan("X"))
        self.assertEqual(self.history.records, ())

    def test_invalid_payloads_are_rejected(self):
        cases = [
            _scan("X", verdict="meh"),
            _scan("X", score="high"),
            _scan("X", score=True),
            _scan("X", score=float("nan")),
            _scan("X", score=float("inf")),
            {"id": "1", "name": "X"},
            None,
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                with self.assertRaises(InvalidScanError):
                    self.history.append(payload)
        self.assertEqual(self.history.records, ())

    def test_clear_empties_history_even_without_session(self):
        self.history.append(_scan("X"))
        self.sessions.logout()

        self.history.clear()

        self.assertEqual(self.history.records, ())

    def test_logout_keeps_recorded_scans(self):
        self.history.append(_scan("X"))

        self.sessions.logout()

        self.assertEqual(len(self.history.records), 1)

    def test_summary_counts_verdicts_and_averages_scores(self):
        self.history.append(_scan("X", score=90))
        self.history.append(_scan("Y", score=40, verdict="avoid"))
        self.history.append(_scan("Z", score=65.5, verdict="caution"))

        self.assertEqual(
            self.history.summary(),
            {
                "total_scans": 3,
                "average_score": 65.17,
                "verdicts": {"good": 1, "caution": 1, "avoid": 1},
            },
        )

    def test_summary_of_empty_history(self):
        summary = self.history.summary()

        self.assertEqual(summary["total_scans"], 0)
        self.assertEqual(summary["average_score"], 0)


if __name__ == "__main__":
    unittest.main()
