import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skintrack_backend.models import Base
from skintrack_backend.services.storage import KeyValueStore, StorageError


class KeyValueStoreTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.store = KeyValueStore(
            sessionmaker(bind=self.engine, expire_on_commit=False)
        )

    def test_read_missing_key_returns_none(self):
        self.assertIsNone(self.store.read("user"))
        self.assertIsNone(self.store.read_json("user"))

    def test_write_replaces_whole_value(self):
        self.store.write("users", "[1, 2, 3]")
        self.store.write("users", "[]")

        self.assertEqual(self.store.read("users"), "[]")

    def test_json_helpers_round_trip_structured_values(self):
        self.store.write_json("user", {"id": "abc", "goals": ["Hydration"]})

        self.assertEqual(
            self.store.read_json("user"), {"id": "abc", "goals": ["Hydration"]}
        )

    def test_remove_is_idempotent(self):
        self.store.write("user", "{}")
        self.store.remove("user")
        self.store.remove("user")

        self.assertIsNone(self.store.read("user"))

    def test_corrupt_json_raises_storage_error(self):
        self.store.write("users", "{not json")

        with self.assertRaises(StorageError):
            self.store.read_json("users")

    def test_database_failures_raise_storage_error(self):
        Base.metadata.drop_all(self.engine)

        with self.assertRaises(StorageError):
            self.store.read("user")
        with self.assertRaises(StorageError):
            self.store.write("user", "{}")


if __name__ == "__main__":
    unittest.main()
