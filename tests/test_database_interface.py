"""Tests for the key-value store implementations."""

import pytest
from sqlalchemy import text

from commtrack.database.factories import create_sqlite_database
from commtrack.database.sqlalchemy_db import SQLAlchemyDatabase
from commtrack.domain.errors import StorageError


@pytest.fixture(params=["sqlite", "memory"])
def db(request, temp_db, memory_db):
    return temp_db if request.param == "sqlite" else memory_db


class TestDatabaseInterface:
    """Both backends must behave the same."""

    def test_get_missing_returns_default(self, db):
        assert db.get("orders") is None
        assert db.get("orders", {}) == {}

    def test_set_and_get(self, db):
        db.set("settings", {"accessory_threshold": "100", "commission_rate": "0.15"})
        assert db.get("settings") == {"accessory_threshold": "100", "commission_rate": "0.15"}

    def test_set_replaces_value(self, db):
        db.set("payouts", [{"id": "a"}])
        db.set("payouts", [{"id": "a"}, {"id": "b"}])
        assert db.get("payouts") == [{"id": "a"}, {"id": "b"}]

    def test_values_are_copied(self, db):
        value = {"orders": [{"order_id": "SH1"}]}
        db.set("orders", value)
        value["orders"].append({"order_id": "SH2"})

        stored = db.get("orders")
        stored["orders"].clear()

        assert db.get("orders") == {"orders": [{"order_id": "SH1"}]}

    def test_delete(self, db):
        db.set("catalog", [])
        db.delete("catalog")
        db.delete("catalog")
        assert db.get("catalog") is None

    def test_list_keys_sorted(self, db):
        db.set("settings", {})
        db.set("catalog", [])
        assert db.list_keys() == ["catalog", "settings"]


def test_sqlite_persists_across_handles(temp_db):
    temp_db.set("orders", {"orders": [], "last_updated": None})

    other = create_sqlite_database(database_path=temp_db.database_path)
    try:
        assert other.get("orders") == {"orders": [], "last_updated": None}
        other.set("orders", {"orders": [{"order_id": "SH1"}], "last_updated": None})
    finally:
        other.disconnect()

    assert temp_db.get("orders")["orders"] == [{"order_id": "SH1"}]


def test_env_var_selects_database(tmp_path, monkeypatch):
    path = tmp_path / "env.db"
    monkeypatch.setenv("COMMTRACK_DB_PATH", str(path))

    db = create_sqlite_database()
    try:
        assert db.database_url == f"sqlite:///{path}"
    finally:
        db.disconnect()


def test_storage_failures_are_wrapped(tmp_path):
    db = SQLAlchemyDatabase(f"sqlite:///{tmp_path / 'store.db'}")
    # Dropping the table makes every operation fail at the SQL level
    engine = db.session_factory.kw["bind"]
    with engine.begin() as connection:
        connection.execute(text("DROP TABLE kv_entries"))

    with pytest.raises(StorageError):
        db.get("orders")
    with pytest.raises(StorageError):
        db.set("orders", {})
    db.disconnect()
