"""
Tests for storage backends and the atomic unit of work
"""

import pytest
from datetime import datetime, timezone

from loan_service.storage import InMemoryStorage, SQLiteStorage


def make_record(record_id, **fields):
    now = datetime.now(timezone.utc).isoformat()
    record = {"id": record_id, "created_at": now, "updated_at": now}
    record.update(fields)
    return record


@pytest.fixture(params=["memory", "sqlite_memory", "sqlite_file"])
def storage(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryStorage()
    elif request.param == "sqlite_memory":
        backend = SQLiteStorage()
    else:
        backend = SQLiteStorage(tmp_path / "loans.db")
    yield backend
    backend.close()


class TestStorageBackends:
    """Behaviour shared by every backend"""

    def test_save_and_load(self, storage):
        record = make_record("r1", amount="100.50", is_paid=False)
        storage.save("items", "r1", record)

        assert storage.load("items", "r1") == record
        assert storage.load("items", "missing") is None
        assert storage.exists("items", "r1")
        assert not storage.exists("items", "missing")

    def test_save_overwrites(self, storage):
        storage.save("items", "r1", make_record("r1", amount="1.00"))
        storage.save("items", "r1", make_record("r1", amount="2.00"))

        assert storage.count("items") == 1
        assert storage.load("items", "r1")["amount"] == "2.00"

    def test_load_all_in_insertion_order(self, storage):
        for record_id in ("b", "a", "c"):
            storage.save("items", record_id, make_record(record_id))

        assert [r["id"] for r in storage.load_all("items")] == ["b", "a", "c"]

    def test_find_by_equality(self, storage):
        storage.save("items", "r1", make_record("r1", owner="x", is_paid=False))
        storage.save("items", "r2", make_record("r2", owner="x", is_paid=True))
        storage.save("items", "r3", make_record("r3", owner="y", is_paid=False))

        assert [r["id"] for r in storage.find("items", {"owner": "x"})] == ["r1", "r2"]
        assert [r["id"] for r in storage.find("items", {"owner": "x", "is_paid": False})] == ["r1"]
        assert storage.find("items", {"owner": "z"}) == []

    def test_delete_and_clear(self, storage):
        storage.save("items", "r1", make_record("r1"))
        storage.save("items", "r2", make_record("r2"))

        assert storage.delete("items", "r1")
        assert not storage.delete("items", "r1")
        assert storage.count("items") == 1

        storage.clear_table("items")
        assert storage.count("items") == 0

    def test_atomic_commits(self, storage):
        with storage.atomic():
            storage.save("items", "r1", make_record("r1"))
            storage.save("items", "r2", make_record("r2"))

        assert storage.count("items") == 2

    def test_atomic_rolls_back_on_error(self, storage):
        storage.save("items", "r1", make_record("r1", amount="1.00"))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("items", "r1", make_record("r1", amount="9.00"))
                storage.save("items", "r2", make_record("r2"))
                raise RuntimeError("boom")

        assert storage.load("items", "r1")["amount"] == "1.00"
        assert not storage.exists("items", "r2")

    def test_nested_atomic_joins_outer(self, storage):
        with pytest.raises(RuntimeError):
            with storage.atomic():
                with storage.atomic():
                    storage.save("items", "inner", make_record("inner"))
                storage.save("items", "outer", make_record("outer"))
                raise RuntimeError("boom")

        assert storage.count("items") == 0

    def test_rollback_of_new_table(self, storage):
        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("fresh", "r1", make_record("r1"))
                raise RuntimeError("boom")

        storage.save("fresh", "r2", make_record("r2"))
        assert [r["id"] for r in storage.load_all("fresh")] == ["r2"]


    def test_load_latest(self, storage):
        assert storage.load_latest("items") is None

        for record_id in ("b", "a", "c"):
            storage.save("items", record_id, make_record(record_id))
        storage.save("items", "a", make_record("a", amount="5.00"))

        assert storage.load_latest("items")["id"] == "c"

    def test_load_latest_after_rollback(self, storage):
        storage.save("items", "r1", make_record("r1"))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("items", "r2", make_record("r2"))
                assert storage.load_latest("items")["id"] == "r2"
                raise RuntimeError("boom")

        assert storage.load_latest("items")["id"] == "r1"

    def test_rollback_restores_deleted_and_cleared(self, storage):
        for record_id in ("r1", "r2", "r3"):
            storage.save("items", record_id, make_record(record_id))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.delete("items", "r2")
                storage.save("items", "r4", make_record("r4"))
                storage.clear_table("items")
                storage.save("items", "r5", make_record("r5"))
                raise RuntimeError("boom")

        assert [r["id"] for r in storage.load_all("items")] == ["r1", "r2", "r3"]


class TestInMemoryStorage:

    def test_transaction_does_not_copy_untouched_tables(self):
        storage = InMemoryStorage()
        for i in range(100):
            storage.save("history", f"h{i}", make_record(f"h{i}"))

        copies = []
        original_copy = storage._copy

        def counting_copy(value):
            copies.append(value)
            return original_copy(value)

        storage._copy = counting_copy
        with storage.atomic():
            storage.save("items", "r1", make_record("r1"))

        # only the saved record is copied, never the history table
        assert len(copies) == 1

    def test_rollback_restores_overwritten_record_in_place(self):
        storage = InMemoryStorage()
        for record_id in ("r1", "r2"):
            storage.save("items", record_id, make_record(record_id, amount="1.00"))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("items", "r1", make_record("r1", amount="9.00"))
                storage.save("items", "r1", make_record("r1", amount="8.00"))
                raise RuntimeError("boom")

        assert [(r["id"], r["amount"]) for r in storage.load_all("items")] == [
            ("r1", "1.00"), ("r2", "1.00")
        ]

    def test_loaded_records_are_copies(self):
        storage = InMemoryStorage()
        storage.save("items", "r1", make_record("r1", tags=["a"]))

        loaded = storage.load("items", "r1")
        loaded["tags"].append("b")

        assert storage.load("items", "r1")["tags"] == ["a"]


class TestSQLiteStorage:

    def test_data_survives_reopen(self, tmp_path):
        db_path = tmp_path / "persist.db"
        storage = SQLiteStorage(db_path)
        storage.save("items", "r1", make_record("r1", amount="12.34"))
        storage.close()

        reopened = SQLiteStorage(db_path)
        assert reopened.load("items", "r1")["amount"] == "12.34"
        reopened.close()
