"""
Tests for record stores.
"""

import json
import pytest
from pathlib import Path

from catalysthr.database import SqlRecordStore
from catalysthr.errors import PersistenceError
from catalysthr.storage import (
    JsonRecordStore,
    MemoryRecordStore,
    diff_dict,
    load_store,
    open_store,
    save_store,
)


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    """Every backend, for contract tests."""
    if request.param == "memory":
        return MemoryRecordStore()
    if request.param == "json":
        return JsonRecordStore(tmp_path / "store.json")
    return SqlRecordStore(tmp_path / "store.db")


class TestRecordStoreContract:
    """Behaviour shared by all backends."""

    def test_get_missing(self, store):
        assert store.get("candidates", "1") is None

    def test_list_empty_collection(self, store):
        assert store.list("candidates") == []

    def test_put_then_get(self, store):
        store.put("candidates", "1", {"id": 1, "name": "Ana"})
        assert store.get("candidates", "1") == {"id": 1, "name": "Ana"}

    def test_ids_compared_as_strings(self, store):
        store.put("candidates", 1, {"id": 1})
        assert store.get("candidates", "1") == {"id": 1}

    def test_put_overwrites(self, store):
        store.put("candidates", "1", {"id": 1, "stage": "new"})
        store.put("candidates", "1", {"id": 1, "stage": "offer"})
        assert store.get("candidates", "1")["stage"] == "offer"
        assert len(store.list("candidates")) == 1

    def test_list_keeps_insertion_order(self, store):
        for i in (3, 1, 2):
            store.put("candidates", str(i), {"id": i})
        store.put("candidates", "3", {"id": 3, "stage": "offer"})
        assert [r["id"] for r in store.list("candidates")] == [3, 1, 2]

    def test_collections_are_separate(self, store):
        store.put("candidates", "1", {"id": 1})
        store.put("jobs", "1", {"id": "job"})
        assert store.get("jobs", "1") == {"id": "job"}
        assert len(store.list("candidates")) == 1

    def test_records_are_copies(self, store):
        record = {"id": 1, "notes": []}
        store.put("candidates", "1", record)
        record["notes"].append("mutated")
        fetched = store.get("candidates", "1")
        fetched["notes"].append("again")
        assert store.get("candidates", "1")["notes"] == []

    def test_unicode_round_trip(self, store):
        store.put("candidates", "1", {"id": 1, "name": "María Fernández"})
        assert store.get("candidates", "1")["name"] == "María Fernández"


class TestJsonStore:
    """Test JSON file store specifics."""

    def test_missing_file_is_empty(self, tmp_path):
        assert load_store(tmp_path / "nope.json") == {"collections": {}}

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("")
        assert load_store(path) == {"collections": {}}

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(PersistenceError):
            JsonRecordStore(path).list("candidates")

    def test_file_format(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonRecordStore(path).put("candidates", "1", {"id": 1, "name": "Sofía"})
        text = path.read_text(encoding="utf-8")
        assert "Sofía" in text
        assert json.loads(text) == {"collections": {"candidates": {"1": {"id": 1, "name": "Sofía"}}}}

    def test_populated_store(self, populated_store):
        store = JsonRecordStore(populated_store)
        assert [r["name"] for r in store.list("candidates")] == ["Ana", "Carlos", "María", "Luis"]

    def test_unserializable_record_leaves_file_intact(self, temp_store_file):
        before = temp_store_file.read_text()
        with pytest.raises(PersistenceError):
            save_store(temp_store_file, {"collections": {"x": {"1": {"bad": object()}}}})
        assert temp_store_file.read_text() == before


class TestOpenStore:
    """Test backend selection."""

    def test_json_by_default(self, tmp_path):
        assert isinstance(open_store(tmp_path / "store.json"), JsonRecordStore)

    @pytest.mark.parametrize("name", ["store.db", "store.sqlite", "store.SQLITE3"])
    def test_sqlite_suffixes(self, tmp_path, name):
        store = open_store(tmp_path / name, max_retries=2)
        assert isinstance(store, SqlRecordStore)
        assert store.max_retries == 2


class TestDiffDict:
    """Test record diffs used in debug logging."""

    def test_changed_keys(self):
        diff = diff_dict({"stage": "new", "name": "Ana"}, {"stage": "offer", "name": "Ana"})
        assert diff == {"stage": {"old": "new", "new": "offer"}}

    def test_added_and_removed(self):
        diff = diff_dict({"a": 1}, {"b": 2})
        assert diff == {"a": {"old": 1, "new": None}, "b": {"old": None, "new": 2}}
