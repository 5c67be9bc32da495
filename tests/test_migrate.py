"""
Tests for scripts/migrate_json_to_db.py.
"""

import importlib.util
import pytest
from pathlib import Path

from catalysthr.database import SqlRecordStore
from catalysthr.storage import JsonRecordStore

SCRIPT = Path(__file__).parent.parent / "scripts" / "migrate_json_to_db.py"


@pytest.fixture(scope="module")
def migrate_module():
    spec = importlib.util.spec_from_file_location("migrate_json_to_db", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestMigrate:
    """Test JSON to SQLite migration."""

    def test_copies_all_collections(self, migrate_module, populated_store, tmp_path, capsys):
        JsonRecordStore(populated_store).put("jobs", "1", {"id": 1, "title": "Dev"})
        db_path = tmp_path / "store.db"

        assert migrate_module.migrate(populated_store, db_path) is True

        db = SqlRecordStore(db_path)
        assert [r["name"] for r in db.list("candidates")] == ["Ana", "Carlos", "María", "Luis"]
        assert db.get("jobs", "1") == {"id": 1, "title": "Dev"}
        assert "Migrated: 5" in capsys.readouterr().out

    def test_skips_invalid_and_existing(self, migrate_module, tmp_path, capsys):
        json_store = JsonRecordStore(tmp_path / "store.json")
        json_store.put("candidates", "1", {"id": 1, "name": "Ana"})
        json_store.put("candidates", "2", {"id": 2, "experience_years": -1})
        db_path = tmp_path / "store.db"
        SqlRecordStore(db_path).put("candidates", "1", {"id": 1, "name": "Already here"})

        migrate_module.migrate(tmp_path / "store.json", db_path)

        db = SqlRecordStore(db_path)
        assert db.get("candidates", "1")["name"] == "Already here"
        assert db.get("candidates", "2") is None
        assert "Skipped:  2" in capsys.readouterr().out

    def test_dry_run_writes_nothing(self, migrate_module, populated_store, tmp_path, capsys):
        db_path = tmp_path / "store.db"
        migrate_module.migrate(populated_store, db_path, dry_run=True)
        assert not db_path.exists()
        assert "candidates: 4 records" in capsys.readouterr().out
