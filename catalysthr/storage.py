"""
Record stores: the persistence boundary of the pipeline engine.

A store holds JSON-compatible records grouped into collections and keyed by
string id. Records are copied on the way in and out so callers never share
mutable state with the store.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import PersistenceError


class RecordStore:
    """Interface: get / list / put over named collections."""

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def list(self, collection: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def put(self, collection: str, record_id: str, record: Dict[str, Any]) -> None:
        raise NotImplementedError


class MemoryRecordStore(RecordStore):
    def __init__(self, collections: Optional[Dict[str, Dict[str, Any]]] = None):
        self.collections: Dict[str, Dict[str, Any]] = copy.deepcopy(collections or {})

    def get(self, collection, record_id):
        record = self.collections.get(collection, {}).get(str(record_id))
        return copy.deepcopy(record)

    def list(self, collection):
        return [copy.deepcopy(r) for r in self.collections.get(collection, {}).values()]

    def put(self, collection, record_id, record):
        self.collections.setdefault(collection, {})[str(record_id)] = copy.deepcopy(record)


def load_store(path: Path) -> Dict[str, Any]:
    """Read a JSON store file; a missing or empty file is an empty store."""
    if not path.exists():
        return {"collections": {}}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
    except OSError as e:
        raise PersistenceError(f"Cannot read store {path}: {e}") from e
    if not content:
        return {"collections": {}}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Store {path} is not valid JSON: {e}") from e
    data.setdefault("collections", {})
    return data


def save_store(path: Path, store: Dict[str, Any]) -> None:
    try:
        content = json.dumps(store, indent=2, ensure_ascii=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(content)
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"Cannot write store {path}: {e}") from e


class JsonRecordStore(RecordStore):
    """Whole-file JSON store; every put rewrites the file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self, collection, record_id):
        return load_store(self.path)["collections"].get(collection, {}).get(str(record_id))

    def list(self, collection):
        return list(load_store(self.path)["collections"].get(collection, {}).values())

    def put(self, collection, record_id, record):
        store = load_store(self.path)
        store["collections"].setdefault(collection, {})[str(record_id)] = record
        save_store(self.path, store)


def diff_dict(old: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    changed = {}
    keys = set(old.keys()) | set(new.keys())
    for k in keys:
        ov = old.get(k)
        nv = new.get(k)
        if ov != nv:
            changed[k] = {"old": ov, "new": nv}
    return changed


SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


def open_store(path: Path, max_retries: int = 0) -> RecordStore:
    """Pick a backend from the file suffix: SQLite for .db/.sqlite, JSON otherwise."""
    path = Path(path)
    if path.suffix.lower() in SQLITE_SUFFIXES:
        from .database import SqlRecordStore
        return SqlRecordStore(path, max_retries=max_retries)
    return JsonRecordStore(path)
