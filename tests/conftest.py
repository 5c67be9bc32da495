"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Any

from catalysthr.logger import get_logger, reset_logger
from catalysthr.storage import MemoryRecordStore


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh global logger per test, with no console or file output."""
    reset_logger()
    logger = get_logger(enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CATALYST_* settings from the developer's shell out of tests."""
    for name in (
        "CATALYST_STORE",
        "CATALYST_LOG_LEVEL",
        "CATALYST_LOG_DIR",
        "CATALYST_LOG_TO_FILE",
        "CATALYST_NOTE_AUTHOR",
        "CATALYST_DB_RETRIES",
        "CATALYST_RANK_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("catalysthr.config._config", None)


class FakeClock:
    """Deterministic clock; each call returns the current time, tick() moves it."""

    def __init__(self, start: datetime = datetime(2024, 1, 20, 10, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def example_candidate() -> Dict[str, Any]:
    """Candidate from the documented scoring example (camelCase, as the UI sends it)."""
    return {
        "id": "c1",
        "skills": ["React", "Node.js"],
        "experienceYears": 3,
        "preferredLocation": "Remoto",
        "salaryRange": {"min": 3000000, "max": 5000000},
        "industry": "technology",
    }


@pytest.fixture
def example_job() -> Dict[str, Any]:
    """Job from the documented scoring example."""
    return {
        "id": "j1",
        "title": "Full Stack Developer",
        "requiredSkills": ["React", "Node.js", "SQL"],
        "experienceLevel": "semi-senior",
        "location": "Remoto",
        "salaryRange": {"min": 4000000, "max": 6000000},
        "industry": "technology",
    }


@pytest.fixture
def candidate_records() -> list:
    """Stored candidate records spread over the default stages."""
    return [
        {"id": 1, "name": "Ana", "stage": "new", "skills": ["React"], "job_id": 1,
         "applied_date": "2024-01-15"},
        {"id": 2, "name": "Carlos", "stage": "screening", "skills": ["Node.js"], "job_id": 2,
         "applied_date": "2024-01-14"},
        {"id": 3, "name": "María", "stage": "new", "skills": ["Figma"], "job_id": 1,
         "applied_date": "2024-01-12"},
        {"id": 4, "name": "Luis", "stage": "offer", "skills": ["AWS"], "job_id": 2,
         "applied_date": "2024-01-10"},
    ]


@pytest.fixture
def memory_store(candidate_records) -> MemoryRecordStore:
    """Memory store holding candidate_records."""
    return MemoryRecordStore({"candidates": {str(r["id"]): r for r in candidate_records}})


@pytest.fixture
def temp_store_file(tmp_path) -> Path:
    """Create a temporary, empty JSON store file."""
    store_file = tmp_path / "test_store.json"
    store_file.write_text(json.dumps({"collections": {}}))
    return store_file


@pytest.fixture
def populated_store(tmp_path, candidate_records) -> Path:
    """JSON store file with candidate_records."""
    store_file = tmp_path / "test_store.json"
    data = {"collections": {"candidates": {str(r["id"]): r for r in candidate_records}}}
    store_file.write_text(json.dumps(data, indent=2))
    return store_file
