"""
Tests for record normalization.
"""

import pytest
from catalysthr.models import CandidateProfile, JobStatus, SalaryRange
from catalysthr.normalize import (
    normalize_candidate,
    normalize_experience,
    normalize_job,
    normalize_salary_range,
    normalize_skills,
    record_key,
    to_number,
)


class TestScalars:
    """Test scalar helpers."""

    def test_record_key(self):
        assert record_key(1) == record_key("1") == "1"

    @pytest.mark.parametrize("raw,expected", [
        (3, 3), (2.5, 2.5), ("3 años", 3), ("about 4.5 years", 4.5), ("none", None),
        (None, None), (True, None), (float("nan"), None),
    ])
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected

    def test_experience_clamped(self):
        assert normalize_experience(-3) == 0
        assert normalize_experience("n/a") == 0
        assert normalize_experience("5 years") == 5


class TestSkills:
    """Test skill list normalization."""

    def test_dedupe_first_spelling_wins(self):
        assert normalize_skills([" React", "react", "SQL", "", None]) == ["React", "SQL"]

    def test_comma_string(self):
        assert normalize_skills("Python, SQL,,Docker") == ["Python", "SQL", "Docker"]

    def test_none(self):
        assert normalize_skills(None) == []

    @pytest.mark.parametrize("value", [5, 2.5, True, {"React": 1}])
    def test_scalar_or_mapping_is_empty(self, value):
        assert normalize_skills(value) == []


class TestSalary:
    """Test salary range normalization."""

    def test_valid(self):
        assert normalize_salary_range({"min": 1, "max": 2}) == SalaryRange(1, 2)

    def test_zero_max_is_open_ended(self):
        assert normalize_salary_range({"min": 1, "max": 0}) == SalaryRange(1, None)

    def test_inverted_is_absent(self):
        assert normalize_salary_range({"min": 5, "max": 1}) is None

    def test_non_numeric_is_absent(self):
        assert normalize_salary_range({"min": "lots", "max": 2}) is None
        assert normalize_salary_range("3M") is None

    def test_empty_is_absent(self):
        assert normalize_salary_range({}) is None


class TestRecords:
    """Test candidate and job normalization."""

    def test_candidate_camel_case(self, example_candidate):
        c = normalize_candidate(example_candidate)
        assert c.experience_years == 3
        assert c.preferred_location == "Remoto"
        assert c.salary_range == SalaryRange(3000000, 5000000)
        assert c.stage is None

    def test_candidate_legacy_fields(self):
        c = normalize_candidate({
            "id": 1,
            "experience": "6 años",
            "status": "interview",
            "statusUpdatedDate": "2024-01-16",
            "notes": [{"text": "ok"}, {"text": ""}],
        })
        assert c.experience_years == 6
        assert c.stage == "interview"
        assert c.stage_updated_at == "2024-01-16"
        assert [n.text for n in c.notes] == ["ok"]
        assert c.notes[0].author == "HR"

    def test_candidate_instance_passthrough(self):
        c = CandidateProfile(id=1)
        assert normalize_candidate(c) is c

    def test_blank_strings_become_none(self):
        c = normalize_candidate({"id": 1, "preferredLocation": "  ", "industry": ""})
        assert c.preferred_location is None
        assert c.industry is None

    def test_job_defaults(self):
        job = normalize_job({"id": 1, "requiredSkills": "React, SQL"})
        assert job.required_skills == ["React", "SQL"]
        assert job.status is JobStatus.ACTIVE

    def test_job_status(self):
        assert normalize_job({"id": 1, "status": "Pending Approval"}).status is JobStatus.PENDING_APPROVAL

    @pytest.mark.parametrize("record", [None, 7, "Ana", ["React"]])
    def test_non_mapping_records_are_empty(self, record):
        candidate = normalize_candidate(record)
        job = normalize_job(record)
        assert candidate.id is None
        assert candidate.skills == []
        assert job.required_skills == []
        assert job.status is JobStatus.ACTIVE

    def test_scalar_notes_dropped(self):
        assert normalize_candidate({"id": 1, "notes": 3}).notes == []
