"""
Tests for schema validation.
"""

import pytest
from catalysthr.models import PipelineStage
from catalysthr.schema import (
    validate_candidate,
    validate_catalog,
    validate_job,
    validate_job_strict,
    validate_stage,
)


class TestValidateCandidate:
    """Test candidate record validation."""

    def test_valid_minimal(self):
        assert validate_candidate({"id": 1}) == []

    def test_valid_camel_case(self, example_candidate):
        """UI-shaped records validate too."""
        assert validate_candidate(example_candidate) == []

    def test_missing_id(self):
        errors = validate_candidate({"name": "Ana"})
        assert any("id" in err for err in errors)

    def test_not_an_object(self):
        assert validate_candidate(["id", 1]) == ["Candidate record must be an object"]

    def test_negative_experience(self):
        errors = validate_candidate({"id": 1, "experience_years": -2})
        assert any("experience_years" in err for err in errors)

    def test_experience_must_be_numeric(self):
        """Free text belongs to normalization, not to stored records."""
        assert validate_candidate({"id": 1, "experienceYears": "3 years"}) != []

    def test_skills_must_be_strings(self):
        assert validate_candidate({"id": 1, "skills": ["React", 3]}) != []

    def test_salary_min_above_max(self):
        errors = validate_candidate({"id": 1, "salary_range": {"min": 5, "max": 1}})
        assert any("min <= max" in err for err in errors)

    def test_open_ended_salary_is_valid(self):
        assert validate_candidate({"id": 1, "salary_range": {"min": 5, "max": 0}}) == []

    def test_stage_must_be_slug(self):
        assert validate_candidate({"id": 1, "stage": "Final Interview"}) != []
        assert validate_candidate({"id": 1, "stage": "final_interview"}) == []

    def test_note_text_required(self):
        errors = validate_candidate({"id": 1, "notes": [{"author": "HR", "text": " "}]})
        assert errors == ["Note 0 must be an object with non-empty 'text'"]


class TestValidateJob:
    """Test job record validation."""

    def test_valid(self, example_job):
        assert validate_job(example_job) == []

    def test_unknown_status(self):
        errors = validate_job({"id": 1, "status": "archived"})
        assert any("status" in err for err in errors)

    @pytest.mark.parametrize("status", ["active", "pending_approval", "closed", "draft", "paused"])
    def test_known_statuses(self, status):
        assert validate_job({"id": 1, "status": status}) == []

    def test_unknown_level_allowed_by_default(self):
        assert validate_job({"id": 1, "experience_level": "wizard"}) == []

    def test_strict_rejects_unknown_level(self):
        ok, errors = validate_job_strict({"id": 1, "experience_level": "wizard"})
        assert not ok
        assert any("experience_level" in err for err in errors)

    def test_strict_accepts_known_level(self):
        assert validate_job_strict({"id": 1, "experienceLevel": "Senior"}) == (True, [])


class TestValidateStage:
    """Test stage and catalog validation."""

    def test_valid_stage(self):
        assert validate_stage({"id": "screening", "name": "Screening", "order": 2}) == []

    def test_order_must_be_int(self):
        assert validate_stage({"id": "a", "order": "1"}) != []
        assert validate_stage({"id": "a", "order": True}) != []

    def test_terminal_must_be_bool(self):
        assert validate_stage({"id": "a", "order": 1, "terminal": "yes"}) != []

    def test_empty_catalog(self):
        assert validate_catalog([]) == ["Stage catalog must not be empty"]

    def test_duplicate_order(self):
        errors = validate_catalog([
            {"id": "a", "order": 1},
            {"id": "b", "order": 1},
        ])
        assert errors == ["Duplicate stage order: 1"]

    def test_duplicate_id(self):
        errors = validate_catalog([
            {"id": "a", "order": 1},
            {"id": "a", "order": 2},
        ])
        assert errors == ["Duplicate stage id: a"]

    def test_accepts_stage_objects(self):
        assert validate_catalog([PipelineStage("a", "A", 1), PipelineStage("b", "B", 2)]) == []
