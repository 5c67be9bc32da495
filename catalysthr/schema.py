import re
from typing import Any, Dict, List, Sequence, Tuple

from .models import ExperienceLevel, JobStatus, PipelineStage

STAGE_ID_RE = re.compile(r"^[a-z][a-z0-9_-]*$")
JOB_STATUSES = [s.value for s in JobStatus]
EXPERIENCE_LEVELS = [lvl.value for lvl in ExperienceLevel]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _get(data: Dict[str, Any], *keys: str) -> Tuple[bool, Any]:
    for k in keys:
        if k in data:
            return True, data[k]
    return False, None


def _check_id(data: Dict[str, Any], errors: List[str]) -> None:
    if "id" not in data or data["id"] is None:
        errors.append("Missing required field: id")
    elif not (_is_non_empty_str(data["id"]) or (isinstance(data["id"], int) and not isinstance(data["id"], bool))):
        errors.append("Field 'id' must be a non-empty string or an integer")


def _check_skills(name: str, value: Any, errors: List[str]) -> None:
    if value is None or isinstance(value, str):
        return
    if not isinstance(value, (list, tuple, set)) or not all(isinstance(s, str) for s in value):
        errors.append(f"Field '{name}' must be a list of strings")


def _check_salary(value: Any, errors: List[str]) -> None:
    if value is None:
        return
    if not isinstance(value, dict):
        errors.append("Field 'salary_range' must be an object with 'min' and 'max'")
        return
    low, high = value.get("min"), value.get("max")
    for bound, v in (("min", low), ("max", high)):
        if v is not None and (not _is_number(v) or v < 0):
            errors.append(f"Field 'salary_range.{bound}' must be a non-negative number")
    if _is_number(low) and _is_number(high) and high and low > high:
        errors.append("Field 'salary_range' must have min <= max")


def _check_stage_id(name: str, value: Any, errors: List[str]) -> None:
    if not isinstance(value, str) or not STAGE_ID_RE.match(value):
        errors.append(f"Field '{name}' must be a lowercase stage id (letters, digits, '-', '_')")


def validate_candidate(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Accepts both snake_case and the camelCase keys the web UI sends.
    """
    errors: List[str] = []
    if not isinstance(data, dict):
        return ["Candidate record must be an object"]

    _check_id(data, errors)

    if "name" in data and data["name"] is not None and not isinstance(data["name"], str):
        errors.append("Field 'name' must be a string if provided")

    _check_skills("skills", data.get("skills"), errors)

    present, exp = _get(data, "experience_years", "experienceYears")
    if present and exp is not None and (not _is_number(exp) or exp < 0):
        errors.append("Field 'experience_years' must be a non-negative number")

    _, salary = _get(data, "salary_range", "salaryRange")
    _check_salary(salary, errors)

    present, stage = _get(data, "stage")
    if present and stage is not None:
        _check_stage_id("stage", stage, errors)

    notes = data.get("notes")
    if notes is not None:
        if not isinstance(notes, list):
            errors.append("Field 'notes' must be a list")
        else:
            for i, n in enumerate(notes):
                if not isinstance(n, dict) or not _is_non_empty_str(n.get("text")):
                    errors.append(f"Note {i} must be an object with non-empty 'text'")

    return errors


def validate_job(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    if not isinstance(data, dict):
        return ["Job record must be an object"]

    _check_id(data, errors)

    if "title" in data and data["title"] is not None and not isinstance(data["title"], str):
        errors.append("Field 'title' must be a string if provided")

    _, skills = _get(data, "required_skills", "requiredSkills")
    _check_skills("required_skills", skills, errors)

    for f in ("location", "industry"):
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    _, level = _get(data, "experience_level", "experienceLevel")
    if level is not None and not isinstance(level, str):
        errors.append("Field 'experience_level' must be a string if provided")

    _, salary = _get(data, "salary_range", "salaryRange")
    _check_salary(salary, errors)

    status = data.get("status")
    if status is not None and status not in JOB_STATUSES:
        errors.append(f"Field 'status' must be one of: {', '.join(JOB_STATUSES)}")

    return errors


def validate_job_strict(data: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """Like validate_job, but also rejects unrecognised experience levels."""
    errors = validate_job(data)
    if isinstance(data, dict):
        _, level = _get(data, "experience_level", "experienceLevel")
        if isinstance(level, str) and level.strip().lower() not in EXPERIENCE_LEVELS:
            errors.append(
                f"Field 'experience_level' must be one of: {', '.join(EXPERIENCE_LEVELS)}"
            )
    return (not errors, errors)


def validate_stage(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    if not isinstance(data, dict):
        return ["Stage must be an object"]
    if "id" not in data:
        errors.append("Missing required field: id")
    else:
        _check_stage_id("id", data["id"], errors)
    if "name" in data and not _is_non_empty_str(data["name"]):
        errors.append("Field 'name' must be a non-empty string")
    order = data.get("order")
    if not isinstance(order, int) or isinstance(order, bool):
        errors.append("Field 'order' must be an integer")
    if "terminal" in data and not isinstance(data["terminal"], bool):
        errors.append("Field 'terminal' must be a boolean")
    return errors


def validate_catalog(stages: Sequence[Any]) -> List[str]:
    """Validate a whole stage catalog: non-empty, every stage valid, unique ids and orders."""
    if not stages:
        return ["Stage catalog must not be empty"]

    errors: List[str] = []
    seen_ids = set()
    seen_orders = set()
    for i, stage in enumerate(stages):
        data = stage.to_dict() if isinstance(stage, PipelineStage) else stage
        stage_errors = validate_stage(data)
        errors.extend(f"Stage {i}: {e}" for e in stage_errors)
        if stage_errors:
            continue
        if data["id"] in seen_ids:
            errors.append(f"Duplicate stage id: {data['id']}")
        if data["order"] in seen_orders:
            errors.append(f"Duplicate stage order: {data['order']}")
        seen_ids.add(data["id"])
        seen_orders.add(data["order"])
    return errors
