"""
Normalization of raw candidate and job records.

Raw records arrive from the UI, demo seeds or older stores in mixed shapes
(camelCase keys, experience as "3 years", comma-separated skills). Every
optional field is filled with its documented default here, once, so the
scoring functions can assume fully populated inputs.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import CandidateProfile, JobPosting, JobStatus, Note, SalaryRange

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def normalize_text(s: str) -> str:
    return " ".join(s.strip().lower().split())


def record_key(record_id: Any) -> str:
    """Store key for a record id; 1 and "1" address the same record."""
    return str(record_id).strip()


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if data.get(k) is not None:
            return data[k]
    return None


def clean_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        m = _NUMBER_RE.search(value)
        if m:
            n = float(m.group())
            return int(n) if n.is_integer() else n
    return None


def normalize_skills(values: Union[str, Iterable[Any], None]) -> List[str]:
    """Strip, drop empties and de-duplicate case-insensitively (first spelling wins)."""
    if isinstance(values, str):
        values = values.split(",")
    elif not isinstance(values, (list, tuple, set)):
        return []
    seen = set()
    result = []
    for v in values:
        s = clean_str(v)
        if s is None or s.lower() in seen:
            continue
        seen.add(s.lower())
        result.append(s)
    return result


def normalize_experience(value: Any) -> float:
    years = to_number(value)
    if years is None or years < 0:
        return 0
    return years


def normalize_salary_range(value: Any) -> Optional[SalaryRange]:
    """Return a SalaryRange, or None when absent or malformed (min > max, negatives)."""
    if isinstance(value, SalaryRange):
        value = value.to_dict()
    if not isinstance(value, dict):
        return None
    raw_min = value.get("min")
    raw_max = value.get("max")
    if raw_min is None and raw_max is None:
        return None
    low = to_number(raw_min) if raw_min is not None else 0
    high = to_number(raw_max) if raw_max is not None else None
    if low is None or low < 0:
        return None
    if raw_max is not None and high is None:
        return None
    if not high:
        # 0 or missing max means "unbounded"; the scorer applies the per-side default
        high = None
    elif high < low:
        return None
    return SalaryRange(min=low, max=high)


def normalize_notes(values: Any) -> List[Note]:
    if not isinstance(values, (list, tuple)):
        return []
    notes = []
    for n in values:
        if isinstance(n, Note):
            notes.append(n)
        elif isinstance(n, dict) and clean_str(n.get("text")):
            notes.append(
                Note(
                    author=clean_str(n.get("author")) or "HR",
                    date=str(n.get("date") or ""),
                    text=n["text"].strip(),
                )
            )
    return notes


def normalize_job_status(value: Any) -> JobStatus:
    if isinstance(value, JobStatus):
        return value
    key = clean_str(value)
    if key is None:
        return JobStatus.ACTIVE
    try:
        return JobStatus(normalize_text(key).replace(" ", "_"))
    except ValueError:
        # Unknown statuses are rejected by schema.validate_job at ingestion.
        return JobStatus.ACTIVE


def normalize_candidate(data: Union[CandidateProfile, Dict[str, Any], None]) -> CandidateProfile:
    if isinstance(data, CandidateProfile):
        return data
    if not isinstance(data, dict):
        data = {}
    return CandidateProfile(
        id=data.get("id"),
        name=clean_str(data.get("name")) or "",
        skills=normalize_skills(data.get("skills")),
        experience_years=normalize_experience(
            _pick(data, "experience_years", "experienceYears", "experience")
        ),
        preferred_location=clean_str(_pick(data, "preferred_location", "preferredLocation")),
        salary_range=normalize_salary_range(_pick(data, "salary_range", "salaryRange")),
        industry=clean_str(data.get("industry")),
        stage=clean_str(_pick(data, "stage", "status")),
        notes=normalize_notes(data.get("notes")),
        job_id=_pick(data, "job_id", "jobId"),
        applied_date=clean_str(_pick(data, "applied_date", "appliedDate")),
        stage_updated_at=clean_str(
            _pick(data, "stage_updated_at", "stageUpdatedAt", "statusUpdatedDate")
        ),
    )


def normalize_job(data: Union[JobPosting, Dict[str, Any], None]) -> JobPosting:
    if isinstance(data, JobPosting):
        return data
    if not isinstance(data, dict):
        data = {}
    return JobPosting(
        id=data.get("id"),
        title=clean_str(data.get("title")) or "",
        required_skills=normalize_skills(_pick(data, "required_skills", "requiredSkills")),
        experience_level=clean_str(_pick(data, "experience_level", "experienceLevel")),
        location=clean_str(data.get("location")),
        salary_range=normalize_salary_range(_pick(data, "salary_range", "salaryRange")),
        industry=clean_str(data.get("industry")),
        status=normalize_job_status(data.get("status")),
    )
