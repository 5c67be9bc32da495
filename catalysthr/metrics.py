"""
Hiring metrics over candidate snapshots.

Pure functions: pass in what the engine returns (``engine.candidates()``).
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .matching import round_half_up
from .models import CandidateProfile

CLOSED_STAGES = ("hired", "rejected")
SECONDS_PER_DAY = 60 * 60 * 24


def _percentage(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole else 0


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    # Mixed naive/aware values cannot be subtracted; compare as naive.
    return parsed.replace(tzinfo=None)


def board_summary(candidates: Iterable[CandidateProfile]) -> Dict[str, Any]:
    """Headline counts shown above the board."""
    candidates = list(candidates)
    total = len(candidates)
    hired = sum(1 for c in candidates if c.stage == "hired")
    rejected = sum(1 for c in candidates if c.stage == "rejected")
    return {
        "total": total,
        "active": total - hired - rejected,
        "hired": hired,
        "rejected": rejected,
        "conversion_rate": _percentage(hired, total),
    }


def days_to_close(candidate: CandidateProfile) -> Optional[float]:
    """Days between application and the last stage change, for closed candidates."""
    if candidate.stage not in CLOSED_STAGES:
        return None
    applied = _parse_timestamp(candidate.applied_date)
    closed = _parse_timestamp(candidate.stage_updated_at)
    if applied is None or closed is None:
        return None
    return (closed - applied).total_seconds() / SECONDS_PER_DAY


def job_metrics(
    candidates: Iterable[CandidateProfile],
    job_id: Any,
    stage_ids: Sequence[str],
) -> Dict[str, Any]:
    """
    Per-posting hiring metrics.

    Args:
        candidates: All candidates; filtered on ``job_id`` (compared as strings)
        job_id: Posting id
        stage_ids: Stage ids to report in ``stage_distribution``, in order

    Returns:
        dict with total_applications, hired_count, hire_effectiveness (percent),
        avg_days_to_close (None when nothing has closed) and stage_distribution
    """
    applications: List[CandidateProfile] = [
        c for c in candidates if c.job_id is not None and str(c.job_id) == str(job_id)
    ]
    hired_count = sum(1 for c in applications if c.stage == "hired")

    durations = [d for d in (days_to_close(c) for c in applications) if d is not None]
    avg_days = round_half_up(sum(durations) / len(durations)) if durations else None

    distribution = {stage_id: 0 for stage_id in stage_ids}
    for c in applications:
        if c.stage in distribution:
            distribution[c.stage] += 1

    return {
        "total_applications": len(applications),
        "hired_count": hired_count,
        "hire_effectiveness": _percentage(hired_count, len(applications)),
        "avg_days_to_close": avg_days,
        "stage_distribution": distribution,
    }
