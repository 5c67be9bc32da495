"""Pipeline stage catalog: defaults, parsing and ordering helpers."""

from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import InvalidCatalog
from .models import PipelineStage
from .schema import validate_catalog

DEFAULT_STAGES = [
    PipelineStage("new", "New", 1, "primary", "Candidates who just applied"),
    PipelineStage("screening", "Screening", 2, "info", "Initial profile review"),
    PipelineStage("interview", "Interview", 3, "warning", "Interview process"),
    PipelineStage("technical", "Technical Assessment", 4, "secondary", "Technical tests and assessments"),
    PipelineStage("final", "Final Interview", 5, "dark", "Interview with management"),
    PipelineStage("offer", "Offer", 6, "success", "Offer sent"),
    PipelineStage("hired", "Hired", 7, "success", "Candidate hired", terminal=True),
    PipelineStage("rejected", "Rejected", 8, "danger", "Candidates not selected", terminal=True),
]

StageLike = Union[PipelineStage, Dict[str, Any]]


def build_catalog(stages: Sequence[StageLike]) -> List[PipelineStage]:
    """
    Validate a catalog and return its stages sorted by order.

    Raises:
        InvalidCatalog: empty catalog, malformed stage, duplicate id or order
    """
    errors = validate_catalog(list(stages or []))
    if errors:
        raise InvalidCatalog(errors)
    parsed = [s if isinstance(s, PipelineStage) else PipelineStage.from_dict(s) for s in stages]
    return sorted(parsed, key=lambda s: s.order)


def initial_stage(catalog: Sequence[PipelineStage]) -> PipelineStage:
    return min(catalog, key=lambda s: s.order)


def find_stage(catalog: Sequence[PipelineStage], stage_id: str) -> Optional[PipelineStage]:
    for stage in catalog:
        if stage.id == stage_id:
            return stage
    return None


def next_stage(catalog: Sequence[PipelineStage], stage_id: str) -> Optional[PipelineStage]:
    """The stage immediately after stage_id by order; None from the last or a terminal stage."""
    ordered = sorted(catalog, key=lambda s: s.order)
    for i, stage in enumerate(ordered):
        if stage.id == stage_id:
            if stage.terminal or i == len(ordered) - 1:
                return None
            return ordered[i + 1]
    return None


def catalog_to_records(catalog: Sequence[PipelineStage]) -> List[Dict[str, Any]]:
    return [s.to_dict() for s in catalog]
