"""
Error taxonomy for the pipeline engine and record stores.

Validation-style failures (unknown ids, bad catalogs, bad records) derive
from PipelineError. Storage failures are reported as PersistenceError so
callers can tell "you asked for something invalid" apart from "the write
did not happen".
"""

from typing import Any, List


class CatalystError(Exception):
    """Base class for every error raised by catalysthr."""
    pass


class PipelineError(CatalystError):
    """A pipeline operation was rejected before touching storage."""
    pass


class UnknownCandidate(PipelineError):
    def __init__(self, candidate_id: Any):
        self.candidate_id = candidate_id
        super().__init__(f"Unknown candidate: {candidate_id}")


class UnknownStage(PipelineError):
    def __init__(self, stage_id: Any):
        self.stage_id = stage_id
        super().__init__(f"Unknown stage: {stage_id}")


class NoNextStage(PipelineError):
    """Raised by advance() when the candidate is already in a final stage."""

    def __init__(self, candidate_id: Any, stage_id: str):
        self.candidate_id = candidate_id
        self.stage_id = stage_id
        super().__init__(f"Candidate {candidate_id} is already in the last stage ({stage_id})")


class InvalidCatalog(PipelineError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid stage catalog: " + "; ".join(self.errors))


class InvalidRecord(PipelineError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid record: " + "; ".join(self.errors))


class PersistenceError(CatalystError):
    """Raised when the record store cannot read or write."""
    pass
