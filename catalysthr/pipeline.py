"""
Hiring pipeline engine.

Owns the ordered stage catalog and every candidate's current stage for a
session, and is the only sanctioned way to change them. Each mutation is
written to the record store before the in-memory snapshot changes, so a
failed write leaves the engine exactly as it was.

Store layout:
    candidates/<id>      candidate record (CandidateProfile.to_dict())
    pipeline/stages      {"stages": [stage records]}
"""

import copy
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .errors import (
    CatalystError,
    InvalidCatalog,
    InvalidRecord,
    NoNextStage,
    PersistenceError,
    UnknownCandidate,
    UnknownStage,
)
from .logger import StructuredLogger, get_logger
from .models import CandidateProfile, Note, PipelineStage, StageChange
from .normalize import normalize_candidate, record_key
from .schema import validate_candidate
from .stages import (
    DEFAULT_STAGES,
    StageLike,
    build_catalog,
    catalog_to_records,
    find_stage,
    initial_stage,
    next_stage,
)
from .storage import RecordStore, diff_dict

CANDIDATES = "candidates"
PIPELINE = "pipeline"
CATALOG_KEY = "stages"

StageObserver = Callable[[StageChange], None]


class PipelineEngine:
    """
    Candidate stage state machine over an injected record store.

    Args:
        store: RecordStore used for hydration and for every write
        stages: Explicit stage catalog; falls back to the stored catalog,
            then to DEFAULT_STAGES
        logger: StructuredLogger (default: global logger)
        clock: Callable returning the current datetime (for timestamps)
        rejected_stage: Stage id used by reject()
    """

    def __init__(
        self,
        store: RecordStore,
        stages: Optional[Sequence[StageLike]] = None,
        logger: Optional[StructuredLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rejected_stage: str = "rejected",
    ):
        self.store = store
        self.logger = logger or get_logger()
        self.clock = clock or datetime.now
        self.rejected_stage = rejected_stage
        self._observers: List[StageObserver] = []
        self._candidates: Dict[str, CandidateProfile] = {}
        self._catalog = self._load_catalog(stages)
        self._hydrate()

    # Hydration

    def _load_catalog(self, stages: Optional[Sequence[StageLike]]) -> List[PipelineStage]:
        stored = self.store.get(PIPELINE, CATALOG_KEY)
        stored_stages = (stored or {}).get("stages")

        if stages is not None:
            catalog = build_catalog(stages)
        elif stored_stages:
            catalog = build_catalog(stored_stages)
        else:
            catalog = list(DEFAULT_STAGES)

        if stored_stages != catalog_to_records(catalog):
            self._put_catalog(catalog)
        return catalog

    def _hydrate(self) -> None:
        valid_ids = {s.id for s in self._catalog}
        fallback = self.initial_stage.id

        for record in self.store.list(CANDIDATES):
            errors = validate_candidate(record)
            if errors:
                self.logger.error(
                    "Invalid candidate record in store",
                    candidate_id=record.get("id") if isinstance(record, dict) else None,
                    errors=errors,
                )
                raise InvalidRecord(errors)

            candidate = normalize_candidate(record)
            if candidate.stage not in valid_ids:
                self.logger.warning(
                    "Candidate stage not in catalog, moving to initial stage",
                    candidate_id=candidate.id, stage=candidate.stage, new_stage=fallback,
                )
                candidate = replace(candidate, stage=fallback, stage_updated_at=self._now())
                self._persist(candidate)
                self.logger.record_transition(fallback, "orphan")
            self._candidates[record_key(candidate.id)] = candidate

        self.logger.debug(
            "Pipeline hydrated",
            candidates=len(self._candidates), stages=[s.id for s in self._catalog],
        )

    # Read side

    @property
    def stages(self) -> List[PipelineStage]:
        """Current catalog ordered by stage order."""
        return list(self._catalog)

    @property
    def initial_stage(self) -> PipelineStage:
        return initial_stage(self._catalog)

    def get_candidate(self, candidate_id: Any) -> CandidateProfile:
        return copy.deepcopy(self._require_candidate(candidate_id, "get_candidate"))

    def candidates(self) -> List[CandidateProfile]:
        return [copy.deepcopy(c) for c in self._candidates.values()]

    def candidates_by_stage(self, stage_id: str) -> List[CandidateProfile]:
        """
        Candidates currently in stage_id, ordered by applied_date (records
        without one keep insertion order, after dated ones).
        """
        self._require_stage(stage_id, "candidates_by_stage")
        members = [c for c in self._candidates.values() if c.stage == stage_id]
        members.sort(key=lambda c: (c.applied_date is None, c.applied_date or ""))
        return [copy.deepcopy(c) for c in members]

    def board(self) -> List[Tuple[PipelineStage, List[CandidateProfile]]]:
        return [(stage, self.candidates_by_stage(stage.id)) for stage in self._catalog]

    def stage_counts(self) -> Dict[str, int]:
        counts = {stage.id: 0 for stage in self._catalog}
        for c in self._candidates.values():
            counts[c.stage] = counts.get(c.stage, 0) + 1
        return counts

    # Observers

    def subscribe(self, callback: StageObserver) -> Callable[[], None]:
        """Register a stage-change callback; returns a function that unregisters it."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _emit(self, change: StageChange) -> None:
        for callback in list(self._observers):
            callback(change)

    # Mutations

    def add_candidate(self, data: Any) -> CandidateProfile:
        """Ingest a new candidate; the stage defaults to the initial stage."""
        if isinstance(data, CandidateProfile):
            data = data.to_dict()
        errors = validate_candidate(data)
        if errors:
            raise self._fail(InvalidRecord(errors), "add_candidate")

        candidate = normalize_candidate(data)
        key = record_key(candidate.id)
        if key in self._candidates:
            raise self._fail(
                InvalidRecord([f"Duplicate candidate id: {candidate.id}"]),
                "add_candidate", candidate_id=candidate.id,
            )
        if candidate.stage is None:
            candidate.stage = self.initial_stage.id
        else:
            self._require_stage(candidate.stage, "add_candidate")
        if candidate.applied_date is None:
            candidate.applied_date = self.clock().date().isoformat()
        candidate.stage_updated_at = self._now()

        self._persist(candidate)
        self._candidates[key] = candidate
        self.logger.info("Candidate added", candidate_id=candidate.id, stage=candidate.stage)
        return copy.deepcopy(candidate)

    def advance(self, candidate_id: Any) -> str:
        """
        Move the candidate to the next stage by order.

        Returns:
            The new stage id

        Raises:
            UnknownCandidate: no such candidate
            NoNextStage: already in the last stage or a terminal stage
            PersistenceError: the store write failed (stage unchanged)
        """
        current = self._require_candidate(candidate_id, "advance")
        target = next_stage(self._catalog, current.stage)
        if target is None:
            raise self._fail(NoNextStage(current.id, current.stage), "advance", candidate_id=current.id)
        self._move(current, target, "advance")
        return target.id

    def set_stage(self, candidate_id: Any, target_stage_id: str) -> Optional[StageChange]:
        """
        Move the candidate to any stage, skipping or going backwards.

        Re-applying the current stage is an idempotent success: nothing is
        written or emitted and None is returned.
        """
        current = self._require_candidate(candidate_id, "set_stage")
        target = self._require_stage(target_stage_id, "set_stage")
        return self._move(current, target, "set")

    def reject(self, candidate_id: Any) -> Optional[StageChange]:
        current = self._require_candidate(candidate_id, "reject")
        target = self._require_stage(self.rejected_stage, "reject")
        return self._move(current, target, "reject")

    def reconfigure_stages(self, new_catalog: Sequence[StageLike]) -> List[Any]:
        """
        Replace the stage catalog.

        Candidates whose stage no longer exists are moved to the new catalog's
        lowest-order stage (persisted and emitted like any other move).
        Orphan records are written before the catalog; if any write fails the
        records already written are restored and the old catalog stays.

        Returns:
            Ids of the reassigned candidates

        Raises:
            InvalidCatalog: empty catalog, bad stage, duplicate id or order
            PersistenceError: a candidate or catalog write failed
        """
        try:
            catalog = build_catalog(new_catalog)
        except InvalidCatalog as e:
            self._fail(e, "reconfigure_stages")
            raise

        valid_ids = {s.id for s in catalog}
        fallback = initial_stage(catalog)
        changed_at = self._now()
        written: List[Tuple[CandidateProfile, CandidateProfile]] = []
        try:
            for candidate in list(self._candidates.values()):
                if candidate.stage in valid_ids:
                    continue
                updated = replace(candidate, stage=fallback.id, stage_updated_at=changed_at)
                self._persist(updated, previous=candidate)
                written.append((candidate, updated))
            self._put_catalog(catalog)
        except PersistenceError:
            self._restore([previous for previous, _ in written])
            raise

        old_ids = [s.id for s in self._catalog]
        self._catalog = catalog
        self.logger.record_reconfiguration()

        reassigned = []
        for previous, updated in written:
            self._commit_move(previous, updated, "orphan")
            reassigned.append(previous.id)

        self.logger.info(
            "Stage catalog reconfigured",
            old_stages=old_ids, new_stages=[s.id for s in catalog], reassigned=reassigned,
        )
        return reassigned

    def add_note(self, candidate_id: Any, author: str, text: str) -> Note:
        """Prepend a timestamped note (notes are kept newest-first)."""
        current = self._require_candidate(candidate_id, "add_note")
        text = (text or "").strip()
        if not text:
            raise self._fail(
                InvalidRecord(["Note text must not be empty"]), "add_note", candidate_id=current.id
            )
        note = Note(author=(author or "").strip() or "HR", date=self._now(), text=text)
        updated = replace(current, notes=[note] + list(current.notes))
        self._persist(updated)
        self._candidates[record_key(current.id)] = updated
        self.logger.record_note()
        self.logger.info("Note added", candidate_id=current.id, author=note.author)
        return note

    # Internals

    def _move(self, current: CandidateProfile, target: PipelineStage, kind: str) -> Optional[StageChange]:
        if current.stage == target.id:
            self.logger.debug("Stage unchanged", candidate_id=current.id, stage=target.id)
            return None

        updated = replace(current, stage=target.id, stage_updated_at=self._now())
        self._persist(updated, previous=current)
        return self._commit_move(current, updated, kind)

    def _commit_move(self, current: CandidateProfile, updated: CandidateProfile, kind: str) -> StageChange:
        """Apply an already persisted move to the snapshot and notify."""
        self._candidates[record_key(current.id)] = updated
        self.logger.record_transition(updated.stage, kind)
        self.logger.info(
            "Candidate stage changed",
            candidate_id=current.id, old_stage=current.stage, new_stage=updated.stage, kind=kind,
        )

        change = StageChange(
            candidate_id=current.id,
            old_stage=current.stage,
            new_stage=updated.stage,
            changed_at=updated.stage_updated_at,
        )
        self._emit(change)
        return change

    def _restore(self, records: Sequence[CandidateProfile]) -> None:
        """Write back the stored versions of records from an aborted batch."""
        for record in records:
            try:
                self._persist(record)
            except PersistenceError:
                # Already logged by _persist; keep restoring the rest
                continue
            self.logger.debug("Candidate restored", candidate_id=record.id, stage=record.stage)

    def _require_candidate(self, candidate_id: Any, op: str) -> CandidateProfile:
        candidate = self._candidates.get(record_key(candidate_id))
        if candidate is None:
            raise self._fail(UnknownCandidate(candidate_id), op, candidate_id=candidate_id)
        return candidate

    def _require_stage(self, stage_id: str, op: str) -> PipelineStage:
        stage = find_stage(self._catalog, stage_id)
        if stage is None:
            raise self._fail(UnknownStage(stage_id), op, stage_id=stage_id)
        return stage

    def _fail(self, exc: CatalystError, op: str, **context) -> CatalystError:
        self.logger.record_failure(type(exc).__name__)
        self.logger.warning(f"{op} failed: {exc}", op=op, **context)
        return exc

    def _persist(self, candidate: CandidateProfile, previous: Optional[CandidateProfile] = None) -> None:
        record = candidate.to_dict()
        key = record_key(candidate.id)
        try:
            self.store.put(CANDIDATES, key, record)
        except PersistenceError as e:
            self._log_write_failure(CANDIDATES, key, e)
            raise
        except OSError as e:
            self._log_write_failure(CANDIDATES, key, e)
            raise PersistenceError(f"Write failed for {CANDIDATES}/{key}: {e}") from e
        if previous is not None:
            self.logger.debug(
                "Candidate persisted", candidate_id=key,
                changed=sorted(diff_dict(previous.to_dict(), record)),
            )

    def _put_catalog(self, catalog: Sequence[PipelineStage]) -> None:
        try:
            self.store.put(PIPELINE, CATALOG_KEY, {"stages": catalog_to_records(catalog)})
        except PersistenceError as e:
            self._log_write_failure(PIPELINE, CATALOG_KEY, e)
            raise
        except OSError as e:
            self._log_write_failure(PIPELINE, CATALOG_KEY, e)
            raise PersistenceError(f"Write failed for {PIPELINE}/{CATALOG_KEY}: {e}") from e

    def _log_write_failure(self, collection: str, key: str, error: Exception) -> None:
        self.logger.record_failure("PersistenceError")
        self.logger.error("Record store write failed", collection=collection, record_id=key, error=str(error))

    def _now(self) -> str:
        return self.clock().isoformat(timespec="seconds")
