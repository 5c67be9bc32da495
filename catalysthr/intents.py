"""
UI intent dispatcher.

Translates the intents a board UI emits (button clicks, drops, note forms)
into PipelineEngine calls, and every outcome into a Notification for the
user. Engine errors never escape dispatch().
"""

from typing import Any, Callable, Dict, Optional

from .errors import CatalystError
from .models import Notification
from .pipeline import PipelineEngine

NotificationSink = Callable[[Notification], None]


class IntentDispatcher:
    """
    Args:
        engine: PipelineEngine to drive
        sink: Optional callable receiving every Notification
        author: Note author used when an addNote intent names none
    """

    def __init__(self, engine: PipelineEngine, sink: Optional[NotificationSink] = None, author: str = "HR"):
        self.engine = engine
        self.sink = sink
        self.author = author
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Notification]] = {
            "advance": self._advance,
            "dropOnStage": self._drop_on_stage,
            "addNote": self._add_note,
            "reject": self._reject,
        }

    def dispatch(self, intent: Dict[str, Any]) -> Notification:
        intent_type = intent.get("type") if isinstance(intent, dict) else None
        handler = self._handlers.get(intent_type)

        if handler is None:
            self.engine.logger.warning("Unknown intent", intent_type=intent_type)
            notification = Notification("error", f"Unknown action: {intent_type}")
        else:
            try:
                notification = handler(intent)
            except CatalystError as e:
                notification = Notification("error", str(e))

        if self.sink is not None:
            self.sink(notification)
        return notification

    # Handlers

    def _advance(self, intent):
        candidate_id = intent.get("candidateId")
        stage_id = self.engine.advance(candidate_id)
        return self._moved(candidate_id, stage_id)

    def _drop_on_stage(self, intent):
        candidate_id = intent.get("candidateId")
        target = intent.get("targetStageId")
        change = self.engine.set_stage(candidate_id, target)
        if change is None:
            return Notification("info", f"{self._name(candidate_id)} is already in {self._stage_name(target)}")
        return self._moved(candidate_id, change.new_stage)

    def _reject(self, intent):
        candidate_id = intent.get("candidateId")
        change = self.engine.reject(candidate_id)
        if change is None:
            return Notification("info", f"{self._name(candidate_id)} was already rejected")
        return Notification("info", f"{self._name(candidate_id)} has been rejected")

    def _add_note(self, intent):
        candidate_id = intent.get("candidateId")
        self.engine.add_note(candidate_id, intent.get("author") or self.author, intent.get("text", ""))
        return Notification("info", f"Note added to {self._name(candidate_id)}")

    # Message helpers

    def _moved(self, candidate_id, stage_id):
        return Notification("info", f"{self._name(candidate_id)} moved to {self._stage_name(stage_id)}")

    def _name(self, candidate_id):
        candidate = self.engine.get_candidate(candidate_id)
        return candidate.name or f"Candidate {candidate.id}"

    def _stage_name(self, stage_id):
        for stage in self.engine.stages:
            if stage.id == stage_id:
                return stage.name
        return stage_id
