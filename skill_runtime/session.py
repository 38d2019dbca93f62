"""
Skills Session - orchestrates loader + engine + projection.

Apply order:
  1. engine.apply_event(event)   - may raise (unknown type, unknown domain)
  2. sequence assigned, event appended to the log - only if step 1 succeeded

The log therefore only ever holds events that replay cleanly, and
replaying it into a fresh engine must reproduce the same workspace.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from skill_kernel.domain_types import TransitionResult
from skill_kernel.engine import SkillsEngine, engine_from_events
from skill_kernel.events import BaseEvent, ReplaceRosterEvent
from skill_kernel.hashing import workspace_signature
from skill_kernel.projection import ProjectionService, WorkspaceView

from .drift import compare_taxonomies, has_drift
from .loader import LoadedRoster, load_roster

logger = logging.getLogger(__name__)


class DeterminismError(Exception):
    """Raised when replay produces a different workspace signature."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Determinism failure: live signature={expected!r}, "
            f"replayed signature={actual!r}"
        )


class SkillsSession:
    """
    One user's workspace: a roster source, an engine, its event log and
    a projection service.
    """

    def __init__(
        self,
        source: str | None = None,
        engine: SkillsEngine | None = None,
        projection: ProjectionService | None = None,
    ) -> None:
        self._source = source
        self._engine = engine or SkillsEngine()
        self._projection = projection or ProjectionService()
        self._events: List[BaseEvent] = []
        self._last_load: LoadedRoster | None = None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize(self) -> LoadedRoster:
        """Start from an empty workspace and load the configured roster."""
        self._engine.initialize_state()
        self._events = []
        return self.reload()

    def reload(self) -> LoadedRoster:
        """
        Re-read the roster source and replace the roster.
        A failed load replaces the roster with an empty one.
        """
        loaded = load_roster(self._source)
        before = self._engine.indices.taxonomy if self._has_state() else None
        self.apply_event(ReplaceRosterEvent.from_people(loaded.people))
        if before is not None:
            diff = compare_taxonomies(before, self._engine.indices.taxonomy)
            if has_drift(diff):
                logger.info(
                    "roster reload from %s: +%d/-%d domains, +%d/-%d skills",
                    loaded.source,
                    len(diff["added_domains"]), len(diff["removed_domains"]),
                    len(diff["added_skills"]), len(diff["removed_skills"]),
                )
        self._last_load = loaded
        return loaded

    def _has_state(self) -> bool:
        try:
            self._engine.state
        except RuntimeError:
            return False
        return True

    # ------------------------------------------------------------------
    # Event application
    # ------------------------------------------------------------------

    def apply_event(self, event: BaseEvent) -> Tuple[dict, TransitionResult]:
        """Apply *event*; log it only if the engine accepted it."""
        if not self._has_state():
            self._engine.initialize_state()
        state, result = self._engine.apply_event(event)
        event.sequence = len(self._events) + 1
        self._events.append(event)
        return state.to_dict(), result

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def view(self, aggregate_mode: bool = True) -> WorkspaceView:
        return self._projection.build(self._engine, aggregate_mode=aggregate_mode)

    def signature(self) -> str:
        return workspace_signature(self._engine.state)

    # ------------------------------------------------------------------
    # Determinism verification
    # ------------------------------------------------------------------

    def verify_determinism(self) -> bool:
        """Replay the log into a fresh engine and compare signatures."""
        replayed = engine_from_events(self._events)
        expected = self.signature()
        actual = workspace_signature(replayed.state)
        if expected != actual:
            raise DeterminismError(expected, actual)
        return True

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def get_metrics(self) -> "SessionMetrics":
        from .observability import collect_metrics
        return collect_metrics(self)

    # ------------------------------------------------------------------
    # Delegates
    # ------------------------------------------------------------------

    @property
    def engine(self) -> SkillsEngine:
        return self._engine

    @property
    def events(self) -> List[BaseEvent]:
        return list(self._events)

    @property
    def last_load(self) -> LoadedRoster | None:
        return self._last_load

    def get_state(self) -> dict:
        return self._engine.state.to_dict()

    def get_diagnostics(self) -> dict:
        return self._engine.get_diagnostics()
