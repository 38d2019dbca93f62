"""
Skill Kernel - Engine

Top-level orchestrator. Delegates state changes to transitions.py,
derives indices through the pure builders, reports via diagnostics.py.

Recompute lifecycle:
  roster_version changes            -> taxonomy, metadata, metrics, scale
  selection / hidden / roster change -> selection aggregates
  anything else                     -> nothing cached is invalidated
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple

from .aggregation import aggregate_selection
from .diagnostics import compute_diagnostics
from .domain_types import (
    MetadataIndex,
    Person,
    PersonMetricsIndex,
    SelectionResult,
    Taxonomy,
    TransitionResult,
)
from .events import BaseEvent, ReplaceRosterEvent
from .metadata import build_metadata_index
from .metrics import build_person_metrics_index
from .roster import RosterParseReport
from .scale import UsageScale, usage_scale_from_metrics
from .state import WorkspaceState, create_initial_state
from .taxonomy import build_taxonomy
from .transitions import apply_event as _transition_apply
from .view_state import scope_skill_keys

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterIndices:
    """Everything derived from the roster alone."""

    taxonomy: Taxonomy = field(default_factory=Taxonomy)
    metadata: MetadataIndex = field(default_factory=dict)
    metrics: PersonMetricsIndex = field(default_factory=dict)
    usage_scale: UsageScale = field(default_factory=UsageScale)
    roster_version: int = 0


def build_roster_indices(people: Iterable[Person], roster_version: int = 0) -> RosterIndices:
    """Full, fresh derivation: people -> taxonomy -> metadata -> metrics -> scale."""
    people = tuple(people)
    taxonomy = build_taxonomy(people)
    metadata = build_metadata_index(taxonomy)
    metrics = build_person_metrics_index(people, metadata)
    return RosterIndices(
        taxonomy=taxonomy,
        metadata=metadata,
        metrics=metrics,
        usage_scale=usage_scale_from_metrics(metrics),
        roster_version=roster_version,
    )


class SkillsEngine:
    """
    Stateful engine that wraps the pure functional transition layer.

    Holds one WorkspaceState at a time and caches derived indices per
    roster version and per selection snapshot. Caches are replaced, never
    patched.
    """

    def __init__(self) -> None:
        self._state: WorkspaceState | None = None
        self._indices: RosterIndices | None = None
        self._selection: SelectionResult | None = None
        self._selection_key: Tuple | None = None
        self._report = RosterParseReport()

    # -- State access -------------------------------------------------------

    @property
    def state(self) -> WorkspaceState:
        if self._state is None:
            raise RuntimeError("Engine not initialised - call initialize_state() first")
        return self._state

    @property
    def indices(self) -> RosterIndices:
        state = self.state
        if self._indices is None or self._indices.roster_version != state.roster_version:
            self._indices = build_roster_indices(state.people, state.roster_version)
            logger.debug(
                "rebuilt roster indices v%d: %d domains, %d skills",
                state.roster_version,
                len(self._indices.taxonomy.domains),
                len(self._indices.metadata),
            )
        return self._indices

    # -- Public API ---------------------------------------------------------

    def initialize_state(self, people: Iterable[Person] = ()) -> WorkspaceState:
        """Create a fresh initial state and store it."""
        self._state = create_initial_state(people)
        self._indices = None
        self._selection = None
        self._selection_key = None
        self._report = RosterParseReport()
        return self._state

    def apply_event(self, event: BaseEvent) -> Tuple[WorkspaceState, TransitionResult]:
        new_state, result = _transition_apply(self.state, event)
        self._state = new_state
        if result.roster_changed:
            self._report = RosterParseReport(
                dropped_people=result.dropped_people,
                skipped_records=result.skipped_records,
            )
        return new_state, result

    def apply_sequence(self, events: Iterable[BaseEvent]) -> WorkspaceState:
        for event in events:
            self.apply_event(event)
        return self.state

    def replay(self, events: Iterable[BaseEvent]) -> WorkspaceState:
        """Reset to a fresh, empty state, then replay every event."""
        self.initialize_state()
        return self.apply_sequence(events)

    def load_roster(self, people: Iterable[Person]) -> WorkspaceState:
        """Convenience for ``apply_event(ReplaceRosterEvent(...))``."""
        if self._state is None:
            self.initialize_state()
        state, _ = self.apply_event(ReplaceRosterEvent.from_people(people))
        return state

    # -- Derived views ------------------------------------------------------

    def selection(self) -> SelectionResult:
        state = self.state
        indices = self.indices
        key = (state.roster_version, state.selected_person_ids, state.hidden_person_ids)
        if self._selection is None or self._selection_key != key:
            self._selection = aggregate_selection(
                state.selected_person_ids, state.hidden_person_ids, indices.metrics,
            )
            self._selection_key = key
        return self._selection

    def scope_skill_keys(self) -> FrozenSet[str] | None:
        return scope_skill_keys(self.state.view.current, self.indices.taxonomy)

    def effective_highlighted_skill_keys(self) -> FrozenSet[str]:
        """Pinned person's skill keys win over the explicit highlight set."""
        state = self.state
        pinned = state.pinned_highlight_person_id
        if pinned:
            per_skill = self.indices.metrics.get(pinned)
            return frozenset(per_skill) if per_skill else frozenset()
        return state.highlighted_skill_keys

    def person_names(self) -> dict:
        names: dict = {}
        for person in self.state.people:
            names.setdefault(person.id, person.display_name)
        return names

    def get_diagnostics(self) -> dict:
        return compute_diagnostics(self.state, self.indices, self._report)


def engine_from_events(events: List[BaseEvent]) -> SkillsEngine:
    """Fresh engine with *events* replayed."""
    engine = SkillsEngine()
    engine.replay(events)
    return engine
