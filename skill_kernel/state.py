"""
Skill Kernel - Workspace State

Immutable snapshot of everything the user can change: roster,
selection, visibility, highlights and the view. Derived indices are
not stored here; the engine recomputes them from this state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Tuple

from .domain_types import Person
from .roster import roster_ids
from .view_state import INITIAL_VIEW_STATE, ViewState


@dataclass(frozen=True)
class WorkspaceState:
    people: Tuple[Person, ...] = ()
    domain_names: FrozenSet[str] = frozenset()
    selected_person_ids: FrozenSet[str] = frozenset()
    hidden_person_ids: FrozenSet[str] = frozenset()
    hidden_skill_keys: FrozenSet[str] = frozenset()
    highlighted_skill_keys: FrozenSet[str] = frozenset()
    pinned_highlight_person_id: str | None = None
    view: ViewState = INITIAL_VIEW_STATE
    roster_version: int = 0
    event_count: int = 0

    def evolve(self, **changes) -> "WorkspaceState":
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    def person_ids(self) -> List[str]:
        return roster_ids(self.people)

    def visible_person_ids(self) -> FrozenSet[str]:
        return self.selected_person_ids - self.hidden_person_ids

    def to_dict(self) -> dict:
        """Serialise to a plain dict (for diagnostics / responses)."""
        return {
            "person_count": len(self.people),
            "selected_person_ids": sorted(self.selected_person_ids),
            "hidden_person_ids": sorted(self.hidden_person_ids),
            "hidden_skill_keys": sorted(self.hidden_skill_keys),
            "highlighted_skill_keys": sorted(self.highlighted_skill_keys),
            "pinned_highlight_person_id": self.pinned_highlight_person_id,
            "view": self.view.to_dict(),
            "roster_version": self.roster_version,
            "event_count": self.event_count,
        }


def create_initial_state(people: Iterable[Person] = ()) -> WorkspaceState:
    """Fresh workspace. A non-empty roster starts fully selected."""
    people = tuple(people)
    return WorkspaceState(
        people=people,
        domain_names=frozenset(
            r.domain for p in people for r in p.skills if r.domain and r.skill
        ),
        selected_person_ids=frozenset(roster_ids(people)),
    )
