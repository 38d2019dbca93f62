"""
Skill Kernel - Event Definitions

Events are **pure data**. They carry intent and payload only.
They contain ZERO transition logic.

Every recomputation in the workspace is triggered by one of these:
roster replacement, selection / visibility toggles, highlight changes
and drill navigation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable

from .domain_types import Person


@dataclass
class BaseEvent:
    """Base for all workspace events - pure data container."""

    event_type: str = ""
    timestamp: str = ""
    sequence: int = 0
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "timestamp": self.timestamp,
            "sequence": self.sequence,
            "payload": dict(self.payload),
        }


@dataclass
class ReplaceRosterEvent(BaseEvent):
    """Replace the whole roster. Selects everyone, resets the view."""

    event_type: str = "replace_roster"
    # payload keys: people (raw fixture entries)

    @classmethod
    def from_people(cls, people: Iterable[Person], **kwargs: Any) -> "ReplaceRosterEvent":
        return cls(payload={"people": [p.to_dict() for p in people]}, **kwargs)


@dataclass
class TogglePersonSelectedEvent(BaseEvent):
    event_type: str = "toggle_person_selected"
    # payload keys: person_id


@dataclass
class SelectAllPeopleEvent(BaseEvent):
    event_type: str = "select_all_people"


@dataclass
class ClearSelectionEvent(BaseEvent):
    event_type: str = "clear_selection"


@dataclass
class SetSelectionEvent(BaseEvent):
    """Replace the selection. Ids not in the roster are ignored."""

    event_type: str = "set_selection"
    # payload keys: person_ids


@dataclass
class TogglePersonVisibilityEvent(BaseEvent):
    event_type: str = "toggle_person_visibility"
    # payload keys: person_id


@dataclass
class ToggleSkillVisibilityEvent(BaseEvent):
    event_type: str = "toggle_skill_visibility"
    # payload keys: skill_key


@dataclass
class HighlightSkillEvent(BaseEvent):
    event_type: str = "highlight_skill"
    # payload keys: skill_key (None clears)


@dataclass
class HighlightPersonEvent(BaseEvent):
    event_type: str = "highlight_person"
    # payload keys: person_id (None clears)


@dataclass
class ClearHighlightEvent(BaseEvent):
    event_type: str = "clear_highlight"


@dataclass
class PinHighlightPersonEvent(BaseEvent):
    event_type: str = "pin_highlight_person"
    # payload keys: person_id (None unpins)


@dataclass
class DrillDownEvent(BaseEvent):
    event_type: str = "drill_down"
    # payload keys: domain


@dataclass
class GoBackEvent(BaseEvent):
    event_type: str = "go_back"


@dataclass
class ResetToOverviewEvent(BaseEvent):
    event_type: str = "reset_to_overview"


EVENT_CLASS_MAP = {
    "replace_roster": ReplaceRosterEvent,
    "toggle_person_selected": TogglePersonSelectedEvent,
    "select_all_people": SelectAllPeopleEvent,
    "clear_selection": ClearSelectionEvent,
    "set_selection": SetSelectionEvent,
    "toggle_person_visibility": TogglePersonVisibilityEvent,
    "toggle_skill_visibility": ToggleSkillVisibilityEvent,
    "highlight_skill": HighlightSkillEvent,
    "highlight_person": HighlightPersonEvent,
    "clear_highlight": ClearHighlightEvent,
    "pin_highlight_person": PinHighlightPersonEvent,
    "drill_down": DrillDownEvent,
    "go_back": GoBackEvent,
    "reset_to_overview": ResetToOverviewEvent,
}


def reconstruct_event(data: Dict[str, Any]) -> BaseEvent:
    """Rebuild a typed event from its ``to_dict()`` form."""
    event_type = data.get("event_type", "")
    cls = EVENT_CLASS_MAP.get(event_type)
    if cls is None:
        raise ValueError(
            f"Unknown event_type: {event_type!r}. "
            f"Valid types: {sorted(EVENT_CLASS_MAP)}"
        )
    return cls(
        timestamp=data.get("timestamp", "") or "",
        sequence=int(data.get("sequence", 0) or 0),
        payload=dict(data.get("payload") or {}),
    )
