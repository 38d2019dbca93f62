"""
Skill Kernel - Centralized Transition Logic

ALL workspace state changes live here.
Input state is never mutated; every handler builds a new snapshot.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, FrozenSet, Tuple

from .domain_types import TransitionResult
from .events import BaseEvent
from .roster import parse_people, roster_ids
from .state import WorkspaceState
from .view_state import drill_down, go_back, reset_to_overview


Handler = Callable[[WorkspaceState, Dict[str, Any]], Tuple[WorkspaceState, TransitionResult]]


# ---------------------------------------------------------------------------
# Public dispatcher
# ---------------------------------------------------------------------------

def apply_event(
    state: WorkspaceState, event: BaseEvent,
) -> Tuple[WorkspaceState, TransitionResult]:
    """
    Apply *event* to *state* and return ``(new_state, result)``.
    Unknown event types are a hard fail.
    """
    handler = _HANDLERS.get(event.event_type)
    if handler is None:
        raise ValueError(f"Unknown event type: {event.event_type}")
    new_state, result = handler(state, event.payload or {})
    return new_state.evolve(event_count=state.event_count + 1), result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _toggle(members: FrozenSet[str], item: str) -> FrozenSet[str]:
    if item in members:
        return members - {item}
    return members | {item}


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _person_skill_keys(state: WorkspaceState, person_id: str) -> FrozenSet[str]:
    for person in state.people:
        if person.id == person_id:
            return frozenset(
                r.skill_key for r in person.skills if r.domain and r.skill
            )
    return frozenset()


# ---------------------------------------------------------------------------
# Individual transition handlers (private)
# ---------------------------------------------------------------------------

def _apply_replace_roster(state, p):
    people, report = parse_people({"people": p.get("people") or []})
    new_state = state.evolve(
        people=tuple(people),
        domain_names=frozenset(
            r.domain for person in people for r in person.skills
            if r.domain and r.skill
        ),
        selected_person_ids=frozenset(roster_ids(people)),
        view=reset_to_overview(state.view),
        roster_version=state.roster_version + 1,
    )
    reason = ""
    if report.dropped_people or report.skipped_records:
        reason = (
            f"dropped {report.dropped_people} people, "
            f"skipped {report.skipped_records} records"
        )
    return new_state, TransitionResult(
        event_type="replace_roster",
        roster_changed=True,
        selection_changed=True,
        view_changed=True,
        dropped_people=report.dropped_people,
        skipped_records=report.skipped_records,
        reason=reason,
    )


def _selection_result(event_type: str, reason: str = "") -> TransitionResult:
    return TransitionResult(event_type=event_type, selection_changed=True, reason=reason)


def _apply_toggle_person_selected(state, p):
    person_id = _text(p.get("person_id"))
    if not person_id:
        return state, TransitionResult(event_type="toggle_person_selected", reason="empty person_id")
    return (
        state.evolve(selected_person_ids=_toggle(state.selected_person_ids, person_id)),
        _selection_result("toggle_person_selected"),
    )


def _apply_select_all_people(state, p):
    return (
        state.evolve(selected_person_ids=frozenset(state.person_ids())),
        _selection_result("select_all_people"),
    )


def _apply_clear_selection(state, p):
    return (
        state.evolve(selected_person_ids=frozenset()),
        _selection_result("clear_selection"),
    )


def _apply_set_selection(state, p):
    raw_ids = p.get("person_ids") or []
    known = set(state.person_ids())
    if not isinstance(raw_ids, (list, tuple, set, frozenset)):
        raw_ids = []
    requested = {_text(i) for i in raw_ids}
    selected = frozenset(requested & known)
    ignored = len(requested - known - {""})
    return (
        state.evolve(selected_person_ids=selected),
        _selection_result("set_selection", f"ignored {ignored} unknown ids" if ignored else ""),
    )


def _apply_toggle_person_visibility(state, p):
    person_id = _text(p.get("person_id"))
    if not person_id:
        return state, TransitionResult(event_type="toggle_person_visibility", reason="empty person_id")
    return (
        state.evolve(hidden_person_ids=_toggle(state.hidden_person_ids, person_id)),
        _selection_result("toggle_person_visibility"),
    )


def _apply_toggle_skill_visibility(state, p):
    skill_key = _text(p.get("skill_key"))
    if not skill_key:
        return state, TransitionResult(event_type="toggle_skill_visibility", reason="empty skill_key")
    return (
        state.evolve(hidden_skill_keys=_toggle(state.hidden_skill_keys, skill_key)),
        TransitionResult(event_type="toggle_skill_visibility", view_changed=True),
    )


def _highlight_result(event_type: str) -> TransitionResult:
    return TransitionResult(event_type=event_type, highlight_changed=True)


def _apply_highlight_skill(state, p):
    skill_key = _text(p.get("skill_key"))
    keys = frozenset({skill_key}) if skill_key else frozenset()
    return state.evolve(highlighted_skill_keys=keys), _highlight_result("highlight_skill")


def _apply_highlight_person(state, p):
    person_id = _text(p.get("person_id"))
    keys = _person_skill_keys(state, person_id) if person_id else frozenset()
    return state.evolve(highlighted_skill_keys=keys), _highlight_result("highlight_person")


def _apply_clear_highlight(state, p):
    return state.evolve(highlighted_skill_keys=frozenset()), _highlight_result("clear_highlight")


def _apply_pin_highlight_person(state, p):
    person_id = _text(p.get("person_id")) or None
    return (
        state.evolve(pinned_highlight_person_id=person_id),
        _highlight_result("pin_highlight_person"),
    )


def _apply_drill_down(state, p):
    domain_name = _text(p.get("domain"))
    return (
        state.evolve(view=drill_down(state.view, domain_name, state.domain_names)),
        TransitionResult(event_type="drill_down", view_changed=True),
    )


def _apply_go_back(state, p):
    if not state.view.can_go_back:
        return state, TransitionResult(event_type="go_back", reason="empty history")
    return (
        state.evolve(view=go_back(state.view)),
        TransitionResult(event_type="go_back", view_changed=True),
    )


def _apply_reset_to_overview(state, p):
    return (
        state.evolve(view=reset_to_overview(state.view)),
        TransitionResult(event_type="reset_to_overview", view_changed=True),
    )


_HANDLERS: Dict[str, Handler] = {
    "replace_roster": _apply_replace_roster,
    "toggle_person_selected": _apply_toggle_person_selected,
    "select_all_people": _apply_select_all_people,
    "clear_selection": _apply_clear_selection,
    "set_selection": _apply_set_selection,
    "toggle_person_visibility": _apply_toggle_person_visibility,
    "toggle_skill_visibility": _apply_toggle_skill_visibility,
    "highlight_skill": _apply_highlight_skill,
    "highlight_person": _apply_highlight_person,
    "clear_highlight": _apply_clear_highlight,
    "pin_highlight_person": _apply_pin_highlight_person,
    "drill_down": _apply_drill_down,
    "go_back": _apply_go_back,
    "reset_to_overview": _apply_reset_to_overview,
}
