"""
Skill Kernel - Diagnostics

Compute a diagnostic snapshot of the current workspace.
Warnings describe tolerated data-quality issues; nothing here raises.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .metadata import keys_without_templates
from .roster import RosterParseReport
from .state import WorkspaceState
from .taxonomy import count_sub_skill_templates

if TYPE_CHECKING:
    from .engine import RosterIndices


def compute_diagnostics(
    state: WorkspaceState,
    indices: "RosterIndices",
    report: RosterParseReport | None = None,
) -> dict:
    """Return a diagnostic dict summarising workspace health."""
    known_ids = set(state.person_ids())
    visible = state.visible_person_ids()

    warnings: List[str] = []

    unknown_selected = sorted(state.selected_person_ids - known_ids)
    if unknown_selected:
        warnings.append(
            f"{len(unknown_selected)} selected id(s) not in roster: "
            f"{', '.join(unknown_selected)}"
        )

    lagging = keys_without_templates(indices.metadata)
    if lagging:
        warnings.append(
            f"{len(lagging)} skill(s) without sub-skill templates; "
            f"unlocked names pass through unverified"
        )

    if report is not None and report.dropped_people:
        warnings.append(f"{report.dropped_people} roster entr(ies) dropped (missing id)")
    if report is not None and report.skipped_records:
        warnings.append(
            f"{report.skipped_records} skill record(s) skipped (missing domain or skill)"
        )

    return {
        "person_count": len(known_ids),
        "selected_count": len(state.selected_person_ids),
        "visible_count": len(visible),
        "hidden_person_count": len(state.hidden_person_ids),
        "hidden_skill_count": len(state.hidden_skill_keys),
        "domain_count": len(indices.taxonomy.domains),
        "skill_count": len(indices.metadata),
        "sub_skill_template_count": count_sub_skill_templates(indices.taxonomy),
        "view": state.view.current.view_key,
        "warnings": warnings,
    }
