"""
Skill Kernel
Deterministic, in-memory derivation of a skills taxonomy, per-selection
aggregates and table projections from a roster of people.
Every derivation is a pure, full recomputation from its inputs.
"""

from .domain_types import (
    Person, PersonSkillRecord, Taxonomy, DomainNode, SkillNode, SkillMeta,
    PersonSkillMetric, SelectionAggregate, SelectionMetrics, SelectionResult,
    TransitionResult, make_skill_key, coerce_usage, safe_ratio,
)
from .roster import RosterParseReport, parse_people
from .taxonomy import build_taxonomy
from .metadata import build_metadata_index
from .metrics import build_person_metrics_index
from .aggregation import aggregate_selection, selection_metrics_for_key
from .scale import UsageScale, create_usage_scale, usage_scale_from_metrics
from .view_state import (
    ViewScope,
    ViewState,
    UnknownDomainError,
    drill_down,
    go_back,
    reset_to_overview,
    scope_skill_keys,
)
from .events import (
    BaseEvent,
    ReplaceRosterEvent,
    TogglePersonSelectedEvent,
    SelectAllPeopleEvent,
    ClearSelectionEvent,
    SetSelectionEvent,
    TogglePersonVisibilityEvent,
    ToggleSkillVisibilityEvent,
    HighlightSkillEvent,
    HighlightPersonEvent,
    ClearHighlightEvent,
    PinHighlightPersonEvent,
    DrillDownEvent,
    GoBackEvent,
    ResetToOverviewEvent,
    reconstruct_event,
)
from .state import WorkspaceState, create_initial_state
from .engine import SkillsEngine, RosterIndices, build_roster_indices
from .hashing import canonical_serialize, canonical_hash, workspace_signature
from .constants import (
    TAXONOMY_ROOT_NAME,
    EPSILON_WEIGHT,
    USAGE_SCALE_MIN,
    USAGE_SCALE_MAX,
    USAGE_SCALE_DEGENERATE,
)

__all__ = [
    "Person",
    "PersonSkillRecord",
    "Taxonomy",
    "DomainNode",
    "SkillNode",
    "SkillMeta",
    "PersonSkillMetric",
    "SelectionAggregate",
    "SelectionMetrics",
    "SelectionResult",
    "TransitionResult",
    "make_skill_key",
    "coerce_usage",
    "safe_ratio",
    "RosterParseReport",
    "parse_people",
    "build_taxonomy",
    "build_metadata_index",
    "build_person_metrics_index",
    "aggregate_selection",
    "selection_metrics_for_key",
    "UsageScale",
    "create_usage_scale",
    "usage_scale_from_metrics",
    "ViewScope",
    "ViewState",
    "UnknownDomainError",
    "drill_down",
    "go_back",
    "reset_to_overview",
    "scope_skill_keys",
    "BaseEvent",
    "ReplaceRosterEvent",
    "TogglePersonSelectedEvent",
    "SelectAllPeopleEvent",
    "ClearSelectionEvent",
    "SetSelectionEvent",
    "TogglePersonVisibilityEvent",
    "ToggleSkillVisibilityEvent",
    "HighlightSkillEvent",
    "HighlightPersonEvent",
    "ClearHighlightEvent",
    "PinHighlightPersonEvent",
    "DrillDownEvent",
    "GoBackEvent",
    "ResetToOverviewEvent",
    "reconstruct_event",
    "WorkspaceState",
    "create_initial_state",
    "SkillsEngine",
    "RosterIndices",
    "build_roster_indices",
    "canonical_serialize",
    "canonical_hash",
    "workspace_signature",
    "TAXONOMY_ROOT_NAME",
    "EPSILON_WEIGHT",
    "USAGE_SCALE_MIN",
    "USAGE_SCALE_MAX",
    "USAGE_SCALE_DEGENERATE",
]
