"""
Workspace Projection Service

Assembles everything the outer surfaces consume from one engine:
  - skill-centric and person-centric table rows
  - weighted hierarchy for the geometry collaborator
  - leaf descriptors for the renderer

Caching strategy:
  - Cache key = workspace signature (content hash of roster, selection,
    hidden sets and view scope), never object identity.
  - A cached view is a complete derivation; nothing is patched into it.
  - Leaf descriptors depend on highlights, so they are rebuilt per call.

The service never modifies engine state.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Tuple

from ..engine import SkillsEngine
from ..hashing import workspace_signature
from ..metrics import roster_usage_totals
from .chart import LeafDescriptor, WeightedNode, build_leaf_descriptors, build_weighted_hierarchy
from .table_types import PersonTableRow, SkillTableRow
from .tables import project_person_rows, project_skill_rows

DEFAULT_CACHE_SIZE = 32


@dataclass(frozen=True)
class WorkspaceView:
    signature: str
    skill_rows: Tuple[SkillTableRow, ...]
    person_rows: Tuple[PersonTableRow, ...]
    hierarchy: WeightedNode
    leaves: Tuple[LeafDescriptor, ...]
    visible_count: int
    aggregate_mode: bool

    def to_dict(self) -> dict:
        return {
            "signature": self.signature,
            "visibleCount": self.visible_count,
            "aggregateMode": self.aggregate_mode,
            "skillRows": [r.to_dict() for r in self.skill_rows],
            "personRows": [r.to_dict() for r in self.person_rows],
            "hierarchy": self.hierarchy.to_dict(),
            "leaves": [leaf.to_dict() for leaf in self.leaves],
        }


class ProjectionService:
    """
    Builds WorkspaceView projections from a SkillsEngine.

    Aggregate mode weights the chart by the visible selection; with it
    off, leaves are weighted and coloured by roster-wide raw usage.
    """

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        self._cache_size = cache_size
        self._cache: "OrderedDict[str, Tuple]" = OrderedDict()

    def build(self, engine: SkillsEngine, aggregate_mode: bool = True) -> WorkspaceView:
        state = engine.state
        signature = workspace_signature(state)
        cache_key = f"{signature}:{int(aggregate_mode)}"

        cached = self._cache.get(cache_key)
        if cached is None:
            cached = self._derive(engine, aggregate_mode)
            self._remember(cache_key, cached)
        else:
            self._cache.move_to_end(cache_key)

        skill_rows, person_rows, hierarchy, visible_count, aggregate_mode, raw_usage = cached
        indices = engine.indices
        selection = engine.selection()
        leaves = build_leaf_descriptors(
            hierarchy,
            selection.aggregates,
            visible_count,
            indices.usage_scale,
            hidden_skill_keys=state.hidden_skill_keys,
            highlighted_skill_keys=engine.effective_highlighted_skill_keys(),
            aggregate_mode=aggregate_mode,
            raw_usage=raw_usage,
        )
        return WorkspaceView(
            signature=signature,
            skill_rows=skill_rows,
            person_rows=person_rows,
            hierarchy=hierarchy,
            leaves=tuple(leaves),
            visible_count=visible_count,
            aggregate_mode=aggregate_mode,
        )

    def clear(self) -> None:
        self._cache.clear()

    def _remember(self, cache_key: str, entry: Tuple) -> None:
        self._cache[cache_key] = entry
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)

    @staticmethod
    def _derive(engine: SkillsEngine, aggregate_mode: bool) -> Tuple:
        state = engine.state
        indices = engine.indices
        selection = engine.selection()
        scope_keys = engine.scope_skill_keys()
        names = engine.person_names()
        raw_usage = None if aggregate_mode else roster_usage_totals(indices.metrics)

        skill_rows: List[SkillTableRow] = project_skill_rows(
            selection.aggregates,
            selection.visible_count,
            state.selected_person_ids,
            indices.metrics,
            indices.metadata,
            names,
            hidden_skill_keys=state.hidden_skill_keys,
            scope_keys=scope_keys,
            hidden_person_ids=state.hidden_person_ids,
        )
        person_rows: List[PersonTableRow] = project_person_rows(
            state.selected_person_ids,
            indices.metrics,
            indices.metadata,
            names,
            hidden_person_ids=state.hidden_person_ids,
            scope_keys=scope_keys,
        )
        hierarchy = build_weighted_hierarchy(
            indices.taxonomy,
            state.view.current,
            selection.aggregates,
            selection.visible_count,
            hidden_skill_keys=state.hidden_skill_keys,
            aggregate_mode=aggregate_mode,
            raw_usage=raw_usage,
        )
        return (
            tuple(skill_rows),
            tuple(person_rows),
            hierarchy,
            selection.visible_count,
            aggregate_mode,
            raw_usage,
        )
