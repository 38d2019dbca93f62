"""
Chart Collaborator Contracts

The kernel never draws and never partitions space. It hands the
geometry collaborator a weighted hierarchy, takes back one opaque value
per leaf, and hands the renderer one descriptor per leaf.

Leaf weight:
    hidden, or nobody visible contributes -> EPSILON_WEIGHT
    aggregate mode                        -> max(EPSILON_WEIGHT, unlocked_sum)
    non-aggregate mode                    -> max(EPSILON_WEIGHT, raw usage)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, List, Mapping, Protocol, Tuple

from ..aggregation import selection_metrics_for_key
from ..constants import (
    EPSILON_WEIGHT,
    OPACITY_BASE,
    OPACITY_HIDDEN,
    OPACITY_NO_SELECTION,
    OPACITY_RATIO_SPAN,
    OPACITY_STATIC,
)
from ..domain_types import AggregateMap, DomainNode, Taxonomy, make_skill_key
from ..scale import UsageScale
from ..view_state import ViewScope


@dataclass(frozen=True)
class WeightedNode:
    """
    Node of the hierarchy handed to the partitioner.
    Internal nodes have children and weight 0; leaves carry the weight.
    """

    id: str
    name: str
    weight: float = 0.0
    domain_name: str = ""
    skill_name: str = ""
    children: Tuple["WeightedNode", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def leaves(self) -> List["WeightedNode"]:
        if self.is_leaf:
            return [self]
        out: List[WeightedNode] = []
        for child in self.children:
            out.extend(child.leaves())
        return out

    def total_weight(self) -> float:
        if self.is_leaf:
            return self.weight
        return sum(c.total_weight() for c in self.children)

    def to_dict(self) -> dict:
        d: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.is_leaf:
            d["weight"] = self.weight
            d["domain"] = self.domain_name
        else:
            d["children"] = [c.to_dict() for c in self.children]
        return d


class GeometryPartitioner(Protocol):
    """Black-box layout collaborator: leaf id -> opaque polygon/position."""

    def partition(self, root: WeightedNode) -> Mapping[str, Any]:
        ...


@dataclass(frozen=True)
class LayoutResult:
    leaves: Tuple[WeightedNode, ...]
    geometry: Mapping[str, Any]

    def geometry_for(self, leaf_id: str) -> Any:
        return self.geometry.get(leaf_id)


@dataclass(frozen=True)
class LeafDescriptor:
    """Everything the renderer needs for one leaf, palette excluded."""

    skill_key: str
    domain_name: str
    skill_name: str
    intensity: float
    opacity: float
    is_highlighted: bool
    is_hidden: bool
    weight: float

    def to_dict(self) -> dict:
        return {
            "skillKey": self.skill_key,
            "domainName": self.domain_name,
            "skillName": self.skill_name,
            "intensity": self.intensity,
            "opacity": self.opacity,
            "isHighlighted": self.is_highlighted,
            "isHidden": self.is_hidden,
            "weight": self.weight,
        }


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

def leaf_weight(
    skill_key: str,
    aggregates: AggregateMap,
    visible_count: int,
    hidden_skill_keys: AbstractSet[str],
    aggregate_mode: bool = True,
    raw_usage: Mapping[str, float] | None = None,
) -> float:
    """Never returns less than EPSILON_WEIGHT."""
    if skill_key in hidden_skill_keys:
        return EPSILON_WEIGHT
    if aggregate_mode:
        agg = aggregates.get(skill_key)
        if visible_count <= 0 or agg is None:
            return EPSILON_WEIGHT
        return max(EPSILON_WEIGHT, float(agg.unlocked_sum))
    usage = (raw_usage or {}).get(skill_key, 0.0)
    return max(EPSILON_WEIGHT, usage)


def _domain_node(
    domain: DomainNode,
    aggregates: AggregateMap,
    visible_count: int,
    hidden_skill_keys: AbstractSet[str],
    aggregate_mode: bool,
    raw_usage: Mapping[str, float] | None,
) -> WeightedNode:
    if not domain.skills:
        return WeightedNode(
            id=domain.name, name=domain.name,
            weight=EPSILON_WEIGHT, domain_name=domain.name,
        )
    children = []
    for skill in domain.skills:
        key = make_skill_key(domain.name, skill.name)
        children.append(WeightedNode(
            id=key,
            name=skill.name,
            weight=leaf_weight(
                key, aggregates, visible_count, hidden_skill_keys,
                aggregate_mode, raw_usage,
            ),
            domain_name=domain.name,
            skill_name=skill.name,
        ))
    children.sort(key=lambda n: n.id)
    return WeightedNode(
        id=domain.name, name=domain.name,
        domain_name=domain.name, children=tuple(children),
    )


def build_weighted_hierarchy(
    taxonomy: Taxonomy,
    scope: ViewScope,
    aggregates: AggregateMap,
    visible_count: int,
    hidden_skill_keys: AbstractSet[str] = frozenset(),
    aggregate_mode: bool = True,
    raw_usage: Mapping[str, float] | None = None,
) -> WeightedNode:
    """
    Hierarchy for the current scope. Overview roots at the taxonomy;
    a drilled-down scope roots at that domain. Children are sorted by
    id so the partitioner input does not depend on roster order.
    """
    args = (aggregates, visible_count, hidden_skill_keys, aggregate_mode, raw_usage)
    if not scope.is_overview:
        domain = taxonomy.find_domain(scope.domain_name)
        if domain is None:
            return WeightedNode(id=scope.domain_name, name=scope.domain_name)
        return _domain_node(domain, *args)

    domains = sorted(
        (_domain_node(d, *args) for d in taxonomy.domains),
        key=lambda n: n.id,
    )
    return WeightedNode(id=taxonomy.name, name=taxonomy.name, children=tuple(domains))


def layout(root: WeightedNode, partitioner: GeometryPartitioner) -> LayoutResult:
    """Run the collaborator; its per-leaf output is passed through untouched."""
    return LayoutResult(leaves=tuple(root.leaves()), geometry=dict(partitioner.partition(root)))


# ---------------------------------------------------------------------------
# Render descriptors
# ---------------------------------------------------------------------------

def build_leaf_descriptors(
    root: WeightedNode,
    aggregates: AggregateMap,
    visible_count: int,
    usage_scale: UsageScale,
    hidden_skill_keys: AbstractSet[str] = frozenset(),
    highlighted_skill_keys: AbstractSet[str] = frozenset(),
    aggregate_mode: bool = True,
    raw_usage: Mapping[str, float] | None = None,
) -> List[LeafDescriptor]:
    descriptors: List[LeafDescriptor] = []
    for leaf in root.leaves():
        key = leaf.id
        hidden = key in hidden_skill_keys
        if aggregate_mode:
            metrics = selection_metrics_for_key(key, aggregates, visible_count)
            intensity = usage_scale(metrics.usage_avg)
            if hidden:
                opacity = OPACITY_HIDDEN
            elif metrics.selected_count == 0:
                opacity = OPACITY_NO_SELECTION
            else:
                opacity = OPACITY_BASE + OPACITY_RATIO_SPAN * metrics.unlocked_people_ratio
        else:
            intensity = usage_scale((raw_usage or {}).get(key, 0.0))
            opacity = OPACITY_HIDDEN if hidden else OPACITY_STATIC
        descriptors.append(LeafDescriptor(
            skill_key=key,
            domain_name=leaf.domain_name,
            skill_name=leaf.skill_name,
            intensity=intensity,
            opacity=opacity,
            is_highlighted=key in highlighted_skill_keys,
            is_hidden=hidden,
            weight=leaf.weight,
        ))
    return descriptors
