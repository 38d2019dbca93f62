"""
Skill Kernel - Selection Aggregator

Sums usage and unlocked counts per skill key across the visible
selection (selected minus hidden). Keys with no qualifying contribution
never appear in the output map.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, List

from .domain_types import (
    AggregateMap,
    PersonMetricsIndex,
    SelectionAggregate,
    SelectionMetrics,
    SelectionResult,
    safe_ratio,
)


def visible_person_ids(
    selected: AbstractSet[str], hidden: AbstractSet[str],
) -> List[str]:
    """Selected minus hidden, sorted for a deterministic iteration order."""
    return sorted(set(selected) - set(hidden))


def aggregate_selection(
    selected: AbstractSet[str],
    hidden: AbstractSet[str],
    metrics: PersonMetricsIndex,
) -> SelectionResult:
    """
    Aggregate the visible selection.

    A metric contributes iff ``usage > 0`` or ``unlocked_count > 0``.
    ``visible_count`` counts visible ids, including ids with no metrics.
    Input sets are never mutated.
    """
    visible = visible_person_ids(selected, hidden)
    usage_sums: Dict[str, float] = {}
    unlocked_sums: Dict[str, int] = {}
    unlocked_people: Dict[str, int] = {}

    for person_id in visible:
        per_skill = metrics.get(person_id)
        if not per_skill:
            continue
        for key, metric in per_skill.items():
            unlocked = metric.unlocked_count
            if metric.usage <= 0 and unlocked <= 0:
                continue
            usage_sums[key] = usage_sums.get(key, 0.0) + metric.usage
            unlocked_sums[key] = unlocked_sums.get(key, 0) + unlocked
            if unlocked > 0:
                unlocked_people[key] = unlocked_people.get(key, 0) + 1

    aggregates: AggregateMap = {
        key: SelectionAggregate(
            usage_sum=usage_sums[key],
            unlocked_sum=unlocked_sums[key],
            unlocked_people_count=unlocked_people.get(key, 0),
        )
        for key in usage_sums
    }
    return SelectionResult(aggregates=aggregates, visible_count=len(visible))


def selection_metrics_for_key(
    skill_key: str, aggregates: AggregateMap, visible_count: int,
) -> SelectionMetrics:
    """Ratios for one key. Everything is zero when nobody is visible."""
    if visible_count <= 0:
        return SelectionMetrics()
    agg = aggregates.get(skill_key) or SelectionAggregate()
    return SelectionMetrics(
        selected_count=visible_count,
        unlocked_people_count=agg.unlocked_people_count,
        unlocked_people_ratio=safe_ratio(agg.unlocked_people_count, visible_count),
        usage_avg=safe_ratio(agg.usage_sum, visible_count),
        unlocked_sum=agg.unlocked_sum,
    )
