"""
Skill Kernel - Person Metrics Index

Per person, per skill key: usage and the reconciled set of unlocked
sub-skill names.

Reconciliation rule:
  - metadata knows sub-skill names for the key -> keep only known names
  - metadata knows none (metadata lag)         -> pass the raw names through

Complexity: O(total records across the roster).
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from .domain_types import (
    MetadataIndex,
    Person,
    PersonMetricsIndex,
    PersonSkillMetric,
    coerce_usage,
)


def reconcile_unlocked(
    names: Iterable[str], known: frozenset,
) -> frozenset:
    """Deduplicate *names*; filter against *known* when it is non-empty."""
    cleaned = {n.strip() for n in names if n and n.strip()}
    if known:
        return frozenset(cleaned & known)
    return frozenset(cleaned)


def build_person_metrics_index(
    people: Iterable[Person], metadata: MetadataIndex,
) -> PersonMetricsIndex:
    """
    Build ``person_id -> {skill_key -> PersonSkillMetric}``.

    The first person with a given id owns it; later duplicates are
    ignored. Within one person, a repeated skill key keeps the last record.
    """
    index: PersonMetricsIndex = {}
    for person in people:
        if not person.id or person.id in index:
            continue
        per_skill: Dict[str, PersonSkillMetric] = {}
        for record in person.skills:
            if not record.domain or not record.skill:
                continue
            key = record.skill_key
            meta = metadata.get(key)
            known = meta.sub_skill_names if meta is not None else frozenset()
            per_skill[key] = PersonSkillMetric(
                usage=coerce_usage(record.usage),
                unlocked_names=reconcile_unlocked(record.unlocked_sub_skills, known),
            )
        index[person.id] = per_skill
    return index


def observed_usage_values(metrics: PersonMetricsIndex) -> List[float]:
    """All usage values in the index, in iteration order."""
    return [
        metric.usage
        for per_skill in metrics.values()
        for metric in per_skill.values()
    ]


def roster_usage_totals(metrics: PersonMetricsIndex) -> Dict[str, float]:
    """Usage summed per skill key over the whole roster, ignoring selection."""
    totals: Dict[str, float] = {}
    for per_skill in metrics.values():
        for key, metric in per_skill.items():
            totals[key] = totals.get(key, 0.0) + metric.usage
    return totals
