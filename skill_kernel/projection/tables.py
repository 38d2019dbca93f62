"""
Table Projector

Two pure projections over the selection aggregates, both scoped to the
current view's skill keys (None = every key). Every call is a full
re-derivation; nothing is cached or patched here.

Sorting is stable, so ties keep their input order.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Mapping

from ..aggregation import visible_person_ids
from ..domain_types import (
    AggregateMap,
    MetadataIndex,
    PersonMetricsIndex,
    safe_ratio,
)
from ..view_state import in_scope
from .table_types import ContributorRow, PersonSkillRow, PersonTableRow, SkillTableRow


def _ordered_selection(selected: AbstractSet[str]) -> List[str]:
    return sorted(selected)


def project_skill_rows(
    aggregates: AggregateMap,
    visible_count: int,
    selected: AbstractSet[str],
    metrics: PersonMetricsIndex,
    metadata: MetadataIndex,
    person_names: Mapping[str, str],
    hidden_skill_keys: AbstractSet[str] = frozenset(),
    scope_keys: FrozenSet[str] | None = None,
    hidden_person_ids: AbstractSet[str] = frozenset(),
) -> List[SkillTableRow]:
    """
    One row per in-scope key present in *aggregates*.

    ``contributors`` lists every visible selected person with non-zero
    usage for the key, so their percentages share the aggregate total;
    ``contributor_count`` is the aggregate's unlocked-people count.
    """
    if not selected:
        return []

    people = visible_person_ids(selected, hidden_person_ids)
    rows: List[SkillTableRow] = []

    for skill_key, agg in aggregates.items():
        if not in_scope(skill_key, scope_keys):
            continue
        meta = metadata.get(skill_key)
        if meta is None:
            continue
        total_usage = agg.usage_sum

        contributors: List[ContributorRow] = []
        for person_id in people:
            metric = metrics.get(person_id, {}).get(skill_key)
            if metric is None or metric.usage == 0:
                continue
            contributors.append(ContributorRow(
                person_id=person_id,
                person_name=person_names.get(person_id) or person_id,
                usage=metric.usage,
                percentage=safe_ratio(metric.usage, total_usage) * 100 if total_usage > 0 else 0.0,
            ))
        contributors.sort(key=lambda c: c.usage, reverse=True)

        rows.append(SkillTableRow(
            skill_key=skill_key,
            skill_name=meta.skill_name,
            domain_name=meta.domain_name,
            total_usage=total_usage,
            avg_usage=safe_ratio(total_usage, visible_count),
            contributor_count=agg.unlocked_people_count,
            is_visible=skill_key not in hidden_skill_keys,
            contributors=tuple(contributors),
        ))

    rows.sort(key=lambda r: r.total_usage, reverse=True)
    return rows


def _in_scope_usage(
    per_skill: Mapping, scope_keys: FrozenSet[str] | None,
) -> float:
    return sum(m.usage for k, m in per_skill.items() if in_scope(k, scope_keys))


def project_person_rows(
    selected: AbstractSet[str],
    metrics: PersonMetricsIndex,
    metadata: MetadataIndex,
    person_names: Mapping[str, str],
    hidden_person_ids: AbstractSet[str] = frozenset(),
    scope_keys: FrozenSet[str] | None = None,
) -> List[PersonTableRow]:
    """
    One row per selected person with at least one in-scope skill of
    non-zero usage. ``chart_percentage`` is the person's share of the
    in-scope usage summed over every selected person.
    """
    people = _ordered_selection(selected)
    chart_total = sum(
        _in_scope_usage(metrics.get(pid, {}), scope_keys) for pid in people
    )

    rows: List[PersonTableRow] = []
    for person_id in people:
        per_skill = metrics.get(person_id)
        if not per_skill:
            continue

        total_usage = 0.0
        domain_sums: Dict[str, float] = {}
        skills: List[PersonSkillRow] = []

        for skill_key, metric in per_skill.items():
            if not in_scope(skill_key, scope_keys) or metric.usage == 0:
                continue
            meta = metadata.get(skill_key)
            if meta is None:
                continue
            total_usage += metric.usage
            domain_sums[meta.domain_name] = domain_sums.get(meta.domain_name, 0.0) + metric.usage
            skills.append(PersonSkillRow(
                skill_key=skill_key,
                skill_name=meta.skill_name,
                domain=meta.domain_name,
                usage=metric.usage,
                unlocked_count=metric.unlocked_count,
                total_sub_skills=len(meta.sub_skill_names),
            ))

        if not skills:
            continue

        skills.sort(key=lambda s: s.usage, reverse=True)
        breakdown = {
            domain: round(safe_ratio(subtotal, total_usage) * 100)
            for domain, subtotal in domain_sums.items()
        } if total_usage > 0 else {}

        rows.append(PersonTableRow(
            person_id=person_id,
            person_name=person_names.get(person_id) or person_id,
            total_usage=total_usage,
            chart_percentage=safe_ratio(total_usage, chart_total) * 100 if chart_total > 0 else 0.0,
            skill_count=len(skills),
            is_visible=person_id not in hidden_person_ids,
            domain_breakdown=breakdown,
            skills=tuple(skills),
        ))

    rows.sort(key=lambda r: r.total_usage, reverse=True)
    return rows


def rows_to_dicts(rows: Iterable) -> List[dict]:
    return [r.to_dict() for r in rows]
