"""
Skill Kernel - Core Domain Types

Pure data. No behaviour beyond trivial accessors and serialisation.
Every type here is either frozen or only ever built fresh by a
derivation pass; nothing is patched in place after construction.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Skill key:
    Identifier of a (domain, skill) pair, derived from the two names.

Taxonomy:
    Union of every domain -> skill -> sub-skill name across the roster.

Unlocked sub-skill:
    A sub-capability one person has marked as acquired for one skill.

Visible selection:
    Selected people minus hidden people.

────────────────────────────────────────────────
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Tuple

from .constants import SKILL_KEY_SEPARATOR, TAXONOMY_ROOT_NAME


# ── Skill Keys ────────────────────────────────────────────────

def make_skill_key(domain_name: str, skill_name: str) -> str:
    """Pure function of the two names. Stable across rebuilds."""
    return f"{domain_name}{SKILL_KEY_SEPARATOR}{skill_name}"


# ── Usage Coercion ────────────────────────────────────────────

def coerce_usage(value: Any) -> float:
    """
    Coerce a raw usage value to a finite float.
    Anything non-numeric or non-finite becomes 0.0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def safe_ratio(numerator: float, denominator: float) -> float:
    """Division that yields 0.0 instead of NaN / Infinity."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


# ── Roster ────────────────────────────────────────────────────

@dataclass(frozen=True)
class PersonSkillRecord:
    """One sparse skill-usage record held by a person."""

    domain: str
    skill: str
    usage: float = 0.0
    unlocked_sub_skills: Tuple[str, ...] = ()

    @property
    def skill_key(self) -> str:
        return make_skill_key(self.domain, self.skill)

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "skill": self.skill,
            "usage": self.usage,
            "unlockedSubSkills": list(self.unlocked_sub_skills),
        }


@dataclass(frozen=True)
class Person:
    """A roster entry. Owned by the caller, never mutated by the kernel."""

    id: str
    name: str
    skills: Tuple[PersonSkillRecord, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "skills": [s.to_dict() for s in self.skills],
        }


# ── Taxonomy ──────────────────────────────────────────────────

@dataclass(frozen=True)
class SkillNode:
    """Skill under a domain. Templates carry no per-person unlocked state."""

    name: str
    sub_skill_templates: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DomainNode:
    name: str
    skills: Tuple[SkillNode, ...] = ()

    def skill_keys(self) -> List[str]:
        return [make_skill_key(self.name, s.name) for s in self.skills]


@dataclass(frozen=True)
class Taxonomy:
    """Root of the unioned domain -> skill -> sub-skill tree."""

    name: str = TAXONOMY_ROOT_NAME
    domains: Tuple[DomainNode, ...] = ()

    def find_domain(self, domain_name: str) -> DomainNode | None:
        for domain in self.domains:
            if domain.name == domain_name:
                return domain
        return None

    def domain_names(self) -> List[str]:
        return [d.name for d in self.domains]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "domains": [
                {
                    "name": d.name,
                    "skills": [
                        {
                            "name": s.name,
                            "skillKey": make_skill_key(d.name, s.name),
                            "subSkillTemplates": list(s.sub_skill_templates),
                        }
                        for s in d.skills
                    ],
                }
                for d in self.domains
            ],
        }


# ── Derived Indices ───────────────────────────────────────────

@dataclass(frozen=True)
class SkillMeta:
    """Flattened view of one taxonomy skill, keyed by skill key."""

    domain_name: str
    skill_name: str
    sub_skill_names: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class PersonSkillMetric:
    """Per (person, skill key) usage and reconciled unlocked sub-skills."""

    usage: float = 0.0
    unlocked_names: FrozenSet[str] = frozenset()

    @property
    def unlocked_count(self) -> int:
        return len(self.unlocked_names)


@dataclass(frozen=True)
class SelectionAggregate:
    """Sums over the visible selection for one skill key."""

    usage_sum: float = 0.0
    unlocked_sum: int = 0
    unlocked_people_count: int = 0

    def to_dict(self) -> dict:
        return {
            "usageSum": self.usage_sum,
            "unlockedSum": self.unlocked_sum,
            "unlockedPeopleCount": self.unlocked_people_count,
        }


@dataclass(frozen=True)
class SelectionMetrics:
    """Ratios derived from a SelectionAggregate. Zero-safe."""

    selected_count: int = 0
    unlocked_people_count: int = 0
    unlocked_people_ratio: float = 0.0
    usage_avg: float = 0.0
    unlocked_sum: int = 0

    def to_dict(self) -> dict:
        return {
            "selectedCount": self.selected_count,
            "unlockedPeopleCount": self.unlocked_people_count,
            "unlockedPeopleRatio": self.unlocked_people_ratio,
            "usageAvg": self.usage_avg,
            "unlockedSum": self.unlocked_sum,
        }


@dataclass(frozen=True)
class TransitionResult:
    """
    Structured, immutable outcome of a workspace transition.
    Tells the caller which derivation stages are now stale.
    """

    event_type: str = ""
    roster_changed: bool = False
    selection_changed: bool = False
    view_changed: bool = False
    highlight_changed: bool = False
    dropped_people: int = 0
    skipped_records: int = 0
    reason: str = ""


MetadataIndex = Dict[str, SkillMeta]
PersonMetricsIndex = Dict[str, Dict[str, PersonSkillMetric]]
AggregateMap = Dict[str, SelectionAggregate]


@dataclass(frozen=True)
class SelectionResult:
    """Output of one aggregation pass."""

    aggregates: AggregateMap = field(default_factory=dict)
    visible_count: int = 0
