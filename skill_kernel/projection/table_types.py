"""
Table Projection Types

Display-ready rows for the skill-centric and person-centric tables.
``to_dict()`` emits the camelCase keys the table UI consumes verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class ContributorRow:
    person_id: str
    person_name: str
    usage: float
    percentage: float

    def to_dict(self) -> dict:
        return {
            "personId": self.person_id,
            "personName": self.person_name,
            "usage": self.usage,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class SkillTableRow:
    skill_key: str
    skill_name: str
    domain_name: str
    total_usage: float
    avg_usage: float
    contributor_count: int
    is_visible: bool
    contributors: Tuple[ContributorRow, ...] = ()

    def to_dict(self) -> dict:
        return {
            "skillKey": self.skill_key,
            "skillName": self.skill_name,
            "domainName": self.domain_name,
            "totalUsage": self.total_usage,
            "avgUsage": self.avg_usage,
            "contributorCount": self.contributor_count,
            "isVisible": self.is_visible,
            "contributors": [c.to_dict() for c in self.contributors],
        }


@dataclass(frozen=True)
class PersonSkillRow:
    skill_key: str
    skill_name: str
    domain: str
    usage: float
    unlocked_count: int
    total_sub_skills: int

    def to_dict(self) -> dict:
        return {
            "skillKey": self.skill_key,
            "skillName": self.skill_name,
            "domain": self.domain,
            "usage": self.usage,
            "unlockedCount": self.unlocked_count,
            "totalSubSkills": self.total_sub_skills,
        }


@dataclass(frozen=True)
class PersonTableRow:
    person_id: str
    person_name: str
    total_usage: float
    chart_percentage: float
    skill_count: int
    is_visible: bool
    domain_breakdown: Dict[str, int] = field(default_factory=dict)
    skills: Tuple[PersonSkillRow, ...] = ()

    def to_dict(self) -> dict:
        return {
            "personId": self.person_id,
            "personName": self.person_name,
            "totalUsage": self.total_usage,
            "chartPercentage": self.chart_percentage,
            "skillCount": self.skill_count,
            "isVisible": self.is_visible,
            "domainBreakdown": dict(self.domain_breakdown),
            "skills": [s.to_dict() for s in self.skills],
        }
