"""
Skill Kernel - Taxonomy Builder

Unions every person's skill records into a three-level tree:
root -> domains -> skills -> sub-skill name templates.

Child order is first-seen order across the people / records /
sub-skill iteration. Callers that need a display order sort downstream.
A rebuild is a full recomputation; node identity never survives it.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from .constants import TAXONOMY_ROOT_NAME
from .domain_types import DomainNode, Person, SkillNode, Taxonomy


class _SkillDraft:
    __slots__ = ("name", "templates", "_seen")

    def __init__(self, name: str) -> None:
        self.name = name
        self.templates: List[str] = []
        self._seen: set = set()

    def add_templates(self, names: Iterable[str]) -> None:
        for name in names:
            if not name or name in self._seen:
                continue
            self._seen.add(name)
            self.templates.append(name)

    def freeze(self) -> SkillNode:
        return SkillNode(name=self.name, sub_skill_templates=tuple(self.templates))


class _DomainDraft:
    __slots__ = ("name", "skills")

    def __init__(self, name: str) -> None:
        self.name = name
        self.skills: Dict[str, _SkillDraft] = {}

    def ensure_skill(self, skill_name: str) -> _SkillDraft:
        draft = self.skills.get(skill_name)
        if draft is None:
            draft = _SkillDraft(skill_name)
            self.skills[skill_name] = draft
        return draft

    def freeze(self) -> DomainNode:
        return DomainNode(
            name=self.name,
            skills=tuple(s.freeze() for s in self.skills.values()),
        )


def apply_people_union(
    drafts: Dict[str, _DomainDraft], people: Iterable[Person],
) -> None:
    """Upsert every valid record of *people* into the draft tree."""
    for person in people:
        for record in person.skills:
            if not record.domain or not record.skill:
                continue
            domain = drafts.get(record.domain)
            if domain is None:
                domain = _DomainDraft(record.domain)
                drafts[record.domain] = domain
            domain.ensure_skill(record.skill).add_templates(record.unlocked_sub_skills)


def build_taxonomy(
    people: Iterable[Person], root_name: str = TAXONOMY_ROOT_NAME,
) -> Taxonomy:
    """Build a fresh taxonomy from the roster. Empty roster -> empty tree."""
    drafts: Dict[str, _DomainDraft] = {}
    apply_people_union(drafts, people)
    return Taxonomy(
        name=root_name,
        domains=tuple(d.freeze() for d in drafts.values()),
    )


def count_sub_skill_templates(taxonomy: Taxonomy) -> int:
    return sum(
        len(skill.sub_skill_templates)
        for domain in taxonomy.domains
        for skill in domain.skills
    )
