"""
Skill Kernel - Metadata Index

Flattens the taxonomy into ``skill_key -> SkillMeta``.
One entry per (domain, skill) pair present in the tree.
"""

from __future__ import annotations

from typing import Dict, List

from .domain_types import MetadataIndex, SkillMeta, Taxonomy, make_skill_key


def build_metadata_index(taxonomy: Taxonomy) -> MetadataIndex:
    index: Dict[str, SkillMeta] = {}
    for domain in taxonomy.domains:
        if not domain.name:
            continue
        for skill in domain.skills:
            if not skill.name:
                continue
            index[make_skill_key(domain.name, skill.name)] = SkillMeta(
                domain_name=domain.name,
                skill_name=skill.name,
                sub_skill_names=frozenset(n for n in skill.sub_skill_templates if n),
            )
    return index


def keys_without_templates(index: MetadataIndex) -> List[str]:
    """Keys whose skill has no recorded sub-skill names."""
    return sorted(k for k, meta in index.items() if not meta.sub_skill_names)
