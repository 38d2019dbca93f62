"""
Taxonomy Drift Comparator - pure function, no side effects.

Structured diff between two taxonomies, used when a roster is replaced
to report which domains and skills appeared or disappeared.
"""

from __future__ import annotations

from typing import Set

from skill_kernel.domain_types import Taxonomy, make_skill_key


def _skill_keys(taxonomy: Taxonomy) -> Set[str]:
    return {
        make_skill_key(d.name, s.name)
        for d in taxonomy.domains
        for s in d.skills
    }


def compare_taxonomies(before: Taxonomy, after: Taxonomy) -> dict:
    """
    Compare two taxonomies and return a structured diff.

    Returns dict with:
        domain_count_delta, skill_count_delta, added_domains,
        removed_domains, added_skills, removed_skills
    """
    domains_a = set(before.domain_names())
    domains_b = set(after.domain_names())
    keys_a = _skill_keys(before)
    keys_b = _skill_keys(after)

    return {
        "domain_count_a": len(domains_a),
        "domain_count_b": len(domains_b),
        "domain_count_delta": len(domains_b) - len(domains_a),
        "skill_count_a": len(keys_a),
        "skill_count_b": len(keys_b),
        "skill_count_delta": len(keys_b) - len(keys_a),
        "added_domains": sorted(domains_b - domains_a),
        "removed_domains": sorted(domains_a - domains_b),
        "added_skills": sorted(keys_b - keys_a),
        "removed_skills": sorted(keys_a - keys_b),
    }


def has_drift(diff: dict) -> bool:
    return any(diff[k] for k in ("added_domains", "removed_domains", "added_skills", "removed_skills"))
