"""
Skill Kernel - Canonical Hashing

Deterministic canonical serialization + SHA-256 hashing, used as a
content signature for memoizing derived views.

Rules:
  - People kept in roster order (order is meaningful for the taxonomy)
  - Id sets sorted
  - UTF-8 JSON, no whitespace, sorted keys
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Iterable

from .domain_types import Person
from .state import WorkspaceState


def _dumps(obj: Any) -> bytes:
    return json.dumps(
        obj, ensure_ascii=True, separators=(",", ":"), sort_keys=True,
    ).encode("utf-8")


def canonical_serialize(people: Iterable[Person]) -> bytes:
    """Canonical serialization of a roster to UTF-8 JSON bytes."""
    return _dumps([p.to_dict() for p in people])


def canonical_hash(people: Iterable[Person]) -> str:
    """SHA-256 of canonical serialization. Lowercase hex string."""
    return hashlib.sha256(canonical_serialize(people)).hexdigest()


def _signature_dict(state: WorkspaceState) -> Dict[str, Any]:
    return {
        "roster": canonical_hash(state.people),
        "selected": sorted(state.selected_person_ids),
        "hidden_people": sorted(state.hidden_person_ids),
        "hidden_skills": sorted(state.hidden_skill_keys),
        "view": state.view.current.to_dict(),
    }


def workspace_signature(state: WorkspaceState) -> str:
    """
    Signature of everything the derived tables and chart depend on.
    Highlights are excluded; they only affect leaf descriptors.
    """
    return hashlib.sha256(_dumps(_signature_dict(state))).hexdigest()
