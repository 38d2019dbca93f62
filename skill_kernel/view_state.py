"""
Skill Kernel - View State Machine

Two scopes only:

    Overview ──drill_down(d)──▶ Domain(d) ──drill_down(e)──▶ Domain(e)
        ▲                           │
        └────────── go_back ────────┘

"Is overview" is an explicit tag on the scope, never a comparison
against a taxonomy object. Transitions are pure: every function returns
a new ViewState and leaves its input untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Tuple

from .domain_types import Taxonomy, make_skill_key

OVERVIEW = "overview"
DOMAIN = "domain"


class UnknownDomainError(ValueError):
    """Raised when drilling into a domain the taxonomy does not contain."""

    def __init__(self, domain_name: str) -> None:
        self.domain_name = domain_name
        super().__init__(f"Unknown domain: {domain_name!r}")


@dataclass(frozen=True)
class ViewScope:
    kind: str = OVERVIEW
    domain_name: str = ""

    @property
    def is_overview(self) -> bool:
        return self.kind == OVERVIEW

    @property
    def view_key(self) -> str:
        return OVERVIEW if self.is_overview else f"{DOMAIN}::{self.domain_name}"

    def to_dict(self) -> dict:
        if self.is_overview:
            return {"kind": OVERVIEW}
        return {"kind": DOMAIN, "domain": self.domain_name}


OVERVIEW_SCOPE = ViewScope()


def domain_scope(domain_name: str) -> ViewScope:
    return ViewScope(kind=DOMAIN, domain_name=domain_name)


@dataclass(frozen=True)
class ViewState:
    """Current scope plus the stack of scopes to go back to."""

    current: ViewScope = OVERVIEW_SCOPE
    history: Tuple[ViewScope, ...] = ()

    @property
    def is_overview(self) -> bool:
        return self.current.is_overview

    @property
    def can_go_back(self) -> bool:
        return bool(self.history)

    def to_dict(self) -> dict:
        return {
            "current": self.current.to_dict(),
            "viewKey": self.current.view_key,
            "isOverview": self.is_overview,
            "history": [h.to_dict() for h in self.history],
        }


INITIAL_VIEW_STATE = ViewState()


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------

def drill_down(
    state: ViewState,
    domain_name: str,
    known_domains: AbstractSet[str] | None = None,
) -> ViewState:
    """
    Push the current scope, then focus *domain_name*.
    With *known_domains* given, an unknown target raises UnknownDomainError.
    """
    if known_domains is not None and domain_name not in known_domains:
        raise UnknownDomainError(domain_name)
    return ViewState(
        current=domain_scope(domain_name),
        history=state.history + (state.current,),
    )


def go_back(state: ViewState) -> ViewState:
    """Pop the most recent scope. No-op on an empty history."""
    if not state.history:
        return state
    return ViewState(current=state.history[-1], history=state.history[:-1])


def reset_to_overview(state: ViewState | None = None) -> ViewState:
    """Overview with an empty history, unconditionally."""
    return INITIAL_VIEW_STATE


def scope_skill_keys(
    scope: ViewScope, taxonomy: Taxonomy,
) -> FrozenSet[str] | None:
    """
    Skill keys in play for *scope*.
    None means "no restriction" (Overview). A domain missing from the
    taxonomy scopes to nothing.
    """
    if scope.is_overview:
        return None
    domain = taxonomy.find_domain(scope.domain_name)
    if domain is None:
        return frozenset()
    return frozenset(make_skill_key(domain.name, s.name) for s in domain.skills)


def in_scope(skill_key: str, scope_keys: FrozenSet[str] | None) -> bool:
    return scope_keys is None or skill_key in scope_keys
