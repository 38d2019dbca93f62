"""
Observability - In-process metrics collection.

No external dependencies. Uses diagnostics + timing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import SkillsSession


@dataclass(frozen=True)
class SessionMetrics:
    """Snapshot of observable session metrics."""

    recompute_latency_ms: float
    event_count: int
    person_count: int
    visible_count: int
    skill_key_count: int
    aggregate_count: int
    workspace_signature: str
    warnings: list

    def to_dict(self) -> dict:
        return {
            "recompute_latency_ms": self.recompute_latency_ms,
            "event_count": self.event_count,
            "person_count": self.person_count,
            "visible_count": self.visible_count,
            "skill_key_count": self.skill_key_count,
            "aggregate_count": self.aggregate_count,
            "workspace_signature": self.workspace_signature,
            "warnings": list(self.warnings),
        }


def collect_metrics(session: "SkillsSession") -> SessionMetrics:
    """
    Collect metrics from a live session.

    Replays the event log into a fresh engine to measure a full
    recompute, then reads diagnostics from the live one.
    """
    from skill_kernel.engine import engine_from_events
    from skill_kernel.projection import ProjectionService

    start = time.perf_counter()
    fresh = engine_from_events(session.events)
    ProjectionService(cache_size=1).build(fresh)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    engine = session.engine
    diagnostics = engine.get_diagnostics()
    selection = engine.selection()

    return SessionMetrics(
        recompute_latency_ms=round(elapsed_ms, 2),
        event_count=len(session.events),
        person_count=diagnostics["person_count"],
        visible_count=selection.visible_count,
        skill_key_count=diagnostics["skill_count"],
        aggregate_count=len(selection.aggregates),
        workspace_signature=session.signature(),
        warnings=diagnostics["warnings"],
    )
