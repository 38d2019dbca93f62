"""
Skills Runtime

Roster loading, session orchestration and observability around the
Skill Kernel. The kernel itself never performs I/O.
"""

from .loader import LoadedRoster, load_roster
from .session import SkillsSession, DeterminismError
from .drift import compare_taxonomies
from .observability import SessionMetrics, collect_metrics

__all__ = [
    "LoadedRoster",
    "load_roster",
    "SkillsSession",
    "DeterminismError",
    "compare_taxonomies",
    "SessionMetrics",
    "collect_metrics",
]
