"""
Roster Loader

Reads a ``{"people": [...]}`` fixture from a filesystem path or an
http(s) URL. Every failure degrades to an empty roster and is logged;
nothing here raises into the kernel.
"""

from __future__ import annotations

import json
import logging
import os
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List
from urllib.parse import urlparse

from skill_kernel.domain_types import Person
from skill_kernel.roster import RosterParseReport, parse_people

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "people.json"
DEFAULT_TIMEOUT_S = 10.0


@dataclass(frozen=True)
class LoadedRoster:
    source: str
    people: List[Person] = field(default_factory=list)
    report: RosterParseReport = field(default_factory=RosterParseReport)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


def default_source() -> str:
    return os.environ.get("SKILLS_ROSTER_SOURCE", DEFAULT_SOURCE)


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def _read_raw(source: str, timeout: float) -> Any:
    if _is_url(source):
        req = urllib.request.Request(source, headers={"Accept": "application/json"})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))
    return json.loads(Path(source).read_text(encoding="utf-8"))


def load_roster(source: str | None = None, timeout: float = DEFAULT_TIMEOUT_S) -> LoadedRoster:
    """Load and parse a roster. Failures yield an empty, flagged result."""
    source = source or default_source()
    try:
        raw = _read_raw(source, timeout)
    except (OSError, ValueError) as exc:
        logger.warning("roster load failed for %s: %s", source, exc)
        return LoadedRoster(source=source, error=str(exc))

    people, report = parse_people(raw)
    if report.dropped_people or report.skipped_records:
        logger.info(
            "roster %s: dropped %d people, skipped %d records",
            source, report.dropped_people, report.skipped_records,
        )
    return LoadedRoster(source=source, people=people, report=report)
