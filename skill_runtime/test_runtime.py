"""
Skills Runtime -- Integration Test

Scenario:
  Phase 1: Load a roster fixture from disk
  Phase 2: Failed loads (missing file, bad JSON, unreachable URL) degrade to empty
  Phase 3: SKILLS_ROSTER_SOURCE picks the default source
  Phase 4: Session initialize + events + projection
  Phase 5: Rejected events never reach the log and are left untouched
  Phase 6: Reload with a changed fixture (drift, selection reset, hidden kept)
  Phase 7: Observability (get_metrics returns valid data)
  Phase 8: Determinism verification

Exit 0 on success, 1 on failure.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skill_kernel.events import (
    DrillDownEvent,
    HighlightPersonEvent,
    TogglePersonSelectedEvent,
    TogglePersonVisibilityEvent,
)
from skill_kernel.taxonomy import build_taxonomy
from skill_kernel.roster import parse_people
from skill_kernel.view_state import UnknownDomainError

from skill_runtime.drift import compare_taxonomies, has_drift
from skill_runtime.loader import default_source, load_roster
from skill_runtime.session import SkillsSession


ROSTER_V1 = {"people": [
    {"id": "u1", "name": "Ada", "skills": [
        {"domain": "Data", "skill": "Pandas", "usage": 70, "unlockedSubSkills": ["GroupBy"]},
        {"domain": "Web", "skill": "FastAPI", "usage": 30, "unlockedSubSkills": []},
    ]},
    {"id": "u2", "name": "Lin", "skills": [
        {"domain": "Data", "skill": "SQL", "usage": 50, "unlockedSubSkills": ["Window"]},
    ]},
    {"name": "no id at all", "skills": []},
]}

ROSTER_V2 = {"people": [
    {"id": "u1", "name": "Ada", "skills": [
        {"domain": "Data", "skill": "Pandas", "usage": 80, "unlockedSubSkills": []},
        {"domain": "Ops", "skill": "Docker", "usage": 20, "unlockedSubSkills": ["Compose"]},
    ]},
    {"id": "u3", "name": "Sam", "skills": []},
]}


def _header(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


def _write_json(path: str, data) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh)


def _temp_path(suffix: str = ".json") -> str:
    fd, path = tempfile.mkstemp(suffix=suffix, prefix="skills_runtime_test_")
    os.close(fd)
    return path


# ================================================================
# Phases
# ================================================================

def test_load_roster_from_file():
    path = _temp_path()
    try:
        _write_json(path, ROSTER_V1)
        loaded = load_roster(path)
        assert loaded.ok
        assert [p.id for p in loaded.people] == ["u1", "u2"]
        assert loaded.report.dropped_people == 1
        assert loaded.source == path
    finally:
        os.unlink(path)


def test_failed_loads_degrade_to_empty():
    missing = load_roster(os.path.join(tempfile.gettempdir(), "skills-does-not-exist.json"))
    assert not missing.ok
    assert missing.people == []

    path = _temp_path()
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("{not json")
        broken = load_roster(path)
        assert not broken.ok
        assert broken.people == []
    finally:
        os.unlink(path)

    unreachable = load_roster("http://127.0.0.1:9/people.json", timeout=0.5)
    assert not unreachable.ok
    assert unreachable.people == []


def test_default_source_from_environment():
    previous = os.environ.get("SKILLS_ROSTER_SOURCE")
    try:
        os.environ.pop("SKILLS_ROSTER_SOURCE", None)
        assert default_source() == "people.json"
        os.environ["SKILLS_ROSTER_SOURCE"] = "/srv/roster.json"
        assert default_source() == "/srv/roster.json"
    finally:
        if previous is None:
            os.environ.pop("SKILLS_ROSTER_SOURCE", None)
        else:
            os.environ["SKILLS_ROSTER_SOURCE"] = previous


def test_session_lifecycle():
    path = _temp_path()
    try:
        _write_json(path, ROSTER_V1)
        session = SkillsSession(source=path)

        # Phase 4
        loaded = session.initialize()
        assert loaded.ok
        assert session.last_load is loaded
        state = session.engine.state
        assert state.selected_person_ids == frozenset({"u1", "u2"})
        assert len(session.events) == 1

        session.apply_event(TogglePersonVisibilityEvent(payload={"person_id": "u2"}))
        session.apply_event(DrillDownEvent(payload={"domain": "Data"}))
        view = session.view()
        assert view.visible_count == 1
        assert [r.skill_key for r in view.skill_rows] == ["Data::Pandas"]
        assert view.hierarchy.id == "Data"
        assert [e.sequence for e in session.events] == [1, 2, 3]

        # Phase 5
        before = len(session.events)
        rejected = DrillDownEvent(payload={"domain": "Astrology"})
        try:
            session.apply_event(rejected)
            raise AssertionError("unknown domain should be rejected")
        except UnknownDomainError:
            pass
        assert len(session.events) == before
        assert rejected.sequence == 0
        assert session.engine.state.view.current.domain_name == "Data"

        # Phase 6
        _write_json(path, ROSTER_V2)
        session.reload()
        state = session.engine.state
        assert state.selected_person_ids == frozenset({"u1", "u3"})
        assert state.view.current.is_overview
        assert "u2" in state.hidden_person_ids
        assert "Ops" in session.engine.indices.taxonomy.domain_names()

        # Phase 7
        session.apply_event(TogglePersonSelectedEvent(payload={"person_id": "u3"}))
        session.apply_event(HighlightPersonEvent(payload={"person_id": "u1"}))
        metrics = session.get_metrics()
        assert metrics.event_count == len(session.events) == 6
        assert metrics.person_count == 2
        assert metrics.visible_count == 1
        assert metrics.skill_key_count == 2
        assert metrics.recompute_latency_ms >= 0
        assert metrics.workspace_signature == session.signature()
        assert metrics.to_dict()["event_count"] == 6

        # Phase 8
        assert session.verify_determinism() is True
    finally:
        os.unlink(path)


def test_session_with_missing_source_is_empty():
    session = SkillsSession(source=os.path.join(tempfile.gettempdir(), "skills-missing.json"))
    loaded = session.initialize()
    assert not loaded.ok
    assert session.get_state()["person_count"] == 0
    assert session.view().skill_rows == ()


def test_compare_taxonomies():
    people_a, _ = parse_people(ROSTER_V1)
    people_b, _ = parse_people(ROSTER_V2)
    diff = compare_taxonomies(build_taxonomy(people_a), build_taxonomy(people_b))
    assert diff["added_domains"] == ["Ops"]
    assert diff["removed_domains"] == ["Web"]
    assert diff["added_skills"] == ["Ops::Docker"]
    assert diff["removed_skills"] == ["Data::SQL", "Web::FastAPI"]
    assert diff["skill_count_delta"] == -1
    assert has_drift(diff)

    same = compare_taxonomies(build_taxonomy(people_a), build_taxonomy(people_a))
    assert not has_drift(same)


def main() -> None:
    phases = [
        ("Phase 1 -- Load Roster From File", test_load_roster_from_file),
        ("Phase 2 -- Failed Loads Degrade", test_failed_loads_degrade_to_empty),
        ("Phase 3 -- Default Source", test_default_source_from_environment),
        ("Phases 4-8 -- Session Lifecycle", test_session_lifecycle),
        ("Missing Source Session", test_session_with_missing_source_is_empty),
        ("Taxonomy Drift", test_compare_taxonomies),
    ]
    failed = 0
    for title, fn in phases:
        _header(title)
        try:
            fn()
            print("  [PASS]")
        except Exception as exc:
            failed += 1
            print(f"  [FAIL] {exc}")

    print(f"\n{'='*60}")
    print(f"  {len(phases) - failed}/{len(phases)} PHASE GROUPS PASSED")
    print(f"{'='*60}")
    sys.exit(0 if failed == 0 else 1)


if __name__ == "__main__":
    main()
