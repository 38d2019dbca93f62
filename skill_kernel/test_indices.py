"""
Skill Kernel - Index Builder Tests

Covers:
  - Roster parsing tolerance
  - Taxonomy union and first-seen ordering
  - Metadata flattening
  - Person metrics reconciliation (filter + metadata-lag fallback)
  - Selection aggregation and zero-safe metrics
  - Usage scale (linear, clamped, degenerate)

Run:  python -m skill_kernel.test_indices
"""

from __future__ import annotations

import math
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skill_kernel.aggregation import aggregate_selection, selection_metrics_for_key
from skill_kernel.constants import USAGE_SCALE_DEGENERATE, USAGE_SCALE_MAX, USAGE_SCALE_MIN
from skill_kernel.domain_types import (
    Person,
    PersonSkillRecord,
    SkillMeta,
    coerce_usage,
    make_skill_key,
)
from skill_kernel.metadata import build_metadata_index, keys_without_templates
from skill_kernel.metrics import build_person_metrics_index, roster_usage_totals
from skill_kernel.roster import parse_people
from skill_kernel.scale import create_usage_scale, usage_scale_from_metrics
from skill_kernel.taxonomy import build_taxonomy


_pass = 0
_fail = 0


def _test(name, fn):
    global _pass, _fail
    try:
        fn()
        print(f"  [PASS] {name}")
        _pass += 1
    except Exception as exc:
        print(f"  [FAIL] {name}: {exc}")
        _fail += 1


def _person(pid, *records, name=""):
    return Person(id=pid, name=name or pid, skills=tuple(records))


def _rec(domain, skill, usage=0.0, unlocked=()):
    return PersonSkillRecord(domain=domain, skill=skill, usage=usage, unlocked_sub_skills=tuple(unlocked))


# ---------------------------------------------------------------------------
# Roster parsing
# ---------------------------------------------------------------------------

def test_parse_tolerates_malformed_entries():
    raw = {"people": [
        {"id": " P1 ", "name": "Ann", "skills": [
            {"domain": "Backend", "skill": "SQL", "usage": "42", "unlockedSubSkills": ["Joins", "", None]},
            {"domain": "", "skill": "Orphan", "usage": 5},
            "not-a-record",
        ]},
        {"name": "No id"},
        42,
        {"id": "P2", "skills": "oops"},
    ]}
    people, report = parse_people(raw)
    assert [p.id for p in people] == ["P1", "P2"]
    assert people[0].skills[0].usage == 42.0
    assert people[0].skills[0].unlocked_sub_skills == ("Joins",)
    assert people[1].skills == ()
    assert report.dropped_people == 2
    assert report.skipped_records == 2


def test_parse_non_roster_is_empty():
    for raw in (None, "people", {"people": "x"}, 3):
        people, report = parse_people(raw)
        assert people == []
        assert report.dropped_people == 0


def test_coerce_usage_non_finite_is_zero():
    assert coerce_usage(float("nan")) == 0.0
    assert coerce_usage(float("inf")) == 0.0
    assert coerce_usage(float("-inf")) == 0.0
    assert coerce_usage("abc") == 0.0
    assert coerce_usage(None) == 0.0
    assert coerce_usage(True) == 0.0
    assert coerce_usage("12.5") == 12.5
    assert coerce_usage(-3) == -3.0


# ---------------------------------------------------------------------------
# Taxonomy + metadata
# ---------------------------------------------------------------------------

def test_taxonomy_union_first_seen_order():
    people = [
        _person("A", _rec("Backend", "SQL", 10, ["Joins"]), _rec("Frontend", "React", 5, ["Hooks"])),
        _person("B", _rec("Frontend", "CSS", 1), _rec("Backend", "SQL", 0, ["Indexes", "Joins"])),
        _person("C", _rec("", "Nothing", 9), _rec("DevOps", "", 9)),
    ]
    taxonomy = build_taxonomy(people)
    assert taxonomy.name == "Tech Skills"
    assert taxonomy.domain_names() == ["Backend", "Frontend"]
    backend = taxonomy.find_domain("Backend")
    assert [s.name for s in backend.skills] == ["SQL"]
    assert backend.skills[0].sub_skill_templates == ("Joins", "Indexes")
    frontend = taxonomy.find_domain("Frontend")
    assert [s.name for s in frontend.skills] == ["React", "CSS"]


def test_taxonomy_empty_roster():
    taxonomy = build_taxonomy([])
    assert taxonomy.domains == ()
    assert build_metadata_index(taxonomy) == {}


def test_taxonomy_rebuild_is_fresh():
    people = [_person("A", _rec("Backend", "SQL", 10, ["Joins"]))]
    first = build_taxonomy(people)
    second = build_taxonomy(people)
    assert first == second
    assert first is not second


def test_metadata_flattening():
    people = [
        _person("A", _rec("Backend", "SQL", 10, ["Joins"]), _rec("Backend", "Go", 3)),
    ]
    index = build_metadata_index(build_taxonomy(people))
    assert set(index) == {"Backend::SQL", "Backend::Go"}
    assert index["Backend::SQL"] == SkillMeta("Backend", "SQL", frozenset({"Joins"}))
    assert index["Backend::Go"].sub_skill_names == frozenset()
    assert keys_without_templates(index) == ["Backend::Go"]


def test_skill_key_is_pure():
    assert make_skill_key("Frontend", "React") == "Frontend::React"
    assert _rec("Frontend", "React").skill_key == make_skill_key("Frontend", "React")


# ---------------------------------------------------------------------------
# Person metrics
# ---------------------------------------------------------------------------

def test_metrics_filter_against_known_names():
    people = [
        _person("A", _rec("Backend", "SQL", 10, ["Joins", "Joins"])),
        _person("B", _rec("Backend", "SQL", 20, ["Indexes"])),
    ]
    taxonomy = build_taxonomy(people)
    metadata = build_metadata_index(taxonomy)
    # Reconcile a third person against that metadata with an unknown name.
    extra = _person("C", _rec("Backend", "SQL", 5, ["Joins", "Sharding"]))
    metrics = build_person_metrics_index(people + [extra], metadata)

    assert metrics["A"]["Backend::SQL"].unlocked_count == 1
    assert metrics["C"]["Backend::SQL"].unlocked_names == frozenset({"Joins"})
    for per_skill in metrics.values():
        for key, metric in per_skill.items():
            known = metadata[key].sub_skill_names
            assert metric.unlocked_count <= len(known)


def test_metrics_pass_through_when_metadata_lags():
    people = [_person("A", _rec("Backend", "SQL", 10, ["Joins", "Joins", "Views"]))]
    metrics = build_person_metrics_index(people, {})
    metric = metrics["A"]["Backend::SQL"]
    assert metric.unlocked_names == frozenset({"Joins", "Views"})
    assert metric.unlocked_count == 2


def test_metrics_skip_nameless_records_and_duplicate_ids():
    people = [
        _person("A", _rec("", "SQL", 10), _rec("Backend", "Go", 4)),
        _person("A", _rec("Backend", "Rust", 99)),
    ]
    metadata = build_metadata_index(build_taxonomy(people))
    metrics = build_person_metrics_index(people, metadata)
    assert list(metrics) == ["A"]
    assert set(metrics["A"]) == {"Backend::Go"}
    assert roster_usage_totals(metrics) == {"Backend::Go": 4.0}


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _metrics_fixture():
    people = [
        _person("A", _rec("Backend", "SQL", 10, ["Joins"]), _rec("Backend", "Go", 0)),
        _person("B", _rec("Backend", "SQL", 30)),
        _person("C", _rec("Backend", "SQL", 0, ["Joins"]), _rec("Backend", "Go", 7)),
    ]
    metadata = build_metadata_index(build_taxonomy(people))
    return build_person_metrics_index(people, metadata)


def test_aggregate_visible_selection():
    metrics = _metrics_fixture()
    selected = frozenset({"A", "B", "C"})
    hidden = frozenset({"B"})
    result = aggregate_selection(selected, hidden, metrics)

    assert result.visible_count == 2
    sql = result.aggregates["Backend::SQL"]
    assert sql.usage_sum == 10
    assert sql.unlocked_sum == 2
    assert sql.unlocked_people_count == 2
    go = result.aggregates["Backend::Go"]
    assert go.usage_sum == 7
    assert go.unlocked_people_count == 0
    # inputs untouched
    assert selected == frozenset({"A", "B", "C"})
    assert hidden == frozenset({"B"})


def test_aggregate_omits_zero_contributions():
    metrics = _metrics_fixture()
    result = aggregate_selection(frozenset({"A"}), frozenset(), metrics)
    assert "Backend::Go" not in result.aggregates
    assert set(result.aggregates) == {"Backend::SQL"}


def test_aggregate_all_hidden_is_empty():
    metrics = _metrics_fixture()
    result = aggregate_selection(frozenset({"A"}), frozenset({"A"}), metrics)
    assert result.visible_count == 0
    assert result.aggregates == {}


def test_aggregate_counts_unknown_visible_ids():
    metrics = _metrics_fixture()
    result = aggregate_selection(frozenset({"A", "ghost"}), frozenset(), metrics)
    assert result.visible_count == 2


def test_selection_metrics_ratios():
    metrics = _metrics_fixture()
    result = aggregate_selection(frozenset({"A", "B", "C"}), frozenset(), metrics)
    m = selection_metrics_for_key("Backend::SQL", result.aggregates, result.visible_count)
    assert m.selected_count == 3
    assert math.isclose(m.unlocked_people_ratio, 2 / 3)
    assert math.isclose(m.usage_avg, 40 / 3)
    missing = selection_metrics_for_key("Nope::Nope", result.aggregates, result.visible_count)
    assert missing.usage_avg == 0
    assert missing.selected_count == 3


# ---------------------------------------------------------------------------
# Usage scale
# ---------------------------------------------------------------------------

def test_usage_scale_linear_and_clamped():
    scale = create_usage_scale([0, 50, 100])
    assert math.isclose(scale(0), USAGE_SCALE_MIN)
    assert math.isclose(scale(100), USAGE_SCALE_MAX)
    assert math.isclose(scale(50), (USAGE_SCALE_MIN + USAGE_SCALE_MAX) / 2)
    assert math.isclose(scale(500), USAGE_SCALE_MAX)
    assert math.isclose(scale(-10), USAGE_SCALE_MIN)
    assert math.isclose(scale(float("nan")), USAGE_SCALE_MIN)


def test_usage_scale_degenerate():
    assert create_usage_scale([]).degenerate
    assert create_usage_scale([5, 5])(123) == USAGE_SCALE_DEGENERATE
    assert usage_scale_from_metrics({})(0) == USAGE_SCALE_DEGENERATE
    zero_only = build_person_metrics_index([_person("A", _rec("B", "S", 0))], {})
    assert usage_scale_from_metrics(zero_only)(0) == USAGE_SCALE_DEGENERATE


def test_usage_scale_anchored_at_zero():
    metrics = build_person_metrics_index([_person("A", _rec("B", "S", 40))], {})
    scale = usage_scale_from_metrics(metrics)
    assert scale.low == 0
    assert scale.high == 40
    assert math.isclose(scale(40), USAGE_SCALE_MAX)


def test_usage_scale_ignores_non_finite():
    scale = create_usage_scale([0, float("nan"), 10, float("inf")])
    assert scale.low == 0 and scale.high == 10


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def main() -> None:
    print("\n=== Skill Kernel Indices ===")
    for name, fn in [
        ("parse tolerates malformed entries", test_parse_tolerates_malformed_entries),
        ("parse non-roster is empty", test_parse_non_roster_is_empty),
        ("coerce usage", test_coerce_usage_non_finite_is_zero),
        ("taxonomy union first-seen order", test_taxonomy_union_first_seen_order),
        ("taxonomy empty roster", test_taxonomy_empty_roster),
        ("taxonomy rebuild is fresh", test_taxonomy_rebuild_is_fresh),
        ("metadata flattening", test_metadata_flattening),
        ("skill key is pure", test_skill_key_is_pure),
        ("metrics filter against known names", test_metrics_filter_against_known_names),
        ("metrics pass-through on metadata lag", test_metrics_pass_through_when_metadata_lags),
        ("metrics skip nameless + duplicate ids", test_metrics_skip_nameless_records_and_duplicate_ids),
        ("aggregate visible selection", test_aggregate_visible_selection),
        ("aggregate omits zero contributions", test_aggregate_omits_zero_contributions),
        ("aggregate all hidden", test_aggregate_all_hidden_is_empty),
        ("aggregate counts unknown visible ids", test_aggregate_counts_unknown_visible_ids),
        ("selection metrics ratios", test_selection_metrics_ratios),
        ("usage scale linear + clamped", test_usage_scale_linear_and_clamped),
        ("usage scale degenerate", test_usage_scale_degenerate),
        ("usage scale anchored at zero", test_usage_scale_anchored_at_zero),
        ("usage scale ignores non-finite", test_usage_scale_ignores_non_finite),
    ]:
        _test(name, fn)

    print(f"\n{'='*60}")
    print(f"  RESULTS: {_pass} passed, {_fail} failed")
    print(f"{'='*60}")
    sys.exit(0 if _fail == 0 else 1)


if __name__ == "__main__":
    main()
