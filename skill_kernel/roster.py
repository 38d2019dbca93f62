"""
Skill Kernel - Roster Parsing

Tolerant boundary between the loading collaborator and the kernel.
Malformed entries are dropped or coerced; nothing here raises for
data-quality problems.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from .domain_types import Person, PersonSkillRecord, coerce_usage


@dataclass(frozen=True)
class RosterParseReport:
    """What the parser had to throw away."""

    dropped_people: int = 0
    skipped_records: int = 0


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _sub_skill_names(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    names = (_text(v) for v in value)
    return tuple(n for n in names if n)


def parse_record(raw: Any) -> PersonSkillRecord | None:
    """Parse one skill record. Non-mappings yield None."""
    if not isinstance(raw, dict):
        return None
    return PersonSkillRecord(
        domain=_text(raw.get("domain")),
        skill=_text(raw.get("skill")),
        usage=coerce_usage(raw.get("usage")),
        unlocked_sub_skills=_sub_skill_names(raw.get("unlockedSubSkills")),
    )


def parse_people(raw: Any) -> Tuple[List[Person], RosterParseReport]:
    """
    Parse a fixture into people.

    Accepts ``{"people": [...]}`` or a bare list. Anything else is an
    empty roster. People without an id are dropped; records that are not
    mappings or lack a domain/skill name are counted as skipped (records
    with empty names are still kept on the person, the kernel skips them).
    """
    if isinstance(raw, dict):
        entries = raw.get("people")
    else:
        entries = raw
    if not isinstance(entries, (list, tuple)):
        return [], RosterParseReport()

    people: List[Person] = []
    dropped = 0
    skipped = 0

    for entry in entries:
        if not isinstance(entry, dict):
            dropped += 1
            continue
        person_id = _text(entry.get("id"))
        if not person_id:
            dropped += 1
            continue

        raw_skills = entry.get("skills")
        if not isinstance(raw_skills, (list, tuple)):
            raw_skills = []

        records: List[PersonSkillRecord] = []
        for raw_record in raw_skills:
            record = parse_record(raw_record)
            if record is None:
                skipped += 1
                continue
            if not record.domain or not record.skill:
                skipped += 1
            records.append(record)

        people.append(Person(
            id=person_id,
            name=_text(entry.get("name")),
            skills=tuple(records),
        ))

    return people, RosterParseReport(dropped_people=dropped, skipped_records=skipped)


def roster_ids(people: Iterable[Person]) -> List[str]:
    """Person ids in roster order, first occurrence wins."""
    seen = set()
    ids: List[str] = []
    for person in people:
        if person.id and person.id not in seen:
            seen.add(person.id)
            ids.append(person.id)
    return ids


def people_by_id(people: Iterable[Person]) -> dict:
    """Map id -> person. First occurrence of a duplicate id wins."""
    index: dict = {}
    for person in people:
        if person.id and person.id not in index:
            index[person.id] = person
    return index
