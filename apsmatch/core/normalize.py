# apsmatch/core/normalize.py
"""
Stored profiles come in a few shapes, all of which end up as one
UserAcademicRecord before anything is scored:
    {"subjects": {"subject1": "Mathematics", ...}, "marks": {"mark1": "75", ...}}
    {"subjects": ["Mathematics", ...],           "marks": {"mark1": "75", ...}}
    {"subjectMarks": [{"subject": "Mathematics", "mark": 75}, ...]}
Blank marks count as 0, blank subject slots are dropped.
"""
import re
from numbers import Number
from typing import Any, Dict, List, Mapping, Tuple

from apsmatch.core.errors import InvalidMarkValue, ProfileFormatError
from apsmatch.core.models import SubjectMark, UserAcademicRecord

NBT_KEYS = ("AL", "QL", "MAT")

_SLOT = re.compile(r"^(subject|mark)(\d+)$")


def parse_mark(subject: str, value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    if isinstance(value, bool):
        raise InvalidMarkValue(subject, value)
    if isinstance(value, Number):
        try:
            mark = int(value)
        except (ValueError, OverflowError):
            raise InvalidMarkValue(subject, value) from None
        if mark != value:
            raise InvalidMarkValue(subject, value)
    else:
        try:
            mark = int(str(value).strip())
        except ValueError:
            raise InvalidMarkValue(subject, value) from None
    if mark < 0 or mark > 100:
        raise InvalidMarkValue(subject, value)
    return mark


def _slot_index(key: str, kind: str) -> int:
    m = _SLOT.match(key)
    if m is None or m.group(1) != kind:
        raise ProfileFormatError(f"Unexpected {kind} key: {key!r}")
    return int(m.group(2))


def _slotted_pairs(profile: Mapping[str, Any]) -> List[Tuple[str, Any]]:
    subjects = profile.get("subjects")
    marks = profile.get("marks") or {}
    if not isinstance(marks, Mapping):
        raise ProfileFormatError("'marks' must be a mapping of markN -> value")

    if isinstance(subjects, Mapping):
        ordered = sorted((_slot_index(k, "subject"), v) for k, v in subjects.items())
    elif isinstance(subjects, list):
        ordered = [(i + 1, v) for i, v in enumerate(subjects)]
    else:
        raise ProfileFormatError("'subjects' must be a list or a mapping of subjectN -> name")

    return [(name, marks.get(f"mark{idx}")) for idx, name in ordered]


def _canonical_pairs(items: Any) -> List[Tuple[str, Any]]:
    if not isinstance(items, list):
        raise ProfileFormatError("'subjectMarks' must be a list")
    pairs = []
    for it in items:
        if not isinstance(it, Mapping) or "subject" not in it:
            raise ProfileFormatError(f"Bad subject mark entry: {it!r}")
        pairs.append((it["subject"], it.get("mark")))
    return pairs


def nbt_from_profile(raw: Any) -> Dict[str, int]:
    if not raw:
        return {}
    if not isinstance(raw, Mapping):
        raise ProfileFormatError("'nbtScores' must be a mapping")
    out: Dict[str, int] = {}
    for key in NBT_KEYS:
        value = raw.get(f"nbt{key}", raw.get(key))
        if value is None:
            continue
        try:
            out[key] = int(str(value).strip() or 0)
        except ValueError:
            raise ProfileFormatError(f"NBT {key}: not a number: {value!r}") from None
    return out


def record_from_profile(profile: Mapping[str, Any]) -> UserAcademicRecord:
    if not isinstance(profile, Mapping):
        raise ProfileFormatError("Profile must be a mapping")

    canonical = profile.get("subjectMarks", profile.get("subject_marks"))
    if canonical is not None:
        pairs = _canonical_pairs(canonical)
    elif profile.get("subjects") is not None:
        pairs = _slotted_pairs(profile)
    else:
        pairs = []

    subject_marks: List[SubjectMark] = []
    seen = set()
    for name, value in pairs:
        if not isinstance(name, str) or not name.strip():
            continue
        name = name.strip()
        if name in seen:
            raise ProfileFormatError(f"Duplicate subject: {name}")
        seen.add(name)
        subject_marks.append(SubjectMark(subject=name, mark=parse_mark(name, value)))

    nbt = profile.get("nbtScores", profile.get("nbt_scores"))
    return UserAcademicRecord(subject_marks=subject_marks, nbt_scores=nbt_from_profile(nbt))


def profile_from_record(record: UserAcademicRecord, aps: int) -> Dict[str, Any]:
    """Inverse of record_from_profile, in the slotted shape the profile store keeps."""
    subjects: Dict[str, str] = {}
    marks: Dict[str, str] = {}
    for i, s in enumerate(record.subject_marks, start=1):
        subjects[f"subject{i}"] = s.subject
        marks[f"mark{i}"] = str(s.mark)
    return {
        "subjects": subjects,
        "marks": marks,
        "apsScore": str(aps),
        "nbtScores": {f"nbt{k}": str(record.nbt_scores.get(k, 0)) for k in NBT_KEYS},
    }
