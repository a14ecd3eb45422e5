# apsmatch/core/scoring.py
"""
APS (Admission Point Score) calculation, NSC aligned:
- Bands are checked highest-first: 80+ -> 7, 70+ -> 6, 60+ -> 5, 50+ -> 4,
  40+ -> 3, 30+ -> 2, anything lower -> 0.
  Note: 0-29 gives 0, not 1. Kept as the calculator has always done it.
- Out-of-range marks are not rejected here: above 100 lands in the top band,
  negative lands in the bottom band. Validation belongs to normalize.py.
- The total counts the first `subject_limit` marks (default 6) in entry order.
  Callers drop the non-counting subject (Life Orientation) before summing.
"""
from typing import Iterable, List, Sequence, Tuple

from apsmatch.core.models import ScoreBand, UserAcademicRecord

SCORE_BANDS: Tuple[ScoreBand, ...] = (
    ScoreBand(80, 100, 7),
    ScoreBand(70, 79, 6),
    ScoreBand(60, 69, 5),
    ScoreBand(50, 59, 4),
    ScoreBand(40, 49, 3),
    ScoreBand(30, 39, 2),
    ScoreBand(0, 29, 0),
)

DEFAULT_SUBJECT_LIMIT = 6
NON_COUNTING_SUBJECTS: Tuple[str, ...] = ("Life Orientation",)
MAX_APS = DEFAULT_SUBJECT_LIMIT * SCORE_BANDS[0].points


def points_for_mark(mark: int) -> int:
    for band in SCORE_BANDS:
        if mark >= band.lower:
            return band.points
    # below the lowest band (negative marks)
    return SCORE_BANDS[-1].points


def total_score(marks: Sequence[int], subject_limit: int = DEFAULT_SUBJECT_LIMIT) -> int:
    if subject_limit < 0:
        raise ValueError(f"subject_limit must be >= 0, got {subject_limit}")
    return sum(points_for_mark(m) for m in list(marks)[:subject_limit])


def counting_marks(record: UserAcademicRecord,
                   excluded: Iterable[str] = NON_COUNTING_SUBJECTS) -> List[int]:
    skip = set(excluded)
    return [s.mark for s in record.subject_marks if s.subject not in skip]


def aps_for_record(record: UserAcademicRecord,
                   subject_limit: int = DEFAULT_SUBJECT_LIMIT,
                   excluded: Iterable[str] = NON_COUNTING_SUBJECTS) -> int:
    return total_score(counting_marks(record, excluded), subject_limit)


def score_breakdown(record: UserAcademicRecord,
                    subject_limit: int = DEFAULT_SUBJECT_LIMIT,
                    excluded: Iterable[str] = NON_COUNTING_SUBJECTS) -> List[Tuple[str, int, int, bool]]:
    """
    Per-subject view of aps_for_record: (subject, mark, points, counted).
    Excluded subjects and anything past the limit are listed with counted=False.
    """
    skip = set(excluded)
    rows: List[Tuple[str, int, int, bool]] = []
    used = 0
    for s in record.subject_marks:
        counted = s.subject not in skip and used < subject_limit
        if counted:
            used += 1
        rows.append((s.subject, s.mark, points_for_mark(s.mark), counted))
    return rows
