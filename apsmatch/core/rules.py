from numbers import Number
from typing import Protocol, Optional

from apsmatch.core.models import UserAcademicRecord, RuleResult, SubjectMark


class AdmissionRule(Protocol):
    def evaluate(self, record: UserAcademicRecord) -> RuleResult: ...


def _usable_mark(s: Optional[SubjectMark]) -> Optional[float]:
    # bool is a Number subclass; a True mark is data corruption, not 1%
    if s is None or isinstance(s.mark, bool) or not isinstance(s.mark, Number):
        return None
    return s.mark


class PointRequirementRule:
    """
    Points gate: the RAW sum of percentage marks must reach the degree's
    point requirement. This is deliberately not the banded APS; the catalogue
    thresholds were captured against raw totals.
    """
    def __init__(self, threshold: int):
        self.threshold = threshold

    def evaluate(self, record: UserAcademicRecord) -> RuleResult:
        if not isinstance(self.threshold, Number):
            return RuleResult(False, f"points: unusable requirement {self.threshold!r}")
        marks = [_usable_mark(s) for s in record.subject_marks]
        if any(m is None for m in marks):
            return RuleResult(False, "points: record has non-numeric marks")
        total = sum(marks)
        passed = total >= self.threshold
        return RuleResult(passed, f"total={total} {'≥' if passed else '<'} required={self.threshold}")


class SubjectRequirementRule:
    def __init__(self, subject: str, min_points: int, or_subject: Optional[str] = None):
        self.subject = subject
        self.min_points = min_points
        self.or_subject = or_subject

    def _label(self) -> str:
        if self.or_subject:
            return f"{self.subject} or {self.or_subject}"
        return self.subject

    def evaluate(self, record: UserAcademicRecord) -> RuleResult:
        if not isinstance(self.min_points, Number):
            return RuleResult(False, f"{self._label()}: unusable requirement {self.min_points!r}")

        main = record.find(self.subject)
        alt = record.find(self.or_subject) if self.or_subject else None
        if main is None and alt is None:
            return RuleResult(False, f"{self._label()}: missing")

        # both branches share one threshold
        for s in (main, alt):
            m = _usable_mark(s)
            if m is not None and m >= self.min_points:
                return RuleResult(True, f"{s.subject} OK (mark={m}, required={self.min_points})")

        got = ", ".join(f"{s.subject}={s.mark}" for s in (main, alt) if s is not None)
        return RuleResult(False, f"{self._label()}: {got} < required {self.min_points}")


class AndRule:
    def __init__(self, *rules):
        self.rules = list(rules)

    def evaluate(self, record: UserAcademicRecord) -> RuleResult:
        exps = []
        for r in self.rules:
            rr = r.evaluate(record)
            exps.append(rr.explanation)
            if not rr.passed:
                return RuleResult(False, " | ".join(exps))
        return RuleResult(True, " | ".join(exps))
