import logging
from typing import Iterable, List, Optional, Sequence

from apsmatch.core.models import UserAcademicRecord, Degree, EligibilityResult
from apsmatch.core.repositories import DegreeRepository
from apsmatch.core.rule_factory import RuleFactory
from apsmatch.core.scoring import (
    DEFAULT_SUBJECT_LIMIT,
    NON_COUNTING_SUBJECTS,
    aps_for_record,
)

logger = logging.getLogger(__name__)


class EligibilityEngine:
    def __init__(self, repo: Optional[DegreeRepository] = None,
                 factory: Optional[RuleFactory] = None,
                 subject_limit: int = DEFAULT_SUBJECT_LIMIT,
                 excluded: Iterable[str] = NON_COUNTING_SUBJECTS):
        self.repo = repo
        self.factory = factory or RuleFactory()
        self.subject_limit = subject_limit
        self.excluded = tuple(excluded)

    @staticmethod
    def _require_marks(record: UserAcademicRecord) -> None:
        if record.subject_marks is None:
            raise TypeError("record.subject_marks must be a list, not None")

    def evaluate_degree(self, record: UserAcademicRecord, degree: Degree) -> EligibilityResult:
        self._require_marks(record)
        rr = self.factory.for_degree(degree).evaluate(record)
        explanations = [e for e in rr.explanation.split(" | ") if e]
        logger.debug("degree %s (%s): passed=%s %s", degree.id, degree.name, rr.passed, rr.explanation)

        # raw total drives the points gate; APS is only reported alongside it
        details = {}
        try:
            details["raw_total"] = float(record.raw_total())
            details["aps"] = float(aps_for_record(record, self.subject_limit, self.excluded))
        except TypeError:
            logger.warning("record has non-numeric marks; totals omitted for degree %s", degree.id)

        return EligibilityResult(
            degree=degree,
            passed=rr.passed,
            explanations=explanations,
            details=details,
        )

    def evaluate_record(self, record: UserAcademicRecord,
                        degrees: Optional[Sequence[Degree]] = None,
                        faculty_id: Optional[int] = None) -> List[EligibilityResult]:
        if degrees is None:
            if self.repo is None:
                raise ValueError("No degrees given and engine has no repository")
            degrees = self.repo.list_degrees(faculty_id=faculty_id)
        return [self.evaluate_degree(record, d) for d in degrees]

    def is_eligible(self, record: UserAcademicRecord, degree: Degree) -> bool:
        self._require_marks(record)
        return self.factory.for_degree(degree).evaluate(record).passed

    def filter_eligible_degrees(self, record: UserAcademicRecord,
                                degrees: Sequence[Degree]) -> List[Degree]:
        eligible = [d for d in degrees if self.is_eligible(record, d)]
        logger.debug("eligible for %d of %d degrees", len(eligible), len(degrees))
        return eligible


_default_engine = EligibilityEngine()


def is_eligible(record: UserAcademicRecord, degree: Degree) -> bool:
    return _default_engine.is_eligible(record, degree)


def filter_eligible_degrees(record: UserAcademicRecord, degrees: Sequence[Degree]) -> List[Degree]:
    return _default_engine.filter_eligible_degrees(record, degrees)
