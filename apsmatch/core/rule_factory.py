from typing import Dict, Any, List

from apsmatch.core.models import Degree
from apsmatch.core.rules import (
    AndRule,
    PointRequirementRule,
    SubjectRequirementRule,
)


class RuleFactory:
    """
    Build admission rules either from a JSON rule config (factory.from_json)
    or straight from a Degree's requirement fields (factory.for_degree).
    """

    def from_json(self, rule_cfg: Dict[str, Any]):
        rtype = (rule_cfg.get("type") or "").lower()

        # 1) total points gate (raw mark sum)
        if rtype == "point_requirement":
            return PointRequirementRule(threshold=rule_cfg.get("threshold"))

        # 2) subject minimum, optionally with an alternative subject
        if rtype == "subject_requirement":
            return SubjectRequirementRule(
                subject=rule_cfg["subject"],
                min_points=rule_cfg.get("min_points"),
                or_subject=rule_cfg.get("or_subject"),
            )

        raise ValueError(f"Unknown rule type: {rule_cfg!r}")

    def rule_configs(self, degree: Degree) -> List[Dict[str, Any]]:
        cfgs: List[Dict[str, Any]] = []
        if degree.point_requirement is not None:
            cfgs.append({"type": "point_requirement", "threshold": degree.point_requirement})
        for req in degree.subject_requirements:
            cfgs.append({
                "type": "subject_requirement",
                "subject": req.subject,
                "min_points": req.min_points,
                "or_subject": req.or_subject,
            })
        return cfgs

    def for_degree(self, degree: Degree) -> AndRule:
        # points gate first, so a low total fails before any subject is looked at
        return AndRule(*[self.from_json(c) for c in self.rule_configs(degree)])
