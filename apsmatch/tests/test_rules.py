import pytest

from apsmatch.core.models import Degree, SubjectMark, SubjectRequirement, UserAcademicRecord
from apsmatch.core.rule_factory import RuleFactory
from apsmatch.core.rules import AndRule, PointRequirementRule, SubjectRequirementRule


def _record(*pairs):
    return UserAcademicRecord(subject_marks=[SubjectMark(s, m) for s, m in pairs])


def test_points_gate_uses_raw_sum():
    rule = PointRequirementRule(threshold=150)
    assert rule.evaluate(_record(("Mathematics", 80), ("History", 70))).passed
    rr = rule.evaluate(_record(("Mathematics", 80), ("History", 69)))
    assert rr.passed is False
    assert rr.explanation == "total=149 < required=150"

def test_points_gate_fails_on_non_numeric_mark():
    rr = PointRequirementRule(threshold=10).evaluate(_record(("Mathematics", "eighty")))
    assert rr.passed is False

def test_subject_requirement_main_branch():
    rule = SubjectRequirementRule("Mathematics", 60)
    assert rule.evaluate(_record(("Mathematics", 60))).passed
    assert not rule.evaluate(_record(("Mathematics", 59))).passed

def test_subject_requirement_or_branch_shares_threshold():
    rule = SubjectRequirementRule("Mathematics", 60, or_subject="Mathematical Literacy")
    assert rule.evaluate(_record(("Mathematics", 50), ("Mathematical Literacy", 70))).passed
    assert rule.evaluate(_record(("Mathematical Literacy", 60))).passed
    rr = rule.evaluate(_record(("Mathematics", 50), ("Mathematical Literacy", 59)))
    assert rr.passed is False
    assert "Mathematics=50" in rr.explanation and "Mathematical Literacy=59" in rr.explanation

def test_subject_requirement_missing_subject_fails():
    rr = SubjectRequirementRule("Accounting", 50, or_subject="Economics").evaluate(_record(("History", 90)))
    assert rr.passed is False
    assert rr.explanation == "Accounting or Economics: missing"

def test_subject_requirement_without_threshold_fails():
    assert not SubjectRequirementRule("Mathematics", None).evaluate(_record(("Mathematics", 90))).passed

def test_none_subject_marks_is_a_programming_error():
    with pytest.raises(TypeError):
        SubjectRequirementRule("Mathematics", 50).evaluate(UserAcademicRecord(subject_marks=None))

def test_and_rule_short_circuits():
    calls = []

    class Spy:
        def evaluate(self, record):
            calls.append(record)
            return SubjectRequirementRule("X", 1).evaluate(record)

    rr = AndRule(PointRequirementRule(500), Spy()).evaluate(_record(("History", 90)))
    assert rr.passed is False
    assert calls == []

def test_empty_and_rule_passes():
    assert AndRule().evaluate(_record()).passed

def test_factory_from_json():
    f = RuleFactory()
    assert isinstance(f.from_json({"type": "point_requirement", "threshold": 300}), PointRequirementRule)
    r = f.from_json({"type": "SUBJECT_REQUIREMENT", "subject": "Mathematics",
                     "min_points": 60, "or_subject": "Mathematical Literacy"})
    assert isinstance(r, SubjectRequirementRule)
    assert r.or_subject == "Mathematical Literacy"
    with pytest.raises(ValueError):
        f.from_json({"type": "nbt_requirement"})

def test_factory_for_degree_puts_points_gate_first():
    degree = Degree(id=1, name="BSc", point_requirement=300,
                    subject_requirements=[SubjectRequirement("Mathematics", 60)])
    cfgs = RuleFactory().rule_configs(degree)
    assert [c["type"] for c in cfgs] == ["point_requirement", "subject_requirement"]

def test_factory_for_degree_without_point_requirement():
    degree = Degree(id=1, name="BSc", subject_requirements=[SubjectRequirement("Mathematics", 60)])
    rule = RuleFactory().for_degree(degree)
    assert len(rule.rules) == 1
    assert rule.evaluate(_record(("Mathematics", 61))).passed
