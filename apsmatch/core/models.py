from dataclasses import dataclass, field
from typing import List, Optional, Dict

@dataclass
class SubjectMark:
    subject: str
    mark: int

@dataclass
class UserAcademicRecord:
    subject_marks: List[SubjectMark] = field(default_factory=list)
    nbt_scores: Dict[str, int] = field(default_factory=dict)

    def find(self, subject: str) -> Optional[SubjectMark]:
        for s in self.subject_marks:
            if s.subject == subject:
                return s
        return None

    def raw_total(self) -> int:
        return sum(s.mark for s in self.subject_marks)

@dataclass(frozen=True)
class ScoreBand:
    lower: int
    upper: int
    points: int

@dataclass
class SubjectRequirement:
    subject: str
    min_points: int
    or_subject: Optional[str] = None

@dataclass
class Degree:
    id: int
    name: str
    point_requirement: Optional[int] = None
    subject_requirements: List[SubjectRequirement] = field(default_factory=list)
    description: Optional[str] = None
    faculty_id: Optional[int] = None
    point_calculation: Optional[str] = None

@dataclass
class Faculty:
    id: int
    name: str

@dataclass
class University:
    id: int
    name: str
    location: str = ""
    logo_url: str = ""
    app_url: str = ""
    description: str = ""
    campus_image_url: str = ""
    faculties: List[Faculty] = field(default_factory=list)

@dataclass
class RuleResult:
    passed: bool
    explanation: str

@dataclass
class EligibilityResult:
    degree: Degree
    passed: bool
    explanations: List[str]
    details: Dict[str, float]
