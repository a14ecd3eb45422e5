from typing import List, Protocol, Dict, Any, Optional
from apsmatch.core.errors import CatalogueError
from apsmatch.core.models import Degree, Faculty, SubjectRequirement, University


class DegreeRepository(Protocol):
    def list_degrees(self, faculty_id: Optional[int] = None) -> List[Degree]:
        ...


def _catalogue_int(value: Any) -> int:
    # exports carry numbers as either JSON numbers or strings
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, str):
        value = value.strip()
    return int(value)


def _catalogue_id(entry: Dict[str, Any], kind: str) -> int:
    try:
        return _catalogue_int(entry["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogueError(f"Bad {kind} id in {entry.get('name')!r}: {e}") from e


def degree_from_json(d: Dict[str, Any], faculty_id: Optional[int] = None) -> Degree:
    """
    Catalogue degree -> Degree. Missing minPoints counts as 0 and an empty or
    zero pointRequirement means no points gate; non-numeric values are errors.
    """
    try:
        reqs = [
            SubjectRequirement(
                subject=r["subject"],
                min_points=_catalogue_int(r.get("minPoints") or 0),
                or_subject=r.get("orSubject") or None,
            )
            for r in d.get("subjectRequirements") or []
        ]
        point_requirement = d.get("pointRequirement")
        return Degree(
            id=_catalogue_int(d["id"]),
            name=d["name"],
            point_requirement=_catalogue_int(point_requirement) if point_requirement else None,
            subject_requirements=reqs,
            description=d.get("description"),
            faculty_id=faculty_id,
            point_calculation=d.get("pointCalculation"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogueError(f"Bad degree entry {d!r}: {e}") from e


class JsonCatalogueRepository:
    """
    Read-only view over universities.json:
    [ {id, name, location, ..., ranking, faculties: [ {id, name, degrees: [...]} ]} ]
    Degrees keep the camelCase field names the catalogue was exported with.
    """
    def __init__(self, catalogue_json: Any):
        if not isinstance(catalogue_json, list):
            raise CatalogueError("Catalogue root must be a list of universities")
        self.catalogue_json = catalogue_json

    def _ranked(self) -> List[Dict[str, Any]]:
        # unranked universities go last, in file order
        return sorted(
            self.catalogue_json,
            key=lambda u: (u.get("ranking") is None, u.get("ranking") or 0),
        )

    def _university(self, u: Dict[str, Any]) -> University:
        return University(
            id=_catalogue_id(u, "university"),
            name=u.get("name") or "Unknown University",
            location=u.get("location") or "Unknown Location",
            logo_url=u.get("logoUrl") or "",
            app_url=u.get("appUrl") or "",
            description=u.get("description") or "",
            campus_image_url=u.get("campusImageUrl") or "",
            faculties=self._faculties(u),
        )

    def _faculties(self, u: Dict[str, Any]) -> List[Faculty]:
        facs = [Faculty(id=_catalogue_id(f, "faculty"), name=f.get("name") or "Unknown Faculty")
                for f in u.get("faculties") or []]
        facs.sort(key=lambda f: f.name)
        return facs

    def _degree_entries(self, faculty_id: Optional[int] = None):
        for u in self._ranked():
            for f in u.get("faculties") or []:
                fid = _catalogue_id(f, "faculty")
                if faculty_id is not None and fid != faculty_id:
                    continue
                for d in f.get("degrees") or []:
                    yield fid, d

    def list_universities(self) -> List[University]:
        return [self._university(u) for u in self._ranked()]

    def get_university(self, university_id: int) -> Optional[University]:
        for u in self.catalogue_json:
            if _catalogue_id(u, "university") == university_id:
                return self._university(u)
        return None

    def list_faculties(self, university_id: int) -> List[Faculty]:
        u = self.get_university(university_id)
        return u.faculties if u is not None else []

    def list_degrees(self, faculty_id: Optional[int] = None) -> List[Degree]:
        degrees = [degree_from_json(d, faculty_id=fid) for fid, d in self._degree_entries(faculty_id)]
        degrees.sort(key=lambda d: d.name)
        return degrees

    def get_degree(self, degree_id: int) -> Optional[Degree]:
        for fid, d in self._degree_entries():
            degree = degree_from_json(d, faculty_id=fid)
            if degree.id == degree_id:
                return degree
        return None
