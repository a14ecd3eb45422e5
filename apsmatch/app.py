import logging
from dataclasses import asdict
from functools import lru_cache
from typing import List, Dict, Any, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, JSONResponse
from pydantic import BaseModel

from apsmatch.catalogue.loaders import load_catalogue
from apsmatch.config import Settings, load_settings
from apsmatch.core.engine import EligibilityEngine
from apsmatch.core.errors import ApsMatchError, CatalogueError
from apsmatch.core.models import Degree
from apsmatch.core.normalize import record_from_profile, profile_from_record
from apsmatch.core.repositories import JsonCatalogueRepository
from apsmatch.core.scoring import aps_for_record, score_breakdown, SCORE_BANDS

logger = logging.getLogger(__name__)

app = FastAPI(title="APS Match")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogueError)
async def catalogue_unavailable(request, exc: CatalogueError):
    logger.error("Catalogue unavailable: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Catalogue unavailable", "details": str(exc)}
    )


# Loaded once per process; a failed load is retried on the next request.
@lru_cache(maxsize=None)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=None)
def catalogue_repository() -> JsonCatalogueRepository:
    return JsonCatalogueRepository(load_catalogue(get_settings().data_dir))


def _degree_out(d: Degree) -> Dict[str, Any]:
    return {
        "id": d.id,
        "name": d.name,
        "faculty_id": d.faculty_id,
        "point_requirement": d.point_requirement,
        "point_calculation": d.point_calculation,
        "description": d.description,
        "subject_requirements": [asdict(r) for r in d.subject_requirements],
    }


@app.get("/")
def root_redirect():
    return RedirectResponse(url="/docs")


# --------- Request models ----------
class SubjectInput(BaseModel):
    subject: str
    mark: Any = None


class ApsRequest(BaseModel):
    subjects: List[SubjectInput]
    nbt_scores: Optional[Dict[str, Any]] = None


class EligibilityRequest(BaseModel):
    # canonical {"subjectMarks": [...]} or the stored subjectN/markN shape
    profile: Dict[str, Any]
    faculty_id: Optional[int] = None
    degree_ids: Optional[List[int]] = None
    only_eligible: bool = False


# --------- Endpoints ----------
@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/bands")
def bands() -> List[Dict[str, int]]:
    return [asdict(b) for b in SCORE_BANDS]


@app.get("/universities")
def universities() -> List[Dict[str, Any]]:
    repo = catalogue_repository()
    return [asdict(u) for u in repo.list_universities()]


@app.get("/universities/{university_id}/faculties")
def faculties(university_id: int) -> List[Dict[str, Any]]:
    repo = catalogue_repository()
    if repo.get_university(university_id) is None:
        raise HTTPException(status_code=400, detail=f"Unknown university: {university_id}")
    return [asdict(f) for f in repo.list_faculties(university_id)]


@app.get("/degrees")
def degrees(faculty_id: Optional[int] = Query(None)) -> List[Dict[str, Any]]:
    repo = catalogue_repository()
    return [_degree_out(d) for d in repo.list_degrees(faculty_id=faculty_id)]


@app.get("/degrees/{degree_id}")
def degree(degree_id: int) -> Dict[str, Any]:
    d = catalogue_repository().get_degree(degree_id)
    if d is None:
        raise HTTPException(status_code=404, detail=f"Unknown degree: {degree_id}")
    return _degree_out(d)


@app.post("/aps")
def aps(req: ApsRequest):
    profile = {
        "subjectMarks": [{"subject": s.subject, "mark": s.mark} for s in req.subjects],
        "nbtScores": req.nbt_scores or {},
    }
    try:
        settings = get_settings()
        record = record_from_profile(profile)

        total = aps_for_record(record, settings.subject_limit, settings.excluded_subjects)
        rows = score_breakdown(record, settings.subject_limit, settings.excluded_subjects)
        logger.info("APS computed: %d over %d subjects", total, len(rows))
        return {
            "aps": total,
            "max_aps": settings.subject_limit * SCORE_BANDS[0].points,
            "subjects": [
                {"subject": name, "mark": mark, "points": points, "counted": counted}
                for name, mark, points, counted in rows
            ],
            "profile": profile_from_record(record, total),
        }

    except ApsMatchError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("APS calculation failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "APS calculation failed", "details": str(e)}
        )


@app.post("/eligibility")
def eligibility(req: EligibilityRequest):
    try:
        settings = get_settings()
        record = record_from_profile(req.profile)

        repo = catalogue_repository()
        engine = EligibilityEngine(
            repo=repo,
            subject_limit=settings.subject_limit,
            excluded=settings.excluded_subjects,
        )
        results = engine.evaluate_record(record, faculty_id=req.faculty_id)

        selected_ids = set(req.degree_ids or [])
        out: List[Dict[str, Any]] = []
        for r in results:
            if req.degree_ids is not None and r.degree.id not in selected_ids:
                continue
            if req.only_eligible and not r.passed:
                continue
            item: Dict[str, Any] = {
                "degree": _degree_out(r.degree),
                "passed": r.passed,
                "explanations": r.explanations,
            }
            item.update(r.details)
            out.append(item)

        logger.info("Eligibility: %d of %d degrees passed",
                    sum(1 for r in results if r.passed), len(results))
        return out

    except (HTTPException, CatalogueError):
        raise
    except ApsMatchError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Eligibility check failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Eligibility check failed", "details": str(e)}
        )


if __name__ == "__main__":
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run("apsmatch.app:app", host=settings.host, port=settings.port, reload=True)
