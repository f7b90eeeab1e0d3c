"""
Match API Routes

Exposes the match engine and catalog lookups via REST API.
The catalog is loaded once at startup (see main.py) and read from
app.state.catalog_holder on every request.
"""

import logging
from typing import Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from db import get_session
from profile_routes import get_stored_payload
from .logic.constants import DEFAULT_MATCH_LIMIT, MAX_MATCH_LIMIT, SEARCH_PAGE_SIZE
from .logic.contracts import Catalog, InstitutionRecord, MatchResult
from .logic.engine import MatchEngine
from .logic.errors import CatalogLoadError, ProfileValidationError
from .logic.runner import CatalogHolder, run_matches
from .logic.search import find_by_id, search_catalog


router = APIRouter(prefix="/api", tags=["matching"])

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class MatchRequest(BaseModel):
    """Request body for the match endpoint."""
    profile: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Applicant payload as submitted by the intake form",
        examples=[{"cumGPA": "3.7", "mcat": "512", "demographics": {"state": "CA"}}],
    )
    profileId: Optional[str] = Field(
        default=None,
        description="Stored profile to score when no inline profile is given",
    )
    limit: int = Field(
        default=DEFAULT_MATCH_LIMIT,
        ge=1,
        le=MAX_MATCH_LIMIT,
        description="Max matches to return",
    )
    strategy: Optional[str] = Field(
        default=None,
        description="Scoring strategy: 'percentile' or 'band'. Defaults to the server setting.",
    )


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_catalog(request: Request) -> Catalog:
    """Loaded catalog, or 503 when the startup load failed."""
    holder: CatalogHolder = request.app.state.catalog_holder
    try:
        return holder.require()
    except CatalogLoadError as e:
        raise HTTPException(status_code=503, detail=f"Institution catalog unavailable: {e.reason}")


def _engine_for(request: Request, strategy: Optional[str]) -> MatchEngine:
    try:
        return MatchEngine(strategy or request.app.state.match_strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _match(catalog: Catalog, raw_profile: Any, limit: int, engine: MatchEngine) -> Dict[str, Any]:
    try:
        output = run_matches(catalog, raw_profile, limit=limit, engine=engine)
    except ProfileValidationError as e:
        logger.info(f"Rejected match request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "matches": [_serialize_match(m) for m in output.matches],
        "summary": {
            "total_evaluated": output.total_institutions_evaluated,
            "total_scoreable": output.total_scoreable,
            "total_returned": output.total_returned,
            "processing_time_ms": output.processing_time_ms,
        },
        "strategy": output.strategy,
        "warnings": output.warnings,
    }


def _load_stored_profile(db: Session, profile_id: str) -> Dict[str, Any]:
    payload = get_stored_payload(db, profile_id)
    if payload is None:
        raise HTTPException(status_code=404, detail="profile not found")
    return payload


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/match", summary="Rank institutions for a profile")
def post_match(
    request: Request,
    body: MatchRequest,
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_session),
):
    """
    Score an applicant against the catalog.

    **Request Body:**
    - `profile`: inline applicant payload (takes precedence)
    - `profileId`: stored profile id, used when `profile` is absent
    - `limit`: maximum matches (default: 30)
    - `strategy`: optional scoring strategy override

    **Response:**
    - Matches ranked by match score, best first
    """
    raw_profile = body.profile
    if raw_profile is None:
        if not body.profileId:
            raise HTTPException(status_code=400, detail="profile or profileId is required")
        raw_profile = _load_stored_profile(db, body.profileId)

    engine = _engine_for(request, body.strategy)
    return _match(catalog, raw_profile, body.limit, engine)


@router.get("/match", summary="Rank institutions for a stored profile")
def get_match(
    request: Request,
    profileId: str = Query(..., min_length=1),
    limit: int = Query(DEFAULT_MATCH_LIMIT, ge=1, le=MAX_MATCH_LIMIT),
    strategy: Optional[str] = Query(None),
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_session),
):
    raw_profile = _load_stored_profile(db, profileId)
    engine = _engine_for(request, strategy)
    return _match(catalog, raw_profile, limit, engine)


@router.get("/schools/search", summary="Search institutions by name")
def search_schools(
    q: str = Query("", description="Name or part of a name"),
    limit: int = Query(SEARCH_PAGE_SIZE, ge=1, le=MAX_MATCH_LIMIT),
    catalog: Catalog = Depends(get_catalog),
):
    results = search_catalog(catalog, q)[:limit]
    return {
        "results": [_serialize_institution(r) for r in results],
        "count": len(results),
    }


@router.get("/schools/{school_id}", summary="Fetch one institution")
def get_school(school_id: str, catalog: Catalog = Depends(get_catalog)):
    record = find_by_id(catalog, school_id)
    if record is None:
        raise HTTPException(status_code=404, detail="not found")
    return _serialize_institution(record, detail=True)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/match/health", summary="Match engine health check")
def health_check(request: Request):
    """Report whether the catalog is loaded. Always 200 so degraded mode is visible."""
    holder: CatalogHolder = request.app.state.catalog_holder
    catalog = holder.catalog
    return {
        "status": "ok" if holder.is_loaded else "degraded",
        "engine": "matching",
        "strategy": request.app.state.match_strategy,
        "institutions": len(catalog) if catalog is not None else 0,
        "error": holder.error.reason if holder.error else None,
    }


# =============================================================================
# SERIALIZERS
# =============================================================================

def _serialize_match(match: MatchResult) -> Dict[str, Any]:
    """Convert MatchResult to the camelCase shape the web client reads (test score as `mcat`)."""
    return {
        "schoolId": match.institution_id,
        "name": match.name,
        "matchScore": match.match_score,
        "gpaScore": match.gpa_component_score,
        "mcatScore": match.test_score_component_score,
        "gpaMedian": match.gpa_median,
        "mcatMedian": match.test_score_median,
    }


def _serialize_curve(points) -> Dict[str, Optional[float]]:
    return {f"p{int(p.percentile)}": p.value for p in points}


def _serialize_institution(record: InstitutionRecord, detail: bool = False) -> Dict[str, Any]:
    data = {
        "schoolId": record.institution_id,
        "name": record.name,
        "state": record.state or None,
        "isPublic": record.is_public,
        "gpaMedian": record.gpa_median,
        "testScoreMedian": record.test_score_median,
    }
    if detail:
        data.update({
            "region": record.region or None,
            "publicPrivate": record.public_private or None,
            "gpaPercentiles": _serialize_curve(record.academic_percentiles.gpa),
            "testScorePercentiles": _serialize_curve(record.academic_percentiles.test_score),
            "demographics": record.demographics.model_dump(),
        })
    return data
