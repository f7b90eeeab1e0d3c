"""
Profile API Routes

Endpoints to save and fetch applicant intake payloads.
Table: applicant_profiles. Payloads are stored raw; the match engine
normalizes them when a match is requested.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from db import get_session
from models.models import StoredProfile, ProfileIn, ProfileOut

router = APIRouter(prefix="/api/profile", tags=["profile"])

logger = logging.getLogger(__name__)


def _to_out(row: StoredProfile) -> ProfileOut:
    return ProfileOut(
        id=row.id,
        user_id=row.user_id,
        profile={**(row.payload or {}), "id": row.id},
        created_at=row.created_at,
    )


def get_stored_payload(db: Session, profile_id: str):
    """Raw stored payload for a profile id, or None."""
    row = db.get(StoredProfile, profile_id)
    return row.payload if row else None


# ─────────────────────────────────────────────
# POST /api/profile
# ─────────────────────────────────────────────
@router.post("", status_code=201, summary="Save applicant profile")
def save_profile(payload: ProfileIn, db: Session = Depends(get_session)):
    """
    Store a profile payload and return its generated id.
    Unknown fields are kept so newer form versions round-trip.
    """
    data = payload.model_dump(exclude_none=True)
    row = StoredProfile(
        user_id=payload.user_id,
        name=payload.name,
        payload=data,
    )
    db.add(row)
    db.flush()
    profile_id = row.id
    db.commit()
    logger.info(f"Saved profile {profile_id}")
    return {"id": profile_id}


# ─────────────────────────────────────────────
# GET /api/profile/user/{user_id}
# ─────────────────────────────────────────────
@router.get("/user/{user_id}", response_model=ProfileOut, summary="Latest profile for a user")
def get_latest_profile(user_id: str, db: Session = Depends(get_session)):
    row = db.execute(
        select(StoredProfile)
        .where(StoredProfile.user_id == user_id)
        .order_by(StoredProfile.created_at.desc())
        .limit(1)
    ).scalar_one_or_none()
    if row is None:
        raise HTTPException(status_code=404, detail="not found")
    return _to_out(row)


# ─────────────────────────────────────────────
# GET /api/profile/{profile_id}
# ─────────────────────────────────────────────
@router.get("/{profile_id}", response_model=ProfileOut, summary="Fetch applicant profile")
def get_profile(profile_id: str, db: Session = Depends(get_session)):
    row = db.get(StoredProfile, profile_id)
    if row is None:
        raise HTTPException(status_code=404, detail="not found")
    return _to_out(row)
