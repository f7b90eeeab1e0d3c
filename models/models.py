import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from sqlalchemy import JSON, Column, String, DateTime
from db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class StoredProfile(Base):
    """Raw applicant payload as submitted by the intake form."""
    __tablename__ = "applicant_profiles"
    __table_args__ = {'extend_existing': True}
    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String(255), index=True, nullable=True)
    name = Column(String(200), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class ProfileIn(BaseModel):
    """
    Intake form body. Everything except `name` is loosely typed; the match
    engine normalizes the payload when it scores it. The user id is accepted
    as `userId` (what the intake form sends) or `user_id`.
    """
    name: str = Field(min_length=1, max_length=200)
    user_id: Optional[str] = Field(default=None, alias="userId")
    undergrad: Optional[str] = None
    major: Optional[str] = None
    cumGPA: Optional[Any] = None
    scienceGPA: Optional[Any] = None
    mcat: Optional[Any] = None
    gradYear: Optional[Any] = None
    experiences: Optional[list] = None
    demographics: Optional[Dict[str, Any]] = None

    class Config:
        extra = "allow"
        populate_by_name = True


class ProfileOut(BaseModel):
    id: str
    user_id: Optional[str] = None
    profile: Dict[str, Any]
    created_at: datetime
