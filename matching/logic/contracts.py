"""
Data Contracts for the Match Engine

Defines Pydantic models for the institution catalog (loaded once),
ApplicantProfile (input) and MatchResult (output).
These contracts are the API boundary for the scoring engine.
"""

import math
from typing import Dict, FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, Field


# =============================================================================
# CATALOG CONTRACTS
# =============================================================================

class PercentilePoint(BaseModel):
    """One rung of a percentile curve. `value` is None when the cell was unparsable."""
    percentile: float = Field(ge=0.0, le=100.0)
    value: Optional[float] = None

    class Config:
        frozen = True

    @property
    def is_valid(self) -> bool:
        return self.value is not None and math.isfinite(self.value)


class AcademicPercentiles(BaseModel):
    """GPA and test-score curves, each ordered ascending by percentile."""
    gpa: Tuple[PercentilePoint, ...] = ()
    test_score: Tuple[PercentilePoint, ...] = ()

    class Config:
        frozen = True


class Demographics(BaseModel):
    """
    Incoming-class character of an institution.
    Race/gender/SES values are percentages; totals are head counts.
    """
    race_white: Optional[float] = None
    race_asian: Optional[float] = None
    race_hispanic: Optional[float] = None
    race_black: Optional[float] = None
    race_other: Optional[float] = None
    gender_male: Optional[float] = None
    gender_female: Optional[float] = None
    ses_disadvantaged: Optional[float] = None
    ses_not_disadvantaged: Optional[float] = None
    total_applicants: Optional[float] = None
    total_interviewed: Optional[float] = None
    total_accepted: Optional[float] = None

    class Config:
        frozen = True


class InstitutionRecord(BaseModel):
    """
    One catalog row.

    `institution_id` keeps the source casing for display; lookups go through
    the lower-cased key held by the Catalog index.
    """
    institution_id: str
    name: str
    normalized_name: str
    academic_percentiles: AcademicPercentiles = Field(default_factory=AcademicPercentiles)

    # Institution character (extended variant)
    state: str = ""
    region: str = ""
    public_private: str = ""
    is_public: bool = False
    demographics: Demographics = Field(default_factory=Demographics)

    # Display only, never read by scoring
    gpa_median: float = 0.0
    test_score_median: float = 0.0

    class Config:
        frozen = True


class Catalog(BaseModel):
    """
    Immutable in-memory collection of institutions plus lookup indices.
    Built wholesale by the catalog loader; a reload builds a new Catalog.
    """
    records: Tuple[InstitutionRecord, ...] = ()
    by_id: Dict[str, InstitutionRecord] = Field(default_factory=dict)
    by_normalized_name: Dict[str, Tuple[InstitutionRecord, ...]] = Field(default_factory=dict)

    class Config:
        frozen = True

    def __len__(self) -> int:
        return len(self.records)


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class ApplicantProfile(BaseModel):
    """
    Normalized applicant. Produced by the profile normalizer, never by callers
    building it from raw form strings directly.
    """
    gpa: Optional[float] = None
    test_score: Optional[float] = None
    extras_score: Optional[float] = None  # 0-100 self-reported strength

    state: Optional[str] = None
    race: Optional[str] = None
    gender: Optional[str] = None
    socioeconomic_status: Optional[str] = None
    preferred_regions: FrozenSet[str] = frozenset()

    class Config:
        frozen = True

    @property
    def has_scoreable_metric(self) -> bool:
        return any(
            v is not None and math.isfinite(v)
            for v in (self.gpa, self.test_score)
        )


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class MatchResult(BaseModel):
    """Score of one institution for one applicant. Recomputed per request."""
    institution_id: str
    name: str
    match_score: int = Field(ge=0, le=100)
    gpa_component_score: Optional[int] = Field(default=None, ge=0, le=100)
    test_score_component_score: Optional[int] = Field(default=None, ge=0, le=100)
    gpa_median: float = 0.0
    test_score_median: float = 0.0


class MatchOutput(BaseModel):
    """
    Output contract for one ranking run.
    Contains ranked matches with summary statistics.
    """
    matches: List[MatchResult] = Field(default_factory=list)

    # Summary Statistics
    total_institutions_evaluated: int = 0
    total_scoreable: int = 0
    total_returned: int = 0

    # Processing metadata
    strategy: str = ""
    processing_time_ms: Optional[float] = None

    # Warnings/Notes
    warnings: List[str] = Field(default_factory=list)
