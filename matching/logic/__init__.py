"""
Match Logic Module

Provides the deterministic scoring engine that ranks institutions for an
applicant, plus the catalog loader and lookups it scores against.
"""

from .contracts import (
    PercentilePoint,
    AcademicPercentiles,
    Demographics,
    InstitutionRecord,
    Catalog,
    ApplicantProfile,
    MatchResult,
    MatchOutput,
)
from .errors import MatchingError, CatalogLoadError, ProfileValidationError
from .catalog_loader import load_catalog, parse_catalog, build_catalog
from .search import search_catalog, find_by_id
from .profile_normalizer import normalize_profile, ensure_scoreable
from .strategies import (
    ScoringStrategy,
    PercentileInterpolationStrategy,
    NormalizedBandStrategy,
    get_strategy,
)
from .engine import MatchEngine, rank_matches, score_institution
from .runner import CatalogHolder, run_matches
from .constants import StrategyName

__all__ = [
    # Main engine
    "MatchEngine",
    "rank_matches",
    "score_institution",
    "run_matches",
    "CatalogHolder",

    # Catalog
    "load_catalog",
    "parse_catalog",
    "build_catalog",
    "search_catalog",
    "find_by_id",

    # Profiles
    "normalize_profile",
    "ensure_scoreable",

    # Strategies
    "ScoringStrategy",
    "PercentileInterpolationStrategy",
    "NormalizedBandStrategy",
    "get_strategy",
    "StrategyName",

    # Contracts
    "PercentilePoint",
    "AcademicPercentiles",
    "Demographics",
    "InstitutionRecord",
    "Catalog",
    "ApplicantProfile",
    "MatchResult",
    "MatchOutput",

    # Errors
    "MatchingError",
    "CatalogLoadError",
    "ProfileValidationError",
]
