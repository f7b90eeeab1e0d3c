"""
Match Engine Constants

Defines header aliases, percentile rungs, state lookups, bonus weights and
paging defaults used by the catalog loader and the scoring strategies.
All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict, List, Tuple

# =============================================================================
# PERCENTILE CURVES
# =============================================================================

# Fixed rungs every academic curve is sampled at
PERCENTILE_RUNGS: Tuple[int, ...] = (10, 25, 50, 75, 90)

MEDIAN_PERCENTILE = 50
LOW_BAND_PERCENTILE = 10
HIGH_BAND_PERCENTILE = 90

# =============================================================================
# HEADER ALIASES
# =============================================================================
# Header names are trimmed + lower-cased before lookup.
# Aliases are tried in order, first present column wins.

NAME_ALIASES: List[str] = ["school", "school name", "schoolname", "institution", "name"]


def _metric_aliases(metric_labels: List[str], percentile: int) -> List[str]:
    aliases = []
    for label in metric_labels:
        if percentile == MEDIAN_PERCENTILE:
            aliases.extend([
                f"{label} p50 (median)",
                f"{label} p50(median)",
                f"{label} median",
            ])
        aliases.extend([
            f"{label} p{percentile}",
            f"{label} {percentile}th",
            f"{label} {percentile}th percentile",
        ])
    return aliases


GPA_LABELS = ["gpa", "cum gpa", "cumulative gpa"]
TEST_SCORE_LABELS = ["mcat", "test score", "test"]

GPA_PERCENTILE_ALIASES: Dict[int, List[str]] = {
    p: _metric_aliases(GPA_LABELS, p) for p in PERCENTILE_RUNGS
}
TEST_SCORE_PERCENTILE_ALIASES: Dict[int, List[str]] = {
    p: _metric_aliases(TEST_SCORE_LABELS, p) for p in PERCENTILE_RUNGS
}

# Institution character (demographics table, or academic table if merged)
STATE_ALIASES: List[str] = ["state", "state/province", "location state"]
REGION_ALIASES: List[str] = ["region", "census region"]
PUBLIC_PRIVATE_ALIASES: List[str] = ["public/private", "public or private", "control", "institution type"]

DEMOGRAPHIC_ALIASES: Dict[str, List[str]] = {
    "race_white": ["race white", "white", "white %", "% white"],
    "race_asian": ["race asian", "asian", "asian %", "% asian"],
    "race_hispanic": ["race hispanic", "hispanic", "hispanic %", "% hispanic", "hispanic/latino"],
    "race_black": ["race black", "black", "black %", "% black", "black/african american"],
    "race_other": ["race other", "other", "other %", "% other"],
    "gender_male": ["gender male", "male", "male %", "% male", "men"],
    "gender_female": ["gender female", "female", "female %", "% female", "women"],
    "ses_disadvantaged": ["ses disadvantaged", "disadvantaged", "% disadvantaged", "disadvantaged %"],
    "ses_not_disadvantaged": ["ses not disadvantaged", "not disadvantaged", "% not disadvantaged"],
    "total_applicants": ["total applicants", "applicants", "applied"],
    "total_interviewed": ["total interviewed", "interviewed", "interviews"],
    "total_accepted": ["total accepted", "accepted", "acceptances", "matriculants"],
}

# Enrollment fields summed for the under-represented share of a class
URM_DEMOGRAPHIC_FIELDS: Tuple[str, ...] = ("race_hispanic", "race_black", "race_other")

# =============================================================================
# APPLICANT LEXICONS
# =============================================================================

STATE_ABBREVIATIONS: Dict[str, str] = {
    "al": "alabama",
    "ak": "alaska",
    "az": "arizona",
    "ar": "arkansas",
    "ca": "california",
    "co": "colorado",
    "ct": "connecticut",
    "de": "delaware",
    "fl": "florida",
    "ga": "georgia",
    "hi": "hawaii",
    "id": "idaho",
    "il": "illinois",
    "in": "indiana",
    "ia": "iowa",
    "ks": "kansas",
    "ky": "kentucky",
    "la": "louisiana",
    "me": "maine",
    "md": "maryland",
    "ma": "massachusetts",
    "mi": "michigan",
    "mn": "minnesota",
    "ms": "mississippi",
    "mo": "missouri",
    "mt": "montana",
    "ne": "nebraska",
    "nv": "nevada",
    "nh": "new hampshire",
    "nj": "new jersey",
    "nm": "new mexico",
    "ny": "new york",
    "nc": "north carolina",
    "nd": "north dakota",
    "oh": "ohio",
    "ok": "oklahoma",
    "or": "oregon",
    "pa": "pennsylvania",
    "ri": "rhode island",
    "sc": "south carolina",
    "sd": "south dakota",
    "tn": "tennessee",
    "tx": "texas",
    "ut": "utah",
    "vt": "vermont",
    "va": "virginia",
    "wa": "washington",
    "wv": "west virginia",
    "wi": "wisconsin",
    "wy": "wyoming",
    "dc": "district of columbia",
}

UNDERREPRESENTED_RACES: List[str] = [
    "black",
    "african american",
    "hispanic",
    "latino",
    "latina",
    "latinx",
    "native american",
    "american indian",
    "alaska native",
    "native hawaiian",
    "pacific islander",
]

DISADVANTAGED_MARKER = "disadvantaged"

# =============================================================================
# STRATEGY WEIGHTS
# =============================================================================

class StrategyName(str, Enum):
    """Registered scoring strategies."""
    PERCENTILE = "percentile"    # Piecewise-linear percentile interpolation
    BAND = "band"                # 10th/90th min-max band plus bonuses


DEFAULT_STRATEGY = StrategyName.PERCENTILE

# Normalized band strategy. Fixed weights, never renormalized.
BAND_METRIC_WEIGHTS: Dict[str, float] = {
    "gpa": 0.4,
    "test_score": 0.4,
}

IN_STATE_PUBLIC_BONUS = 0.10
DISADVANTAGED_BONUS = 0.05
URM_BONUS = 0.05
URM_ENROLLMENT_THRESHOLD = 20.0
EXTRAS_BONUS_MAX = 0.05

# =============================================================================
# PAGING DEFAULTS
# =============================================================================

DEFAULT_MATCH_LIMIT = 30
MAX_MATCH_LIMIT = 200
SEARCH_PAGE_SIZE = 20
