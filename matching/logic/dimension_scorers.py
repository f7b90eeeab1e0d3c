"""
Dimension Scorers

Individual scoring functions for the academic metrics and the categorical
bonuses. Percentile scorers return a value in [0, 100], band scorers and
bonuses return a fraction in [0, 1]. Every scorer returns None rather than
raising when its inputs are missing.
All logic is deterministic - no AI/ML components.
"""

import math
from typing import Optional, Sequence

from .constants import (
    STATE_ABBREVIATIONS,
    UNDERREPRESENTED_RACES,
    DISADVANTAGED_MARKER,
    URM_DEMOGRAPHIC_FIELDS,
    URM_ENROLLMENT_THRESHOLD,
    IN_STATE_PUBLIC_BONUS,
    DISADVANTAGED_BONUS,
    URM_BONUS,
    EXTRAS_BONUS_MAX,
)
from .contracts import ApplicantProfile, InstitutionRecord, PercentilePoint


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def is_finite(value: Optional[float]) -> bool:
    return value is not None and not isinstance(value, bool) and math.isfinite(value)


def round_score(value: float) -> int:
    """Round half up: 62.5 -> 63, where round() would give 62."""
    return int(math.floor(value + 0.5))


# =============================================================================
# PERCENTILE INTERPOLATION
# =============================================================================

def valid_points(points: Sequence[PercentilePoint]) -> list:
    """Non-null points, ascending by percentile."""
    return sorted((p for p in points if p.is_valid), key=lambda p: p.percentile)


def interpolate_percentile(value: Optional[float], points: Sequence[PercentilePoint]) -> Optional[float]:
    """
    Place `value` on a percentile curve.

    - No valid points, or no value: None
    - At or below the lowest point: scaled linearly from 0 up to that point,
      with 0 as the implicit floor value
    - Between two points: linear interpolation of the percentile
    - Above the highest point: last percentile plus the relative overshoot
      (value - last) / last expressed in percentile units, capped at 100

    Returns:
        Percentile in [0, 100] or None
    """
    if not is_finite(value):
        return None
    curve = valid_points(points)
    if not curve:
        return None

    first = curve[0]
    if value <= first.value:
        if first.value <= 0:
            # Zero floor: there is no span to scale over
            return clamp(first.percentile if value >= first.value else 0.0, 0.0, 100.0)
        position = max(value, 0.0) / first.value
        return clamp(position * first.percentile, 0.0, 100.0)

    for lower, upper in zip(curve, curve[1:]):
        if value <= upper.value:
            span = upper.value - lower.value
            if span <= 0:
                return clamp(upper.percentile, 0.0, 100.0)
            fraction = (value - lower.value) / span
            return clamp(
                lower.percentile + fraction * (upper.percentile - lower.percentile),
                0.0,
                100.0,
            )

    last = curve[-1]
    if last.value <= 0:
        return 100.0
    ratio = (value - last.value) / last.value
    extrapolated = last.percentile + ratio * 100.0
    return clamp(extrapolated, last.percentile, 100.0)


# =============================================================================
# NORMALIZED BAND
# =============================================================================

def percentile_value(points: Sequence[PercentilePoint], percentile: float) -> Optional[float]:
    for point in points:
        if point.percentile == percentile:
            return point.value if point.is_valid else None
    return None


def normalized_band_score(value: Optional[float], p10: Optional[float], p90: Optional[float]) -> Optional[float]:
    """Min-max position of `value` between the 10th and 90th percentile bounds, clamped to [0, 1]."""
    if not (is_finite(value) and is_finite(p10) and is_finite(p90)):
        return None
    band = p90 - p10
    if band <= 0:
        return None
    return clamp((value - p10) / band, 0.0, 1.0)


# =============================================================================
# CATEGORICAL BONUSES
# =============================================================================

def normalize_lower(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_state(value: Optional[str]) -> str:
    """Expand two-letter abbreviations to the full lower-case state name."""
    normalized = normalize_lower(value)
    if not normalized:
        return ""
    return STATE_ABBREVIATIONS.get(normalized, normalized)


def is_disadvantaged(ses: Optional[str]) -> bool:
    return DISADVANTAGED_MARKER in normalize_lower(ses)


def is_underrepresented_race(race: Optional[str]) -> bool:
    normalized = normalize_lower(race)
    if not normalized:
        return False
    return any(entry in normalized for entry in UNDERREPRESENTED_RACES)


def urm_enrollment_percent(institution: InstitutionRecord) -> Optional[float]:
    """Summed under-represented share of the incoming class, None when no field is known."""
    values = [
        getattr(institution.demographics, field)
        for field in URM_DEMOGRAPHIC_FIELDS
    ]
    values = [v for v in values if is_finite(v)]
    if not values:
        return None
    return sum(values)


def in_state_public_bonus(profile: ApplicantProfile, institution: InstitutionRecord) -> float:
    profile_state = normalize_state(profile.state)
    institution_state = normalize_state(institution.state)
    if institution.is_public and profile_state and institution_state and profile_state == institution_state:
        return IN_STATE_PUBLIC_BONUS
    return 0.0


def disadvantaged_bonus(profile: ApplicantProfile) -> float:
    return DISADVANTAGED_BONUS if is_disadvantaged(profile.socioeconomic_status) else 0.0


def urm_bonus(profile: ApplicantProfile, institution: InstitutionRecord) -> float:
    if not is_underrepresented_race(profile.race):
        return 0.0
    urm_percent = urm_enrollment_percent(institution)
    if is_finite(urm_percent) and urm_percent >= URM_ENROLLMENT_THRESHOLD:
        return URM_BONUS
    return 0.0


def extras_bonus(profile: ApplicantProfile) -> float:
    if not is_finite(profile.extras_score):
        return 0.0
    return clamp(profile.extras_score, 0.0, 100.0) / 100.0 * EXTRAS_BONUS_MAX
