"""
Profile Normalizer

Coerces loosely-typed applicant input (web form strings, stored JSON
payloads, pydantic models) into an ApplicantProfile.

normalize_profile never raises. Each field is extracted independently,
trying the nested `demographics` value first, then the flat alias, then
falling back to None / empty.
"""

import json
import math
from typing import Any, Dict, FrozenSet, Optional, Sequence

from pydantic import BaseModel

from .contracts import ApplicantProfile
from .errors import ProfileValidationError

# Flat field aliases in priority order. `cumGPA` is the legacy name used by
# older stored payloads and must stay supported.
GPA_FIELDS = ("gpa", "cumGPA", "cum_gpa")
TEST_SCORE_FIELDS = ("testScore", "test_score", "mcat")
EXTRAS_FIELDS = ("extrasScore", "extras_score")

STATE_FIELDS = ("state",)
RACE_FIELDS = ("race",)
GENDER_FIELDS = ("gender",)
SES_FIELDS = ("ses", "socioeconomicStatus", "socioeconomic_status")
REGION_FIELDS = ("preferredRegions", "preferred_regions")


def _as_mapping(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    if isinstance(raw, (str, bytes)):
        try:
            decoded = json.loads(raw)
        except (ValueError, TypeError, RecursionError):
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def _first_present(data: Dict[str, Any], fields: Sequence[str]) -> Any:
    """First field whose value is not None, mirroring a `??` chain."""
    for field in fields:
        value = data.get(field)
        if value is not None:
            return value
    return None


def to_finite_number(value: Any) -> Optional[float]:
    """Numbers and numeric strings become floats; everything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            num = float(value)
        except (OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (str, int, float)):
        try:
            text = str(value).strip()
        except ValueError:
            # int beyond the interpreter's str conversion digit limit
            return None
        return text or None
    return None


def _to_regions(value: Any) -> FrozenSet[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple, set, frozenset)):
        return frozenset()
    regions = set()
    for item in value:
        text = _to_text(item)
        if text:
            regions.add(text)
    return frozenset(regions)


def normalize_profile(raw: Any) -> ApplicantProfile:
    """
    Build an ApplicantProfile from arbitrary input.

    Args:
        raw: dict, pydantic model, JSON string, or anything else

    Returns:
        ApplicantProfile, possibly with every field empty
    """
    data = _as_mapping(raw)
    demographics = data.get("demographics")
    if not isinstance(demographics, dict):
        demographics = {}

    def nested_then_flat(fields: Sequence[str]) -> Any:
        value = _first_present(demographics, fields)
        if value is None:
            value = _first_present(data, fields)
        return value

    extras = _first_present(data, EXTRAS_FIELDS)
    if extras is None:
        extras = _first_present(demographics, EXTRAS_FIELDS)

    return ApplicantProfile(
        gpa=to_finite_number(_first_present(data, GPA_FIELDS)),
        test_score=to_finite_number(_first_present(data, TEST_SCORE_FIELDS)),
        extras_score=to_finite_number(extras),
        state=_to_text(nested_then_flat(STATE_FIELDS)),
        race=_to_text(nested_then_flat(RACE_FIELDS)),
        gender=_to_text(nested_then_flat(GENDER_FIELDS)),
        socioeconomic_status=_to_text(nested_then_flat(SES_FIELDS)),
        preferred_regions=_to_regions(nested_then_flat(REGION_FIELDS)),
    )


def ensure_scoreable(profile: ApplicantProfile) -> ApplicantProfile:
    """
    Reject profiles the match engine cannot score.

    Raises:
        ProfileValidationError: if neither GPA nor test score is a finite number
    """
    if not profile.has_scoreable_metric:
        raise ProfileValidationError("Profile needs a numeric GPA or test score to be matched")
    return profile
