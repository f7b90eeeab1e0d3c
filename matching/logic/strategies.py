"""
Scoring Strategies

Two independent ways of turning an applicant and an institution into a
MatchResult. Both sit behind the same `score(profile, institution)` call:

- PercentileInterpolationStrategy (default): places each metric on the
  institution's percentile curve and averages the available metrics.
- NormalizedBandStrategy: min-max position between the 10th and 90th
  percentile bounds, fixed 0.4/0.4 weights, plus categorical bonuses.

Neither strategy supersedes the other; the default is a configuration choice.
"""

from typing import Dict, Optional, Union

from .constants import (
    StrategyName,
    DEFAULT_STRATEGY,
    BAND_METRIC_WEIGHTS,
    LOW_BAND_PERCENTILE,
    HIGH_BAND_PERCENTILE,
)
from .contracts import ApplicantProfile, InstitutionRecord, MatchResult
from .dimension_scorers import (
    clamp,
    is_finite,
    round_score,
    interpolate_percentile,
    percentile_value,
    normalized_band_score,
    in_state_public_bonus,
    disadvantaged_bonus,
    urm_bonus,
    extras_bonus,
)


class ScoringStrategy:
    """Interface shared by all strategies."""

    name: StrategyName

    def score(self, profile: ApplicantProfile, institution: InstitutionRecord) -> Optional[MatchResult]:
        """Return the institution's MatchResult, or None when nothing about it can be scored."""
        raise NotImplementedError

    def _result(
        self,
        institution: InstitutionRecord,
        match_score: float,
        gpa_score: Optional[float],
        test_score: Optional[float],
    ) -> MatchResult:
        return MatchResult(
            institution_id=institution.institution_id,
            name=institution.name,
            match_score=round_score(clamp(match_score, 0.0, 100.0)),
            gpa_component_score=round_score(gpa_score) if is_finite(gpa_score) else None,
            test_score_component_score=round_score(test_score) if is_finite(test_score) else None,
            gpa_median=institution.gpa_median,
            test_score_median=institution.test_score_median,
        )


class PercentileInterpolationStrategy(ScoringStrategy):
    """
    Baseline strategy.

    matchScore is the mean of the available metric percentiles. A metric
    with no valid points on the institution's curve is left out of the mean;
    an institution with neither metric is excluded (None).
    """

    name = StrategyName.PERCENTILE

    def score(self, profile: ApplicantProfile, institution: InstitutionRecord) -> Optional[MatchResult]:
        curves = institution.academic_percentiles
        gpa_score = interpolate_percentile(profile.gpa, curves.gpa)
        test_score = interpolate_percentile(profile.test_score, curves.test_score)

        available = [s for s in (gpa_score, test_score) if is_finite(s)]
        if not available:
            return None

        mean = sum(available) / len(available)
        return self._result(institution, mean, gpa_score, test_score)


class NormalizedBandStrategy(ScoringStrategy):
    """
    Enriched strategy with categorical bonuses.

    Base score is 0.4 * gpa band + 0.4 * test band. A missing metric drops
    its term without renormalizing the other, so an applicant with a single
    metric tops out at 0.4 + bonuses. This cap is a deliberate simplification
    kept from the product rules.
    """

    name = StrategyName.BAND

    def score(self, profile: ApplicantProfile, institution: InstitutionRecord) -> Optional[MatchResult]:
        curves = institution.academic_percentiles
        gpa_score = normalized_band_score(
            profile.gpa,
            percentile_value(curves.gpa, LOW_BAND_PERCENTILE),
            percentile_value(curves.gpa, HIGH_BAND_PERCENTILE),
        )
        test_score = normalized_band_score(
            profile.test_score,
            percentile_value(curves.test_score, LOW_BAND_PERCENTILE),
            percentile_value(curves.test_score, HIGH_BAND_PERCENTILE),
        )

        if not (is_finite(gpa_score) or is_finite(test_score)):
            return None

        base = 0.0
        if is_finite(gpa_score):
            base += BAND_METRIC_WEIGHTS["gpa"] * gpa_score
        if is_finite(test_score):
            base += BAND_METRIC_WEIGHTS["test_score"] * test_score

        total = (
            base
            + in_state_public_bonus(profile, institution)
            + disadvantaged_bonus(profile)
            + urm_bonus(profile, institution)
            + extras_bonus(profile)
        )
        total = clamp(total, 0.0, 1.0)

        return self._result(
            institution,
            total * 100.0,
            gpa_score * 100.0 if is_finite(gpa_score) else None,
            test_score * 100.0 if is_finite(test_score) else None,
        )


STRATEGIES: Dict[StrategyName, ScoringStrategy] = {
    StrategyName.PERCENTILE: PercentileInterpolationStrategy(),
    StrategyName.BAND: NormalizedBandStrategy(),
}


def get_strategy(name: Union[str, StrategyName, None] = None) -> ScoringStrategy:
    """
    Look up a registered strategy by name.

    Raises:
        ValueError: for an unknown name
    """
    if name is None or name == "":
        return STRATEGIES[DEFAULT_STRATEGY]
    try:
        key = StrategyName(str(name.value if isinstance(name, StrategyName) else name).strip().lower())
    except ValueError:
        known = ", ".join(s.value for s in StrategyName)
        raise ValueError(f"Unknown scoring strategy '{name}'. Expected one of: {known}")
    return STRATEGIES[key]
