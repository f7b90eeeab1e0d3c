"""
Match Engine

Main orchestrator that scores an applicant against every institution and
ranks the results. This is the primary entry point for generating matches.

Scoring is pure: the catalog is read-only and each institution is scored
independently, so the engine can fan out over a thread pool without locks.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Union

from .constants import StrategyName
from .contracts import ApplicantProfile, InstitutionRecord, MatchResult
from .ranker import rank_results
from .strategies import ScoringStrategy, get_strategy

logger = logging.getLogger(__name__)


class MatchEngine:
    """
    Scores and ranks institutions for an applicant.

    Pipeline flow:
    1. Scoring - run the strategy over each institution
    2. Filtering - drop institutions with nothing scoreable
    3. Ranking - stable sort by match score and truncate
    """

    def __init__(
        self,
        strategy: Union[ScoringStrategy, str, StrategyName, None] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize the match engine.

        Args:
            strategy: Strategy instance or registered name. Defaults to percentile interpolation.
            max_workers: Thread pool size for scoring. None or 1 scores sequentially.
        """
        if isinstance(strategy, ScoringStrategy):
            self.strategy = strategy
        else:
            self.strategy = get_strategy(strategy)
        self.max_workers = max_workers

    def score(self, profile: ApplicantProfile, institution: InstitutionRecord) -> Optional[MatchResult]:
        return self.strategy.score(profile, institution)

    def score_all(
        self,
        profile: ApplicantProfile,
        institutions: Sequence[InstitutionRecord],
    ) -> List[Optional[MatchResult]]:
        """Score every institution, results in catalog order."""
        if self.max_workers and self.max_workers > 1 and len(institutions) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() yields in submission order
                return list(pool.map(lambda inst: self.score(profile, inst), institutions))
        return [self.score(profile, inst) for inst in institutions]

    def rank(
        self,
        profile: ApplicantProfile,
        institutions: Sequence[InstitutionRecord],
        limit: int,
    ) -> List[MatchResult]:
        """
        Rank institutions for a profile.

        Args:
            profile: Normalized applicant profile
            institutions: Catalog records to score
            limit: Maximum results to return (> 0)

        Returns:
            Up to `limit` MatchResults, best first
        """
        scored = self.score_all(profile, institutions)
        excluded = sum(1 for r in scored if r is None)
        if excluded:
            logger.debug(f"{excluded} of {len(scored)} institutions had no scoreable metric")
        return rank_results(scored, limit)


def score_institution(
    profile: ApplicantProfile,
    institution: InstitutionRecord,
    strategy: Union[ScoringStrategy, str, StrategyName, None] = None,
) -> Optional[MatchResult]:
    """Score a single institution with the given (or default) strategy."""
    return MatchEngine(strategy).score(profile, institution)


# Convenience function for simple usage
def rank_matches(
    profile: ApplicantProfile,
    institutions: Sequence[InstitutionRecord],
    limit: int,
    strategy: Union[ScoringStrategy, str, StrategyName, None] = None,
) -> List[MatchResult]:
    """
    Convenience function to rank matches.

    Args:
        profile: Normalized applicant profile
        institutions: Catalog records (usually `catalog.records`)
        limit: Maximum results
        strategy: Optional strategy or strategy name

    Returns:
        Ranked MatchResults
    """
    engine = MatchEngine(strategy)
    return engine.rank(profile, institutions, limit)
