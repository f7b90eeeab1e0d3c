"""
Ranker

Orders scored institutions by match score and truncates to the page limit.
"""

import math
from typing import Iterable, List, Optional

from .contracts import MatchResult


def is_rankable(result: Optional[MatchResult]) -> bool:
    return result is not None and math.isfinite(result.match_score)


def rank_results(results: Iterable[Optional[MatchResult]], limit: int) -> List[MatchResult]:
    """
    Rank match results by score (descending).

    `sorted` is stable, so institutions with equal scores keep catalog order.

    Args:
        results: Per-institution results in catalog order, None for excluded ones
        limit: Maximum results to return (> 0)

    Returns:
        At most `limit` results
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    ranked = sorted(
        (r for r in results if is_rankable(r)),
        key=lambda r: r.match_score,
        reverse=True,
    )
    return ranked[:limit]
