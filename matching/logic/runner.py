"""
Engine Runner

Orchestrates the match pipeline:
1. Accepts a raw (loosely-typed) applicant payload
2. Normalizes and validates it
3. Runs the match engine over the catalog
4. Returns ranked matches

This is a pure orchestration layer - NO scoring, NO parsing of tables.
The catalog lives in a CatalogHolder created at process start and passed
explicitly to every call; there is no module-level catalog.
"""

import logging
import threading
import time
from typing import Any, Optional

from .catalog_loader import Source, load_catalog
from .constants import DEFAULT_MATCH_LIMIT
from .contracts import Catalog, MatchOutput
from .engine import MatchEngine
from .errors import CatalogLoadError
from .profile_normalizer import ensure_scoreable, normalize_profile
from .ranker import rank_results

logger = logging.getLogger(__name__)


class CatalogHolder:
    """
    Owns the current catalog reference.

    The reference moves from "not loaded" to a fully built Catalog in one
    assignment, or the load error is kept instead. Readers never observe a
    partially built catalog. A reload builds a new Catalog and swaps it in.
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self._catalog = catalog
        self._error: Optional[CatalogLoadError] = None
        self._lock = threading.Lock()

    @property
    def catalog(self) -> Optional[Catalog]:
        return self._catalog

    @property
    def error(self) -> Optional[CatalogLoadError]:
        return self._error

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None

    def load(self, academic_source: Source, demographics_source: Optional[Source] = None) -> Catalog:
        """
        Build a catalog from disk and swap it in.

        Raises:
            CatalogLoadError: the previous catalog (if any) stays in place
        """
        with self._lock:
            try:
                catalog = load_catalog(academic_source, demographics_source)
            except CatalogLoadError as e:
                self._error = e
                raise
            self._catalog = catalog
            self._error = None
            return catalog

    def mark_failed(self, error: CatalogLoadError) -> None:
        """Record a load failure that happened outside `load`, e.g. missing configuration."""
        with self._lock:
            self._error = error

    def require(self) -> Catalog:
        """
        Return the loaded catalog.

        Raises:
            CatalogLoadError: if no catalog has been loaded
        """
        catalog = self._catalog
        if catalog is None:
            if self._error is not None:
                raise self._error
            raise CatalogLoadError("<unset>", "catalog has not been loaded")
        return catalog


def run_matches(
    catalog: Catalog,
    raw_profile: Any,
    limit: int = DEFAULT_MATCH_LIMIT,
    engine: Optional[MatchEngine] = None,
) -> MatchOutput:
    """
    Main entry point: run the full match pipeline.

    Args:
        catalog: Loaded catalog
        raw_profile: Applicant payload in any shape the normalizer accepts
        limit: Max matches to return
        engine: Optional preconfigured engine (strategy, workers)

    Returns:
        MatchOutput with ranked matches

    Raises:
        ProfileValidationError: if the payload has no usable GPA or test score
        ValueError: if limit is not a positive integer
    """
    engine = engine or MatchEngine()
    profile = ensure_scoreable(normalize_profile(raw_profile))

    logger.info(f"🚀 Starting match pipeline with strategy: {engine.strategy.name.value}")

    start_time = time.perf_counter()

    scored = engine.score_all(profile, catalog.records)
    scoreable = [r for r in scored if r is not None]
    logger.info(f"📊 Institutions scored: {len(scoreable)}/{len(scored)}")

    matches = rank_results(scored, limit)

    processing_time = (time.perf_counter() - start_time) * 1000

    warnings = []
    if not catalog.records:
        warnings.append("Institution catalog is empty.")
    elif not scoreable:
        warnings.append("No institution has data for the metrics in this profile.")
    for warning in warnings:
        logger.warning(f"⚠️ {warning}")

    logger.info(f"✨ Match pipeline complete ({processing_time:.2f}ms), returning {len(matches)}")

    return MatchOutput(
        matches=matches,
        total_institutions_evaluated=len(scored),
        total_scoreable=len(scoreable),
        total_returned=len(matches),
        strategy=engine.strategy.name.value,
        processing_time_ms=round(processing_time, 2),
        warnings=warnings,
    )
