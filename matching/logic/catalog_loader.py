"""
Catalog Loader

Reads the academic percentile table and the optional demographics table
and builds the immutable Catalog the match engine scores against.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO ranking
- NO writes

Precondition: the two tables carry no join key. Row i of the demographics
table describes the same institution as row i of the academic table, so the
data-preparation process must keep their order and row count in sync. The
loader can only compare row counts and warn on mismatch.
"""

import csv
import logging
import math
import os
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .constants import (
    NAME_ALIASES,
    GPA_PERCENTILE_ALIASES,
    TEST_SCORE_PERCENTILE_ALIASES,
    STATE_ALIASES,
    REGION_ALIASES,
    PUBLIC_PRIVATE_ALIASES,
    DEMOGRAPHIC_ALIASES,
    PERCENTILE_RUNGS,
    MEDIAN_PERCENTILE,
)
from .contracts import (
    AcademicPercentiles,
    Catalog,
    Demographics,
    InstitutionRecord,
    PercentilePoint,
)
from .errors import CatalogLoadError

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike]


def normalize_header(header: Optional[str]) -> str:
    return (header or "").strip().lower()


def normalize_name(name: Optional[str]) -> str:
    """Search-index key for an institution name or a query."""
    return name.strip().lower() if name else ""


def parse_number(value) -> Optional[float]:
    """
    Parse a numeric cell.

    Returns None for empty or unparsable cells and for NaN/inf, never raises.
    A trailing '%' and thousands separators are tolerated.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
        return num if math.isfinite(num) else None
    text = str(value).strip().rstrip("%").replace(",", "").strip()
    if not text:
        return None
    try:
        num = float(text)
    except (ValueError, TypeError):
        return None
    return num if math.isfinite(num) else None


# =============================================================================
# TABLE PARSING
# =============================================================================

def _read_table(text: str) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Split CSV text into a normalized header and row dicts.

    Blank lines are skipped. Short rows are padded with empty cells,
    extra cells beyond the header are ignored.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return [], []

    reader = csv.reader(lines)
    header = [normalize_header(h) for h in next(reader)]

    rows: List[Dict[str, str]] = []
    for cols in reader:
        row: Dict[str, str] = {}
        for i, column in enumerate(header):
            row[column] = cols[i].strip() if i < len(cols) else ""
        rows.append(row)
    return header, rows


def _resolve_column(header: Sequence[str], aliases: Sequence[str]) -> Optional[str]:
    """Return the first alias present in the header, in alias priority order."""
    present = set(header)
    for alias in aliases:
        if alias in present:
            return alias
    return None


class _ColumnMap:
    """Header aliases resolved once per table."""

    def __init__(self, header: Sequence[str]):
        self.header = list(header)
        self.name = _resolve_column(header, NAME_ALIASES)
        self.gpa = {p: _resolve_column(header, GPA_PERCENTILE_ALIASES[p]) for p in PERCENTILE_RUNGS}
        self.test_score = {p: _resolve_column(header, TEST_SCORE_PERCENTILE_ALIASES[p]) for p in PERCENTILE_RUNGS}
        self.state = _resolve_column(header, STATE_ALIASES)
        self.region = _resolve_column(header, REGION_ALIASES)
        self.public_private = _resolve_column(header, PUBLIC_PRIVATE_ALIASES)
        self.demographics = {
            field: _resolve_column(header, aliases)
            for field, aliases in DEMOGRAPHIC_ALIASES.items()
        }

    def missing_curve_columns(self) -> List[str]:
        missing = [f"gpa p{p}" for p, col in self.gpa.items() if col is None]
        missing += [f"test p{p}" for p, col in self.test_score.items() if col is None]
        return missing


def _cell(row: Optional[Dict[str, str]], column: Optional[str]) -> str:
    if row is None or column is None:
        return ""
    return row.get(column, "")


def _first_text(*candidates: str) -> str:
    for candidate in candidates:
        if candidate:
            return candidate
    return ""


def _build_curve(row: Dict[str, str], columns: Dict[int, Optional[str]]) -> Tuple[PercentilePoint, ...]:
    points = [
        PercentilePoint(percentile=p, value=parse_number(_cell(row, column)))
        for p, column in columns.items()
    ]
    return tuple(sorted(points, key=lambda point: point.percentile))


def _median(curve: Sequence[PercentilePoint]) -> float:
    for point in curve:
        if point.percentile == MEDIAN_PERCENTILE and point.is_valid:
            return point.value
    return 0.0


def _build_record(
    idx: int,
    row: Dict[str, str],
    columns: _ColumnMap,
    demo_row: Optional[Dict[str, str]],
    demo_columns: Optional[_ColumnMap],
) -> InstitutionRecord:
    name = _cell(row, columns.name) or f"unknown-{idx}"

    gpa_curve = _build_curve(row, columns.gpa)
    test_curve = _build_curve(row, columns.test_score)

    # Institution character lives in the demographics table when supplied,
    # otherwise the academic table may carry the same columns.
    def character(attr: str) -> str:
        demo_value = _cell(demo_row, getattr(demo_columns, attr)) if demo_columns else ""
        return _first_text(demo_value, _cell(row, getattr(columns, attr)))

    public_private = character("public_private")

    demographics = {}
    for field in DEMOGRAPHIC_ALIASES:
        value = None
        if demo_columns is not None:
            value = parse_number(_cell(demo_row, demo_columns.demographics[field]))
        if value is None:
            value = parse_number(_cell(row, columns.demographics[field]))
        demographics[field] = value

    return InstitutionRecord(
        institution_id=name.strip(),
        name=name,
        normalized_name=normalize_name(name),
        academic_percentiles=AcademicPercentiles(gpa=gpa_curve, test_score=test_curve),
        state=character("state"),
        region=character("region"),
        public_private=public_private,
        is_public=public_private.strip().lower().startswith("public"),
        demographics=Demographics(**demographics),
        gpa_median=_median(gpa_curve),
        test_score_median=_median(test_curve),
    )


# =============================================================================
# CATALOG ASSEMBLY
# =============================================================================

def build_catalog(records: Sequence[InstitutionRecord]) -> Catalog:
    """
    Index records by lower-cased id and by normalized name.

    Id collisions: the last row wins in the id index. Every row stays in
    `records` and in the name index.
    """
    by_id: Dict[str, InstitutionRecord] = {}
    by_name: Dict[str, List[InstitutionRecord]] = {}

    for record in records:
        key = record.institution_id.lower()
        if key in by_id:
            logger.warning(f"Duplicate institution id '{record.institution_id}', later row replaces earlier one")
        by_id[key] = record
        by_name.setdefault(record.normalized_name, []).append(record)

    return Catalog(
        records=tuple(records),
        by_id=by_id,
        by_normalized_name={k: tuple(v) for k, v in by_name.items()},
    )


def parse_catalog(academic_text: str, demographics_text: Optional[str] = None) -> Catalog:
    """
    Build a Catalog from already-read table text.

    Args:
        academic_text: CSV text with names and GPA / test-score percentiles
        demographics_text: Optional CSV text, positionally paired with the academic rows

    Returns:
        Catalog (empty when the academic table has no data rows)
    """
    header, rows = _read_table(academic_text or "")
    if not rows:
        logger.info("Academic table has no data rows, catalog is empty")
        return build_catalog([])

    columns = _ColumnMap(header)
    missing = columns.missing_curve_columns()
    if missing:
        logger.debug(f"Academic table has no column for: {', '.join(missing)}")

    demo_rows: List[Dict[str, str]] = []
    demo_columns: Optional[_ColumnMap] = None
    if demographics_text is not None:
        demo_header, demo_rows = _read_table(demographics_text)
        demo_columns = _ColumnMap(demo_header)
        if len(demo_rows) != len(rows):
            logger.warning(
                f"Row count mismatch: {len(rows)} academic rows vs {len(demo_rows)} demographics rows; "
                "rows are paired by position"
            )

    records = []
    for idx, row in enumerate(rows):
        demo_row = demo_rows[idx] if idx < len(demo_rows) else None
        records.append(_build_record(idx, row, columns, demo_row, demo_columns))

    return build_catalog(records)


def _read_source(source: Source) -> str:
    try:
        with open(source, "r", encoding="utf-8-sig") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(str(source), str(e)) from e


def load_catalog(academic_source: Source, demographics_source: Optional[Source] = None) -> Catalog:
    """
    Read the source tables from disk and build the catalog in one shot.

    Raises:
        CatalogLoadError: if a source cannot be read or parsed
    """
    academic_text = _read_source(academic_source)
    demographics_text = _read_source(demographics_source) if demographics_source else None

    try:
        catalog = parse_catalog(academic_text, demographics_text)
    except csv.Error as e:
        raise CatalogLoadError(str(academic_source), f"malformed CSV: {e}") from e

    logger.info(f"Loaded {len(catalog)} institutions from {academic_source}")
    return catalog
