"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile
from pathlib import Path

# db.py reads DATABASE_URL at import time; point it at a throwaway file
# before any test module imports the app.
_DB_DIR = tempfile.mkdtemp(prefix="school-match-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{Path(_DB_DIR) / 'test.db'}")

import pytest

from matching.logic.catalog_loader import parse_catalog
from matching.logic.contracts import (
    AcademicPercentiles,
    Demographics,
    InstitutionRecord,
    PercentilePoint,
)


ACADEMIC_HEADER = (
    "School,GPA P10,GPA P25,GPA P50 (Median),GPA P75,GPA P90,"
    "MCAT P10,MCAT P25,MCAT P50 (Median),MCAT P75,MCAT P90"
)


@pytest.fixture
def academic_csv() -> str:
    """Three institutions with full curves and one with no usable data."""
    return "\n".join([
        ACADEMIC_HEADER,
        "Alpha University,3.4,3.6,3.75,3.85,3.95,508,512,515,518,521",
        "Beta College,3.0,3.2,3.4,3.6,3.8,498,502,506,510,514",
        "Gamma Institute,3.2,3.4,3.6,3.7,3.8,502,505,509,512,516",
        "Delta School,n/a,,,,,,,,,",
    ])


@pytest.fixture
def demographics_csv() -> str:
    """Demographics rows, positionally paired with academic_csv."""
    return "\n".join([
        "School,State,Region,Public/Private,Race Hispanic,Race Black,Race Other,Total Applicants",
        "Alpha University,CA,West,Private,8,6,2,9000",
        "Beta College,California,West,Public,15,10,3,6000",
        "Gamma Institute,TX,South,Public,5,5,1,4000",
        "Delta School,NY,Northeast,Private,,,,",
    ])


@pytest.fixture
def catalog(academic_csv, demographics_csv):
    return parse_catalog(academic_csv, demographics_csv)


@pytest.fixture
def csv_files(tmp_path, academic_csv, demographics_csv):
    """Write both tables to disk and return their paths."""
    academic = tmp_path / "academics.csv"
    demographics = tmp_path / "demographics.csv"
    academic.write_text(academic_csv, encoding="utf-8")
    demographics.write_text(demographics_csv, encoding="utf-8")
    return academic, demographics


def make_curve(**points):
    """make_curve(p10=3.0, p50=3.5) -> ordered PercentilePoint tuple."""
    return tuple(
        PercentilePoint(percentile=int(key[1:]), value=value)
        for key, value in sorted(points.items(), key=lambda kv: int(kv[0][1:]))
    )


def make_institution(
    name: str = "Test School",
    gpa=None,
    test_score=None,
    state: str = "",
    public_private: str = "",
    demographics=None,
) -> InstitutionRecord:
    gpa = gpa or ()
    test_score = test_score or ()
    gpa_median = next((p.value for p in gpa if p.percentile == 50 and p.value is not None), 0.0)
    test_median = next((p.value for p in test_score if p.percentile == 50 and p.value is not None), 0.0)
    return InstitutionRecord(
        institution_id=name,
        name=name,
        normalized_name=name.strip().lower(),
        academic_percentiles=AcademicPercentiles(gpa=gpa, test_score=test_score),
        state=state,
        public_private=public_private,
        is_public=public_private.lower().startswith("public"),
        demographics=Demographics(**(demographics or {})),
        gpa_median=gpa_median,
        test_score_median=test_median,
    )


@pytest.fixture
def gpa_only_institution() -> InstitutionRecord:
    """GPA points {10: 3.0, 50: 3.5, 90: 3.9} and no test-score data."""
    return make_institution(
        name="Curve School",
        gpa=make_curve(p10=3.0, p50=3.5, p90=3.9),
    )
