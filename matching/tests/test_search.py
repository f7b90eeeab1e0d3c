"""
Tests for catalog search and id lookup.
"""

from matching.logic.catalog_loader import parse_catalog
from matching.logic.search import find_by_id, search_catalog


def _names(records):
    return [r.name for r in records]


def _catalog(*names):
    rows = ["School,GPA P50 (Median),MCAT P50 (Median)"]
    rows += [f"{name},3.5,510" for name in names]
    return parse_catalog("\n".join(rows))


def test_exact_match_first_then_substrings_in_catalog_order():
    catalog = _catalog("Medical School", "School", "Another School")

    results = search_catalog(catalog, "SCHOOL")

    assert _names(results) == ["School", "Medical School", "Another School"]


def test_no_duplicates_between_groups():
    catalog = _catalog("School", "Medical School", "Another School")
    results = search_catalog(catalog, "school")
    assert len(results) == len({id(r) for r in results}) == 3


def test_query_is_trimmed():
    catalog = _catalog("School", "Medical School")
    assert _names(search_catalog(catalog, "  medical ")) == ["Medical School"]


def test_every_exact_duplicate_is_returned():
    catalog = _catalog("Twin", "Twin Cities College", "Twin")
    assert _names(search_catalog(catalog, "twin")) == ["Twin", "Twin", "Twin Cities College"]


def test_empty_query_returns_nothing():
    catalog = _catalog("School")
    assert search_catalog(catalog, "") == []
    assert search_catalog(catalog, "   ") == []
    assert search_catalog(catalog, None) == []


def test_no_match_returns_empty_list():
    assert search_catalog(_catalog("School"), "college") == []


def test_no_typo_tolerance():
    assert search_catalog(_catalog("School"), "shcool") == []


def test_find_by_id_is_case_insensitive():
    catalog = _catalog("Example School")
    assert find_by_id(catalog, "example school").name == "Example School"
    assert find_by_id(catalog, "EXAMPLE SCHOOL").name == "Example School"


def test_find_by_id_missing_returns_none():
    catalog = _catalog("Example School")
    assert find_by_id(catalog, "missing") is None
    assert find_by_id(catalog, "") is None
    assert find_by_id(catalog, None) is None
