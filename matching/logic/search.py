"""
Catalog lookups used by the HTTP layer: name search and id lookup.
"""

from typing import List, Optional

from .catalog_loader import normalize_name
from .contracts import Catalog, InstitutionRecord


def search_catalog(catalog: Catalog, query: Optional[str]) -> List[InstitutionRecord]:
    """
    Case-insensitive name search.

    Exact normalized-name matches come first, then substring matches,
    each group in catalog order, with no record repeated. Paging is left
    to the caller.
    """
    q = normalize_name(query)
    if not q:
        return []

    exact = list(catalog.by_normalized_name.get(q, ()))
    # Every exact match is also a substring match, so skip them here
    substring = [
        record for record in catalog.records
        if q in record.normalized_name and record.normalized_name != q
    ]
    return exact + substring


def find_by_id(catalog: Catalog, institution_id: Optional[str]) -> Optional[InstitutionRecord]:
    """Case-insensitive id lookup. Returns None when absent."""
    if not institution_id:
        return None
    return catalog.by_id.get(str(institution_id).strip().lower())
