"""
Tests for the catalog loader.
"""

import logging

import pytest
from pydantic import ValidationError

from matching.logic.catalog_loader import load_catalog, parse_catalog, parse_number
from matching.logic.errors import CatalogLoadError


class TestParseCatalog:
    """Test building a catalog from table text."""

    def test_loads_rows_and_indexes_names(self):
        """Rows are indexed by lower-cased id and normalized name."""
        catalog = parse_catalog("\n".join([
            "School,GPA P50 (Median),MCAT P50 (Median)",
            "School One,3.5,510",
            "School Two,3.6,515",
        ]))

        assert len(catalog.records) == 2
        assert catalog.by_id["school one"].test_score_median == 510
        assert catalog.by_normalized_name["school two"][0].gpa_median == 3.6

    def test_id_keeps_display_case(self):
        catalog = parse_catalog("School,GPA P50\n  Example School  ,3.8")
        record = catalog.by_id["example school"]
        assert record.institution_id == "Example School"
        assert record.normalized_name == "example school"

    def test_header_names_are_case_and_space_insensitive(self):
        catalog = parse_catalog("  SCHOOL , gpa p90 ,Mcat P10\nAlpha,3.9,500")
        record = catalog.records[0]
        gpa = {p.percentile: p.value for p in record.academic_percentiles.gpa}
        test = {p.percentile: p.value for p in record.academic_percentiles.test_score}
        assert gpa[90] == 3.9
        assert test[10] == 500

    def test_header_aliases(self):
        """Alternate spellings of the same column resolve to the same rung."""
        for header in ["MCAT P50 (Median)", "MCAT P50", "MCAT P50(Median)", "Test Score Median"]:
            catalog = parse_catalog(f"School,{header}\nAlpha,512")
            assert catalog.records[0].test_score_median == 512, header

    def test_alias_priority_first_match_wins(self):
        catalog = parse_catalog("School,MCAT P50,MCAT P50 (Median)\nAlpha,500,510")
        assert catalog.records[0].test_score_median == 510

    def test_all_rungs_present_and_sorted(self, catalog):
        for record in catalog.records:
            for curve in (record.academic_percentiles.gpa, record.academic_percentiles.test_score):
                assert [p.percentile for p in curve] == [10, 25, 50, 75, 90]

    def test_unparsable_cells_become_none(self, catalog):
        delta = catalog.by_id["delta school"]
        assert all(p.value is None for p in delta.academic_percentiles.gpa)
        assert all(p.value is None for p in delta.academic_percentiles.test_score)

    def test_missing_median_defaults_to_zero(self, catalog):
        delta = catalog.by_id["delta school"]
        assert delta.gpa_median == 0
        assert delta.test_score_median == 0

    def test_missing_name_gets_placeholder(self):
        catalog = parse_catalog("School,GPA P50\n,3.5")
        assert catalog.records[0].name == "unknown-0"

    def test_header_only_is_empty_catalog(self):
        catalog = parse_catalog("School,GPA P50 (Median),MCAT P50 (Median)\n")
        assert len(catalog) == 0
        assert catalog.by_id == {}

    def test_empty_text_is_empty_catalog(self):
        assert len(parse_catalog("")) == 0

    def test_blank_lines_are_skipped(self):
        catalog = parse_catalog("School,GPA P50\n\nAlpha,3.5\n\n\nBeta,3.6\n")
        assert [r.name for r in catalog.records] == ["Alpha", "Beta"]

    def test_quoted_comma_in_name(self):
        catalog = parse_catalog('School,GPA P50\n"University of California, Davis",3.6')
        assert catalog.records[0].name == "University of California, Davis"
        assert catalog.records[0].gpa_median == 3.6

    def test_short_rows_are_padded(self):
        catalog = parse_catalog("School,GPA P10,GPA P50\nAlpha,3.1")
        gpa = {p.percentile: p.value for p in catalog.records[0].academic_percentiles.gpa}
        assert gpa[10] == 3.1
        assert gpa[50] is None


class TestDuplicateIds:

    def test_last_row_wins_in_id_index(self, caplog):
        with caplog.at_level(logging.WARNING):
            catalog = parse_catalog("School,GPA P50\nAlpha,3.1\nALPHA,3.9")

        assert len(catalog.records) == 2
        assert catalog.by_id["alpha"].gpa_median == 3.9
        assert len(catalog.by_normalized_name["alpha"]) == 2
        assert any("Duplicate institution id" in r.message for r in caplog.records)


class TestDemographicsPairing:

    def test_rows_pair_by_position(self, catalog):
        beta = catalog.by_id["beta college"]
        assert beta.state == "California"
        assert beta.region == "West"
        assert beta.is_public is True
        assert beta.demographics.race_hispanic == 15
        assert beta.demographics.total_applicants == 6000

        alpha = catalog.by_id["alpha university"]
        assert alpha.is_public is False
        assert alpha.public_private == "Private"

    def test_shorter_demographics_table_leaves_defaults(self, academic_csv, caplog):
        demographics = "School,State,Public/Private\nAlpha University,CA,Private"
        with caplog.at_level(logging.WARNING):
            catalog = parse_catalog(academic_csv, demographics)

        gamma = catalog.by_id["gamma institute"]
        assert gamma.state == ""
        assert gamma.is_public is False
        assert gamma.demographics.race_black is None
        assert any("Row count mismatch" in r.message for r in caplog.records)

    def test_character_columns_in_academic_table(self):
        catalog = parse_catalog("School,State,Public/Private,GPA P50\nAlpha,OH,Public,3.5")
        record = catalog.records[0]
        assert record.state == "OH"
        assert record.is_public is True

    def test_generic_type_column_is_not_ownership(self):
        catalog = parse_catalog("School,Type,GPA P50\nAlpha,Public Health,3.5")
        record = catalog.records[0]
        assert record.public_private == ""
        assert record.is_public is False

    def test_institution_type_column_is_ownership(self):
        catalog = parse_catalog("School,Institution Type,GPA P50\nAlpha,Public,3.5")
        assert catalog.records[0].is_public is True

    def test_no_demographics_table(self, academic_csv):
        catalog = parse_catalog(academic_csv)
        assert all(r.demographics.race_hispanic is None for r in catalog.records)


class TestImmutability:

    def test_records_are_frozen(self, catalog):
        with pytest.raises(ValidationError):
            catalog.records[0].name = "Changed"

    def test_catalog_is_frozen(self, catalog):
        with pytest.raises(ValidationError):
            catalog.records = ()


class TestLoadCatalog:

    def test_loads_from_files(self, csv_files):
        academic, demographics = csv_files
        catalog = load_catalog(academic, demographics)
        assert len(catalog) == 4
        assert catalog.by_id["gamma institute"].state == "TX"

    def test_loads_without_demographics(self, csv_files):
        academic, _ = csv_files
        catalog = load_catalog(str(academic))
        assert len(catalog) == 4

    def test_missing_file_is_load_error(self, tmp_path):
        with pytest.raises(CatalogLoadError) as exc_info:
            load_catalog(tmp_path / "missing.csv")
        assert "missing.csv" in exc_info.value.source

    def test_missing_demographics_file_is_load_error(self, csv_files, tmp_path):
        academic, _ = csv_files
        with pytest.raises(CatalogLoadError):
            load_catalog(academic, tmp_path / "missing.csv")

    def test_header_only_file_loads_empty(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("School,GPA P50 (Median),MCAT P50 (Median)\n", encoding="utf-8")
        assert len(load_catalog(path)) == 0

    def test_utf8_bom_is_ignored(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_text("\ufeffSchool,GPA P50\nAlpha,3.5", encoding="utf-8")
        assert load_catalog(path).records[0].name == "Alpha"


class TestParseNumber:

    @pytest.mark.parametrize("raw,expected", [
        ("3.5", 3.5),
        (" 510 ", 510.0),
        ("12%", 12.0),
        ("1,200", 1200.0),
        (7, 7.0),
    ])
    def test_parses(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "  ", "n/a", "NaN", "inf", None, True])
    def test_rejects(self, raw):
        assert parse_number(raw) is None
