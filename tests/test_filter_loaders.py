"""
Tests for building filter specifications from names and list files.
"""

import logging

import pytest

from fasta_organism_filter.errors import FilterFileError
from fasta_organism_filter.filters.loaders import (
    ListFileMode,
    build_from_list_file,
    build_from_single_name,
    build_from_taxonomy_list_file,
    output_suffix_for_name
)
from fasta_organism_filter.filters.specification import (
    ByOneOrganismName,
    ByOrganismNames,
    ByProteinNames,
    ByTaxonomyIds,
    NameCriteria,
    NoFilter,
    output_suffix_of
)


class TestSingleOrganismName:
    """Test the single organism name builder."""

    def test_exact_name(self):
        spec = build_from_single_name("Homo sapiens")

        assert isinstance(spec, ByOneOrganismName)
        assert spec.criteria.exact_names == frozenset({"homo sapiens"})
        assert spec.criteria.regexes == ()
        assert spec.output_suffix == "_Homo_sapiens"

    def test_wildcard_becomes_regex(self):
        spec = build_from_single_name("Escherichia coli*")

        assert spec.criteria.exact_names == frozenset()
        assert spec.criteria.regex_expressions == ("Escherichia coli.+",)
        assert spec.output_suffix == "_Escherichia_coli"

    def test_invalid_wildcard_pattern(self):
        with pytest.raises(FilterFileError):
            build_from_single_name("Homo (sapiens*")

    @pytest.mark.parametrize("name,expected", [
        ("Homo sapiens", "_Homo_sapiens"),
        ("Escherichia coli*", "_Escherichia_coli"),
        ("E. coli K-12", "_E__coli_K-12"),
        ("a/b\\c:d?e<f>g|h", "_a_b_c_d_e_f_g_h"),
    ])
    def test_output_suffix(self, name, expected):
        assert output_suffix_for_name(name) == expected


class TestOrganismListFile:
    """Test organism list files with names, RegEx: and TaxId: lines."""

    def test_mixed_entries(self, write_list_file):
        path = write_list_file([
            "Homo sapiens",
            "",
            "RegEx:Escherichia coli.+",
            "TaxId:9606",
            "taxid:10090",
            "regex:^Mus"
        ])

        spec = build_from_list_file(path, ListFileMode.ORGANISM_NAME)

        assert isinstance(spec, ByOrganismNames)
        assert spec.criteria.exact_names == frozenset({"homo sapiens"})
        assert spec.criteria.regex_expressions == ("Escherichia coli.+", "^Mus")
        assert spec.taxonomy_ids == frozenset({9606, 10090})
        assert not spec.is_empty

    def test_duplicate_entries_collapse(self, write_list_file):
        path = write_list_file(["Homo sapiens", "HOMO SAPIENS", "RegEx:^Mus", "RegEx:^Mus"])

        spec = build_from_list_file(path, ListFileMode.ORGANISM_NAME)

        assert len(spec.criteria.exact_names) == 1
        assert spec.criteria.regex_expressions == ("^Mus",)

    def test_empty_regex_and_taxid_are_warned(self, write_list_file, caplog):
        path = write_list_file(["RegEx:", "TaxId:  ", "TaxId:abc", "Homo sapiens"])

        with caplog.at_level(logging.WARNING):
            spec = build_from_list_file(path, ListFileMode.ORGANISM_NAME)

        messages = [record.getMessage() for record in caplog.records]
        assert "Empty RegEx filter defined on line 1" in messages
        assert "Empty TaxId defined on line 2" in messages
        assert "TaxId defined on line 3 is not an integer: abc" in messages
        assert spec.taxonomy_ids == frozenset()
        assert spec.criteria.exact_names == frozenset({"homo sapiens"})

    def test_taxid_must_be_a_32_bit_integer(self, write_list_file, caplog):
        path = write_list_file(["TaxId:1_000", "TaxId:99999999999", "TaxId: 9606 ", "TaxId:+562", "TaxId:2147483647"])

        with caplog.at_level(logging.WARNING):
            spec = build_from_list_file(path, ListFileMode.ORGANISM_NAME)

        assert [record.getMessage() for record in caplog.records] == [
            "TaxId defined on line 1 is not an integer: 1_000",
            "TaxId defined on line 2 is not an integer: 99999999999",
        ]
        assert spec.taxonomy_ids == frozenset({9606, 562, 2147483647})

    def test_invalid_regex_is_fatal(self, write_list_file):
        path = write_list_file(["RegEx:(unclosed"])

        with pytest.raises(FilterFileError) as exc_info:
            build_from_list_file(path, ListFileMode.ORGANISM_NAME)

        assert exc_info.value.context.line_number == 1

    def test_blank_file_is_empty(self, write_list_file):
        path = write_list_file(["", "   "])

        spec = build_from_list_file(path, ListFileMode.ORGANISM_NAME)
        assert spec.is_empty

    def test_missing_file(self, tmp_path):
        with pytest.raises(FilterFileError, match="List file not found"):
            build_from_list_file(tmp_path / "missing.txt", ListFileMode.ORGANISM_NAME)


class TestProteinListFile:
    """Test protein list files."""

    def test_taxid_lines_are_names(self, write_list_file):
        path = write_list_file(["P04637", "TaxId:9606", "RegEx:^XP_"])

        spec = build_from_list_file(path, ListFileMode.PROTEIN_NAME, search_descriptions=True)

        assert isinstance(spec, ByProteinNames)
        assert spec.search_descriptions is True
        assert spec.criteria.exact_names == frozenset({"p04637", "taxid:9606"})
        assert spec.criteria.regex_expressions == ("^XP_",)


class TestTaxonomyListFiles:
    """Test taxonomy ID list files."""

    def test_list_file_mode_ignores_names(self, write_list_file, caplog):
        path = write_list_file(["TaxId:9606", "Homo sapiens"])

        with caplog.at_level(logging.WARNING):
            spec = build_from_list_file(path, ListFileMode.TAXONOMY_ID)

        assert isinstance(spec, ByTaxonomyIds)
        assert spec.taxonomy_ids == frozenset({9606})
        assert any("Ignoring 1 name filter" in record.getMessage() for record in caplog.records)

    def test_header_line_is_tolerated(self, write_list_file, caplog):
        path = write_list_file(["TaxonomyID", "9606", "10090", "", "562"])

        with caplog.at_level(logging.WARNING):
            spec = build_from_taxonomy_list_file(path)

        assert spec.taxonomy_ids == frozenset({9606, 10090, 562})
        assert not [record for record in caplog.records if record.levelno >= logging.WARNING]

    def test_non_integer_lines_are_warned(self, write_list_file, caplog):
        path = write_list_file(["9606", "human", "10090"])

        with caplog.at_level(logging.WARNING):
            spec = build_from_taxonomy_list_file(path)

        assert spec.taxonomy_ids == frozenset({9606, 10090})
        assert [record.getMessage() for record in caplog.records] == ["Line 2 is not an integer: human"]

    def test_only_32_bit_integers_are_accepted(self, write_list_file, caplog):
        path = write_list_file(["TaxonomyID", " 9606 ", "1_000", "2147483648", "10090.0", "-7"])

        with caplog.at_level(logging.WARNING):
            spec = build_from_taxonomy_list_file(path)

        assert spec.taxonomy_ids == frozenset({9606, -7})
        assert [record.getMessage() for record in caplog.records] == [
            "Line 3 is not an integer: 1_000",
            "Line 4 is not an integer: 2147483648",
            "Line 5 is not an integer: 10090.0",
        ]

    def test_header_only_is_empty(self, write_list_file):
        spec = build_from_taxonomy_list_file(write_list_file(["TaxonomyID"]))
        assert spec.is_empty

    def test_missing_file(self, tmp_path):
        with pytest.raises(FilterFileError):
            build_from_taxonomy_list_file(tmp_path / "missing.txt")


class TestSpecifications:
    """Test specification helpers."""

    def test_descriptions(self):
        assert NoFilter().description == "organism summary"
        assert ByOrganismNames().description == "organism name"
        assert ByProteinNames().description == "protein name"
        assert ByTaxonomyIds().description == "taxonomy ID"

    def test_no_filter_is_never_empty(self):
        assert not NoFilter().is_empty

    def test_organism_names_with_only_taxonomy_ids_are_not_empty(self):
        assert not ByOrganismNames(taxonomy_ids=frozenset({9606})).is_empty

    def test_output_suffix_only_for_single_name(self):
        assert output_suffix_of(build_from_single_name("Homo sapiens")) == "_Homo_sapiens"
        assert output_suffix_of(ByProteinNames(criteria=NameCriteria.build(exact_names=["P1"]))) is None
        assert output_suffix_of(NoFilter()) is None
