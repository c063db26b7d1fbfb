"""
Tests for the match engine and the per-mode keep/drop policies.
"""

import io
import logging

import pytest
from hypothesis import given, strategies as st, settings

from fasta_organism_filter.filters.loaders import build_from_single_name
from fasta_organism_filter.filters.matching import NO_MATCH, is_exact_or_regex_match, is_taxonomy_match
from fasta_organism_filter.filters.specification import (
    ByOrganismNames,
    ByProteinNames,
    ByTaxonomyIds,
    NameCriteria,
    NoFilter
)
from fasta_organism_filter.models.entities import ProteinEntry
from fasta_organism_filter.processing.orchestrator import (
    MatchRecorder,
    is_organism_match,
    is_protein_match,
    should_keep
)


def entry(name, description):
    return ProteinEntry(name=name, description=description, sequence="MKV")


class TestExactOrRegexMatch:
    """Test candidate matching against NameCriteria."""

    def test_exact_match_is_case_insensitive(self):
        criteria = NameCriteria.build(exact_names=["Homo sapiens"])
        outcome = is_exact_or_regex_match("HOMO SAPIENS", criteria)

        assert outcome
        assert outcome.matched_text == "HOMO SAPIENS"
        assert not outcome.is_regex_match

    def test_exact_match_covers_whole_candidate(self):
        criteria = NameCriteria.build(exact_names=["Homo sapiens"])
        assert is_exact_or_regex_match("Homo sapiens neanderthalensis", criteria) is NO_MATCH

    def test_regex_matches_anywhere(self):
        criteria = NameCriteria.build(regex_expressions=["cytochrome c"])
        outcome = is_exact_or_regex_match("Mitochondrial Cytochrome C oxidase", criteria)

        assert outcome.matched
        assert outcome.matched_text == "Cytochrome C"
        assert outcome.pattern == "cytochrome c"
        assert outcome.match_start == 14

    def test_exact_checked_before_regex(self):
        criteria = NameCriteria.build(exact_names=["Mus musculus"], regex_expressions=["^Mus"])
        outcome = is_exact_or_regex_match("Mus musculus", criteria)

        assert outcome.matched
        assert not outcome.is_regex_match

    def test_first_matching_regex_wins(self):
        criteria = NameCriteria.build(regex_expressions=["sapiens", "^Homo"])
        outcome = is_exact_or_regex_match("Homo sapiens", criteria)

        assert outcome.pattern == "sapiens"

    def test_no_match(self):
        criteria = NameCriteria.build(exact_names=["Homo sapiens"], regex_expressions=["^Mus"])
        assert not is_exact_or_regex_match("Rattus norvegicus", criteria)

    @given(name=st.text(alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ ", min_size=1, max_size=30))
    @settings(max_examples=100)
    def test_name_always_matches_itself_in_any_case(self, name):
        """An exact name matches the same text regardless of case."""
        criteria = NameCriteria.build(exact_names=[name])
        assert is_exact_or_regex_match(name.upper(), criteria).matched
        assert is_exact_or_regex_match(name.lower(), criteria).matched


class TestTaxonomyMatch:
    """Test taxonomy ID membership."""

    def test_member(self):
        assert is_taxonomy_match(9606, {9606, 10090})

    def test_not_member(self):
        assert not is_taxonomy_match(562, {9606})

    def test_zero_never_matches(self):
        assert not is_taxonomy_match(0, {0, 9606})


class TestOrganismPolicy:
    """Test organism filter candidate order."""

    def test_species_tag_is_only_name_candidate(self):
        # Brackets and the description are not consulted when OS= is present
        criteria = NameCriteria.build(exact_names=["Mus musculus"], regex_expressions=["kinase"])
        protein = entry("P1", "Kinase [Mus musculus] OS=Homo sapiens OX=9606")

        assert not is_organism_match(protein, criteria)

    def test_species_tag_match(self):
        criteria = NameCriteria.build(exact_names=["homo sapiens"])
        assert is_organism_match(entry("P1", "p53 OS=Homo sapiens OX=9606"), criteria)

    def test_brackets_then_description(self):
        criteria = NameCriteria.build(regex_expressions=["kinase"])
        protein = entry("P1", "Serine kinase [Mus musculus]")

        assert is_organism_match(protein, criteria)

    def test_description_fallback_without_organism(self):
        criteria = NameCriteria.build(regex_expressions=["uncharacterized"])
        assert is_organism_match(entry("P1", "Uncharacterized protein"), criteria)

    def test_empty_description_never_matches(self):
        criteria = NameCriteria.build(regex_expressions=[".*"])
        assert not is_organism_match(entry("P1", ""), criteria)

    def test_taxonomy_ids_tested_after_names(self):
        criteria = NameCriteria.build(exact_names=["Rattus norvegicus"])
        protein = entry("P1", "p53 OS=Homo sapiens OX=9606")

        assert is_organism_match(protein, criteria, frozenset({9606}))
        assert not is_organism_match(protein, criteria, frozenset({10090}))

    def test_taxonomy_fallback_skips_brackets_behind_species_tag(self):
        criteria = NameCriteria.build(exact_names=["Rattus norvegicus"])
        protein = entry("P1", "p53 [Rattus norvegicus] OS=Homo sapiens OX=9606")

        assert not is_organism_match(protein, criteria, frozenset({10090}))
        assert is_organism_match(protein, criteria, frozenset({9606}))

    def test_wildcard_name(self):
        spec = build_from_single_name("Escherichia coli*")

        assert should_keep(entry("P1", "Protein OS=Escherichia coli (strain K12) OX=83333"), spec)
        assert not should_keep(entry("P2", "Protein OS=Escherichia coli"), spec)
        assert not should_keep(entry("P3", "Protein OS=Escherichia albertii OX=208962"), spec)


class TestProteinPolicy:
    """Test protein name filter."""

    def test_name_match(self):
        criteria = NameCriteria.build(exact_names=["sp|P04637|P53_HUMAN"])
        assert is_protein_match(entry("sp|P04637|P53_HUMAN", "p53"), criteria)

    def test_description_only_when_requested(self):
        criteria = NameCriteria.build(regex_expressions=["tumor antigen"])
        protein = entry("P1", "Cellular tumor antigen p53")

        assert not is_protein_match(protein, criteria)
        assert is_protein_match(protein, criteria, search_descriptions=True)


class TestShouldKeep:
    """Test keep/drop dispatch on the specification type."""

    def test_taxonomy_spec(self):
        spec = ByTaxonomyIds(taxonomy_ids=frozenset({9606}))

        assert should_keep(entry("P1", "p53 OS=Homo sapiens OX=9606"), spec)
        assert not should_keep(entry("P2", "p53 [Homo sapiens]"), spec)

    def test_protein_spec(self):
        spec = ByProteinNames(criteria=NameCriteria.build(regex_expressions=["^XP_"]))

        assert should_keep(entry("XP_001", "tumor protein p53"), spec)
        assert not should_keep(entry("NP_001", "tumor protein p53"), spec)

    def test_organism_names_spec(self):
        spec = ByOrganismNames(criteria=NameCriteria.build(exact_names=["Mus musculus"]))
        assert should_keep(entry("XP_001", "tumor protein p53 [Mus musculus]"), spec)

    def test_no_filter_has_no_decision(self):
        with pytest.raises(TypeError):
            should_keep(entry("P1", "p53"), NoFilter())


class TestMatchRecorder:
    """Test match diagnostics."""

    def test_match_info_rows(self):
        stream = io.StringIO()
        recorder = MatchRecorder(stream)
        criteria = NameCriteria.build(exact_names=["Mus musculus"], regex_expressions=["^Homo"])

        is_organism_match(entry("P1", "p53 [Mus musculus]"), criteria, recorder=recorder)
        is_organism_match(entry("P2", "p53 OS=Homo sapiens OX=9606"), criteria, recorder=recorder)
        recorder.record_taxonomy("P3", 9606)

        assert stream.getvalue().splitlines() == [
            "P1\tMus musculus",
            "P2\tHomo\t^Homo",
            "P3\t9606",
        ]

    def test_matches_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="fasta_organism_filter.processing.orchestrator")
        recorder = MatchRecorder()
        criteria = NameCriteria.build(regex_expressions=["sapiens"])

        is_organism_match(entry("P2", "p53 OS=Homo sapiens OX=9606"), criteria, recorder=recorder)

        messages = [record.getMessage() for record in caplog.records if record.levelno == logging.DEBUG]
        assert any("matched 'sapiens' in 'Homo sapiens'" in message for message in messages)
