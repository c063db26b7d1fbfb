"""
Filter specifications, their builders, and the match engine.
"""

from .specification import (
    FilterSpecification,
    NameCriteria,
    NoFilter,
    ByOrganismNames,
    ByOneOrganismName,
    ByProteinNames,
    ByTaxonomyIds,
    output_suffix_of
)
from .loaders import (
    ListFileMode,
    build_from_single_name,
    build_from_list_file,
    build_from_taxonomy_list_file,
    output_suffix_for_name
)
from .matching import MatchOutcome, NO_MATCH, is_exact_or_regex_match, is_taxonomy_match

__all__ = [
    'FilterSpecification',
    'NameCriteria',
    'NoFilter',
    'ByOrganismNames',
    'ByOneOrganismName',
    'ByProteinNames',
    'ByTaxonomyIds',
    'output_suffix_of',
    'ListFileMode',
    'build_from_single_name',
    'build_from_list_file',
    'build_from_taxonomy_list_file',
    'output_suffix_for_name',
    'MatchOutcome',
    'NO_MATCH',
    'is_exact_or_regex_match',
    'is_taxonomy_match'
]
