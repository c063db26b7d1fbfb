"""
Processing orchestration: filtering runs and organism summaries.
"""

from .orchestrator import (
    FastaOrganismFilter,
    ProcessingReport,
    MatchRecorder,
    should_keep,
    is_organism_match,
    is_protein_match,
    is_taxonomy_filter_match
)
from .summary import OrganismSummary, OrganismSummaryRow, split_genus_species

__all__ = [
    'FastaOrganismFilter',
    'ProcessingReport',
    'MatchRecorder',
    'should_keep',
    'is_organism_match',
    'is_protein_match',
    'is_taxonomy_filter_match',
    'OrganismSummary',
    'OrganismSummaryRow',
    'split_genus_species'
]
