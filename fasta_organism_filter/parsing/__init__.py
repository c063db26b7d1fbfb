"""
Parsers for FASTA protein description lines.
"""

from .description import (
    extract_species_tag,
    extract_taxonomy_id,
    extract_bracketed_organism,
    extract_organism,
    parse_int32
)

__all__ = [
    'extract_species_tag',
    'extract_taxonomy_id',
    'extract_bracketed_organism',
    'extract_organism',
    'parse_int32'
]
