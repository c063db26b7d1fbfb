"""
Data models for the FASTA Organism Filter.

This package provides the per-entry dataclasses used on the processing hot path and
the Pydantic model that validates the options of a run.
"""

from .entities import ProteinEntry, ExtractionResult, OrganismInfo
from .options import FilterOptions, SelectionMode

__all__ = [
    # Entities
    "ProteinEntry",
    "ExtractionResult",
    "OrganismInfo",

    # Options
    "FilterOptions",
    "SelectionMode",
]
