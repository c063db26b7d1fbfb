"""
Data models for protein entries, organism extraction results, and organism statistics.

These are lightweight dataclasses because one instance is created per FASTA entry
and input files may contain millions of proteins.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProteinEntry:
    """
    One FASTA record as supplied by the reader.

    ``header`` is the header text exactly as read, without the leading '>'.
    """
    name: str
    description: str
    sequence: str
    header: str = ""

    @classmethod
    def from_header(cls, header: str, sequence: str, max_description_length: Optional[int] = None) -> "ProteinEntry":
        """
        Split a FASTA header line (without the leading '>') into name and description.

        The name is the text up to the first space; the description is the rest.
        Descriptions longer than max_description_length are truncated; the raw
        header is kept as is.
        """
        name, _, description = header.partition(" ")
        if max_description_length is not None and len(description) > max_description_length:
            description = description[:max_description_length]
        return cls(name=name, description=description, sequence=sequence, header=header)

    @property
    def header_line(self) -> str:
        """Header text without the leading '>'."""
        if self.header:
            return self.header
        if self.description:
            return f"{self.name} {self.description}"
        return self.name


@dataclass(frozen=True)
class ExtractionResult:
    """Organism name and taxonomy ID derived from one description line."""
    organism: str = ""
    taxonomy_id: int = 0


@dataclass
class OrganismInfo:
    """Observation statistics for one organism name in summary mode."""
    organism_name: str
    taxonomy_id: int = 0
    observation_count: int = 0
