"""
Pydantic model for the processing options of one filtering run.

This module validates the combination of command-line (or parameter file) options
and decides which processing mode applies.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SelectionMode(Enum):
    """The five processing modes."""
    SUMMARIZE = "summarize"
    ORGANISM_LIST = "organism_list"
    ORGANISM_NAME = "organism_name"
    PROTEIN_LIST = "protein_list"
    TAXONOMY_LIST = "taxonomy_list"


class FilterOptions(BaseModel):
    """Processing options for one run of the organism filter."""

    model_config = ConfigDict(frozen=True)

    input_file_path: str = Field(
        ...,
        description="FASTA file to process (.fasta or .fasta.gz)"
    )
    output_directory_path: Optional[str] = Field(
        None,
        description="Output directory; defaults to the directory of the input file"
    )
    create_map_file: bool = Field(
        False,
        description="Create the protein to organism map file (summary mode only)"
    )
    organism_name: Optional[str] = Field(
        None,
        description="Single organism name to filter on; '*' is a wildcard"
    )
    organism_list_file: Optional[str] = Field(
        None,
        description="File with organism names, RegEx: patterns, or TaxId: values"
    )
    protein_list_file: Optional[str] = Field(
        None,
        description="File with protein names or RegEx: patterns"
    )
    search_protein_descriptions: bool = Field(
        False,
        description="Also match the protein list against protein descriptions"
    )
    taxonomy_id_list_file: Optional[str] = Field(
        None,
        description="File with one taxonomy ID per line"
    )
    verbose: bool = Field(
        False,
        description="Write the match info file and log every match"
    )

    @field_validator('input_file_path')
    @classmethod
    def validate_input_path(cls, v):
        """Input path must be provided and non-empty."""
        if v is None or not v.strip():
            raise ValueError(f'Input path must be provided and non-empty; "{v}" was provided')
        return v.strip()

    @field_validator('output_directory_path', 'organism_name', 'organism_list_file',
                     'protein_list_file', 'taxonomy_id_list_file')
    @classmethod
    def blank_to_none(cls, v):
        """Treat whitespace-only values as not provided."""
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def validate_single_selection_mode(self):
        """At most one selection criterion may be active."""
        provided = [
            flag for flag, value in (
                ("--organism", self.organism_name),
                ("--org", self.organism_list_file),
                ("--prot", self.protein_list_file),
                ("--tax", self.taxonomy_id_list_file),
            ) if value
        ]
        if len(provided) > 1:
            raise ValueError(
                "Only one filter can be used at a time; received " + ", ".join(provided)
            )
        return self

    @property
    def selection_mode(self) -> SelectionMode:
        """Processing mode implied by the options."""
        if self.organism_name:
            return SelectionMode.ORGANISM_NAME
        if self.organism_list_file:
            return SelectionMode.ORGANISM_LIST
        if self.protein_list_file:
            return SelectionMode.PROTEIN_LIST
        if self.taxonomy_id_list_file:
            return SelectionMode.TAXONOMY_LIST
        return SelectionMode.SUMMARIZE
