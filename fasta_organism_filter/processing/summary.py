"""
Organism census for summary mode.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Tuple, Union

from ..models.entities import OrganismInfo

logger = logging.getLogger(__name__)

SUMMARY_HEADER = ("Organism", "TaxonomyID", "Proteins", "Genus", "Species")
MAP_HEADER = ("Protein", "Organism", "TaxonomyID")


@dataclass(frozen=True)
class OrganismSummaryRow:
    """One line of the organism summary file."""
    organism: str
    taxonomy_id: int
    proteins: int
    genus: str
    species: str

    def to_fields(self) -> Tuple[str, ...]:
        return (self.organism, str(self.taxonomy_id), str(self.proteins), self.genus, self.species)


def split_genus_species(organism: str) -> Tuple[str, str]:
    """
    Heuristic genus and species: the first two whitespace-delimited words.

    Square brackets around the genus are removed.

    >>> split_genus_species("Homo sapiens neanderthalensis")
    ('Homo', 'sapiens')
    >>> split_genus_species("[Clostridium] scindens")
    ('Clostridium', 'scindens')
    """
    name_parts = organism.split()
    if not name_parts:
        return "", ""
    genus = name_parts[0].strip("[]")
    species = name_parts[1] if len(name_parts) > 1 else ""
    return genus, species


class OrganismSummary:
    """
    Tally of proteins per organism name.

    The taxonomy ID recorded for an organism is the one seen with its first protein;
    later proteins with a different OX= value only increase the count.
    """

    def __init__(self):
        self._organisms: Dict[str, OrganismInfo] = {}

    def add(self, organism: str, taxonomy_id: int = 0) -> OrganismInfo:
        info = self._organisms.get(organism)
        if info is None:
            info = OrganismInfo(organism_name=organism, taxonomy_id=taxonomy_id, observation_count=1)
            self._organisms[organism] = info
        else:
            info.observation_count += 1
        return info

    def get(self, organism: str) -> OrganismInfo:
        return self._organisms[organism]

    def __len__(self) -> int:
        return len(self._organisms)

    def __contains__(self, organism: str) -> bool:
        return organism in self._organisms

    def rows(self) -> Iterator[OrganismSummaryRow]:
        """Summary rows sorted by organism name."""
        for name in sorted(self._organisms):
            info = self._organisms[name]
            genus, species = split_genus_species(name)
            yield OrganismSummaryRow(
                organism=name,
                taxonomy_id=info.taxonomy_id,
                proteins=info.observation_count,
                genus=genus,
                species=species
            )

    def write(self, path: Union[str, Path]) -> int:
        """Write the tab-delimited summary file; returns the number of organisms written."""
        count = 0
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write("\t".join(SUMMARY_HEADER) + "\n")
            for row in self.rows():
                f.write("\t".join(row.to_fields()) + "\n")
                count += 1
        return count
