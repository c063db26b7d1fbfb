"""
Organism and taxonomy extraction from FASTA protein descriptions.

Descriptions come in three flavours:

* UniProt style, with ``OS=Organism name`` and ``OX=TaxonomyID`` tags, e.g.
  ``Cellular tumor antigen p53 OS=Homo sapiens OX=9606 GN=TP53 PE=1 SV=4``
* NCBI style, with the organism in the last set of square brackets, e.g.
  ``hypothetical protein [Salmonella enterica subsp. enterica serovar 4,[5],12:i:-]``
* Neither, in which case the whole description is the only text to search.

All functions here are pure; the regular expressions are compiled at import time.
"""

import re
from typing import Optional

from ..models.entities import ExtractionResult

SPECIES_TAG_PATTERN = re.compile(r"OS=(.+)", re.IGNORECASE)
TAXONOMY_TAG_PATTERN = re.compile(r"OX=([0-9]+)", re.IGNORECASE)
NEXT_TAG_PATTERN = re.compile(r" [a-z]+=", re.IGNORECASE)

# Appended to the description so that OS= always has a following tag to stop at
SENTINEL_TAG = " XX=Ignore"

# Optional sign and ASCII digits, with surrounding whitespace; leading zeros do not count toward the width
INT32_PATTERN = re.compile(r"\s*([+-]?)0*([0-9]{1,10})\s*")

# Taxonomy IDs are signed 32-bit integers; anything outside that range is unparsable
MIN_TAXONOMY_ID = -2 ** 31
MAX_TAXONOMY_ID = 2 ** 31 - 1


def extract_species_tag(description: str) -> str:
    """
    Return the organism named by the first OS= tag, or an empty string.

    The organism name ends just before the next `` Tag=`` in the description.

    >>> extract_species_tag("p53 OS=Homo sapiens OX=9606 GN=TP53")
    'Homo sapiens'
    >>> extract_species_tag("p53 OS=Homo sapiens")
    'Homo sapiens'
    """
    match = SPECIES_TAG_PATTERN.search(description + SENTINEL_TAG)
    if not match:
        return ""

    species_tag = match.group(1)
    next_tag = NEXT_TAG_PATTERN.search(species_tag)
    if next_tag:
        return species_tag[:next_tag.start()]

    return ""


def parse_int32(text: str) -> Optional[int]:
    """
    Parse a signed 32-bit integer, or return None.

    Surrounding whitespace and a leading sign are allowed; underscores, decimal
    points, and values outside the 32-bit range are not.

    >>> parse_int32(" 9606 ")
    9606
    >>> parse_int32("1_000") is None
    True
    """
    match = INT32_PATTERN.fullmatch(text)
    if not match:
        return None

    value = int(match.group(2))
    if match.group(1) == "-":
        value = -value
    if not MIN_TAXONOMY_ID <= value <= MAX_TAXONOMY_ID:
        return None
    return value


def extract_taxonomy_id(description: str) -> int:
    """Return the integer after the first OX= tag, or 0 if absent or unparsable."""
    match = TAXONOMY_TAG_PATTERN.search(description)
    if not match:
        return 0

    taxonomy_id = parse_int32(match.group(1))
    return taxonomy_id if taxonomy_id is not None else 0


def extract_bracketed_organism(description: str) -> str:
    """
    Return the text inside the last top-level pair of square brackets.

    Brackets nested inside the organism name are honoured, so
    ``Protein X [Salmonella enterica serovar 4,[5],12:i:-]`` yields
    ``Salmonella enterica serovar 4,[5],12:i:-``.

    When the last ``]`` has no matching ``[``, the description up to the character
    before that ``]`` is returned instead. This is a degraded result kept for
    compatibility with existing organism summaries, not a real parse.
    """
    index_end = description.rfind("]")
    if index_end < 0:
        return ""

    depth = 1
    for index in range(index_end - 1, -1, -1):
        char = description[index]
        if char == "]":
            depth += 1
        elif char == "[":
            depth -= 1
            if depth == 0:
                return description[index + 1:index_end]

    # No matching '['
    return description[:max(index_end - 1, 0)]


def extract_organism(description: str, fallback_to_description: bool = False) -> ExtractionResult:
    """
    Determine the organism for a description using the standard fallback order.

    1. UniProt OS= tag (when present and non-empty)
    2. Last set of square brackets
    3. The entire description, only when ``fallback_to_description`` is set

    The taxonomy ID from OX= is attached regardless of which source supplied the name.

    Args:
        description: Protein description (header text after the protein name)
        fallback_to_description: Use the whole description when nothing else is found

    Returns:
        ExtractionResult; ``organism`` is empty when nothing was found
    """
    taxonomy_id = extract_taxonomy_id(description)

    species = extract_species_tag(description)
    if species:
        return ExtractionResult(species, taxonomy_id)

    organism = extract_bracketed_organism(description)
    if organism:
        return ExtractionResult(organism, taxonomy_id)

    if fallback_to_description and description:
        return ExtractionResult(description, taxonomy_id)

    return ExtractionResult(taxonomy_id=taxonomy_id)
