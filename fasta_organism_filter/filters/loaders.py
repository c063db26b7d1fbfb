"""
Builders that turn user input into filter specifications.

List files have one entry per line. Blank lines are ignored, lines starting with
``RegEx:`` hold a regular expression, lines starting with ``TaxId:`` hold a
taxonomy ID (organism and taxonomy filters only), and any other line is a name
to match exactly (case-insensitive).
"""

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Set, Tuple, Union

from ..errors import FilterFileError, create_error_context
from ..parsing.description import parse_int32
from .specification import (
    ByOneOrganismName,
    ByOrganismNames,
    ByProteinNames,
    ByTaxonomyIds,
    NameCriteria,
)

logger = logging.getLogger(__name__)

REGEX_PREFIX = "RegEx:"
TAXONOMY_PREFIX = "TaxId:"

# Characters not allowed in the output file suffix
INVALID_SUFFIX_CHARS = set(' \\/:*?.<>|')


class ListFileMode(Enum):
    """Kind of list file being loaded."""
    ORGANISM_NAME = "organism"
    PROTEIN_NAME = "protein"
    TAXONOMY_ID = "taxonomy"


def _pluralize(count: int) -> str:
    return "" if count == 1 else "s"


def output_suffix_for_name(name: str) -> str:
    """
    Build an output file suffix from an organism name.

    >>> output_suffix_for_name("Homo sapiens")
    '_Homo_sapiens'
    >>> output_suffix_for_name("Escherichia coli*")
    '_Escherichia_coli'
    """
    suffix = "_" + "".join("_" if char in INVALID_SUFFIX_CHARS else char for char in name)
    return suffix.rstrip("_")


def build_from_single_name(name: str) -> ByOneOrganismName:
    """
    Create a specification for one organism name.

    An asterisk is a wildcard: every ``*`` becomes ``.+`` and the name is used as a
    case-insensitive regular expression. Otherwise the name is matched exactly.

    Raises:
        FilterFileError: if the wildcard expression is not a valid regular expression
    """
    if "*" in name:
        expression = name.replace("*", ".+")
        try:
            criteria = NameCriteria.build(regex_expressions=[expression])
        except re.error as e:
            raise FilterFileError(
                f"Invalid organism name pattern '{name}': {e}",
                context=create_error_context("build_from_single_name", organism_name=name),
                original_exception=e
            ) from e
    else:
        criteria = NameCriteria.build(exact_names=[name])

    return ByOneOrganismName(
        organism_name=name,
        criteria=criteria,
        output_suffix=output_suffix_for_name(name)
    )


def _read_lines(path: Path) -> Iterator[Tuple[int, str]]:
    """Yield (line number, line) pairs with the line terminator removed."""
    if not path.exists():
        raise FilterFileError(
            f"List file not found: {path.resolve()}",
            context=create_error_context("read_list_file", file_path=str(path))
        )

    line_number = 0
    try:
        with open(path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, start=1):
                yield line_number, line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as e:
        raise FilterFileError(
            f"Error reading {path.name} at line {line_number}: {e}",
            context=create_error_context("read_list_file", file_path=str(path), line_number=line_number),
            original_exception=e
        ) from e


def _starts_with(line: str, prefix: str) -> bool:
    return line[:len(prefix)].lower() == prefix.lower()


def _read_name_filter_file(
    path: Path,
    mode: ListFileMode
) -> Tuple[List[str], List[str], Set[int]]:
    names: List[str] = []
    expressions: List[str] = []
    taxonomy_ids: Set[int] = set()

    for line_number, line in _read_lines(path):
        if not line.strip():
            continue

        if _starts_with(line, REGEX_PREFIX):
            expression = line[len(REGEX_PREFIX):]
            if not expression.strip():
                logger.warning("Empty RegEx filter defined on line %d", line_number)
                continue
            try:
                re.compile(expression, re.IGNORECASE)
            except re.error as e:
                raise FilterFileError(
                    f"Invalid regular expression on line {line_number} of {path.name}: {expression}",
                    context=create_error_context("read_list_file", file_path=str(path), line_number=line_number),
                    original_exception=e
                ) from e
            expressions.append(expression)

        elif mode != ListFileMode.PROTEIN_NAME and _starts_with(line, TAXONOMY_PREFIX):
            value = line[len(TAXONOMY_PREFIX):]
            if not value.strip():
                logger.warning("Empty TaxId defined on line %d", line_number)
                continue
            taxonomy_id = parse_int32(value)
            if taxonomy_id is None:
                logger.warning("TaxId defined on line %d is not an integer: %s", line_number, value)
            else:
                taxonomy_ids.add(taxonomy_id)

        else:
            names.append(line)

    return names, expressions, taxonomy_ids


def build_from_list_file(
    path: Union[str, Path],
    mode: ListFileMode,
    search_descriptions: bool = False
) -> Union[ByOrganismNames, ByProteinNames, ByTaxonomyIds]:
    """
    Load names, regular expressions, and taxonomy IDs from a list file.

    Args:
        path: List file path
        mode: Organism, protein, or taxonomy list
        search_descriptions: Protein mode only; also match protein descriptions

    Returns:
        ByOrganismNames, ByProteinNames, or ByTaxonomyIds depending on mode.
        The result may be empty; callers decide whether that is an error.

    Raises:
        FilterFileError: if the file is missing, unreadable, or has an invalid RegEx: line
    """
    path = Path(path)
    logger.info("Loading the %s filters from %s", mode.value, path.name)

    names, expressions, taxonomy_ids = _read_name_filter_file(path, mode)
    criteria = NameCriteria.build(exact_names=names, regex_expressions=expressions)
    entity = "protein" if mode == ListFileMode.PROTEIN_NAME else "organism"

    if mode == ListFileMode.TAXONOMY_ID:
        if not criteria.is_empty:
            logger.warning("Ignoring %d name filter%s in taxonomy ID list %s",
                           len(names) + len(expressions), _pluralize(len(names) + len(expressions)), path.name)
        specification = ByTaxonomyIds(taxonomy_ids=frozenset(taxonomy_ids))
    elif mode == ListFileMode.PROTEIN_NAME:
        specification = ByProteinNames(criteria=criteria, search_descriptions=search_descriptions)
    else:
        specification = ByOrganismNames(criteria=criteria, taxonomy_ids=frozenset(taxonomy_ids))

    if mode != ListFileMode.TAXONOMY_ID:
        if criteria.exact_names:
            count = len(criteria.exact_names)
            logger.info("Read %s %s name%s from %s", f"{count:,}", entity, _pluralize(count), path.name)
        if criteria.regexes:
            count = len(criteria.regexes)
            logger.info("Read %s %s name RegEx filter%s from %s", f"{count:,}", entity, _pluralize(count), path.name)
    if taxonomy_ids:
        count = len(taxonomy_ids)
        logger.info("Read %s taxonomy ID value%s from %s", f"{count:,}", _pluralize(count), path.name)

    return specification


def build_from_taxonomy_list_file(path: Union[str, Path]) -> ByTaxonomyIds:
    """
    Load taxonomy IDs from a file with one integer per line.

    A non-integer first line is accepted silently as a header row; non-integer
    lines after that are reported as warnings and skipped.

    Raises:
        FilterFileError: if the file is missing or unreadable
    """
    path = Path(path)
    logger.info("Loading taxonomy IDs from %s", path.name)

    taxonomy_ids: Set[int] = set()
    for line_number, line in _read_lines(path):
        if not line.strip():
            continue
        taxonomy_id = parse_int32(line)
        if taxonomy_id is not None:
            taxonomy_ids.add(taxonomy_id)
        elif line_number > 1:
            logger.warning("Line %d is not an integer: %s", line_number, line)

    if taxonomy_ids:
        count = len(taxonomy_ids)
        logger.info("Read %s taxonomy ID value%s from %s", f"{count:,}", _pluralize(count), path.name)

    return ByTaxonomyIds(taxonomy_ids=frozenset(taxonomy_ids))
