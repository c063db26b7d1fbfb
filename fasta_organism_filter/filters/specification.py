"""
Filter specifications: the selection criteria for one filtering run.

A specification is exactly one of five frozen dataclasses; ``FilterSpecification``
is their union. Regular expressions are compiled when the specification is built
and reused for every protein entry.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Pattern, Tuple, Union


def normalize_name(name: str) -> str:
    """Case-insensitive key used for exact name comparisons."""
    return name.casefold()


def compile_filter_regex(expression: str) -> Pattern:
    """Compile a user-supplied filter expression (case-insensitive)."""
    return re.compile(expression, re.IGNORECASE)


@dataclass(frozen=True)
class NameCriteria:
    """
    Exact names and regular expressions to match text against.

    Exact names are stored case-folded. Regexes keep insertion order as
    ``(expression, compiled pattern)`` pairs; duplicates collapse.
    """
    exact_names: FrozenSet[str] = frozenset()
    regexes: Tuple[Tuple[str, Pattern], ...] = ()

    @classmethod
    def build(cls, exact_names: Iterable[str] = (), regex_expressions: Iterable[str] = ()) -> "NameCriteria":
        """Create criteria, compiling each distinct expression once."""
        compiled: Dict[str, Pattern] = {}
        for expression in regex_expressions:
            if expression not in compiled:
                compiled[expression] = compile_filter_regex(expression)
        return cls(
            exact_names=frozenset(normalize_name(name) for name in exact_names),
            regexes=tuple(compiled.items())
        )

    @property
    def is_empty(self) -> bool:
        return not self.exact_names and not self.regexes

    @property
    def regex_expressions(self) -> Tuple[str, ...]:
        return tuple(expression for expression, _ in self.regexes)


@dataclass(frozen=True)
class NoFilter:
    """Summarize organisms only; nothing is filtered."""

    @property
    def is_empty(self) -> bool:
        return False

    @property
    def description(self) -> str:
        return "organism summary"


@dataclass(frozen=True)
class ByOrganismNames:
    """Organism names, organism regexes, and taxonomy IDs loaded from a list file."""
    criteria: NameCriteria = field(default_factory=NameCriteria)
    taxonomy_ids: FrozenSet[int] = frozenset()

    @property
    def is_empty(self) -> bool:
        return self.criteria.is_empty and not self.taxonomy_ids

    @property
    def description(self) -> str:
        return "organism name"


@dataclass(frozen=True)
class ByOneOrganismName:
    """A single organism name given on the command line."""
    organism_name: str
    criteria: NameCriteria
    output_suffix: str = ""

    @property
    def is_empty(self) -> bool:
        return self.criteria.is_empty

    @property
    def description(self) -> str:
        return "organism name"


@dataclass(frozen=True)
class ByProteinNames:
    """Protein names and protein name regexes loaded from a list file."""
    criteria: NameCriteria = field(default_factory=NameCriteria)
    search_descriptions: bool = False

    @property
    def is_empty(self) -> bool:
        return self.criteria.is_empty

    @property
    def description(self) -> str:
        return "protein name"


@dataclass(frozen=True)
class ByTaxonomyIds:
    """Taxonomy IDs loaded from a list file."""
    taxonomy_ids: FrozenSet[int] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.taxonomy_ids

    @property
    def description(self) -> str:
        return "taxonomy ID"


FilterSpecification = Union[NoFilter, ByOrganismNames, ByOneOrganismName, ByProteinNames, ByTaxonomyIds]


def output_suffix_of(specification: FilterSpecification) -> Optional[str]:
    """Output file suffix requested by the specification, if any."""
    if isinstance(specification, ByOneOrganismName) and specification.output_suffix:
        return specification.output_suffix
    return None
