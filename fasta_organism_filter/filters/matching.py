"""
Match engine: test candidate text or taxonomy IDs against filter criteria.
"""

from dataclasses import dataclass
from typing import AbstractSet, Optional

from .specification import NameCriteria, normalize_name


@dataclass(frozen=True)
class MatchOutcome:
    """Result of testing one candidate against NameCriteria."""
    matched: bool
    matched_text: str = ""
    pattern: Optional[str] = None
    match_start: int = 0

    @property
    def is_regex_match(self) -> bool:
        return self.pattern is not None

    def __bool__(self) -> bool:
        return self.matched


NO_MATCH = MatchOutcome(matched=False)


def is_exact_or_regex_match(candidate: str, criteria: NameCriteria) -> MatchOutcome:
    """
    Test candidate text against exact names first, then each regex in order.

    Exact comparison is case-insensitive and covers the whole candidate. Regexes
    match anywhere in the candidate; the first one that matches wins and the
    outcome carries the matched substring and the originating expression.

    Callers should not pass empty candidates.
    """
    if normalize_name(candidate) in criteria.exact_names:
        return MatchOutcome(matched=True, matched_text=candidate)

    for expression, pattern in criteria.regexes:
        match = pattern.search(candidate)
        if match:
            return MatchOutcome(
                matched=True,
                matched_text=match.group(0),
                pattern=expression,
                match_start=match.start()
            )

    return NO_MATCH


def is_taxonomy_match(taxonomy_id: int, taxonomy_ids: AbstractSet[int]) -> bool:
    """Set membership; 0 means no OX= tag and never matches."""
    return taxonomy_id != 0 and taxonomy_id in taxonomy_ids
