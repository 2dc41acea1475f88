"""
Keyword admission filter.

Decides whether a posting is kept before reconciliation. Three keyword lists
are evaluated against the lower-cased `title + url + note` text:

1. Role keywords: at least one must match as a whole word, so "java" matches
   "Java SE Developer" but not "JavaScript Developer". Empty list = no filter.
2. Include keywords: at least one must appear as a substring. Empty list falls
   back to DEFAULT_INCLUDE_KEYWORDS (remote-work terms).
3. Exclude keywords: any substring hit rejects the posting, whatever tiers 1
   and 2 said.

Tiers 1 and 2 are combined with AND by default; `combination: any` switches
to OR. Exclusion always wins.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from atscrawler.source_extractor.base import Posting

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE_KEYWORDS = (
    "remote",
    "wfh",
    "work from home",
    "anywhere",
    "latam",
    "brazil",
)

COMBINE_ALL = "all"
COMBINE_ANY = "any"
VALID_COMBINATIONS = {COMBINE_ALL, COMBINE_ANY}


def _clean_keywords(keywords: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Trim, lower-case and drop blank keywords."""
    if not keywords:
        return ()
    if isinstance(keywords, str):
        keywords = [keywords]
    return tuple(k.strip().lower() for k in keywords if k and str(k).strip())


@dataclass(frozen=True)
class FilterPolicy:
    """Immutable keyword policy read once per run."""

    role_keywords: tuple[str, ...] = ()
    include_keywords: tuple[str, ...] = ()
    exclude_keywords: tuple[str, ...] = ()
    combination: str = COMBINE_ALL
    _role_patterns: tuple[re.Pattern, ...] = field(
        default=(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "role_keywords", _clean_keywords(self.role_keywords))
        object.__setattr__(self, "include_keywords", _clean_keywords(self.include_keywords))
        object.__setattr__(self, "exclude_keywords", _clean_keywords(self.exclude_keywords))

        combination = (self.combination or COMBINE_ALL).strip().lower()
        if combination not in VALID_COMBINATIONS:
            raise ValueError(
                f"combination must be one of {sorted(VALID_COMBINATIONS)}, got '{self.combination}'"
            )
        object.__setattr__(self, "combination", combination)
        object.__setattr__(
            self,
            "_role_patterns",
            tuple(word_pattern(k) for k in self.role_keywords),
        )

    @property
    def effective_include_keywords(self) -> tuple[str, ...]:
        return self.include_keywords or DEFAULT_INCLUDE_KEYWORDS


def word_pattern(keyword: str) -> re.Pattern:
    """
    Compile a whole-word pattern for a keyword.

    A keyword matches only when it is not glued to another letter, digit or
    underscore on either side. Lookarounds are used instead of `\\b` so
    keywords ending in symbols ("c++", "c#") still match.
    """
    return re.compile(r"(?<![a-z0-9_])" + re.escape(keyword.lower()) + r"(?![a-z0-9_])")


class AdmissionFilter:
    """
    Applies a FilterPolicy to postings.

    Example:
        >>> policy = FilterPolicy(role_keywords=("java",), exclude_keywords=("javascript",))
        >>> AdmissionFilter(policy).matches(Posting("Lever", "acme", "Java Backend", "https://a.co/1", "Remote"))
        True
    """

    def __init__(self, policy: FilterPolicy):
        self.policy = policy

    def role_matches(self, text: str) -> bool:
        if not self.policy.role_keywords:
            return True
        return any(p.search(text) for p in self.policy._role_patterns)

    def include_matches(self, text: str) -> bool:
        return any(k in text for k in self.policy.effective_include_keywords)

    def exclude_matches(self, text: str) -> bool:
        return any(k in text for k in self.policy.exclude_keywords)

    def matches(self, posting: Posting) -> bool:
        """Return True if the posting is admitted."""
        text = posting.search_text()

        if self.exclude_matches(text):
            return False

        role_ok = self.role_matches(text)
        include_ok = self.include_matches(text)
        if self.policy.combination == COMBINE_ANY:
            return role_ok or include_ok
        return role_ok and include_ok

    def filter(self, postings: Iterable[Posting]) -> list[Posting]:
        """Return the admitted postings, logging how many were rejected."""
        postings = list(postings)
        admitted = [p for p in postings if self.matches(p)]

        logger.info(
            "Filtered: %d postings passed, %d rejected",
            len(admitted),
            len(postings) - len(admitted),
            extra={
                "admitted": len(admitted),
                "rejected": len(postings) - len(admitted),
                "role_keywords": list(self.policy.role_keywords),
                "include_keywords": list(self.policy.include_keywords),
                "exclude_keywords": list(self.policy.exclude_keywords),
                "combination": self.policy.combination,
            },
        )
        return admitted
