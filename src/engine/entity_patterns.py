"""
Entity pattern set shared by the deep replacement transformer.

These are coarse heuristics for short marketing/article copy, not a named
entity recognizer. Swap in a different EntityPatternSet for stronger matching.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Tuple

COMPANY_SUFFIXES: Tuple[str, ...] = ("Inc", "Corp", "LLC", "Company", "Ltd")


def _suffix_alternation(suffixes: Iterable[str]) -> str:
    return "|".join(re.escape(s) for s in suffixes)


EMAIL_PATTERN = re.compile(r"\b[\w.+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}\b")

# John Smith
PERSON_PATTERN = re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b")

# Alpha Company Inc, Globex Corp
COMPANY_PATTERN = re.compile(
    rf"\b[A-Z][a-z]+(?: [A-Z][a-z]+)* (?:{_suffix_alternation(COMPANY_SUFFIXES)})\b"
)

# <a ... href="...">text</a>; groups: quote, href, text
LINK_PATTERN = re.compile(
    r"""<a\b[^>]*?\bhref=(["'])(.*?)\1[^>]*>(.*?)</a\s*>""",
    flags=re.IGNORECASE | re.DOTALL,
)


@dataclass(frozen=True)
class EntityPatternSet:
    """Matchers for emails, person names, company names and anchor markup."""

    email: re.Pattern = EMAIL_PATTERN
    person: re.Pattern = PERSON_PATTERN
    company: re.Pattern = COMPANY_PATTERN
    link: re.Pattern = LINK_PATTERN

    def entity_patterns(self) -> Tuple[re.Pattern, ...]:
        """Plain-text entity matchers, in the order the transformer applies them."""
        return (self.email, self.person, self.company)


DEFAULT_PATTERNS = EntityPatternSet()
