"""Deterministic confidence scoring for AI-suggested replacements."""

import re
from typing import Optional

BASE_SCORE = 50
SHORT_SUGGESTION_SCORE = 25
MIN_SCORE = 15
MAX_SCORE = 95

_LEADING_CAPITAL = re.compile(r"[A-Z]")
_PROPER_NOUN = re.compile(r"[A-Z][a-z]+")


def _starts_capitalized(text: str) -> bool:
    return _LEADING_CAPITAL.match(text) is not None


def _context_overlap(suggestion: str, context: str) -> int:
    context_words = set(context.lower().split())
    return sum(1 for word in suggestion.lower().split() if word in context_words)


def score_confidence(suggestion: Optional[str], context: Optional[str], find_text: Optional[str]) -> int:
    """
    Score how trustworthy a suggested replacement for find_text looks, 15..95.

    Suggestions shorter than two characters short-circuit to 25.
    """
    if not suggestion or len(suggestion) < 2:
        return SHORT_SUGGESTION_SCORE

    find_text = find_text or ""
    score = BASE_SCORE

    if suggestion.lower() != find_text.lower():
        score += 15
    if context and suggestion.lower() in context.lower():
        score += 20
    # single-space split on purpose: doubled spaces count as extra words
    if len(suggestion.split(" ")) == len(find_text.split(" ")):
        score += 10
    if _starts_capitalized(suggestion) == _starts_capitalized(find_text):
        score += 5
    if _PROPER_NOUN.match(suggestion):
        score += 5
    if len(find_text) * 0.5 <= len(suggestion) <= len(find_text) * 2:
        score += 5
    if len(suggestion) == 1:
        score -= 30
    if context:
        score += 3 * _context_overlap(suggestion, context)

    return min(max(score, MIN_SCORE), MAX_SCORE)
