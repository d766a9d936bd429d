"""Brand compliance gate: a keyword heuristic scored against the brand style profile."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from ..shared.errors import ComplianceError
from ..shared.schema import BrandStyleProfile, ComplianceVerdict

SHORT_TEXT_MAX_WORDS = 3
ACCEPT_THRESHOLD = 2
LONG_TEXT_MIN_WORDS = 10

DEFAULT_MARKERS: Dict[str, Tuple[str, ...]] = {
    "politeness": ("please", "thank you"),
    "casual": ("hey", "cool"),
    "levity": ("fun", "awesome"),
}

REJECTION_REASON = "Text does not match the brand communication style"


class ComplianceValidator(ABC):
    """Accepts or rejects candidate text against a brand style profile."""

    @abstractmethod
    def validate(self, text: str, profile: BrandStyleProfile) -> ComplianceVerdict:
        """Return a verdict; never raises for rejected text."""


def _contains_any(lowered: str, markers: Iterable[str]) -> bool:
    return any(marker in lowered for marker in markers)


class KeywordComplianceValidator(ComplianceValidator):
    """
    Five one-point checks; accept at two or more.

    Texts of three words or fewer are exempt, so plain token swaps
    ("Acme" -> "Globex") are never blocked on style.
    """

    def __init__(self, markers: Optional[Dict[str, List[str]]] = None) -> None:
        merged = dict(DEFAULT_MARKERS)
        for kind, words in (markers or {}).items():
            if kind in merged and words:
                merged[kind] = tuple(words)
        self.markers = merged

    def score(self, text: str, profile: BrandStyleProfile) -> int:
        lowered = text.lower()
        word_count = len(text.split())
        checks = (
            profile.formality_level > 3 and _contains_any(lowered, self.markers["politeness"]),
            profile.formality_level <= 2 and _contains_any(lowered, self.markers["casual"]),
            profile.tone == 2 and "!" not in lowered and "?" not in lowered,
            profile.humor_level > 3 and _contains_any(lowered, self.markers["levity"]),
            profile.complexity_level > 3 and word_count > LONG_TEXT_MIN_WORDS,
        )
        return sum(1 for passed in checks if passed)

    def validate(self, text: str, profile: BrandStyleProfile) -> ComplianceVerdict:
        text = text or ""
        if len(text.split()) <= SHORT_TEXT_MAX_WORDS:
            return ComplianceVerdict(accepted=True, reason="Short text is exempt from brand style review")
        score = self.score(text, profile)
        if score >= ACCEPT_THRESHOLD:
            return ComplianceVerdict(accepted=True, reason=f"Text matches the brand communication style ({score} checks)")
        return ComplianceVerdict(accepted=False, reason=REJECTION_REASON)


_default_validator = KeywordComplianceValidator()


def validate_compliance(
    text: str,
    profile: BrandStyleProfile,
    validator: Optional[ComplianceValidator] = None,
) -> ComplianceVerdict:
    """Validate text with the given validator (keyword heuristic by default)."""
    return (validator or _default_validator).validate(text, profile)


def check_compliance(
    text: str,
    profile: BrandStyleProfile,
    validator: Optional[ComplianceValidator] = None,
) -> ComplianceVerdict:
    """Fail-fast variant: raise ComplianceError when the text is rejected."""
    verdict = validate_compliance(text, profile, validator)
    if not verdict.accepted:
        raise ComplianceError(verdict.reason)
    return verdict
