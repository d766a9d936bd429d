"""
Deep, entity-aware find/replace over a content entry.

The entry must be tree-shaped (JSON-like CMS records guarantee this); there is
no cycle guard and no depth limit.
"""

import re
from typing import AbstractSet, Dict, Optional

from ..shared.config import get_protected_fields
from ..shared.errors import ValidationError
from ..shared.schema import Entry
from .entity_patterns import DEFAULT_PATTERNS, EntityPatternSet


def compile_literal(find_text: str) -> re.Pattern:
    """Case-insensitive matcher for find_text taken literally."""
    return re.compile(re.escape(find_text), flags=re.IGNORECASE)


def _splice(match: re.Match, replacements: Dict[int, str]) -> str:
    """Rebuild match.group(0) with the given groups swapped out."""
    whole = match.group(0)
    base = match.start()
    for group in sorted(replacements, key=match.start, reverse=True):
        start, end = match.start(group) - base, match.end(group) - base
        whole = whole[:start] + replacements[group] + whole[end:]
    return whole


def rewrite_entities(
    text: str,
    find_text: str,
    replace_text: str,
    patterns: EntityPatternSet = DEFAULT_PATTERNS,
) -> str:
    """Replace email/person/company matches that equal find_text exactly."""

    def _sub(match: re.Match) -> str:
        return replace_text if match.group(0) == find_text else match.group(0)

    for pattern in patterns.entity_patterns():
        text = pattern.sub(_sub, text)
    return text


def rewrite_links(
    text: str,
    find_text: str,
    replace_text: str,
    patterns: EntityPatternSet = DEFAULT_PATTERNS,
) -> str:
    """
    Rewrite anchors whose href or label equals find_text.

    href match: only the href changes. Label match: the label changes, and the
    href too when it contains find_text (case-insensitive), so URL slugs follow
    a renamed label. Other attributes are kept as written.
    """
    literal = compile_literal(find_text)

    def _sub(match: re.Match) -> str:
        href, label = match.group(2), match.group(3)
        if href == find_text:
            return _splice(match, {2: replace_text})
        if label == find_text:
            new_href = href
            if find_text.lower() in href.lower():
                new_href = literal.sub(lambda _m: replace_text, href)
            return _splice(match, {2: new_href, 3: replace_text})
        return match.group(0)

    return patterns.link.sub(_sub, text)


class _StringRewriter:
    """Applies the literal, entity and hyperlink passes to one string at a time."""

    def __init__(self, find_text: str, replace_text: str, patterns: EntityPatternSet) -> None:
        self.find_text = find_text
        self.replace_text = replace_text
        self.patterns = patterns
        self.literal = compile_literal(find_text)
        # After the literal pass, find_text can only reappear inside inserted
        # replacement text; skip the later passes so a span is rewritten once.
        self.entity_passes = find_text.lower() not in replace_text.lower()

    def __call__(self, text: str) -> str:
        result = self.literal.sub(lambda _m: self.replace_text, text)
        if not self.entity_passes:
            return result
        result = rewrite_entities(result, self.find_text, self.replace_text, self.patterns)
        return rewrite_links(result, self.find_text, self.replace_text, self.patterns)


def _walk(node: Entry, rewrite: _StringRewriter, protected: AbstractSet[str]) -> Entry:
    if isinstance(node, str):
        return rewrite(node)
    if isinstance(node, (list, tuple)):
        return type(node)(_walk(item, rewrite, protected) for item in node)
    if isinstance(node, dict):
        return {
            key: value if key in protected else _walk(value, rewrite, protected)
            for key, value in node.items()
        }
    return node


def deep_replace(
    entry: Entry,
    find_text: str,
    replace_text: str,
    patterns: Optional[EntityPatternSet] = None,
    protected_fields: Optional[AbstractSet[str]] = None,
) -> Entry:
    """
    Return a copy of entry with find_text replaced everywhere outside protected keys.

    Each string goes through, in order: a case-insensitive literal substitution;
    exact-match email/person/company entity substitution; and a hyperlink pass
    that rewrites an anchor's href or label when either equals find_text.
    Protected subtrees are shared with the input, not copied.

    Raises:
        ValidationError: If find_text is empty or replace_text is missing.
    """
    if not find_text or not find_text.strip():
        raise ValidationError("findText is required")
    if replace_text is None:
        raise ValidationError("replaceText is required")

    rewrite = _StringRewriter(find_text, replace_text, patterns or DEFAULT_PATTERNS)
    protected = get_protected_fields() if protected_fields is None else protected_fields
    return _walk(entry, rewrite, protected)
