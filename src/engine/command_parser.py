"""
Natural-language command parser.

Turns instructions such as

    replace "Acme" with "Globex" and set designation to "Manager"

into typed operations. Each pattern is applied to the whole input on its own;
results are grouped by pattern, not by position in the text.
"""

import re
from typing import List, Optional, Union

from ..shared.schema import FieldUpdateOperation, ParsedCommand, ReplaceOperation


REPLACE_PATTERN = re.compile(
    r"""\breplace\s+(["'])(.*?)\1\s+with\s+(["'])(.*?)\3""",
    flags=re.IGNORECASE | re.DOTALL,
)
SET_PATTERN = re.compile(
    r"""\b(?:set|update|change)\s+([\w.-]+)\s+to\s+(["'])(.*?)\2""",
    flags=re.IGNORECASE | re.DOTALL,
)
CONTINUATION_PATTERN = re.compile(
    r"""\band\s+([\w.-]+)\s+to\s+(["'])(.*?)\2""",
    flags=re.IGNORECASE | re.DOTALL,
)

ParsedOperation = Union[ReplaceOperation, FieldUpdateOperation]


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _replace_operations(text: str) -> List[ParsedOperation]:
    operations: List[ParsedOperation] = []
    for match in REPLACE_PATTERN.finditer(text):
        find_text = _clean(match.group(2))
        if not find_text:
            continue
        operations.append(ReplaceOperation(find_text=find_text, replace_text=_clean(match.group(4)) or None))
    return operations


def _field_operations(pattern: re.Pattern, text: str) -> List[ParsedOperation]:
    operations: List[ParsedOperation] = []
    for match in pattern.finditer(text):
        field_name = _clean(match.group(1))
        if not field_name:
            continue
        operations.append(FieldUpdateOperation(field_name=field_name, new_value=_clean(match.group(3)) or None))
    return operations


def parse_command(text: Optional[str]) -> ParsedCommand:
    """Extract edit operations from free text. Never raises; check is_valid."""
    text = text or ""
    operations = (
        _replace_operations(text)
        + _field_operations(SET_PATTERN, text)
        + _field_operations(CONTINUATION_PATTERN, text)
    )
    return ParsedCommand(original_input=text, operations=operations)
