"""Named-field updates with alias resolution."""

import logging
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Tuple

from ..shared.config import get_protected_fields
from ..shared.errors import ValidationError
from ..shared.schema import Entry

logger = logging.getLogger(__name__)

# Each group is tried in order; the first member already on the entry wins.
ALIAS_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("contact", "email"),
    ("company", "organization"),
    ("title", "heading", "name"),
    ("designation", "role", "position"),
    ("author", "writer"),
    ("description", "summary", "excerpt"),
)


def _alias_target(field_name: str, entry: Mapping[str, Any], protected: AbstractSet[str]) -> Optional[str]:
    lowered = field_name.lower()
    for group in ALIAS_GROUPS:
        if lowered not in group:
            continue
        for member in group:
            if member in entry and member not in protected:
                return member
    return None


def resolve_field_key(
    field_name: str,
    entry: Mapping[str, Any],
    protected: AbstractSet[str] = frozenset(),
) -> str:
    """
    Pick the entry key a requested field name should write to.

    Priority: alias group member present on the entry, exact key, lowercased
    key, then the literal name as a new key. Protected keys are never chosen
    by the first three steps.
    """
    target = _alias_target(field_name, entry, protected)
    if target is not None:
        return target
    if field_name in entry and field_name not in protected:
        return field_name
    lowered = field_name.lower()
    if lowered in entry and lowered not in protected:
        return lowered
    return field_name


def apply_field_updates_detailed(
    entry: Entry,
    updates: Mapping[str, Any],
    protected_fields: Optional[AbstractSet[str]] = None,
) -> Tuple[Dict[str, Any], List[str]]:
    """Like apply_field_updates, also returning the requested names that were dropped."""
    if not isinstance(entry, dict):
        raise ValidationError("Field updates require a mapping entry")
    protected = get_protected_fields() if protected_fields is None else protected_fields

    updated = dict(entry)
    skipped: List[str] = []
    for field_name, new_value in updates.items():
        key = resolve_field_key(field_name, updated, protected)
        if key in protected:
            logger.warning(
                f"Skipping update to protected field '{key}'",
                extra={"payload": {"field": field_name}},
            )
            skipped.append(field_name)
            continue
        updated[key] = new_value
    return updated, skipped


def apply_field_updates(
    entry: Entry,
    updates: Mapping[str, Any],
    protected_fields: Optional[AbstractSet[str]] = None,
) -> Dict[str, Any]:
    """Return a copy of entry with each requested field written to its resolved key.

    Updates whose resolved key is a protected metadata field are dropped.
    """
    return apply_field_updates_detailed(entry, updates, protected_fields)[0]
