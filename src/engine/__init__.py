"""Smart replacement engine: parser, transformer, field resolver, scorer and compliance gate."""

from .command_parser import parse_command
from .compliance import (
    ComplianceValidator,
    KeywordComplianceValidator,
    check_compliance,
    validate_compliance,
)
from .confidence import score_confidence
from .deep_replace import deep_replace
from .entity_patterns import DEFAULT_PATTERNS, EntityPatternSet
from .field_updates import ALIAS_GROUPS, apply_field_updates, apply_field_updates_detailed, resolve_field_key

__all__ = [
    "parse_command",
    "ComplianceValidator",
    "KeywordComplianceValidator",
    "check_compliance",
    "validate_compliance",
    "score_confidence",
    "deep_replace",
    "DEFAULT_PATTERNS",
    "EntityPatternSet",
    "ALIAS_GROUPS",
    "apply_field_updates",
    "apply_field_updates_detailed",
    "resolve_field_key",
]
