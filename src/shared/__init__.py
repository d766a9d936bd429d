"""Shared schemas, configuration and collaborators for the smart replacement service."""

from .schema import (
    BrandStyleProfile,
    ComplianceVerdict,
    FieldUpdateOperation,
    OperationReport,
    ParsedCommand,
    ReplaceOperation,
    SmartReplaceResult,
    Suggestion,
    parse_operations,
)
from .errors import (
    ComplianceError,
    ReplacementError,
    UpstreamError,
    ValidationError,
)
from .config import (
    CONTENTSTACK_BASE_URL,
    CONTENTSTACK_ENVIRONMENT,
    CONTENTSTACK_CONTENT_TYPE,
    DEFAULT_PROTECTED_FIELDS,
    get_protected_fields,
    get_content_api_url,
    get_suggestion_url,
)

__all__ = [
    # Schema exports
    "BrandStyleProfile",
    "ComplianceVerdict",
    "FieldUpdateOperation",
    "OperationReport",
    "ParsedCommand",
    "ReplaceOperation",
    "SmartReplaceResult",
    "Suggestion",
    "parse_operations",
    # Error exports
    "ComplianceError",
    "ReplacementError",
    "UpstreamError",
    "ValidationError",
    # Config exports
    "CONTENTSTACK_BASE_URL",
    "CONTENTSTACK_ENVIRONMENT",
    "CONTENTSTACK_CONTENT_TYPE",
    "DEFAULT_PROTECTED_FIELDS",
    "get_protected_fields",
    "get_content_api_url",
    "get_suggestion_url",
]
