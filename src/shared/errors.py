"""Error taxonomy for the replacement engine and its collaborators."""

from typing import Optional


class ReplacementError(Exception):
    """Base class for all engine errors."""


class ValidationError(ReplacementError, ValueError):
    """A required input to an operation is missing or empty."""


class ComplianceError(ReplacementError):
    """Replacement text was rejected by the brand compliance gate."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class UpstreamError(ReplacementError, RuntimeError):
    """A collaborator call (content API, suggestion provider) failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
