"""Orchestrator module: replacement flows, content session and HTTP layer."""

from typing import TYPE_CHECKING

__all__ = ["ReplacementOrchestrator", "SessionManager", "create_app"]

if TYPE_CHECKING:
    from .replacement import ReplacementOrchestrator
    from .session import SessionManager
    from .server import create_app


def __getattr__(name: str):
    """Lazy import pattern so importing the engine never pulls in Flask."""
    if name == "ReplacementOrchestrator":
        from .replacement import ReplacementOrchestrator
        return ReplacementOrchestrator
    if name == "SessionManager":
        from .session import SessionManager
        return SessionManager
    if name == "create_app":
        from .server import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
