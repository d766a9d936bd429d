"""
HTTP server for the smart replacement service.

Builds the Flask app, wires the orchestrator to the Contentstack repository,
the chat suggestion provider and the brand kit, and serves the replacement
blueprint. Run with `python -m src.orchestrator.server`.
"""

from typing import Optional

from flask import Flask, request

from .api.replace import ORCHESTRATOR_EXTENSION, replace_bp
from .replacement import ReplacementOrchestrator
from .storage.contentstack import ContentstackRepository
from ..shared.brand_config import BrandProfileStore
from ..shared.config import PORT, get_cors_origins
from ..shared.errors import UpstreamError
from ..shared.llm_client import ChatSuggestionProvider
from ..shared.logger import get_logger

logger = get_logger("replacer", __name__)


def build_orchestrator() -> ReplacementOrchestrator:
    """Create an orchestrator from environment configuration."""
    return ReplacementOrchestrator(
        repository=ContentstackRepository(),
        suggestions=ChatSuggestionProvider(),
        profiles=BrandProfileStore(),
    )


def _warm_session(orchestrator: ReplacementOrchestrator) -> None:
    # A failed startup login is retried lazily by the first request.
    try:
        orchestrator.sessions.refresh()
    except UpstreamError as exc:
        logger.warning(
            "Initial login failed, will retry when needed",
            extra={"payload": {"error": str(exc)}},
        )


def create_app(orchestrator: Optional[ReplacementOrchestrator] = None, warm_session: bool = False) -> Flask:
    """Build the Flask app around an orchestrator (built from config when omitted)."""
    app = Flask(__name__)
    if orchestrator is None:
        orchestrator = build_orchestrator()
    if warm_session:
        _warm_session(orchestrator)
    app.extensions[ORCHESTRATOR_EXTENSION] = orchestrator
    app.register_blueprint(replace_bp)

    allowed_origins = set(get_cors_origins())

    @app.after_request
    def _cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
            response.headers["Vary"] = "Origin"
        return response

    return app


if __name__ == "__main__":
    app = create_app(warm_session=True)
    logger.info(f"Server is running on port {PORT}")
    app.run(host="0.0.0.0", port=PORT, threaded=True)
