"""
Shared configuration for the smart replacement service.

Centralizes collaborator URLs, credentials and engine policy using environment
variables. All modules should use these constants instead of hardcoded values.
"""

import os
from pathlib import Path
from typing import List, Optional

BASE_DIR = Path(__file__).resolve().parents[2]
DEPLOY_DIR = BASE_DIR / "deploy"

# ============================================
# Content Repository (Contentstack Management API)
# ============================================

CONTENTSTACK_BASE_URL: str = (
    os.getenv("CONTENTSTACK_BASE_URL") or os.getenv("BASE_URL") or "https://api.contentstack.io/v3"
).strip()
CONTENTSTACK_API_KEY: str = os.getenv("CONTENTSTACK_API_KEY", "").strip()
CONTENTSTACK_ENVIRONMENT: str = os.getenv("CONTENTSTACK_ENVIRONMENT", "development").strip()
CONTENTSTACK_CONTENT_TYPE: str = os.getenv("CONTENTSTACK_CONTENT_TYPE", "article").strip()
CONTENTSTACK_USER_EMAIL: Optional[str] = os.getenv("CONTENTSTACK_USER_EMAIL")
CONTENTSTACK_USER_PASSWORD: Optional[str] = os.getenv("CONTENTSTACK_USER_PASSWORD")

# Locale used for publishing when an entry does not carry one
DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "en-us")

# ============================================
# Suggestion Provider (OpenAI-compatible chat completions)
# ============================================

# Gemini exposes an OpenAI-compatible endpoint; any compatible server works.
SUGGESTION_API_URL: str = os.getenv(
    "SUGGESTION_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/openai",
)
SUGGESTION_API_KEY: Optional[str] = os.getenv("SUGGESTION_API_KEY") or os.getenv("GEMINI_API_KEY")
SUGGESTION_MODEL_NAME: str = os.getenv("SUGGESTION_MODEL_NAME", "gemini-2.0-flash")

# ============================================
# Brand Kit
# ============================================

BRANDKIT_PATH: Path = Path(os.getenv("BRANDKIT_PATH", str(DEPLOY_DIR / "brandkit.yaml")))

# ============================================
# Engine Policy
# ============================================

# Identity/version/audit keys that content rewrites must never touch (exact match)
DEFAULT_PROTECTED_FIELDS = (
    "uid",
    "created_at",
    "_version",
    "created_by",
    "updated_at",
    "updated_by",
)

# ============================================
# Timeout Matrix (seconds)
# ============================================
TIMEOUT_MATRIX = {
    "CONTENT_API": int(os.getenv("TIMEOUT_CONTENT_API", "15")),
    "SUGGESTION_CALL": int(os.getenv("TIMEOUT_SUGGESTION_CALL", "30")),
}

# ============================================
# HTTP Server
# ============================================
PORT: int = int(os.getenv("PORT", "5000"))

# ============================================
# Environment Variable Names (for reference)
# ============================================
# CONTENTSTACK_BASE_URL=https://eu-api.contentstack.com/v3
# CONTENTSTACK_API_KEY=blt...
# CONTENTSTACK_ENVIRONMENT=development
# CONTENTSTACK_USER_EMAIL=editor@example.com
# CONTENTSTACK_USER_PASSWORD=...
# GEMINI_API_KEY=...
# PROTECTED_FIELDS=uid,created_at,_version,created_by,updated_at,updated_by
# CORS_ALLOWED_ORIGINS=http://localhost:3000

# ============================================
# Helper Functions
# ============================================


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def get_protected_fields() -> frozenset:
    """Protected metadata keys, overridable with PROTECTED_FIELDS (comma-separated)."""
    override = _split_csv(os.getenv("PROTECTED_FIELDS"))
    return frozenset(override or DEFAULT_PROTECTED_FIELDS)


def get_cors_origins() -> List[str]:
    """Origins allowed to call the HTTP API from a browser."""
    return _split_csv(os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000"))


def get_content_api_url() -> str:
    """Get the content repository base URL without a trailing slash."""
    return CONTENTSTACK_BASE_URL.rstrip("/")


def get_suggestion_url() -> str:
    """Get the chat completions base URL without a trailing slash."""
    return SUGGESTION_API_URL.rstrip("/")


def debug_prompts_enabled() -> bool:
    """Whether LLM request/response pairs are dumped to logs/debug."""
    return os.getenv("DEBUG_PROMPTS", "false").lower() in ("true", "1", "yes")
