"""
LLM client for replacement suggestions.

Calls an OpenAI-compatible chat completions endpoint (Gemini by default) with
optional debug logging when DEBUG_PROMPTS=true.
"""

import json
import time
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

import requests

from .logger import get_logger
from .config import (
    TIMEOUT_MATRIX,
    SUGGESTION_API_KEY,
    SUGGESTION_MODEL_NAME,
    debug_prompts_enabled,
    get_suggestion_url,
)
from .errors import UpstreamError

logger = get_logger("llm_client", __name__)

# Sensitive keys to redact from debug logs
SENSITIVE_KEYS = {
    "api_key",
    "authorization",
    "password",
    "token",
    "secret",
    "credentials",
}

SUGGESTION_PROMPT = """You are an expert content editor helping with smart text replacement.

Content context: "{context}"

Task: Replace the phrase "{find_text}" with a contextually appropriate alternative.

Guidelines:
- Understand the MEANING and category of the original text
- For AI models: "Gemini 2.5 Pro" -> "Claude Sonnet" (NOT "Claude 2.5 Pro")
- For products: Replace with equivalent products from different companies
- For companies: Replace with comparable companies in the same industry
- For people: Replace with appropriate alternative names
- Maintain the same tone and context as the original

Examples of CORRECT replacements:
- "Gemini 2.5 Pro" -> "Claude Sonnet"
- "OpenAI GPT-4" -> "Anthropic Claude"
- "Google Cloud Platform" -> "Microsoft Azure"
- "ChatGPT" -> "Claude"
- "Microsoft" -> "Apple"
- "Amazon Web Services" -> "Google Cloud Platform"

Important: Return ONLY the replacement text, nothing else. No explanations, no quotes, just the replacement."""


def build_suggestion_prompt(find_text: str, context: Optional[str]) -> str:
    """Render the replacement prompt for one phrase and its surrounding content."""
    return SUGGESTION_PROMPT.format(context=context or "", find_text=find_text)


def _redact_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of data with sensitive values replaced by "[REDACTED]"."""
    redacted = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            redacted[key] = "[REDACTED]"
        elif isinstance(value, dict):
            redacted[key] = _redact_sensitive(value)
        elif isinstance(value, list):
            redacted[key] = [
                _redact_sensitive(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            redacted[key] = value
    return redacted


def _write_debug_log(
    url: str,
    request_data: Dict[str, Any],
    response_data: Optional[Dict[str, Any]] = None,
) -> None:
    """Write request/response to logs/debug/req_{timestamp}_{uuid}.json when DEBUG_PROMPTS is on."""
    if not debug_prompts_enabled():
        return

    debug_dir = Path("logs/debug")
    debug_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = debug_dir / f"req_{timestamp}_{str(uuid.uuid4())[:8]}.json"

    log_entry: Dict[str, Any] = {
        "url": url,
        "request": _redact_sensitive(request_data),
        "timestamp": datetime.now().isoformat(),
    }
    if response_data:
        log_entry["response"] = response_data

    try:
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(log_entry, f, indent=2, ensure_ascii=False)
        logger.debug(f"Debug log written: {filename}")
    except OSError as e:
        logger.warning(f"Failed to write debug log: {e}")


def call_model(
    url: str,
    payload: Dict[str, Any],
    timeout: int = 30,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Call an LLM model via HTTP POST request.

    Args:
        url: Full URL to the chat completions endpoint.
        payload: JSON request payload.
        timeout: Request timeout in seconds.
        headers: Optional custom headers (redacted before debug logging).

    Returns:
        Response JSON as dictionary.

    Raises:
        UpstreamError: If the HTTP request fails or the body is not JSON.
    """
    request_data: Dict[str, Any] = {"url": url, "payload": payload}
    if headers:
        request_data["headers"] = _redact_sensitive(headers)
    _write_debug_log(url, request_data)

    start = time.monotonic()
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
        response_data = response.json()
    except requests.exceptions.RequestException as e:
        error_data = None
        if e.response is not None:
            error_data = {"error": e.response.text, "status_code": e.response.status_code}
            _write_debug_log(url, request_data, error_data)
        logger.error(
            f"LLM request failed: {url}",
            extra={"payload": {"error": str(e), "url": url}},
        )
        status = e.response.status_code if e.response is not None else None
        raise UpstreamError(f"LLM request failed: {e}", status_code=status) from e
    except ValueError as e:
        raise UpstreamError(f"LLM response is not valid JSON: {e}") from e

    duration_ms = (time.monotonic() - start) * 1000
    _write_debug_log(url, request_data, response_data)
    logger.info(
        "LLM call completed",
        extra={"payload": {"model": payload.get("model"), "duration_ms": round(duration_ms, 1)}},
    )
    return response_data


def extract_message_text(response_data: Dict[str, Any]) -> Optional[str]:
    """Pull the first choice's message content out of a chat completion."""
    try:
        content = response_data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str):
        return None
    return content


def clean_suggestion(text: Optional[str]) -> Optional[str]:
    """Strip whitespace and one layer of wrapping quotes the model sometimes adds."""
    if text is None:
        return None
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"', "`"):
        cleaned = cleaned[1:-1].strip()
    return cleaned or None


class SuggestionProvider(ABC):
    """Produces replacement text from a prompt. None means no usable suggestion."""

    @abstractmethod
    def generate(self, prompt: str) -> Optional[str]:
        """Return generated text, or None when nothing usable came back."""


class ChatSuggestionProvider(SuggestionProvider):
    """SuggestionProvider backed by an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: str = SUGGESTION_MODEL_NAME,
        api_key: Optional[str] = SUGGESTION_API_KEY,
        timeout: int = TIMEOUT_MATRIX["SUGGESTION_CALL"],
    ) -> None:
        self.base_url = (base_url or get_suggestion_url()).rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    def generate(self, prompt: str) -> Optional[str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.4,
        }
        data = call_model(
            f"{self.base_url}/chat/completions",
            payload,
            timeout=self.timeout,
            headers=headers,
        )
        return clean_suggestion(extract_message_text(data))
