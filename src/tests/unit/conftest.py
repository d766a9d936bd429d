"""
Unit Test Firewall - blocks real network IO for unit tests.

Applies to all tests in src/tests/unit/ and subdirectories. Tests that need an
HTTP response patch the source library (`requests.post`, an injected
`requests.Session`) themselves; anything that slips through fails loudly.
"""

import pytest


class NetworkBlocked(RuntimeError):
    pass


def _blocked(*args, **kwargs):
    raise NetworkBlocked(f"Network access is disabled in unit tests: {args[:2]}")


@pytest.fixture(autouse=True)
def network_firewall(monkeypatch):
    """Patch the source library so no unit test can reach a real server."""
    monkeypatch.setattr("requests.Session.request", _blocked)
    monkeypatch.setattr("requests.post", _blocked)
    monkeypatch.setattr("requests.get", _blocked)


@pytest.fixture(autouse=True)
def quiet_env(monkeypatch):
    """Keep tests independent of the developer's shell configuration."""
    for name in ("PROTECTED_FIELDS", "CORS_ALLOWED_ORIGINS", "DEBUG_PROMPTS", "LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
