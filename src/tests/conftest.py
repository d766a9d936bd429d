"""
Pytest configuration and shared fixtures for the smart replacement tests.
"""

import json
from pathlib import Path
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from src.orchestrator.replacement import ReplacementOrchestrator
from src.orchestrator.session import SessionManager
from src.orchestrator.storage.contentstack import ContentRepository
from src.shared.brand_config import BrandProfileStore
from src.shared.llm_client import SuggestionProvider
from src.shared.schema import BrandStyleProfile


@pytest.fixture
def sample_entry() -> Dict[str, Any]:
    """A small article entry with protected metadata and nested content."""
    return {
        "uid": "e1",
        "_version": 3,
        "created_by": "blt-author",
        "locale": "en-us",
        "title": "Report by John Smith",
        "body": "Contact John Smith at john@x.com",
        "sections": [
            {"heading": "About John Smith", "links": ['<a href="/team/john-smith">John Smith</a>']},
            {"heading": "Numbers", "values": [1, 2.5, True, None]},
        ],
    }


@pytest.fixture
def formal_profile() -> BrandStyleProfile:
    """Formal, neutral brand: politeness counts, exclamations do not."""
    return BrandStyleProfile(formality_level=4, tone=2, humor_level=1, complexity_level=3)


@pytest.fixture
def brandkit_file(tmp_path: Path) -> Path:
    """Brand kit in the CMS export shape (JSON list, first item active)."""
    path = tmp_path / "brandkit.json"
    path.write_text(
        json.dumps(
            [
                {
                    "title": "Default",
                    "communication_style": {
                        "formality_level": 4,
                        "tone": 2,
                        "humor_level": 1,
                        "complexity_level": 3,
                    },
                }
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def mock_repository(sample_entry) -> Mock:
    """ContentRepository double returning a fresh copy of sample_entry."""
    repo = Mock(spec=ContentRepository)
    repo.login.return_value = "token-123"
    repo.fetch.side_effect = lambda uid, session: json.loads(json.dumps(sample_entry))
    repo.list_entries.return_value = [sample_entry]
    return repo


@pytest.fixture
def mock_provider() -> Mock:
    provider = Mock(spec=SuggestionProvider)
    provider.generate.return_value = "Globex"
    return provider


@pytest.fixture
def mock_profiles(formal_profile) -> Mock:
    profiles = Mock(spec=BrandProfileStore)
    profiles.load.return_value = formal_profile
    profiles.load_markers.return_value = {}
    profiles.load_with_markers.return_value = (formal_profile, {})
    return profiles


@pytest.fixture
def orchestrator(mock_repository, mock_provider, mock_profiles) -> ReplacementOrchestrator:
    return ReplacementOrchestrator(
        repository=mock_repository,
        suggestions=mock_provider,
        profiles=mock_profiles,
        sessions=SessionManager(mock_repository.login),
        environment="production",
    )
