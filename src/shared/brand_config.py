"""
Loader utilities for the brand kit (communication style + compliance markers).

The brand kit is exported from the CMS as JSON; YAML is accepted as well since
yaml.safe_load reads both.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging

import yaml
from pydantic import ValidationError as SchemaValidationError

from . import config
from .errors import UpstreamError
from .schema import BrandStyleProfile

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> Any:
    if not path.exists():
        logger.warning(f"Brand kit missing: {path}")
        return {}
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        logger.warning(f"Brand kit empty: {path}")
        return {}
    return yaml.safe_load(raw) or {}


def _brand_document(data: Any) -> Dict[str, Any]:
    # CMS exports are a list of brand kit entries; the first one is active.
    if isinstance(data, list):
        data = data[0] if data else {}
    return data if isinstance(data, dict) else {}


def load_brandkit(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the active brand kit document."""
    return _brand_document(_load_yaml(path or config.BRANDKIT_PATH))


class BrandProfileStore:
    """Reads the brand style profile from the brand kit file on every load()."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path

    def _document(self) -> Dict[str, Any]:
        return load_brandkit(self.path)

    @staticmethod
    def _profile_from(document: Dict[str, Any]) -> BrandStyleProfile:
        style = document.get("communication_style", document)
        if not isinstance(style, dict):
            raise UpstreamError("Brand kit communication_style must be a mapping")
        try:
            return BrandStyleProfile.model_validate(style)
        except SchemaValidationError as e:
            raise UpstreamError(f"Invalid brand style profile: {e}") from e

    @staticmethod
    def _markers_from(document: Dict[str, Any]) -> Dict[str, List[str]]:
        markers = document.get("markers") or {}
        if not isinstance(markers, dict):
            return {}
        return {
            str(kind): [str(m).strip().lower() for m in words if isinstance(m, str) and m.strip()]
            for kind, words in markers.items()
            if isinstance(words, list)
        }

    def load(self) -> BrandStyleProfile:
        return self._profile_from(self._document())

    def load_markers(self) -> Dict[str, List[str]]:
        """Optional marker overrides: {"politeness": [...], "casual": [...], "levity": [...]}."""
        return self._markers_from(self._document())

    def load_with_markers(self) -> Tuple[BrandStyleProfile, Dict[str, List[str]]]:
        """Profile and marker overrides from a single read of the brand kit."""
        document = self._document()
        return self._profile_from(document), self._markers_from(document)
