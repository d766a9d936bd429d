"""
Content repository backed by the Contentstack Management API.

Only the calls the replacement flows need: session login, entry list/fetch,
entry update and publish. Every call takes an explicit Session.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import requests

from ...shared.config import (
    CONTENTSTACK_API_KEY,
    CONTENTSTACK_CONTENT_TYPE,
    CONTENTSTACK_ENVIRONMENT,
    CONTENTSTACK_USER_EMAIL,
    CONTENTSTACK_USER_PASSWORD,
    TIMEOUT_MATRIX,
    get_content_api_url,
)
from ...shared.errors import UpstreamError
from ...shared.logger import get_logger
from ..session import Session

logger = get_logger("replacer", __name__)


class ContentRepository(ABC):
    """Where entries are fetched from and persisted to."""

    @abstractmethod
    def login(self) -> str:
        """Return a fresh authtoken."""

    @abstractmethod
    def list_entries(self, session: Session) -> List[Dict[str, Any]]:
        """List entries of the configured content type."""

    @abstractmethod
    def fetch(self, uid: str, session: Session) -> Dict[str, Any]:
        """Fetch one entry by uid."""

    @abstractmethod
    def update(self, uid: str, entry: Dict[str, Any], session: Session) -> None:
        """Persist the full entry."""

    @abstractmethod
    def publish(self, uid: str, environments: Sequence[str], locales: Sequence[str], session: Session) -> None:
        """Publish the entry to the given environments and locales."""


class ContentstackRepository(ContentRepository):
    """ContentRepository over the Contentstack REST API using requests."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: str = CONTENTSTACK_API_KEY,
        environment: str = CONTENTSTACK_ENVIRONMENT,
        content_type: str = CONTENTSTACK_CONTENT_TYPE,
        email: Optional[str] = CONTENTSTACK_USER_EMAIL,
        password: Optional[str] = CONTENTSTACK_USER_PASSWORD,
        timeout: int = TIMEOUT_MATRIX["CONTENT_API"],
        http: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or get_content_api_url()).rstrip("/")
        self.api_key = api_key
        self.environment = environment
        self.content_type = content_type
        self.email = email
        self.password = password
        self.timeout = timeout
        self.http = http or requests.Session()

    def _entries_url(self, uid: Optional[str] = None, suffix: str = "") -> str:
        url = f"{self.base_url}/content_types/{self.content_type}/entries"
        if uid:
            url = f"{url}/{uid}"
        return f"{url}{suffix}"

    def _headers(self, session: Session) -> Dict[str, str]:
        return {
            "api_key": self.api_key,
            "access_token": session.authtoken,
            "Content-Type": "application/json",
        }

    def _request(self, method: str, url: str, session: Optional[Session] = None, **kwargs: Any) -> Dict[str, Any]:
        headers = self._headers(session) if session is not None else {"Content-Type": "application/json"}
        try:
            response = self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}
        except requests.exceptions.RequestException as e:
            status = e.response.status_code if e.response is not None else None
            detail = e.response.text if e.response is not None else str(e)
            logger.error(
                f"Content API {method} failed: {url}",
                extra={"payload": {"status_code": status, "error": detail[:500]}},
            )
            raise UpstreamError(f"Content API {method} {url} failed", status_code=status) from e
        except ValueError as e:
            raise UpstreamError(f"Content API returned invalid JSON for {url}") from e

    def login(self) -> str:
        if not self.email or not self.password:
            raise UpstreamError("CONTENTSTACK_USER_EMAIL and CONTENTSTACK_USER_PASSWORD are required to log in")
        data = self._request(
            "POST",
            f"{self.base_url}/user-session",
            json={"user": {"email": self.email, "password": self.password}},
        )
        token = (data.get("user") or {}).get("authtoken")
        if not token:
            raise UpstreamError("Login response did not include an authtoken")
        logger.info("Logged in to content API")
        return token

    def list_entries(self, session: Session) -> List[Dict[str, Any]]:
        data = self._request("GET", self._entries_url(), session, params={"environment": self.environment})
        return data.get("entries", [])

    def fetch(self, uid: str, session: Session) -> Dict[str, Any]:
        data = self._request("GET", self._entries_url(uid), session, params={"environment": self.environment})
        entry = data.get("entry")
        if not isinstance(entry, dict):
            raise UpstreamError(f"Entry {uid} not found in content API response", status_code=404)
        return entry

    def update(self, uid: str, entry: Dict[str, Any], session: Session) -> None:
        self._request(
            "PUT",
            self._entries_url(uid),
            session,
            params={"environment": self.environment},
            json={"entry": entry},
        )
        logger.info("Entry updated", extra={"payload": {"uid": uid}})

    def publish(self, uid: str, environments: Sequence[str], locales: Sequence[str], session: Session) -> None:
        self._request(
            "POST",
            self._entries_url(uid, "/publish"),
            session,
            params={"environment": self.environment},
            json={"entry": {"environments": list(environments), "locales": list(locales)}},
        )
        logger.info(
            "Entry published",
            extra={"payload": {"uid": uid, "environments": list(environments), "locales": list(locales)}},
        )
