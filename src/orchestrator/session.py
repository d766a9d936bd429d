"""
Shared content API session with single-flight refresh.

One SessionManager is shared by every request. When the credential is missing
or stale, the first caller performs the login and every concurrent caller
waits on the same in-flight future instead of logging in again.
"""

import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Tuple

from ..shared.logger import get_logger
from ..shared.utils import get_utc_now

logger = get_logger("replacer", __name__)


@dataclass(frozen=True)
class Session:
    """Credential handed explicitly to every content repository call."""

    authtoken: str
    obtained_at: datetime = field(default_factory=get_utc_now)

    def __repr__(self) -> str:
        return f"Session(authtoken='***', obtained_at={self.obtained_at.isoformat()})"


class SessionManager:
    """Caches a Session and refreshes it behind a single in-flight login."""

    def __init__(self, login: Callable[[], str]) -> None:
        self._login = login
        self._lock = threading.Lock()
        self._session: Optional[Session] = None
        self._inflight: Optional["Future[Session]"] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def _claim(self, reuse_cached: bool) -> Tuple[Optional[Session], Optional["Future[Session]"], bool]:
        # Under the lock: return the cached session, join the in-flight
        # login, or become the leader of a new one.
        with self._lock:
            if reuse_cached and self._session is not None:
                return self._session, None, False
            if self._inflight is not None:
                return None, self._inflight, False
            self._inflight = Future()
            return None, self._inflight, True

    def _lead(self, future: "Future[Session]") -> Session:
        try:
            token = self._login()
            if not token:
                raise ValueError("Login returned an empty authtoken")
            session = Session(authtoken=token)
        except BaseException as exc:
            logger.warning("Content API login failed", extra={"payload": {"error": str(exc)}})
            with self._lock:
                self._inflight = None
            future.set_exception(exc)
            raise

        with self._lock:
            self._session = session
            self._inflight = None
        future.set_result(session)
        logger.info("Content API session refreshed")
        return session

    def _obtain(self, reuse_cached: bool) -> Session:
        cached, future, leader = self._claim(reuse_cached)
        if cached is not None:
            return cached
        if leader:
            return self._lead(future)
        return future.result()

    def current(self) -> Session:
        """Return the cached session, logging in first if there is none."""
        return self._obtain(reuse_cached=True)

    def refresh(self) -> Session:
        """Force a new login; joins a login already in flight.

        Raises whatever the login callable raised, in every waiting caller.
        """
        return self._obtain(reuse_cached=False)

    def invalidate(self, session: Optional[Session] = None) -> None:
        """Drop the cached session (only if it is still the one given)."""
        with self._lock:
            if session is None or self._session is session:
                self._session = None
