"""Thread-safe, single-flight cache for the current access token."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from auth0_middleware.models.auth import TokenStatus
from auth0_middleware.models.errors import AuthError, NotAuthorized

logger = logging.getLogger(__name__)


class TokenFetcher(Protocol):
    def fetch(self) -> str | AuthError: ...


class _Flight:
    """One in-progress fetch; waiters block on ``done``."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.result: str | AuthError = NotAuthorized()


class TokenCache:
    """Holds at most one access token.

    When the token is absent, the first caller of ``get`` fetches a new one and
    every concurrent caller waits for that same fetch instead of issuing its
    own. A fetch that completes after ``invalidate`` still installs its token.
    """

    def __init__(self, source: TokenFetcher) -> None:
        self._source = source
        self._lock = threading.Lock()
        self._token: str | None = None
        self._flight: _Flight | None = None
        self._fetch_count = 0

    def get(self) -> str | AuthError:
        """Return the cached token, fetching one if none is held."""
        with self._lock:
            if self._token is not None:
                logger.debug("Token cache hit")
                return self._token
            flight = self._flight
            leader = flight is None
            if leader:
                flight = self._flight = _Flight()
                self._fetch_count += 1

        if not leader:
            logger.debug("Token fetch in flight, waiting for its result")
            flight.done.wait()
            return flight.result

        logger.info("No cached token, fetching a new one")
        try:
            result = self._source.fetch()
            flight.result = result
        finally:
            with self._lock:
                if not isinstance(flight.result, AuthError):
                    self._token = flight.result
                self._flight = None
            flight.done.set()

        if isinstance(result, AuthError):
            logger.warning(f"Token fetch failed: {result.message}")
        else:
            logger.info("Token fetched")
        return result

    def invalidate(self) -> None:
        """Drop the cached token. Does not cancel a fetch in flight."""
        with self._lock:
            if self._token is not None:
                logger.info("Invalidating cached token")
            self._token = None

    def get_status(self) -> TokenStatus:
        """Get the current cache status."""
        with self._lock:
            return TokenStatus(
                has_token=self._token is not None,
                fetch_in_flight=self._flight is not None,
                fetch_count=self._fetch_count,
            )
