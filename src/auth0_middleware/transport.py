"""HTTP transport capability consumed by the token source and the client."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Sends requests and releases the resources held by their responses."""

    def send(self, request: httpx.Request) -> httpx.Response: ...

    def dispose(self, response: httpx.Response) -> None: ...


class HttpxTransport:
    """Transport backed by an httpx.Client.

    Responses are streamed, so the body is only read when the caller asks for
    it and ``dispose`` releases the underlying connection.
    """

    def __init__(self, http: httpx.Client | None = None, timeout: float = 30.0) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=timeout)

    def send(self, request: httpx.Request) -> httpx.Response:
        logger.debug(f"{request.method} {request.url}")
        return self._http.send(request, stream=True)

    def dispose(self, response: httpx.Response) -> None:
        response.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_http:
            self._http.close()
