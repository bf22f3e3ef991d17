"""HTTP client that transparently authenticates requests with a bearer token.

Handles header injection, token invalidation and the single forced-refresh
retry. Failures are returned as ordinary responses, never raised.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from auth0_middleware.auth import TokenSource
from auth0_middleware.config import AuthConfig
from auth0_middleware.models.auth import ErrorBody, TokenStatus
from auth0_middleware.models.errors import AuthError, NotAuthorized, ProviderUnavailable
from auth0_middleware.transport import HttpxTransport, Transport
from auth0_middleware.utils.cache import TokenCache

logger = logging.getLogger(__name__)


# Retries allowed after the first authentication failure
MAX_AUTH_RETRIES = 1

# Protected resources answer 404 instead of 401 so as not to reveal that they
# exist, so both mean the token was not accepted.
UNAUTHORIZED_STATUSES = frozenset({401, 404})

ERROR_STATUSES = {
    NotAuthorized: 401,
    ProviderUnavailable: 408,
}


def error_response(error: AuthError, request: httpx.Request | None = None) -> httpx.Response:
    """Build the in-memory response reported to the caller for ``error``."""
    return httpx.Response(
        status_code=ERROR_STATUSES[type(error)],
        json=ErrorBody(message=error.message).model_dump(),
        request=request,
    )


class AuthenticatingClient:
    """Executes requests with the cached bearer token attached.

    A 401 or 404 response invalidates the token and the request is sent once
    more with a freshly fetched one. If that also fails, or no token can be
    obtained, the caller gets a synthesized 401 (credentials rejected) or 408
    (identity provider unreachable) response.
    """

    def __init__(self, cache: TokenCache, transport: Transport) -> None:
        self._cache = cache
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: AuthConfig,
        transport: Transport | None = None,
        timeout: float = 30.0,
    ) -> AuthenticatingClient:
        """Wire a token source, cache and client around one shared transport."""
        transport = transport or HttpxTransport(timeout=timeout)
        return cls(TokenCache(TokenSource(config, transport)), transport)

    def execute(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` with a bearer token, retrying once on 401/404.

        The response is returned unread; the caller must read or close it.
        """
        result = self._retry_request(request, MAX_AUTH_RETRIES)
        if isinstance(result, AuthError):
            self._cache.invalidate()
            logger.warning(f"{request.method} {request.url} failed: {result.message}")
            return error_response(result, request)
        return result

    def send(self, request: httpx.Request) -> httpx.Response:
        """Transport entry point, so clients can be stacked."""
        return self.execute(request)

    def dispose(self, response: httpx.Response) -> None:
        self._transport.dispose(response)

    def _retry_request(self, request: httpx.Request, retries: int) -> httpx.Response | AuthError:
        # The body may be a one-shot stream; buffer it so the retry can replay it
        try:
            request.read()
        except httpx.StreamError as e:
            return ProviderUnavailable(e)

        while True:
            token = self._cache.get()
            if isinstance(token, AuthError):
                return token

            try:
                response = self._transport.send(self._authorize(request, token))
            except (httpx.TransportError, httpx.StreamError) as e:
                return ProviderUnavailable(e)

            if response.status_code not in UNAUTHORIZED_STATUSES:
                return response

            self._discard(response)
            self._cache.invalidate()
            if retries <= 0:
                return NotAuthorized()
            retries -= 1
            logger.warning(
                f"Got {response.status_code} for {request.method} {request.url}, "
                "refreshing token and retrying..."
            )

    @staticmethod
    def _authorize(request: httpx.Request, token: str) -> httpx.Request:
        """Copy ``request`` with the Authorization header set."""
        headers = request.headers.copy()
        # Framing is recomputed from the buffered body
        headers.pop("Transfer-Encoding", None)
        headers.pop("Content-Length", None)
        headers["Authorization"] = f"Bearer {token}"
        return httpx.Request(
            request.method,
            request.url,
            headers=headers,
            content=request.content,
            extensions=request.extensions,
        )

    def _discard(self, response: httpx.Response) -> None:
        """Release a rejected response's resources."""
        try:
            self._transport.dispose(response)
        except Exception as e:
            logger.warning(f"Failed to dispose of rejected response: {e}")

    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        content: bytes | str | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Build and execute an authenticated request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            url: Absolute URL of the protected resource.
            json: JSON request body.
            content: Raw request body, used when ``json`` is not given.
            params: Query parameters.
            headers: Additional headers to include.

        Returns:
            The final response, possibly synthesized, with its body already
            read and its connection released.
        """
        request = httpx.Request(
            method.upper(), url, json=json, content=content, params=params, headers=headers
        )
        response = self.execute(request)
        try:
            response.read()
        except (httpx.HTTPError, httpx.StreamError) as e:
            response.close()
            return error_response(ProviderUnavailable(e), request)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for GET requests."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for POST requests."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for PUT requests."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for PATCH requests."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for DELETE requests."""
        return self.request("DELETE", url, **kwargs)

    def token_status(self) -> TokenStatus:
        return self._cache.get_status()

    def close(self) -> None:
        """Close the underlying transport, if it can be closed."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> AuthenticatingClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class AuthenticatingTransport(httpx.BaseTransport):
    """Plugs an AuthenticatingClient into an ``httpx.Client`` as its transport."""

    def __init__(self, client: AuthenticatingClient) -> None:
        self._client = client

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        response = self._client.execute(request)
        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=response.stream,
            extensions=response.extensions,
        )

    def close(self) -> None:
        self._client.close()


def authenticated_client(
    config: AuthConfig,
    http: httpx.Client | None = None,
    timeout: float = 30.0,
) -> httpx.Client:
    """Wrap ``http`` so every request it sends carries a bearer token for ``config``.

    The returned client is a plain ``httpx.Client``; callers use it exactly as
    they would the unwrapped one.
    """
    client = AuthenticatingClient.from_config(config, HttpxTransport(http, timeout=timeout))
    return httpx.Client(transport=AuthenticatingTransport(client), timeout=timeout)
