"""Client-credentials token acquisition from an Auth0-style identity provider.

A single fetch is one POST to ``<provider>/oauth/token``. Retrying is left to
the caller.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from auth0_middleware.config import AuthConfig
from auth0_middleware.models.auth import TokenRequest, TokenResponse
from auth0_middleware.models.errors import AuthError, NotAuthorized, ProviderUnavailable
from auth0_middleware.transport import Transport

logger = logging.getLogger(__name__)

# Failures that mean the provider was never reached
CONNECTIVITY_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


class TokenSource:
    """Fetches fresh access tokens from the identity provider."""

    def __init__(self, config: AuthConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    @property
    def token_url(self) -> str:
        return self._config.token_url

    def fetch(self) -> str | AuthError:
        """Request a new access token.

        Returns:
            The token, ``ProviderUnavailable`` if the provider could not be
            reached, or ``NotAuthorized`` for any other failure.
        """
        body = TokenRequest(
            audience=self._config.audience,
            client_id=self._config.client_id,
            client_secret=self._config.client_secret,
        )
        request = httpx.Request("POST", self.token_url, json=body.model_dump())

        try:
            response = self._transport.send(request)
        except CONNECTIVITY_ERRORS as e:
            logger.warning(f"Identity provider unreachable at {self.token_url}: {e}")
            return ProviderUnavailable(e)
        except httpx.HTTPError as e:
            logger.warning(f"Token request failed: {e}")
            return NotAuthorized()

        try:
            response.read()
            if not response.is_success:
                logger.warning(f"Token request rejected (HTTP {response.status_code})")
                return NotAuthorized()
            return TokenResponse.model_validate(response.json()).access_token
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.warning(f"Unusable token response: {e}")
            return NotAuthorized()
        finally:
            self._transport.dispose(response)
