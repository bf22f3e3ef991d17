"""Tests for auth.py: token request shape, parsing and failure classification."""
import json

import httpx
import pytest

from auth0_middleware.auth import TokenSource
from auth0_middleware.models.errors import NotAuthorized, ProviderUnavailable
from auth0_middleware.transport import HttpxTransport
from auth0_middleware.config import AuthConfig


@pytest.fixture
def source(auth_config, mock_transport):
    return TokenSource(auth_config, mock_transport)


def _resp(status_code=200, json_data=None, text=""):
    """Build a real, fully read httpx.Response."""
    if json_data is not None:
        return httpx.Response(status_code, json=json_data)
    return httpx.Response(status_code, text=text)


# ── Request ──────────────────────────────────────────────────────────

def test_posts_to_token_endpoint(source, mock_transport):
    mock_transport.send.return_value = _resp(json_data={"access_token": "T1"})

    source.fetch()
    request = mock_transport.send.call_args[0][0]
    assert request.method == "POST"
    assert str(request.url) == "https://idp.example/oauth/token"


def test_sends_client_credentials_body(source, mock_transport):
    mock_transport.send.return_value = _resp(json_data={"access_token": "T1"})

    source.fetch()
    request = mock_transport.send.call_args[0][0]
    assert json.loads(request.content) == {
        "audience": "a",
        "client_id": "c",
        "client_secret": "s",
    }
    assert request.headers["Content-Type"] == "application/json"


def test_token_url_strips_trailing_slash(mock_transport):
    config = AuthConfig(uri="https://idp.example/", audience="a", client_id="c", client_secret="s")
    assert TokenSource(config, mock_transport).token_url == "https://idp.example/oauth/token"


# ── Success ──────────────────────────────────────────────────────────

def test_returns_access_token(source, mock_transport):
    mock_transport.send.return_value = _resp(
        json_data={"access_token": "T1", "token_type": "Bearer", "expires_in": 86400}
    )
    assert source.fetch() == "T1"


def test_ignores_extra_fields(source, mock_transport):
    mock_transport.send.return_value = _resp(
        json_data={"access_token": "T1", "id_token": "xyz", "scope": "read:all"}
    )
    assert source.fetch() == "T1"


def test_response_disposed_on_success(source, mock_transport):
    response = _resp(json_data={"access_token": "T1"})
    mock_transport.send.return_value = response

    source.fetch()
    mock_transport.dispose.assert_called_once_with(response)


# ── Failure classification ───────────────────────────────────────────

def test_connect_error_is_provider_unavailable(source, mock_transport):
    cause = httpx.ConnectError("connection refused")
    mock_transport.send.side_effect = cause

    result = source.fetch()
    assert isinstance(result, ProviderUnavailable)
    assert result.cause is cause
    assert "connection refused" in result.message
    mock_transport.dispose.assert_not_called()


def test_connect_timeout_is_provider_unavailable(source, mock_transport):
    mock_transport.send.side_effect = httpx.ConnectTimeout("timed out")
    assert isinstance(source.fetch(), ProviderUnavailable)


def test_read_timeout_is_not_authorized(source, mock_transport):
    mock_transport.send.side_effect = httpx.ReadTimeout("read timed out")
    assert source.fetch() == NotAuthorized()


@pytest.mark.parametrize("status", [400, 401, 403, 500])
def test_non_success_status_is_not_authorized(source, mock_transport, status):
    response = _resp(status, json_data={"error": "access_denied"})
    mock_transport.send.return_value = response

    assert source.fetch() == NotAuthorized()
    mock_transport.dispose.assert_called_once_with(response)


def test_malformed_json_is_not_authorized(source, mock_transport):
    mock_transport.send.return_value = _resp(200, text="<html>oops</html>")
    assert source.fetch() == NotAuthorized()


def test_missing_access_token_is_not_authorized(source, mock_transport):
    mock_transport.send.return_value = _resp(json_data={"token_type": "Bearer"})
    assert source.fetch() == NotAuthorized()


def test_empty_access_token_is_not_authorized(source, mock_transport):
    mock_transport.send.return_value = _resp(json_data={"access_token": ""})
    assert source.fetch() == NotAuthorized()


def test_single_attempt_only(source, mock_transport):
    mock_transport.send.return_value = _resp(500, text="boom")

    source.fetch()
    assert mock_transport.send.call_count == 1


# ── Over a real httpx transport ──────────────────────────────────────

def test_fetch_over_httpx_transport(auth_config):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"access_token": "T1"})

    transport = HttpxTransport(httpx.Client(transport=httpx.MockTransport(handler)))
    assert TokenSource(auth_config, transport).fetch() == "T1"
    assert seen[0].url.path == "/oauth/token"
