"""Tests for models/: error taxonomy and token models."""
import pytest
from pydantic import ValidationError

from auth0_middleware.models.auth import TokenResponse
from auth0_middleware.models.errors import AuthError, NotAuthorized, ProviderUnavailable


def test_auth_error_is_abstract():
    with pytest.raises(TypeError):
        AuthError()


def test_errors_are_auth_errors():
    assert isinstance(NotAuthorized(), AuthError)
    assert isinstance(ProviderUnavailable(ConnectionError("refused")), AuthError)


def test_provider_unavailable_equality_ignores_cause():
    assert ProviderUnavailable(ConnectionError("a")) == ProviderUnavailable(ConnectionError("b"))


def test_token_response_requires_token():
    with pytest.raises(ValidationError):
        TokenResponse(access_token="")
