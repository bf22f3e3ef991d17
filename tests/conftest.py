"""Shared fixtures for the auth0-middleware test suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from auth0_middleware.config import AuthConfig, Config, ProviderProfile, Settings


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        timeout=5.0,
        default_provider="default",
    )


@pytest.fixture
def fake_providers() -> dict[str, ProviderProfile]:
    return {
        "default": ProviderProfile(uri="https://idp.example", audience="a"),
        "staging": ProviderProfile(
            uri="https://staging.idp.example/",
            audience="staging-api",
            client_id="staging-client",
            client_secret="staging-secret",
        ),
    }


@pytest.fixture
def fake_config(fake_settings, fake_providers) -> Config:
    return Config(settings=fake_settings, providers=fake_providers)


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(uri="https://idp.example", audience="a", client_id="c", client_secret="s")


@pytest.fixture
def mock_transport():
    """MagicMock standing in for a Transport."""
    transport = MagicMock()
    transport.send = MagicMock()
    transport.dispose = MagicMock()
    return transport

