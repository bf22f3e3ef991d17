"""Configuration management for the Auth0 middleware.

Loads client credentials from .env and identity-provider profiles from
providers.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv


DEFAULT_PROVIDER = "default"


class AuthConfig(BaseModel):
    """Static identity used to request tokens from one provider."""
    uri: str
    audience: str
    client_id: str
    client_secret: str

    @property
    def token_url(self) -> str:
        return f"{self.uri.rstrip('/')}/oauth/token"


class ProviderProfile(BaseModel):
    """A single identity provider's configuration."""
    uri: str
    audience: str
    client_id: str | None = None
    client_secret: str | None = None

    @field_validator("uri")
    @classmethod
    def _check_uri(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Provider URI must be http(s), got '{value}'")
        return value.rstrip("/")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    client_id: str = Field(description="OAuth client ID")
    client_secret: str = Field(description="OAuth client secret")
    uri: str = Field(default="", description="Identity provider base URI")
    audience: str = Field(default="", description="API audience tokens are requested for")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    default_provider: str = Field(default=DEFAULT_PROVIDER, description="Provider used when none is given")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    providers: dict[str, ProviderProfile]

    def get_provider(self, name: str | None = None) -> ProviderProfile:
        """Get a provider profile by name (case-insensitive)."""
        name = (name or self.settings.default_provider).lower()
        if name not in self.providers:
            available = ", ".join(sorted(self.providers.keys())) or "none"
            raise ValueError(f"Unknown provider '{name}'. Available: {available}")
        return self.providers[name]

    def auth_config(self, name: str | None = None) -> AuthConfig:
        """Resolve the credentials for a provider, profile values taking precedence."""
        profile = self.get_provider(name)
        return AuthConfig(
            uri=profile.uri,
            audience=profile.audience,
            client_id=profile.client_id or self.settings.client_id,
            client_secret=profile.client_secret or self.settings.client_secret,
        )

    @property
    def all_providers(self) -> list[str]:
        """List all configured provider names."""
        return sorted(self.providers.keys())


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "providers.yaml").exists():
            return parent
    # Fallback: cwd
    return Path.cwd()


def _load_providers(project_root: Path, settings: Settings) -> dict[str, ProviderProfile]:
    """Load provider profiles from providers.yaml, or build one from the environment."""
    providers_path = project_root / "config" / "providers.yaml"
    if not providers_path.exists():
        if not settings.uri:
            return {}
        return {
            DEFAULT_PROVIDER: ProviderProfile(uri=settings.uri, audience=settings.audience),
        }

    with open(providers_path) as f:
        data = yaml.safe_load(f) or {}

    providers = {}
    for name, profile_data in (data.get("providers") or {}).items():
        providers[name.lower()] = ProviderProfile(**profile_data)
    return providers


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both AUTH0_* and legacy camelCase names from .env.
    """
    return Settings(
        client_id=_env("AUTH0_CLIENT_ID", "clientId"),
        client_secret=_env("AUTH0_CLIENT_SECRET", "clientSecret"),
        uri=_env("AUTH0_URI", "uri"),
        audience=_env("AUTH0_AUDIENCE", "audience"),
        timeout=float(_env("AUTH0_TIMEOUT", default="30")),
        default_provider=_env("AUTH0_DEFAULT_PROVIDER", default=DEFAULT_PROVIDER).lower(),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    providers = _load_providers(project_root, settings)

    return Config(settings=settings, providers=providers)
