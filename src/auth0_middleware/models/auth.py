"""Auth-related data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    """Body posted to the provider's /oauth/token endpoint."""
    audience: str
    client_id: str
    client_secret: str


class TokenResponse(BaseModel):
    """Response from the provider's token endpoint."""
    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None


class ErrorBody(BaseModel):
    """JSON body of a synthesized error response."""
    message: str


class TokenStatus(BaseModel):
    """Current state of the token cache."""
    has_token: bool
    fetch_in_flight: bool = False
    fetch_count: int = 0
