"""Authentication error taxonomy.

Errors are plain values returned alongside tokens, not raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class AuthError(ABC):
    """Base for the two authentication failure kinds."""

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable description reported to the caller."""


@dataclass(frozen=True)
class NotAuthorized(AuthError):
    """The provider or the protected API rejected the presented credentials."""

    @property
    def message(self) -> str:
        return "The credentials you presented have not been accepted by the identity provider"


@dataclass(frozen=True)
class ProviderUnavailable(AuthError):
    """The provider could not be reached."""
    cause: BaseException = field(compare=False)

    @property
    def message(self) -> str:
        return f"The identity provider cannot be contacted to validate your credentials: {self.cause}"
