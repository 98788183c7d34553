"""Token provider port - validates bearer tokens and yields the principal."""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class AuthenticatedPrincipal:
    """Principal identity and group claims taken from a validated token."""

    subject_id: str
    identity_provider: str
    groups: list[str] = field(default_factory=list)
    username: str | None = None
    client_id: str | None = None


class TokenProvider(Protocol):
    """Port for bearer token validation."""

    def decode_token(self, token: str) -> AuthenticatedPrincipal | None: ...
