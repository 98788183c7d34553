"""Principal DTOs."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PrincipalContext:
    """Principal as seen by the resolver: identity plus group claims of this request."""

    identity_provider: str
    subject_id: str
    groups: frozenset[str] = field(default_factory=frozenset)
