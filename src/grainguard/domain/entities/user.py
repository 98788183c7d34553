"""User entity - principal with granular permission overrides."""

from dataclasses import dataclass, field
from datetime import datetime

from grainguard.domain.value_objects import PermissionAction, PermissionKey


@dataclass(frozen=True)
class GranularPermission:
    """Permission attached directly to a principal, tagged allow or deny."""

    key: PermissionKey
    action: PermissionAction

    @property
    def qualified_name(self) -> str:
        return self.key.qualified_name


@dataclass
class User:
    """Principal identified by identity provider and subject id.

    Group membership is not stored here; it arrives as claims per request.
    """

    identity_provider: str
    subject_id: str
    created_at: datetime
    granular_permissions: list[GranularPermission] = field(default_factory=list)
    modified_at: datetime | None = None
    is_deleted: bool = False

    @property
    def identifier(self) -> str:
        return f"{self.identity_provider}:{self.subject_id}"
