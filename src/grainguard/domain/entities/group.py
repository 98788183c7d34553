"""Group entity - directory or custom group mapped to roles."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from grainguard.domain.value_objects import GroupSource


@dataclass
class GroupMember:
    """User reference held by a custom group."""

    identity_provider: str
    subject_id: str


@dataclass
class Group:
    """Group - member roles and, for custom groups, member users."""

    id: str
    name: str
    source: GroupSource
    created_at: datetime
    roles: list[UUID] = field(default_factory=list)
    users: list[GroupMember] = field(default_factory=list)
    is_deleted: bool = False

    @property
    def is_custom(self) -> bool:
        return self.source == GroupSource.CUSTOM

    def has_user(self, identity_provider: str, subject_id: str) -> bool:
        return any(
            u.identity_provider == identity_provider and u.subject_id == subject_id
            for u in self.users
        )
