"""Role entity for RBAC."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class Role:
    """Role - granted and denied permissions, optional single parent.

    ``permissions`` and ``denied_permissions`` hold Permission ids.
    ``child_roles`` is informational and not used by resolution.
    """

    id: UUID
    grain: str
    securable_item: str
    name: str
    created_at: datetime
    parent_role: UUID | None = None
    child_roles: list[UUID] = field(default_factory=list)
    permissions: list[UUID] = field(default_factory=list)
    denied_permissions: list[UUID] = field(default_factory=list)
    created_by: str | None = None
    modified_at: datetime | None = None
    modified_by: str | None = None
    is_deleted: bool = False

    def in_scope(self, grain: str | None, securable_item: str | None) -> bool:
        if grain and self.grain != grain:
            return False
        if securable_item and self.securable_item != securable_item:
            return False
        return True
