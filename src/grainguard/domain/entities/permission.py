"""Permission entity - catalog entry scoped to a grain and securable item."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from grainguard.domain.value_objects import PermissionAction, PermissionKey


@dataclass
class Permission:
    """Permission - named capability within grain/securable item."""

    id: UUID
    grain: str
    securable_item: str
    name: str
    created_at: datetime
    action: PermissionAction = PermissionAction.ALLOW
    created_by: str | None = None
    modified_at: datetime | None = None
    modified_by: str | None = None
    is_deleted: bool = False

    @property
    def key(self) -> PermissionKey:
        return PermissionKey(self.grain, self.securable_item, self.name)

    @property
    def qualified_name(self) -> str:
        return self.key.qualified_name
