"""Permission repository port."""

from typing import Protocol
from uuid import UUID

from grainguard.domain.entities import Permission
from grainguard.domain.value_objects import PermissionKey


class PermissionRepository(Protocol):
    """Port for permission catalog persistence."""

    async def get_by_id(
        self, permission_id: UUID, include_deleted: bool = False
    ) -> Permission | None: ...

    async def get_many(self, permission_ids: set[UUID]) -> list[Permission]: ...

    async def get_by_key(self, key: PermissionKey) -> Permission | None: ...

    async def list_by_scope(
        self,
        grain: str,
        securable_item: str | None = None,
        name: str | None = None,
    ) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission: ...

    async def update(self, permission: Permission) -> None: ...

    async def soft_delete(self, permission_id: UUID) -> None: ...
