"""Role repository port."""

from typing import Protocol
from uuid import UUID

from grainguard.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, role_id: UUID, include_deleted: bool = False) -> Role | None: ...

    async def get_many(self, role_ids: set[UUID]) -> list[Role]: ...

    async def list_by_scope(
        self,
        grain: str | None = None,
        securable_item: str | None = None,
        name: str | None = None,
    ) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...

    async def soft_delete(self, role_id: UUID) -> None: ...
