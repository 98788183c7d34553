"""Get permissions use case."""

from uuid import UUID

from grainguard.domain.entities import Permission
from grainguard.domain.exceptions import NotFound


class GetPermissionsUseCase:
    """Look up catalog permissions by scope or id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, grain: str, securable_item: str, name: str | None = None
    ) -> list[Permission]:
        async with self._uow_factory() as uow:
            permissions = await uow.permissions.list_by_scope(grain, securable_item, name)
        return sorted(permissions, key=lambda p: p.name)

    async def get(self, permission_id: UUID) -> Permission:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
        if not permission:
            raise NotFound("Permission", permission_id)
        return permission
