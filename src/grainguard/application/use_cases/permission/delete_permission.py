"""Delete permission use case."""

from uuid import UUID

from grainguard.domain.exceptions import NotFound


class DeletePermissionUseCase:
    """Soft-delete a catalog permission."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, permission_id: UUID) -> None:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)
            await uow.permissions.soft_delete(permission_id)
