"""Delete role use case."""

from datetime import UTC, datetime
from uuid import UUID

from grainguard.domain.exceptions import NotFound


class DeleteRoleUseCase:
    """Soft-delete a role and unlink it from its parent."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID, actor_id: str | None = None) -> None:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            await uow.roles.soft_delete(role_id)

            if role.parent_role is not None:
                parent = await uow.roles.get_by_id(role.parent_role)
                if parent and role_id in parent.child_roles:
                    parent.child_roles.remove(role_id)
                    parent.modified_at = datetime.now(UTC)
                    parent.modified_by = actor_id
                    await uow.roles.update(parent)
