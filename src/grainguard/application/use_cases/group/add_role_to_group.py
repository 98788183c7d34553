"""Add role to group use case."""

from uuid import UUID

from grainguard.domain.entities import Group
from grainguard.domain.exceptions import NotFound


class AddRoleToGroupUseCase:
    """Assign a role to a group."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, group_name: str, role_id: UUID) -> Group:
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_name(group_name)
            if not group:
                raise NotFound("Group", group_name)
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            if role_id not in group.roles:
                group.roles.append(role_id)
                await uow.groups.update(group)
            return group
