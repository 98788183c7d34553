"""Get roles use case."""

from uuid import UUID

from grainguard.domain.entities import Role
from grainguard.domain.exceptions import NotFound


class GetRolesUseCase:
    """List roles of a securable item, optionally by name."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, grain: str, securable_item: str, role_name: str | None = None
    ) -> list[Role]:
        async with self._uow_factory() as uow:
            roles = await uow.roles.list_by_scope(grain, securable_item, role_name)
        return sorted(roles, key=lambda r: r.name)

    async def get(self, role_id: UUID) -> Role:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
        if not role:
            raise NotFound("Role", role_id)
        return role
