"""Get group roles use case."""

from grainguard.domain.entities import Group, Role
from grainguard.domain.exceptions import NotFound


class GetGroupRolesUseCase:
    """Read a group and its non-deleted roles, optionally scoped."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        name: str,
        grain: str | None = None,
        securable_item: str | None = None,
    ) -> tuple[Group, list[Role]]:
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_name(name)
            if not group:
                raise NotFound("Group", name)
            roles = await uow.roles.get_many(set(group.roles))
        scoped = [r for r in roles if not r.is_deleted and r.in_scope(grain, securable_item)]
        return group, sorted(scoped, key=lambda r: (r.grain, r.securable_item, r.name))
