"""Delete group use case."""

from grainguard.domain.exceptions import NotFound


class DeleteGroupUseCase:
    """Soft-delete a group."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, name: str) -> None:
        async with self._uow_factory() as uow:
            if not await uow.groups.get_by_name(name):
                raise NotFound("Group", name)
            await uow.groups.soft_delete(name)
