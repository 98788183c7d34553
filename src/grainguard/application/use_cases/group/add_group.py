"""Add group use case."""

from datetime import UTC, datetime

from grainguard.domain.entities import Group
from grainguard.domain.exceptions import AlreadyExists
from grainguard.domain.value_objects import GroupSource


class AddGroupUseCase:
    """Register a directory or custom group."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        name: str,
        source: GroupSource = GroupSource.DIRECTORY,
        group_id: str | None = None,
    ) -> Group:
        """Create group; id defaults to the name."""
        async with self._uow_factory() as uow:
            if await uow.groups.get_by_name(name):
                raise AlreadyExists("Group", name)
            group = Group(
                id=group_id or name,
                name=name,
                source=source,
                created_at=datetime.now(UTC),
            )
            await uow.groups.create(group)
            return group
