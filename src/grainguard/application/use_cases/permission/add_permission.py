"""Add permission use case."""

from datetime import UTC, datetime
from uuid import uuid4

from grainguard.domain.entities import Permission
from grainguard.domain.exceptions import AlreadyExists
from grainguard.domain.value_objects import PermissionKey


class AddPermissionUseCase:
    """Register a permission in the catalog."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        grain: str,
        securable_item: str,
        name: str,
        actor_id: str | None = None,
    ) -> Permission:
        """Create permission; identity (grain, securable item, name) must be unique."""
        key = PermissionKey(grain, securable_item, name)
        async with self._uow_factory() as uow:
            if await uow.permissions.get_by_key(key):
                raise AlreadyExists("Permission", key.qualified_name)
            permission = Permission(
                id=uuid4(),
                grain=grain,
                securable_item=securable_item,
                name=name,
                created_at=datetime.now(UTC),
                created_by=actor_id,
            )
            await uow.permissions.create(permission)
            return permission
