"""Remove permissions from role use case."""

from datetime import UTC, datetime
from uuid import UUID

from grainguard.application.services.granular_permissions import NO_PERMISSIONS_MESSAGE
from grainguard.application.services.role_permissions import (
    attached_ids,
    load_compatible_permissions,
)
from grainguard.domain.entities import Role
from grainguard.domain.exceptions import NotFound, ValidationError


class RemovePermissionsFromRoleUseCase:
    """Detach permissions from a role's granted or denied list."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        role_id: UUID,
        permission_ids: list[UUID],
        denied: bool = False,
        actor_id: str | None = None,
    ) -> Role:
        """Detach permissions; every id must currently be attached."""
        if not permission_ids:
            raise ValidationError(NO_PERMISSIONS_MESSAGE)

        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)

            permissions = await load_compatible_permissions(
                uow.permissions, role.grain, role.securable_item, permission_ids
            )
            target = attached_ids(role, denied)
            for permission in permissions:
                if permission.id not in target:
                    raise NotFound("Permission", permission.id)
            for permission_id in dict.fromkeys(p.id for p in permissions):
                target.remove(permission_id)

            role.modified_at = datetime.now(UTC)
            role.modified_by = actor_id
            await uow.roles.update(role)
            return role
