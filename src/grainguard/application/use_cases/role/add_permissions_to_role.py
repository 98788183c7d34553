"""Add permissions to role use case."""

from datetime import UTC, datetime
from uuid import UUID

from grainguard.application.services.granular_permissions import NO_PERMISSIONS_MESSAGE
from grainguard.application.services.role_permissions import (
    attached_ids,
    load_compatible_permissions,
)
from grainguard.domain.entities import Role
from grainguard.domain.exceptions import NotFound, ValidationError


class AddPermissionsToRoleUseCase:
    """Attach catalog permissions to a role's granted or denied list."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        role_id: UUID,
        permission_ids: list[UUID],
        denied: bool = False,
        actor_id: str | None = None,
    ) -> Role:
        """Attach permissions. Raises IncompatiblePermission on scope mismatch."""
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
                    target.append(permission.id)

            role.modified_at = datetime.now(UTC)
            role.modified_by = actor_id
            await uow.roles.update(role)
            return role
