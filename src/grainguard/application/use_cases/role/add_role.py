"""Add role use case."""

from datetime import UTC, datetime
from uuid import uuid4

from grainguard.application.dto.permission_dto import RoleCreateInput
from grainguard.application.services.role_permissions import load_compatible_permissions
from grainguard.domain.entities import Role
from grainguard.domain.exceptions import AlreadyExists, IncompatiblePermission, NotFound


class AddRoleUseCase:
    """Create a role, linking it under its parent."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, input_data: RoleCreateInput, actor_id: str | None = None) -> Role:
        """Create role. Parent must exist; permissions must share the role's scope."""
        async with self._uow_factory() as uow:
            existing = await uow.roles.list_by_scope(
                input_data.grain, input_data.securable_item, input_data.name
            )
            if existing:
                raise AlreadyExists(
                    "Role",
                    f"{input_data.grain}/{input_data.securable_item}.{input_data.name}",
                )

            parent = None
            if input_data.parent_role is not None:
                parent = await uow.roles.get_by_id(input_data.parent_role)
                if not parent:
                    raise NotFound("Role", input_data.parent_role)
                if not parent.in_scope(input_data.grain, input_data.securable_item):
                    raise IncompatiblePermission(
                        f"Parent role {parent.grain}/{parent.securable_item}.{parent.name} "
                        f"does not match role scope {input_data.grain}/{input_data.securable_item}"
                    )

            granted = await load_compatible_permissions(
                uow.permissions,
                input_data.grain,
                input_data.securable_item,
                input_data.permissions,
            )
            denied = await load_compatible_permissions(
                uow.permissions,
                input_data.grain,
                input_data.securable_item,
                input_data.denied_permissions,
            )

            now = datetime.now(UTC)
            role = Role(
                id=uuid4(),
                grain=input_data.grain,
                securable_item=input_data.securable_item,
                name=input_data.name,
                created_at=now,
                parent_role=input_data.parent_role,
                permissions=list(dict.fromkeys(p.id for p in granted)),
                denied_permissions=list(dict.fromkeys(p.id for p in denied)),
                created_by=actor_id,
            )
            await uow.roles.create(role)

            if parent:
                parent.child_roles.append(role.id)
                parent.modified_at = now
                parent.modified_by = actor_id
                await uow.roles.update(parent)
            return role
