"""Role permission attachment checks."""

from uuid import UUID

from grainguard.application.ports.repositories import PermissionRepository
from grainguard.domain.entities import Permission, Role
from grainguard.domain.exceptions import IncompatiblePermission, NotFound


async def load_compatible_permissions(
    permissions: PermissionRepository,
    grain: str,
    securable_item: str,
    permission_ids: list[UUID],
) -> list[Permission]:
    """Load permissions by id, requiring each to exist and share the role's scope."""
    result = []
    incompatible = []
    for permission_id in permission_ids:
        permission = await permissions.get_by_id(permission_id)
        if not permission:
            raise NotFound("Permission", permission_id)
        if permission.grain != grain or permission.securable_item != securable_item:
            incompatible.append(permission.qualified_name)
            continue
        result.append(permission)
    if incompatible:
        raise IncompatiblePermission(
            f"Permissions {', '.join(incompatible)} do not match role scope "
            f"{grain}/{securable_item}"
        )
    return result


def attached_ids(role: Role, denied: bool) -> list[UUID]:
    """The role's granted or denied id list."""
    return role.denied_permissions if denied else role.permissions
