"""Role hierarchy - ancestor closure over parent pointers."""

import logging
from uuid import UUID

from grainguard.application.ports.repositories import RoleRepository
from grainguard.domain.entities import Role
from grainguard.domain.exceptions import DataIntegrityError

logger = logging.getLogger(__name__)


class RoleGraph:
    """Read-only view of the role forest for one resolution.

    Roles fetched while walking are kept for the lifetime of the instance,
    so shared ancestors are loaded once per request.
    """

    def __init__(self, roles: RoleRepository) -> None:
        self._roles = roles
        self._loaded: dict[UUID, Role | None] = {}

    def remember(self, role: Role) -> None:
        """Register an already-loaded role."""
        self._loaded[role.id] = role

    async def _get(self, role_id: UUID) -> Role | None:
        if role_id not in self._loaded:
            self._loaded[role_id] = await self._roles.get_by_id(role_id, include_deleted=True)
        return self._loaded[role_id]

    async def ancestor_chain(self, role: Role) -> list[Role]:
        """Return the role followed by its ancestors up to the root.

        Raises DataIntegrityError when a parent is missing, soft-deleted,
        or already on the chain.
        """
        self.remember(role)
        chain = [role]
        visited = {role.id}
        current = role
        while current.parent_role is not None:
            parent_id = current.parent_role
            if parent_id in visited:
                raise DataIntegrityError(
                    role.id,
                    f"Cycle in role hierarchy of role {role.id}: {parent_id} is its own ancestor",
                )
            parent = await self._get(parent_id)
            if parent is None:
                raise DataIntegrityError(
                    role.id, f"Role {current.id} references missing parent role {parent_id}"
                )
            if parent.is_deleted:
                raise DataIntegrityError(
                    role.id, f"Role {current.id} references deleted parent role {parent_id}"
                )
            visited.add(parent_id)
            chain.append(parent)
            current = parent
        return chain
