"""PostgreSQL role repository implementation."""

import logging
from uuid import UUID

from psycopg import AsyncConnection

from grainguard.domain.entities import Role
from grainguard.infrastructure.persistence.postgres.connection import execute

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, grain, securable_item, name, parent_role_id, child_roles, permissions, "
    "denied_permissions, created_at, created_by, modified_at, modified_by, is_deleted"
)


def _to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        grain=r[1],
        securable_item=r[2],
        name=r[3],
        parent_role=r[4],
        child_roles=list(r[5] or []),
        permissions=list(r[6] or []),
        denied_permissions=list(r[7] or []),
        created_at=r[8],
        created_by=r[9],
        modified_at=r[10],
        modified_by=r[11],
        is_deleted=r[12],
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID, include_deleted: bool = False) -> Role | None:
        """Get role by id."""
        q = f"SELECT {_COLUMNS} FROM role WHERE id = %s"
        if not include_deleted:
            q += " AND NOT is_deleted"
        cur = await execute(self._conn, q, (role_id,))
        r = await cur.fetchone()
        return _to_role(r) if r else None

    async def get_many(self, role_ids: set[UUID]) -> list[Role]:
        """Get non-deleted roles by ids."""
        if not role_ids:
            return []
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM role WHERE id = ANY(%s) AND NOT is_deleted",
            (list(role_ids),),
        )
        return [_to_role(r) for r in await cur.fetchall()]

    async def list_by_scope(
        self,
        grain: str | None = None,
        securable_item: str | None = None,
        name: str | None = None,
    ) -> list[Role]:
        """List non-deleted roles, each filter optional."""
        conditions = ["NOT is_deleted"]
        params: list[object] = []
        for column, value in (("grain", grain), ("securable_item", securable_item), ("name", name)):
            if value:
                conditions.append(f"{column} = %s")
                params.append(value)
        q = f"SELECT {_COLUMNS} FROM role WHERE {' AND '.join(conditions)}"
        cur = await execute(self._conn, q, params)
        return [_to_role(r) for r in await cur.fetchall()]

    async def create(self, role: Role) -> Role:
        """Create role."""
        await execute(
            self._conn,
            f"INSERT INTO role ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                role.id,
                role.grain,
                role.securable_item,
                role.name,
                role.parent_role,
                role.child_roles,
                role.permissions,
                role.denied_permissions,
                role.created_at,
                role.created_by,
                role.modified_at,
                role.modified_by,
                role.is_deleted,
            ),
        )
        return role

    async def update(self, role: Role) -> None:
        """Update role."""
        await execute(
            self._conn,
            "UPDATE role SET parent_role_id=%s, child_roles=%s, permissions=%s, "
            "denied_permissions=%s, modified_at=%s, modified_by=%s, is_deleted=%s WHERE id=%s",
            (
                role.parent_role,
                role.child_roles,
                role.permissions,
                role.denied_permissions,
                role.modified_at,
                role.modified_by,
                role.is_deleted,
                role.id,
            ),
        )

    async def soft_delete(self, role_id: UUID) -> None:
        """Soft delete role."""
        logger.info("Soft deleting role %s", role_id)
        await execute(
            self._conn,
            "UPDATE role SET is_deleted = TRUE, modified_at = NOW() WHERE id = %s",
            (role_id,),
        )
