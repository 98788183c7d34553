"""PostgreSQL permission repository implementation."""

import logging
from uuid import UUID

from psycopg import AsyncConnection

from grainguard.domain.entities import Permission
from grainguard.domain.value_objects import PermissionAction, PermissionKey
from grainguard.infrastructure.persistence.postgres.connection import execute

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, grain, securable_item, name, action, created_at, created_by, "
    "modified_at, modified_by, is_deleted"
)


def _to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        grain=r[1],
        securable_item=r[2],
        name=r[3],
        action=PermissionAction(r[4]),
        created_at=r[5],
        created_by=r[6],
        modified_at=r[7],
        modified_by=r[8],
        is_deleted=r[9],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(
        self, permission_id: UUID, include_deleted: bool = False
    ) -> Permission | None:
        """Get permission by id."""
        q = f"SELECT {_COLUMNS} FROM permission WHERE id = %s"
        if not include_deleted:
            q += " AND NOT is_deleted"
        cur = await execute(self._conn, q, (permission_id,))
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def get_many(self, permission_ids: set[UUID]) -> list[Permission]:
        """Get non-deleted permissions by ids."""
        if not permission_ids:
            return []
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM permission WHERE id = ANY(%s) AND NOT is_deleted",
            (list(permission_ids),),
        )
        return [_to_permission(r) for r in await cur.fetchall()]

    async def get_by_key(self, key: PermissionKey) -> Permission | None:
        """Get permission by grain, securable item and name."""
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM permission "
            "WHERE grain = %s AND securable_item = %s AND name = %s AND NOT is_deleted",
            (key.grain, key.securable_item, key.name),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def list_by_scope(
        self,
        grain: str,
        securable_item: str | None = None,
        name: str | None = None,
    ) -> list[Permission]:
        """List permissions of a grain, optionally narrowed."""
        conditions = ["NOT is_deleted", "grain = %s"]
        params: list[object] = [grain]
        if securable_item:
            conditions.append("securable_item = %s")
            params.append(securable_item)
        if name:
            conditions.append("name = %s")
            params.append(name)
        q = f"SELECT {_COLUMNS} FROM permission WHERE {' AND '.join(conditions)}"
        cur = await execute(self._conn, q, params)
        return [_to_permission(r) for r in await cur.fetchall()]

    async def create(self, permission: Permission) -> Permission:
        """Create permission."""
        await execute(
            self._conn,
            f"INSERT INTO permission ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                permission.id,
                permission.grain,
                permission.securable_item,
                permission.name,
                permission.action.value,
                permission.created_at,
                permission.created_by,
                permission.modified_at,
                permission.modified_by,
                permission.is_deleted,
            ),
        )
        return permission

    async def update(self, permission: Permission) -> None:
        """Update permission audit fields and delete flag."""
        await execute(
            self._conn,
            "UPDATE permission SET modified_at=%s, modified_by=%s, is_deleted=%s WHERE id=%s",
            (permission.modified_at, permission.modified_by, permission.is_deleted, permission.id),
        )

    async def soft_delete(self, permission_id: UUID) -> None:
        """Soft delete permission."""
        logger.info("Soft deleting permission %s", permission_id)
        await execute(
            self._conn,
            "UPDATE permission SET is_deleted = TRUE, modified_at = NOW() WHERE id = %s",
            (permission_id,),
        )
