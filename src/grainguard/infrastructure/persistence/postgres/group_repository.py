"""PostgreSQL group repository implementation."""

import logging

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from grainguard.domain.entities import Group, GroupMember
from grainguard.domain.value_objects import GroupSource
from grainguard.infrastructure.persistence.postgres.connection import execute

logger = logging.getLogger(__name__)

_COLUMNS = "name, id, source, roles, users, created_at, is_deleted"


def _to_group(r: tuple) -> Group:
    return Group(
        name=r[0],
        id=r[1],
        source=GroupSource(r[2]),
        roles=list(r[3] or []),
        users=[GroupMember(u["identity_provider"], u["subject_id"]) for u in (r[4] or [])],
        created_at=r[5],
        is_deleted=r[6],
    )


def _users_json(group: Group) -> Jsonb:
    return Jsonb(
        [
            {"identity_provider": u.identity_provider, "subject_id": u.subject_id}
            for u in group.users
        ]
    )


class PostgresGroupRepository:
    """Group repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_name(self, name: str, include_deleted: bool = False) -> Group | None:
        """Get group by name."""
        q = f"SELECT {_COLUMNS} FROM auth_group WHERE name = %s"
        if not include_deleted:
            q += " AND NOT is_deleted"
        cur = await execute(self._conn, q, (name,))
        r = await cur.fetchone()
        return _to_group(r) if r else None

    async def get_many_by_name(self, names: set[str]) -> list[Group]:
        """Get non-deleted groups by names."""
        if not names:
            return []
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM auth_group WHERE name = ANY(%s) AND NOT is_deleted",
            (list(names),),
        )
        return [_to_group(r) for r in await cur.fetchall()]

    async def list_by_member(self, identity_provider: str, subject_id: str) -> list[Group]:
        """List non-deleted custom groups that hold the user."""
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM auth_group "
            "WHERE source = %s AND NOT is_deleted AND users @> %s",
            (
                GroupSource.CUSTOM.value,
                Jsonb([{"identity_provider": identity_provider, "subject_id": subject_id}]),
            ),
        )
        return [_to_group(r) for r in await cur.fetchall()]

    async def create(self, group: Group) -> Group:
        """Create group."""
        await execute(
            self._conn,
            f"INSERT INTO auth_group ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                group.name,
                group.id,
                group.source.value,
                group.roles,
                _users_json(group),
                group.created_at,
                group.is_deleted,
            ),
        )
        return group

    async def update(self, group: Group) -> None:
        """Update group roles and users."""
        await execute(
            self._conn,
            "UPDATE auth_group SET roles=%s, users=%s, is_deleted=%s WHERE name=%s",
            (group.roles, _users_json(group), group.is_deleted, group.name),
        )

    async def soft_delete(self, name: str) -> None:
        """Soft delete group."""
        logger.info("Soft deleting group %s", name)
        await execute(
            self._conn,
            "UPDATE auth_group SET is_deleted = TRUE WHERE name = %s",
            (name,),
        )
