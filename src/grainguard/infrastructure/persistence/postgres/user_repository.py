"""PostgreSQL user repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from grainguard.domain.entities import GranularPermission, User
from grainguard.domain.value_objects import PermissionAction, PermissionKey
from grainguard.infrastructure.persistence.postgres.connection import execute

_COLUMNS = (
    "identity_provider, subject_id, granular_permissions, created_at, modified_at, is_deleted"
)


def _to_user(r: tuple) -> User:
    return User(
        identity_provider=r[0],
        subject_id=r[1],
        granular_permissions=[
            GranularPermission(
                key=PermissionKey(g["grain"], g["securable_item"], g["name"]),
                action=PermissionAction(g["action"]),
            )
            for g in (r[2] or [])
        ],
        created_at=r[3],
        modified_at=r[4],
        is_deleted=r[5],
    )


def _granular_json(user: User) -> Jsonb:
    return Jsonb(
        [
            {
                "grain": g.key.grain,
                "securable_item": g.key.securable_item,
                "name": g.key.name,
                "action": g.action.value,
            }
            for g in user.granular_permissions
        ]
    )


class PostgresUserRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(
        self, identity_provider: str, subject_id: str, include_deleted: bool = False
    ) -> User | None:
        """Get user by identity provider and subject."""
        q = f"SELECT {_COLUMNS} FROM principal WHERE identity_provider = %s AND subject_id = %s"
        if not include_deleted:
            q += " AND NOT is_deleted"
        cur = await execute(self._conn, q, (identity_provider, subject_id))
        r = await cur.fetchone()
        return _to_user(r) if r else None

    async def get_for_update(self, identity_provider: str, subject_id: str) -> User | None:
        """Get user and lock its row until the transaction ends.

        A missing row is inserted empty first, so concurrent first writers
        queue on the same row lock instead of racing on INSERT.
        """
        await execute(
            self._conn,
            "INSERT INTO principal "
            "(identity_provider, subject_id, granular_permissions, created_at, is_deleted) "
            "VALUES (%s, %s, '[]'::jsonb, now(), false) "
            "ON CONFLICT (identity_provider, subject_id) DO NOTHING",
            (identity_provider, subject_id),
        )
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM principal "
            "WHERE identity_provider = %s AND subject_id = %s AND NOT is_deleted FOR UPDATE",
            (identity_provider, subject_id),
        )
        r = await cur.fetchone()
        return _to_user(r) if r else None

    async def create(self, user: User) -> User:
        """Create user, replacing a soft-deleted row with the same identity."""
        await execute(
            self._conn,
            f"INSERT INTO principal ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (identity_provider, subject_id) DO UPDATE SET "
            "granular_permissions = EXCLUDED.granular_permissions, "
            "created_at = EXCLUDED.created_at, modified_at = EXCLUDED.modified_at, "
            "is_deleted = EXCLUDED.is_deleted",
            (
                user.identity_provider,
                user.subject_id,
                _granular_json(user),
                user.created_at,
                user.modified_at,
                user.is_deleted,
            ),
        )
        return user

    async def update(self, user: User) -> None:
        """Update user overrides."""
        await execute(
            self._conn,
            "UPDATE principal SET granular_permissions=%s, modified_at=%s, is_deleted=%s "
            "WHERE identity_provider=%s AND subject_id=%s",
            (
                _granular_json(user),
                user.modified_at,
                user.is_deleted,
                user.identity_provider,
                user.subject_id,
            ),
        )
