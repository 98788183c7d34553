"""PostgreSQL client repository implementation."""

import logging
from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from grainguard.domain.entities import Client, SecurableItem
from grainguard.domain.exceptions import AlreadyExists
from grainguard.infrastructure.persistence.postgres.connection import execute

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, top_level_securable_item, created_at, created_by, modified_at, modified_by, "
    "is_deleted"
)


def _timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _item_to_dict(item: SecurableItem) -> dict:
    return {
        "id": str(item.id),
        "name": item.name,
        "created_at": item.created_at.isoformat(),
        "created_by": item.created_by,
        "modified_at": item.modified_at.isoformat() if item.modified_at else None,
        "modified_by": item.modified_by,
        "securable_items": [_item_to_dict(child) for child in item.securable_items],
    }


def _item_from_dict(d: dict) -> SecurableItem:
    return SecurableItem(
        id=UUID(d["id"]),
        name=d["name"],
        created_at=_timestamp(d["created_at"]),
        created_by=d.get("created_by"),
        modified_at=_timestamp(d.get("modified_at")),
        modified_by=d.get("modified_by"),
        securable_items=[_item_from_dict(child) for child in d.get("securable_items") or []],
    )


def _to_client(r: tuple) -> Client:
    return Client(
        id=r[0],
        name=r[1],
        top_level_securable_item=_item_from_dict(r[2]),
        created_at=r[3],
        created_by=r[4],
        modified_at=r[5],
        modified_by=r[6],
        is_deleted=r[7],
    )


class PostgresClientRepository:
    """Client repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, client_id: str, include_deleted: bool = False) -> Client | None:
        """Get client by id."""
        q = f"SELECT {_COLUMNS} FROM client WHERE id = %s"
        if not include_deleted:
            q += " AND NOT is_deleted"
        cur = await execute(self._conn, q, (client_id,))
        r = await cur.fetchone()
        return _to_client(r) if r else None

    async def get_for_update(self, client_id: str) -> Client | None:
        """Get client and lock its row until the transaction ends."""
        cur = await execute(
            self._conn,
            f"SELECT {_COLUMNS} FROM client WHERE id = %s AND NOT is_deleted FOR UPDATE",
            (client_id,),
        )
        r = await cur.fetchone()
        return _to_client(r) if r else None

    async def list_all(self) -> list[Client]:
        """List non-deleted clients."""
        cur = await execute(
            self._conn, f"SELECT {_COLUMNS} FROM client WHERE NOT is_deleted ORDER BY id"
        )
        return [_to_client(r) for r in await cur.fetchall()]

    async def create(self, client: Client) -> Client:
        """Create client, replacing a soft-deleted row with the same id."""
        cur = await execute(
            self._conn,
            f"INSERT INTO client ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (id) DO UPDATE SET name = EXCLUDED.name, "
            "top_level_securable_item = EXCLUDED.top_level_securable_item, "
            "created_at = EXCLUDED.created_at, created_by = EXCLUDED.created_by, "
            "modified_at = NULL, modified_by = NULL, is_deleted = false "
            "WHERE client.is_deleted",
            (
                client.id,
                client.name,
                Jsonb(_item_to_dict(client.top_level_securable_item)),
                client.created_at,
                client.created_by,
                client.modified_at,
                client.modified_by,
                client.is_deleted,
            ),
        )
        if cur.rowcount == 0:
            raise AlreadyExists("Client", client.id)
        return client

    async def update(self, client: Client) -> None:
        """Update client name and securable item tree."""
        await execute(
            self._conn,
            "UPDATE client SET name=%s, top_level_securable_item=%s, modified_at=%s, "
            "modified_by=%s WHERE id=%s",
            (
                client.name,
                Jsonb(_item_to_dict(client.top_level_securable_item)),
                client.modified_at,
                client.modified_by,
                client.id,
            ),
        )

    async def soft_delete(self, client_id: str) -> None:
        """Soft delete client."""
        logger.info("Soft deleting client %s", client_id)
        await execute(
            self._conn,
            "UPDATE client SET is_deleted = true, modified_at = now() WHERE id = %s",
            (client_id,),
        )
