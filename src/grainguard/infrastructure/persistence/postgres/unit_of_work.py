"""PostgreSQL Unit of Work implementation."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import psycopg
from psycopg_pool import AsyncConnectionPool

from grainguard.domain.exceptions import TransientStorageError
from grainguard.infrastructure.persistence.postgres.client_repository import (
    PostgresClientRepository,
)
from grainguard.infrastructure.persistence.postgres.group_repository import (
    PostgresGroupRepository,
)
from grainguard.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from grainguard.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from grainguard.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)

logger = logging.getLogger(__name__)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._groups = PostgresGroupRepository(self._conn)
        self._users = PostgresUserRepository(self._conn)
        self._clients = PostgresClientRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def groups(self) -> PostgresGroupRepository:
        return self._groups

    @property
    def users(self) -> PostgresUserRepository:
        return self._users

    @property
    def clients(self) -> PostgresClientRepository:
        return self._clients

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn and not self._conn.closed:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Each entry takes its own pooled connection and transaction. Connection
    and transaction failures surface as ``TransientStorageError`` once the
    transaction is rolled back, so the caller can rerun the whole unit.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        try:
            async with PostgresUnitOfWork(pool) as uow:
                try:
                    yield uow
                    await uow.commit()
                except BaseException:
                    await uow.rollback()
                    raise
        except psycopg.OperationalError as e:
            logger.warning("Transaction failed: %s", e)
            raise TransientStorageError(str(e)) from e

    return factory
