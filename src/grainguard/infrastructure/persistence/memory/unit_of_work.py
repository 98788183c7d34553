"""In-memory Unit of Work implementation."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from grainguard.infrastructure.persistence.memory.database import InMemoryDatabase
from grainguard.infrastructure.persistence.memory.repositories import (
    InMemoryClientRepository,
    InMemoryGroupRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryUserRepository,
)


class InMemoryUnitOfWork:
    """In-memory Unit of Work - writes go straight to the shared tables."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._held_locks: list[asyncio.Lock] = []
        self.permissions = InMemoryPermissionRepository(db)
        self.roles = InMemoryRoleRepository(db)
        self.groups = InMemoryGroupRepository(db)
        self.users = InMemoryUserRepository(db, self._held_locks)
        self.clients = InMemoryClientRepository(db, self._held_locks)

    def release(self) -> None:
        while self._held_locks:
            self._held_locks.pop().release()

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def create_uow_factory(db: InMemoryDatabase | None = None) -> object:
    """Create UnitOfWork factory (async context manager) over one database."""
    database = db or InMemoryDatabase()

    @asynccontextmanager
    async def factory() -> AsyncIterator[InMemoryUnitOfWork]:
        uow = InMemoryUnitOfWork(database)
        try:
            yield uow
        finally:
            uow.release()

    return factory
