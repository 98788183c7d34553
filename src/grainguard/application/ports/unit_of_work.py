"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from grainguard.application.ports.repositories.client_repository import ClientRepository
from grainguard.application.ports.repositories.group_repository import GroupRepository
from grainguard.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from grainguard.application.ports.repositories.role_repository import RoleRepository
from grainguard.application.ports.repositories.user_repository import UserRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def groups(self) -> GroupRepository: ...

    @property
    def users(self) -> UserRepository: ...

    @property
    def clients(self) -> ClientRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
