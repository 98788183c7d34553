"""In-memory repository implementations."""

import asyncio
import logging
from copy import deepcopy
from datetime import UTC, datetime
from uuid import UUID

from grainguard.domain.entities import Client, Group, Permission, Role, User, is_active
from grainguard.domain.value_objects import PermissionKey
from grainguard.infrastructure.persistence.memory.database import InMemoryDatabase

logger = logging.getLogger(__name__)


def _visible(entity: object | None, include_deleted: bool = False) -> bool:
    return entity is not None and (include_deleted or is_active(entity))


async def _hold(lock: asyncio.Lock, held_locks: list[asyncio.Lock]) -> None:
    if lock not in held_locks:
        await lock.acquire()
        held_locks.append(lock)


class InMemoryPermissionRepository:
    """Permission repository over InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get_by_id(
        self, permission_id: UUID, include_deleted: bool = False
    ) -> Permission | None:
        permission = self._db.permissions.get(permission_id)
        if not _visible(permission, include_deleted):
            return None
        return deepcopy(permission)

    async def get_many(self, permission_ids: set[UUID]) -> list[Permission]:
        return [
            deepcopy(p)
            for pid in permission_ids
            if _visible(p := self._db.permissions.get(pid))
        ]

    async def get_by_key(self, key: PermissionKey) -> Permission | None:
        for permission in self._db.permissions.values():
            if permission.key == key and is_active(permission):
                return deepcopy(permission)
        return None

    async def list_by_scope(
        self,
        grain: str,
        securable_item: str | None = None,
        name: str | None = None,
    ) -> list[Permission]:
        return [
            deepcopy(p)
            for p in self._db.permissions.values()
            if is_active(p)
            and p.grain == grain
            and (not securable_item or p.securable_item == securable_item)
            and (not name or p.name == name)
        ]

    async def create(self, permission: Permission) -> Permission:
        self._db.permissions[permission.id] = deepcopy(permission)
        return permission

    async def update(self, permission: Permission) -> None:
        self._db.permissions[permission.id] = deepcopy(permission)

    async def soft_delete(self, permission_id: UUID) -> None:
        permission = self._db.permissions.get(permission_id)
        if permission:
            logger.info("Soft deleting permission %s", permission_id)
            permission.is_deleted = True
            permission.modified_at = datetime.now(UTC)


class InMemoryRoleRepository:
    """Role repository over InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get_by_id(self, role_id: UUID, include_deleted: bool = False) -> Role | None:
        role = self._db.roles.get(role_id)
        if not _visible(role, include_deleted):
            return None
        return deepcopy(role)

    async def get_many(self, role_ids: set[UUID]) -> list[Role]:
        return [
            deepcopy(r)
            for rid in role_ids
            if _visible(r := self._db.roles.get(rid))
        ]

    async def list_by_scope(
        self,
        grain: str | None = None,
        securable_item: str | None = None,
        name: str | None = None,
    ) -> list[Role]:
        return [
            deepcopy(r)
            for r in self._db.roles.values()
            if is_active(r)
            and r.in_scope(grain, securable_item)
            and (not name or r.name == name)
        ]

    async def create(self, role: Role) -> Role:
        self._db.roles[role.id] = deepcopy(role)
        return role

    async def update(self, role: Role) -> None:
        self._db.roles[role.id] = deepcopy(role)

    async def soft_delete(self, role_id: UUID) -> None:
        role = self._db.roles.get(role_id)
        if role:
            logger.info("Soft deleting role %s", role_id)
            role.is_deleted = True
            role.modified_at = datetime.now(UTC)


class InMemoryGroupRepository:
    """Group repository over InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get_by_name(self, name: str, include_deleted: bool = False) -> Group | None:
        group = self._db.groups.get(name)
        if not _visible(group, include_deleted):
            return None
        return deepcopy(group)

    async def get_many_by_name(self, names: set[str]) -> list[Group]:
        return [
            deepcopy(g)
            for name in names
            if _visible(g := self._db.groups.get(name))
        ]

    async def list_by_member(self, identity_provider: str, subject_id: str) -> list[Group]:
        return [
            deepcopy(g)
            for g in self._db.groups.values()
            if is_active(g) and g.is_custom and g.has_user(identity_provider, subject_id)
        ]

    async def create(self, group: Group) -> Group:
        self._db.groups[group.name] = deepcopy(group)
        return group

    async def update(self, group: Group) -> None:
        self._db.groups[group.name] = deepcopy(group)

    async def soft_delete(self, name: str) -> None:
        group = self._db.groups.get(name)
        if group:
            logger.info("Soft deleting group %s", name)
            group.is_deleted = True


class InMemoryUserRepository:
    """User repository over InMemoryDatabase.

    ``get_for_update`` takes the user's lock; the unit of work releases it.
    """

    def __init__(self, db: InMemoryDatabase, held_locks: list[asyncio.Lock]) -> None:
        self._db = db
        self._held_locks = held_locks

    async def get(
        self, identity_provider: str, subject_id: str, include_deleted: bool = False
    ) -> User | None:
        user = self._db.users.get((identity_provider, subject_id))
        if not _visible(user, include_deleted):
            return None
        return deepcopy(user)

    async def get_for_update(self, identity_provider: str, subject_id: str) -> User | None:
        await _hold(self._db.user_lock((identity_provider, subject_id)), self._held_locks)
        return await self.get(identity_provider, subject_id)

    async def create(self, user: User) -> User:
        self._db.users[(user.identity_provider, user.subject_id)] = deepcopy(user)
        return user

    async def update(self, user: User) -> None:
        self._db.users[(user.identity_provider, user.subject_id)] = deepcopy(user)


class InMemoryClientRepository:
    """Client repository over InMemoryDatabase.

    ``get_for_update`` takes the client's lock; the unit of work releases it.
    """

    def __init__(self, db: InMemoryDatabase, held_locks: list[asyncio.Lock]) -> None:
        self._db = db
        self._held_locks = held_locks

    async def get(self, client_id: str, include_deleted: bool = False) -> Client | None:
        client = self._db.clients.get(client_id)
        if not _visible(client, include_deleted):
            return None
        return deepcopy(client)

    async def get_for_update(self, client_id: str) -> Client | None:
        await _hold(self._db.client_lock(client_id), self._held_locks)
        return await self.get(client_id)

    async def list_all(self) -> list[Client]:
        return [deepcopy(c) for c in self._db.clients.values() if is_active(c)]

    async def create(self, client: Client) -> Client:
        self._db.clients[client.id] = deepcopy(client)
        return client

    async def update(self, client: Client) -> None:
        self._db.clients[client.id] = deepcopy(client)

    async def soft_delete(self, client_id: str) -> None:
        client = self._db.clients.get(client_id)
        if client:
            logger.info("Soft deleting client %s", client_id)
            client.is_deleted = True
            client.modified_at = datetime.now(UTC)
