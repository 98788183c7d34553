"""Shared in-memory storage for the in-memory adapter."""

import asyncio
import weakref
from uuid import UUID

from grainguard.domain.entities import Client, Group, Permission, Role, User


class InMemoryDatabase:
    """Process-local tables shared by every in-memory unit of work."""

    def __init__(self) -> None:
        self.permissions: dict[UUID, Permission] = {}
        self.roles: dict[UUID, Role] = {}
        self.groups: dict[str, Group] = {}
        self.users: dict[tuple[str, str], User] = {}
        self.clients: dict[str, Client] = {}
        # Entries live only while a unit of work holds or awaits the lock.
        self._locks: weakref.WeakValueDictionary[tuple, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def user_lock(self, key: tuple[str, str]) -> asyncio.Lock:
        """Lock guarding read-modify-write of one user record."""
        return self._locks.setdefault(("user", *key), asyncio.Lock())

    def client_lock(self, client_id: str) -> asyncio.Lock:
        """Lock guarding read-modify-write of one client's securable items."""
        return self._locks.setdefault(("client", client_id), asyncio.Lock())

    @property
    def lock_count(self) -> int:
        return len(self._locks)
