"""User repository port."""

from typing import Protocol

from grainguard.domain.entities import User


class UserRepository(Protocol):
    """Port for principal persistence."""

    async def get(
        self, identity_provider: str, subject_id: str, include_deleted: bool = False
    ) -> User | None: ...

    async def get_for_update(self, identity_provider: str, subject_id: str) -> User | None:
        """Get user and hold it for an atomic read-modify-write in this unit of work."""
        ...

    async def create(self, user: User) -> User: ...

    async def update(self, user: User) -> None: ...
