"""Group repository port."""

from typing import Protocol

from grainguard.domain.entities import Group


class GroupRepository(Protocol):
    """Port for group persistence."""

    async def get_by_name(self, name: str, include_deleted: bool = False) -> Group | None: ...

    async def get_many_by_name(self, names: set[str]) -> list[Group]: ...

    async def list_by_member(self, identity_provider: str, subject_id: str) -> list[Group]: ...

    async def create(self, group: Group) -> Group: ...

    async def update(self, group: Group) -> None: ...

    async def soft_delete(self, name: str) -> None: ...
