"""Client repository port."""

from typing import Protocol

from grainguard.domain.entities import Client


class ClientRepository(Protocol):
    """Port for client persistence."""

    async def get(self, client_id: str, include_deleted: bool = False) -> Client | None: ...

    async def get_for_update(self, client_id: str) -> Client | None:
        """Get client and hold it for an atomic read-modify-write in this unit of work."""
        ...

    async def list_all(self) -> list[Client]: ...

    async def create(self, client: Client) -> Client: ...

    async def update(self, client: Client) -> None: ...

    async def soft_delete(self, client_id: str) -> None: ...
