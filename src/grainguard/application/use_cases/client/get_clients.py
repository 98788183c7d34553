"""Get clients use case."""

from grainguard.domain.entities import Client
from grainguard.domain.exceptions import NotFound


class GetClientsUseCase:
    """List registered clients or look one up by id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> list[Client]:
        async with self._uow_factory() as uow:
            clients = await uow.clients.list_all()
        return sorted(clients, key=lambda c: c.id)

    async def get(self, client_id: str) -> Client:
        async with self._uow_factory() as uow:
            client = await uow.clients.get(client_id)
        if not client:
            raise NotFound("Client", client_id)
        return client
