"""Add client use case."""

from datetime import UTC, datetime
from uuid import uuid4

from grainguard.domain.entities import Client, SecurableItem
from grainguard.domain.exceptions import AlreadyExists


class AddClientUseCase:
    """Register a client with a top-level securable item named after its id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, client_id: str, name: str, actor_id: str | None = None) -> Client:
        async with self._uow_factory() as uow:
            if await uow.clients.get(client_id):
                raise AlreadyExists("Client", client_id)
            now = datetime.now(UTC)
            client = Client(
                id=client_id,
                name=name,
                created_at=now,
                created_by=actor_id,
                top_level_securable_item=SecurableItem(
                    id=uuid4(), name=client_id, created_at=now, created_by=actor_id
                ),
            )
            await uow.clients.create(client)
            return client
