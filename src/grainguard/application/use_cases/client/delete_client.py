"""Delete client use case."""

from grainguard.domain.exceptions import NotFound


class DeleteClientUseCase:
    """Soft-delete a client."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, client_id: str) -> None:
        async with self._uow_factory() as uow:
            if not await uow.clients.get(client_id):
                raise NotFound("Client", client_id)
            await uow.clients.soft_delete(client_id)
