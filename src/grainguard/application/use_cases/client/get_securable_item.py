"""Get securable item use case."""

from uuid import UUID

from grainguard.domain.entities import SecurableItem
from grainguard.domain.exceptions import NotFound


class GetSecurableItemUseCase:
    """Look up a client's top-level securable item or any nested item by id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, client_id: str, item_id: UUID | None = None) -> SecurableItem:
        """Top-level item when ``item_id`` is None; NotFound for an unknown client or item."""
        async with self._uow_factory() as uow:
            client = await uow.clients.get(client_id)
        if not client:
            raise NotFound("Client", client_id)
        top = client.top_level_securable_item
        if item_id is None:
            return top
        item = top.find(item_id)
        if not item:
            raise NotFound("SecurableItem", item_id)
        return item
