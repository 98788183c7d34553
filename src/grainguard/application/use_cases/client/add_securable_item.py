"""Add securable item use case."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from grainguard.domain.entities import SecurableItem
from grainguard.domain.exceptions import AlreadyExists, NotFound


class AddSecurableItemUseCase:
    """Add a child securable item under the top-level item or a nested one."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        client_id: str,
        name: str,
        parent_id: UUID | None = None,
        actor_id: str | None = None,
    ) -> SecurableItem:
        """Names are unique among siblings."""
        async with self._uow_factory() as uow:
            client = await uow.clients.get_for_update(client_id)
            if not client:
                raise NotFound("Client", client_id)
            parent = client.top_level_securable_item
            if parent_id is not None:
                parent = parent.find(parent_id)
                if not parent:
                    raise NotFound("SecurableItem", parent_id)
            if parent.has_child(name):
                raise AlreadyExists("SecurableItem", f"{parent.name}/{name}")

            now = datetime.now(UTC)
            item = SecurableItem(id=uuid4(), name=name, created_at=now, created_by=actor_id)
            parent.securable_items.append(item)
            parent.modified_at = now
            parent.modified_by = actor_id
            client.modified_at = now
            client.modified_by = actor_id
            await uow.clients.update(client)
            return item
