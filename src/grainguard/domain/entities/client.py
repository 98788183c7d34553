"""Client entity - registered application and its securable item tree."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class SecurableItem:
    """Named resource node; children are nested securable items."""

    id: UUID
    name: str
    created_at: datetime
    securable_items: list["SecurableItem"] = field(default_factory=list)
    created_by: str | None = None
    modified_at: datetime | None = None
    modified_by: str | None = None

    def walk(self) -> Iterator["SecurableItem"]:
        """This item and every descendant, depth first."""
        yield self
        for child in self.securable_items:
            yield from child.walk()

    def find(self, item_id: UUID) -> "SecurableItem | None":
        return next((item for item in self.walk() if item.id == item_id), None)

    def has_child(self, name: str) -> bool:
        return any(child.name == name for child in self.securable_items)


@dataclass
class Client:
    """Client - owns one top-level securable item named after its id."""

    id: str
    name: str
    created_at: datetime
    top_level_securable_item: SecurableItem
    created_by: str | None = None
    modified_at: datetime | None = None
    modified_by: str | None = None
    is_deleted: bool = False
