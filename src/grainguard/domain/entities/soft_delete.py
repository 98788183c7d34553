"""Soft-delete capability shared by stored entities."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SupportsSoftDelete(Protocol):
    """Entity that is flagged deleted instead of being removed."""

    is_deleted: bool


def is_active(entity: object | None) -> bool:
    """True when entity exists and is not soft-deleted."""
    if entity is None:
        return False
    if isinstance(entity, SupportsSoftDelete):
        return not entity.is_deleted
    return True
