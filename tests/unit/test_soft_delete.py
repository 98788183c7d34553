"""Unit tests for the soft-delete capability."""

from datetime import UTC, datetime
from uuid import uuid4

from grainguard.domain.entities import (
    Group,
    Permission,
    Role,
    SupportsSoftDelete,
    User,
    is_active,
)
from grainguard.domain.value_objects import GroupSource

NOW = datetime.now(UTC)


def test_stored_entities_support_soft_delete() -> None:
    entities = [
        Permission(id=uuid4(), grain="app", securable_item="x", name="read", created_at=NOW),
        Role(id=uuid4(), grain="app", securable_item="x", name="viewer", created_at=NOW),
        Group(id="g", name="g", source=GroupSource.CUSTOM, created_at=NOW),
        User(identity_provider="windows", subject_id="alice", created_at=NOW),
    ]
    for entity in entities:
        assert isinstance(entity, SupportsSoftDelete)
        assert is_active(entity)
        entity.is_deleted = True
        assert not is_active(entity)


def test_missing_entity_is_not_active() -> None:
    assert not is_active(None)
