"""Unit tests for PermissionKey."""

import pytest

from grainguard.domain.value_objects import PermissionKey


def test_qualified_name() -> None:
    assert PermissionKey("app", "patientsafety", "read").qualified_name == "app/patientsafety.read"


def test_parse_roundtrip() -> None:
    key = PermissionKey.parse("dos/valuesets.manage")
    assert key == PermissionKey("dos", "valuesets", "manage")


def test_name_may_contain_dots() -> None:
    key = PermissionKey.parse("app/item.read.all")
    assert key.securable_item == "item"
    assert key.name == "read.all"


@pytest.mark.parametrize("value", ["nodivider", "app/noname", "/item.name", "app/.name"])
def test_parse_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        PermissionKey.parse(value)


def test_empty_parts_rejected() -> None:
    with pytest.raises(ValueError):
        PermissionKey("app", "", "read")


def test_in_scope() -> None:
    key = PermissionKey("app", "item", "read")
    assert key.in_scope(None, None)
    assert key.in_scope("app", None)
    assert key.in_scope("app", "item")
    assert not key.in_scope("dos", None)
    assert not key.in_scope("app", "other")


def test_keys_hash_by_value() -> None:
    """Keys compare by value and are usable as set members."""
    assert len({PermissionKey("a", "b", "c"), PermissionKey("a", "b", "c")}) == 1
