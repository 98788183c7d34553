"""Unit tests for domain exceptions."""

from uuid import uuid4

import pytest

from grainguard.domain.exceptions import (
    AlreadyExists,
    DataIntegrityError,
    GrainGuardError,
    IncompatiblePermission,
    NotFound,
    StorageError,
    TransientStorageError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc_type",
    [
        AlreadyExists,
        DataIntegrityError,
        IncompatiblePermission,
        NotFound,
        StorageError,
        TransientStorageError,
        ValidationError,
    ],
)
def test_inherits_grainguard_error(exc_type: type) -> None:
    assert issubclass(exc_type, GrainGuardError)


def test_not_found_message() -> None:
    """NotFound names the entity and identifier."""
    assert str(NotFound("Role", "abc")) == "Role not found: abc"
    assert str(NotFound("Role")) == "Role not found"


def test_already_exists_message() -> None:
    e = AlreadyExists("Group", "admins")
    assert str(e) == "Group already exists: admins"
    assert e.entity == "Group"


def test_data_integrity_keeps_role_id() -> None:
    role_id = uuid4()
    e = DataIntegrityError(role_id, "cycle")
    assert e.role_id == role_id
    assert str(e) == "cycle"


def test_validation_error_details_default_empty() -> None:
    assert ValidationError("bad").details == {}


def test_raise_not_found_catchable_as_grainguard_error() -> None:
    with pytest.raises(GrainGuardError):
        raise NotFound("Permission", "123")
