"""Unit tests for granular override grant/revoke validation."""

import pytest

from grainguard.application.services import granular_permissions
from grainguard.application.services.granular_permissions import (
    INVALID_ALLOW_PERMISSION_ACTIONS,
    INVALID_ALLOW_PERMISSIONS,
    INVALID_DENY_PERMISSION_ACTIONS,
    INVALID_DENY_PERMISSIONS,
    NO_PERMISSIONS_MESSAGE,
)
from grainguard.domain.entities import GranularPermission
from grainguard.domain.exceptions import ValidationError
from grainguard.domain.value_objects import PermissionAction, PermissionKey

X = PermissionKey("app", "patientsafety", "x")
Y = PermissionKey("app", "patientsafety", "y")
Z = PermissionKey("app", "billing", "z")


def allow(key: PermissionKey) -> GranularPermission:
    return GranularPermission(key, PermissionAction.ALLOW)


def deny(key: PermissionKey) -> GranularPermission:
    return GranularPermission(key, PermissionAction.DENY)


class TestGrant:
    def test_empty_batch_rejected(self) -> None:
        with pytest.raises(ValidationError, match="No permissions specified"):
            granular_permissions.grant([allow(X)], [])

    def test_appends_new_records(self) -> None:
        assert granular_permissions.grant([allow(X)], [deny(Y)]) == [allow(X), deny(Y)]

    def test_existing_record_not_duplicated(self) -> None:
        assert granular_permissions.grant([allow(X)], [allow(X), allow(X)]) == [allow(X)]

    def test_allow_and_deny_coexist(self) -> None:
        assert granular_permissions.grant([allow(X)], [deny(X)]) == [allow(X), deny(X)]


class TestRevoke:
    def test_empty_batch_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc:
            granular_permissions.revoke([allow(X)], [])
        assert str(exc.value) == NO_PERMISSIONS_MESSAGE

    def test_removes_exact_matches(self) -> None:
        existing = [allow(X), deny(X), allow(Y)]
        assert granular_permissions.revoke(existing, [deny(X)]) == [allow(X), allow(Y)]

    def test_missing_allow_reported(self) -> None:
        with pytest.raises(ValidationError) as exc:
            granular_permissions.revoke([], [allow(X)])
        assert exc.value.details == {INVALID_ALLOW_PERMISSIONS: [X.qualified_name]}
        assert str(exc.value) == f"Invalid allow permissions: {X.qualified_name}"

    def test_missing_deny_reported(self) -> None:
        with pytest.raises(ValidationError) as exc:
            granular_permissions.revoke([allow(Y)], [deny(X)])
        assert exc.value.details == {INVALID_DENY_PERMISSIONS: [X.qualified_name]}

    def test_wrong_action_reported(self) -> None:
        with pytest.raises(ValidationError) as exc:
            granular_permissions.revoke([deny(X), allow(Y)], [allow(X), deny(Y)])
        assert exc.value.details == {
            INVALID_ALLOW_PERMISSION_ACTIONS: [X.qualified_name],
            INVALID_DENY_PERMISSION_ACTIONS: [Y.qualified_name],
        }

    def test_all_failures_reported_at_once(self) -> None:
        """Every category is accumulated into a single error."""
        existing = [deny(Y), allow(Z)]
        with pytest.raises(ValidationError) as exc:
            granular_permissions.revoke(existing, [allow(X), allow(Y), deny(X), allow(Z)])

        message = str(exc.value)
        assert f"Invalid allow permissions: {X.qualified_name}" in message
        assert f"Invalid allow permission actions: {Y.qualified_name}" in message
        assert f"Invalid deny permissions: {X.qualified_name}" in message
        assert set(exc.value.details) == {
            INVALID_ALLOW_PERMISSIONS,
            INVALID_ALLOW_PERMISSION_ACTIONS,
            INVALID_DENY_PERMISSIONS,
        }

    def test_nothing_removed_when_any_entry_invalid(self) -> None:
        existing = [allow(X)]
        with pytest.raises(ValidationError):
            granular_permissions.revoke(existing, [allow(X), allow(Y)])
        assert existing == [allow(X)]

    def test_names_listed_once(self) -> None:
        with pytest.raises(ValidationError) as exc:
            granular_permissions.revoke([], [allow(X), allow(X), allow(Y)])
        assert exc.value.details[INVALID_ALLOW_PERMISSIONS] == [X.qualified_name, Y.qualified_name]
        assert str(exc.value) == (
            f"Invalid allow permissions: {X.qualified_name}, {Y.qualified_name}"
        )


class TestPartition:
    def test_split_by_action(self) -> None:
        allowed, denied = granular_permissions.partition([allow(X), deny(Y), deny(X)])
        assert allowed == {X}
        assert denied == {X, Y}

    def test_scope_restriction(self) -> None:
        allowed, denied = granular_permissions.partition(
            [allow(X), allow(Z), deny(Z)], grain="app", securable_item="billing"
        )
        assert allowed == {Z}
        assert denied == {Z}
