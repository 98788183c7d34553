"""Granular permission overrides - validation of grant and revoke batches."""

from collections.abc import Sequence

from grainguard.domain.entities import GranularPermission
from grainguard.domain.exceptions import ValidationError
from grainguard.domain.value_objects import PermissionAction, PermissionKey

INVALID_ALLOW_PERMISSIONS = "Invalid allow permissions"
INVALID_DENY_PERMISSIONS = "Invalid deny permissions"
INVALID_ALLOW_PERMISSION_ACTIONS = "Invalid allow permission actions"
INVALID_DENY_PERMISSION_ACTIONS = "Invalid deny permission actions"

NO_PERMISSIONS_MESSAGE = (
    "No permissions specified, ensure an array of permissions is included in the request."
)


def _opposite(action: PermissionAction) -> PermissionAction:
    if action == PermissionAction.ALLOW:
        return PermissionAction.DENY
    return PermissionAction.ALLOW


def partition(
    overrides: Sequence[GranularPermission],
    grain: str | None = None,
    securable_item: str | None = None,
) -> tuple[set[PermissionKey], set[PermissionKey]]:
    """Split overrides into (allow, deny) key sets restricted to the scope."""
    allow: set[PermissionKey] = set()
    deny: set[PermissionKey] = set()
    for override in overrides:
        if not override.key.in_scope(grain, securable_item):
            continue
        if override.action == PermissionAction.DENY:
            deny.add(override.key)
        else:
            allow.add(override.key)
    return allow, deny


def grant(
    existing: Sequence[GranularPermission], requested: Sequence[GranularPermission]
) -> list[GranularPermission]:
    """Return the override list with requested records upserted.

    Allow and Deny records for the same permission are kept side by side.
    """
    if not requested:
        raise ValidationError(NO_PERMISSIONS_MESSAGE)
    result = list(existing)
    present = set(result)
    for override in requested:
        if override not in present:
            result.append(override)
            present.add(override)
    return result


def revoke(
    existing: Sequence[GranularPermission], requested: Sequence[GranularPermission]
) -> list[GranularPermission]:
    """Return the override list with requested records removed.

    Every entry must match a stored record with the same action; all
    mismatches are collected into one ValidationError and nothing is removed.
    """
    if not requested:
        raise ValidationError(NO_PERMISSIONS_MESSAGE)

    present = set(existing)
    problems: dict[str, list[str]] = {
        INVALID_ALLOW_PERMISSIONS: [],
        INVALID_DENY_PERMISSIONS: [],
        INVALID_ALLOW_PERMISSION_ACTIONS: [],
        INVALID_DENY_PERMISSION_ACTIONS: [],
    }
    for override in requested:
        if override in present:
            continue
        is_allow = override.action == PermissionAction.ALLOW
        if GranularPermission(override.key, _opposite(override.action)) in present:
            label = INVALID_ALLOW_PERMISSION_ACTIONS if is_allow else INVALID_DENY_PERMISSION_ACTIONS
        else:
            label = INVALID_ALLOW_PERMISSIONS if is_allow else INVALID_DENY_PERMISSIONS
        if override.qualified_name not in problems[label]:
            problems[label].append(override.qualified_name)

    details = {label: names for label, names in problems.items() if names}
    if details:
        message = "; ".join(f"{label}: {', '.join(names)}" for label, names in details.items())
        raise ValidationError(message, details)

    removed = set(requested)
    return [o for o in existing if o not in removed]
