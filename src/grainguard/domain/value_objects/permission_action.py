"""Permission action attached to a role grant or a granular override."""

from enum import StrEnum


class PermissionAction(StrEnum):
    """Allow or deny modifier."""

    ALLOW = "allow"
    DENY = "deny"
