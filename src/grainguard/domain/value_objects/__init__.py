"""Domain value objects."""

from grainguard.domain.value_objects.group_source import GroupSource
from grainguard.domain.value_objects.permission_action import PermissionAction
from grainguard.domain.value_objects.permission_key import PermissionKey

__all__ = [
    "GroupSource",
    "PermissionAction",
    "PermissionKey",
]
