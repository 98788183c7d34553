"""Domain entities."""

from grainguard.domain.entities.client import Client, SecurableItem
from grainguard.domain.entities.group import Group, GroupMember
from grainguard.domain.entities.permission import Permission
from grainguard.domain.entities.role import Role
from grainguard.domain.entities.soft_delete import SupportsSoftDelete, is_active
from grainguard.domain.entities.user import GranularPermission, User

__all__ = [
    "Client",
    "GranularPermission",
    "Group",
    "GroupMember",
    "Permission",
    "Role",
    "SecurableItem",
    "SupportsSoftDelete",
    "User",
    "is_active",
]
