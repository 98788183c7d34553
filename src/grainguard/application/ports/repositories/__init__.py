"""Repository ports."""

from grainguard.application.ports.repositories.client_repository import ClientRepository
from grainguard.application.ports.repositories.group_repository import GroupRepository
from grainguard.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from grainguard.application.ports.repositories.role_repository import RoleRepository
from grainguard.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "ClientRepository",
    "GroupRepository",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
