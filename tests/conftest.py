"""Pytest fixtures for GrainGuard tests."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from grainguard.application.dto.principal import PrincipalContext
from grainguard.domain.entities import (
    GranularPermission,
    Group,
    GroupMember,
    Permission,
    Role,
    User,
)
from grainguard.domain.value_objects import GroupSource, PermissionAction, PermissionKey
from grainguard.infrastructure.persistence.memory.database import InMemoryDatabase
from grainguard.infrastructure.persistence.memory.unit_of_work import create_uow_factory

GRAIN = "app"
SECURABLE_ITEM = "patientsafety"
IDP = "windows"
SUBJECT = "alice"


# --- Seeding helpers ---


class Seeder:
    """Writes entities straight into an InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    def permission(
        self,
        name: str,
        grain: str = GRAIN,
        securable_item: str = SECURABLE_ITEM,
        is_deleted: bool = False,
    ) -> Permission:
        permission = Permission(
            id=uuid4(),
            grain=grain,
            securable_item=securable_item,
            name=name,
            created_at=datetime.now(UTC),
            is_deleted=is_deleted,
        )
        self.db.permissions[permission.id] = permission
        return permission

    def role(
        self,
        name: str,
        permissions: list[Permission] | None = None,
        denied: list[Permission] | None = None,
        parent: Role | None = None,
        grain: str = GRAIN,
        securable_item: str = SECURABLE_ITEM,
        is_deleted: bool = False,
    ) -> Role:
        role = Role(
            id=uuid4(),
            grain=grain,
            securable_item=securable_item,
            name=name,
            created_at=datetime.now(UTC),
            parent_role=parent.id if parent else None,
            permissions=[p.id for p in permissions or []],
            denied_permissions=[p.id for p in denied or []],
            is_deleted=is_deleted,
        )
        self.db.roles[role.id] = role
        if parent:
            parent.child_roles.append(role.id)
        return role

    def group(
        self,
        name: str,
        roles: list[Role] | None = None,
        source: GroupSource = GroupSource.DIRECTORY,
        users: list[tuple[str, str]] | None = None,
        extra_role_ids: list[UUID] | None = None,
        is_deleted: bool = False,
    ) -> Group:
        group = Group(
            id=name,
            name=name,
            source=source,
            created_at=datetime.now(UTC),
            roles=[r.id for r in roles or []] + list(extra_role_ids or []),
            users=[GroupMember(idp, sub) for idp, sub in users or []],
            is_deleted=is_deleted,
        )
        self.db.groups[group.name] = group
        return group

    def overrides(
        self,
        *entries: tuple[Permission | PermissionKey, PermissionAction],
        identity_provider: str = IDP,
        subject_id: str = SUBJECT,
    ) -> User:
        user = User(
            identity_provider=identity_provider,
            subject_id=subject_id,
            created_at=datetime.now(UTC),
            granular_permissions=[override(p, a) for p, a in entries],
        )
        self.db.users[(identity_provider, subject_id)] = user
        return user


def override(
    permission: Permission | PermissionKey, action: PermissionAction = PermissionAction.ALLOW
) -> GranularPermission:
    """GranularPermission for a catalog permission or a bare key."""
    key = permission.key if isinstance(permission, Permission) else permission
    return GranularPermission(key=key, action=action)


def principal(*groups: str, identity_provider: str = IDP, subject_id: str = SUBJECT) -> PrincipalContext:
    """Principal carrying the given group claims."""
    return PrincipalContext(
        identity_provider=identity_provider,
        subject_id=subject_id,
        groups=frozenset(groups),
    )


# --- Fixtures ---


@pytest.fixture
def db() -> InMemoryDatabase:
    """Fresh in-memory database for each test."""
    return InMemoryDatabase()


@pytest.fixture
def seed(db: InMemoryDatabase) -> Seeder:
    return Seeder(db)


@pytest.fixture
def uow_factory(db: InMemoryDatabase):
    """Factory returning async context manager with an InMemoryUnitOfWork over ``db``."""
    return create_uow_factory(db)
