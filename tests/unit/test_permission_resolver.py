"""Unit tests for effective permission resolution."""

import logging

import pytest

from grainguard.application.dto.permission_dto import RoleCreateInput
from grainguard.application.services.permission_resolver import PermissionResolver, merge
from grainguard.application.use_cases.role.add_role import AddRoleUseCase
from grainguard.application.use_cases.user.get_effective_permissions import (
    GetEffectivePermissionsUseCase,
)
from grainguard.domain.exceptions import DataIntegrityError, IncompatiblePermission
from grainguard.domain.value_objects import PermissionAction, PermissionKey

from tests.conftest import Seeder, principal

ALLOW = PermissionAction.ALLOW
DENY = PermissionAction.DENY


async def _resolve(uow_factory, who, grain=None, securable_item=None) -> list[str]:
    use_case = GetEffectivePermissionsUseCase(unit_of_work_factory=uow_factory)
    result = await use_case.execute(who, grain=grain, securable_item=securable_item)
    return result.permissions


def test_merge_user_deny_wins() -> None:
    p = PermissionKey("app", "x", "p")
    q = PermissionKey("app", "x", "q")
    r = PermissionKey("app", "x", "r")
    assert merge({p, q}, {r}, {q, r}) == {p}


@pytest.mark.asyncio
async def test_ancestor_inheritance(seed: Seeder, uow_factory) -> None:
    """Principal assigned the leaf of A..E gets all five, not child F's."""
    perms = {name: seed.permission(name) for name in "abcdef"}
    a = seed.role("A", [perms["a"]])
    b = seed.role("B", [perms["b"]], parent=a)
    c = seed.role("C", [perms["c"]], parent=b)
    d = seed.role("D", [perms["d"]], parent=c)
    e = seed.role("E", [perms["e"]], parent=d)
    seed.role("F", [perms["f"]], parent=e)
    seed.group("g", [e])

    result = await _resolve(uow_factory, principal("g"))

    assert result == sorted(perms[n].qualified_name for n in "abcde")


@pytest.mark.asyncio
async def test_group_union(seed: Seeder, uow_factory) -> None:
    p1 = seed.permission("p1")
    p2 = seed.permission("p2")
    seed.group("g1", [seed.role("r1", [p1])])
    seed.group("g2", [seed.role("r2", [p2])])

    result = await _resolve(uow_factory, principal("g1", "g2"))

    assert result == ["app/patientsafety.p1", "app/patientsafety.p2"]


@pytest.mark.asyncio
async def test_user_deny_overrides_role_grant(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p")
    other = seed.permission("other")
    seed.group("g", [seed.role("r", [p, other])])
    seed.overrides((p, DENY))

    result = await _resolve(uow_factory, principal("g"))

    assert result == [other.qualified_name]


@pytest.mark.asyncio
async def test_user_allow_adds_beyond_roles(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p")
    seed.group("g", [seed.role("r", [p])])
    seed.overrides((PermissionKey("app", "billing", "q"), ALLOW))

    result = await _resolve(uow_factory, principal("g"))

    assert result == ["app/billing.q", "app/patientsafety.p"]


@pytest.mark.asyncio
async def test_role_deny_suppresses_cross_role_grant(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p")
    q = seed.permission("q")
    s = seed.permission("s")
    seed.group("g1", [seed.role("r1", [p, q])])
    seed.group("g2", [seed.role("r2", [s], denied=[p])])

    result = await _resolve(uow_factory, principal("g1", "g2"))

    assert result == [q.qualified_name, s.qualified_name]


@pytest.mark.asyncio
async def test_role_deny_does_not_remove_user_allow(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p")
    seed.group("g", [seed.role("r", denied=[p])])
    seed.overrides((p, ALLOW))

    result = await _resolve(uow_factory, principal("g"))

    assert result == [p.qualified_name]


@pytest.mark.asyncio
async def test_user_deny_beats_user_allow(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p")
    seed.overrides((p, ALLOW), (p, DENY))

    result = await _resolve(uow_factory, principal())

    assert result == []


@pytest.mark.asyncio
async def test_resolution_is_idempotent(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p")
    q = seed.permission("q")
    seed.group("g", [seed.role("r", [p])])
    seed.overrides((q, ALLOW))

    first = await _resolve(uow_factory, principal("g"))
    second = await _resolve(uow_factory, principal("g"))

    assert first == second


@pytest.mark.asyncio
async def test_scoped_is_subset_of_unscoped(seed: Seeder, uow_factory) -> None:
    in_scope = seed.permission("read")
    elsewhere = seed.permission("read", securable_item="billing")
    other_grain = seed.permission("read", grain="dos", securable_item="patientsafety")
    seed.group(
        "g",
        [
            seed.role("r1", [in_scope]),
            seed.role("r2", [elsewhere], securable_item="billing"),
            seed.role("r3", [other_grain], grain="dos"),
        ],
    )
    seed.overrides((PermissionKey("app", "billing", "write"), ALLOW))

    unscoped = await _resolve(uow_factory, principal("g"))
    scoped = await _resolve(uow_factory, principal("g"), "app", "patientsafety")
    by_grain = await _resolve(uow_factory, principal("g"), "app")

    assert scoped == [in_scope.qualified_name]
    assert set(scoped) <= set(unscoped)
    assert set(by_grain) == {
        in_scope.qualified_name,
        elsewhere.qualified_name,
        "app/billing.write",
    }
    assert len(unscoped) == 4


@pytest.mark.asyncio
async def test_cross_scope_parent_rejected_keeps_scoped_subset(seed: Seeder, uow_factory) -> None:
    view = seed.permission("view", securable_item="x")
    parent = seed.role("px", denied=[view], securable_item="x")
    r1 = seed.role("r1", [view], parent=parent, securable_item="x")

    add_role = AddRoleUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(IncompatiblePermission):
        await add_role.execute(
            RoleCreateInput(grain="app", securable_item="y", name="r2", parent_role=parent.id)
        )
    async with uow_factory() as uow:
        assert await uow.roles.list_by_scope("app", "y", "r2") == []
        stored_parent = await uow.roles.get_by_id(parent.id)
    assert stored_parent.child_roles == [r1.id]

    seed.group("g", [r1])
    unscoped = await _resolve(uow_factory, principal("g"))
    scoped = await _resolve(uow_factory, principal("g"), "app", "x")
    assert set(scoped) <= set(unscoped)
    assert scoped == []


@pytest.mark.asyncio
async def test_deleted_permission_not_granted(seed: Seeder, uow_factory) -> None:
    p = seed.permission("p", is_deleted=True)
    seed.group("g", [seed.role("r", [p])])

    assert await _resolve(uow_factory, principal("g")) == []


@pytest.mark.asyncio
async def test_integrity_error_fails_request(seed: Seeder, uow_factory, caplog) -> None:
    a = seed.role("a")
    b = seed.role("b", parent=a)
    a.parent_role = b.id
    seed.group("g", [b])

    with caplog.at_level(logging.ERROR):
        with pytest.raises(DataIntegrityError):
            await _resolve(uow_factory, principal("g"))
    assert str(b.id) in caplog.text


@pytest.mark.asyncio
async def test_unknown_principal_has_nothing(uow_factory) -> None:
    async with uow_factory() as uow:
        keys = await PermissionResolver(uow).resolve(principal("nobody"))
    assert keys == set()
