"""Unit tests for RoleAggregator."""

import pytest

from grainguard.application.services.role_aggregator import RoleAggregate, RoleAggregator
from grainguard.application.services.role_graph import RoleGraph
from grainguard.domain.exceptions import DataIntegrityError

from tests.conftest import Seeder


def test_effective_is_granted_minus_denied() -> None:
    aggregate = RoleAggregate(granted={1, 2, 3}, denied={2, 4})
    assert aggregate.effective == {1, 3}


@pytest.mark.asyncio
async def test_aggregate_includes_ancestor_permissions(seed: Seeder, uow_factory) -> None:
    """Leaf role inherits every ancestor's grants, not its descendants'."""
    perms = {name: seed.permission(name) for name in "abcdef"}
    a = seed.role("A", [perms["a"]])
    b = seed.role("B", [perms["b"]], parent=a)
    c = seed.role("C", [perms["c"]], parent=b)
    d = seed.role("D", [perms["d"]], parent=c)
    e = seed.role("E", [perms["e"]], parent=d)
    seed.role("F", [perms["f"]], parent=e)

    async with uow_factory() as uow:
        aggregate = await RoleAggregator(RoleGraph(uow.roles)).aggregate([e])

    assert aggregate.effective == {perms[n].id for n in "abcde"}


@pytest.mark.asyncio
async def test_denial_from_one_chain_removes_grant_of_another(
    seed: Seeder, uow_factory
) -> None:
    p = seed.permission("p")
    q = seed.permission("q")
    r = seed.permission("r")
    r1 = seed.role("r1", [p, q])
    r2 = seed.role("r2", [r], denied=[p])

    async with uow_factory() as uow:
        aggregate = await RoleAggregator(RoleGraph(uow.roles)).aggregate([r1, r2])

    assert aggregate.effective == {q.id, r.id}


@pytest.mark.asyncio
async def test_ancestor_denial_applies(seed: Seeder, uow_factory) -> None:
    """A parent's denial removes the child's own grant."""
    p = seed.permission("p")
    parent = seed.role("parent", denied=[p])
    child = seed.role("child", [p], parent=parent)

    async with uow_factory() as uow:
        aggregate = await RoleAggregator(RoleGraph(uow.roles)).aggregate([child])

    assert aggregate.granted == {p.id}
    assert aggregate.effective == set()


@pytest.mark.asyncio
async def test_broken_chain_fails_aggregation(seed: Seeder, uow_factory) -> None:
    a = seed.role("a")
    b = seed.role("b", parent=a)
    del seed.db.roles[a.id]
    async with uow_factory() as uow:
        with pytest.raises(DataIntegrityError):
            await RoleAggregator(RoleGraph(uow.roles)).aggregate([b])


@pytest.mark.asyncio
async def test_empty_input(uow_factory) -> None:
    async with uow_factory() as uow:
        aggregate = await RoleAggregator(RoleGraph(uow.roles)).aggregate([])
    assert aggregate.effective == set()
