"""Unit tests for PostgreSQL repositories over a mocked connection."""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import psycopg
import pytest

from grainguard.application.use_cases.user.grant_granular_permissions import (
    GrantGranularPermissionsUseCase,
)
from grainguard.domain.entities import Client, GranularPermission, SecurableItem, User
from grainguard.domain.exceptions import AlreadyExists, StorageError, TransientStorageError
from grainguard.domain.value_objects import GroupSource, PermissionAction, PermissionKey
from grainguard.infrastructure.persistence.postgres.client_repository import (
    PostgresClientRepository,
)
from grainguard.infrastructure.persistence.postgres.group_repository import (
    PostgresGroupRepository,
)
from grainguard.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from grainguard.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from grainguard.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)
from grainguard.infrastructure.persistence.retry import RetryingUseCase, RetryPolicy

NOW = datetime.now(UTC)
FAST = RetryPolicy(max_attempts=3, initial_wait=0, max_wait=0)


def _conn(rows: list[tuple]) -> MagicMock:
    cursor = MagicMock()
    cursor.fetchone = AsyncMock(return_value=rows[0] if rows else None)
    cursor.fetchall = AsyncMock(return_value=rows)
    conn = MagicMock()
    conn.execute = AsyncMock(return_value=cursor)
    conn.closed = False
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


class _Pool:
    """Hands out the given connections in order, one per unit of work."""

    def __init__(self, *conns: MagicMock) -> None:
        self._conns = list(conns)

    @asynccontextmanager
    async def connection(self):
        yield self._conns.pop(0)


class TestRoleRepository:
    @pytest.mark.asyncio
    async def test_maps_row(self) -> None:
        role_id, parent_id, perm_id = uuid4(), uuid4(), uuid4()
        row = (role_id, "app", "x", "viewer", parent_id, [], [perm_id], [], NOW, "admin", None, None, False)
        conn = _conn([row])

        role = await PostgresRoleRepository(conn).get_by_id(role_id)

        assert role.id == role_id
        assert role.parent_role == parent_id
        assert role.permissions == [perm_id]
        assert role.created_by == "admin"
        query, params = conn.execute.await_args.args
        assert "AND NOT is_deleted" in query
        assert params == (role_id,)

    @pytest.mark.asyncio
    async def test_include_deleted(self) -> None:
        conn = _conn([])
        repo = PostgresRoleRepository(conn)
        assert await repo.get_by_id(uuid4(), include_deleted=True) is None
        query, _ = conn.execute.await_args.args
        assert "is_deleted" not in query.split("WHERE", 1)[1]

    @pytest.mark.asyncio
    async def test_list_by_scope_filters(self) -> None:
        conn = _conn([])
        await PostgresRoleRepository(conn).list_by_scope("app", None, "viewer")
        query, params = conn.execute.await_args.args
        assert "grain = %s" in query
        assert "securable_item" not in query.split("WHERE", 1)[1]
        assert params == ["app", "viewer"]

    @pytest.mark.asyncio
    async def test_get_many_empty_skips_query(self) -> None:
        conn = _conn([])
        assert await PostgresRoleRepository(conn).get_many(set()) == []
        conn.execute.assert_not_awaited()


class TestGroupRepository:
    @pytest.mark.asyncio
    async def test_maps_users(self) -> None:
        role_id = uuid4()
        conn = _conn(
            [
                (
                    "team",
                    "team",
                    "custom",
                    [role_id],
                    [{"identity_provider": "windows", "subject_id": "alice"}],
                    NOW,
                    False,
                )
            ]
        )

        group = await PostgresGroupRepository(conn).get_by_name("team")

        assert group.source == GroupSource.CUSTOM
        assert group.roles == [role_id]
        assert group.has_user("windows", "alice")

    @pytest.mark.asyncio
    async def test_list_by_member_uses_containment(self) -> None:
        conn = _conn([])
        await PostgresGroupRepository(conn).list_by_member("windows", "alice")
        query, params = conn.execute.await_args.args
        assert "users @> %s" in query
        assert params[0] == "custom"


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_maps_overrides(self) -> None:
        conn = _conn(
            [
                (
                    "windows",
                    "alice",
                    [{"grain": "app", "securable_item": "x", "name": "read", "action": "deny"}],
                    NOW,
                    None,
                    False,
                )
            ]
        )

        user = await PostgresUserRepository(conn).get_for_update("windows", "alice")

        assert user.granular_permissions[0].qualified_name == "app/x.read"
        assert user.granular_permissions[0].action == PermissionAction.DENY
        query, _ = conn.execute.await_args.args
        assert query.endswith("FOR UPDATE")

    @pytest.mark.asyncio
    async def test_get_for_update_inserts_missing_row_before_locking(self) -> None:
        conn = _conn([("windows", "bob", [], NOW, None, False)])

        user = await PostgresUserRepository(conn).get_for_update("windows", "bob")

        assert user.granular_permissions == []
        (insert, insert_params), (select, _) = [c.args for c in conn.execute.await_args_list]
        assert insert.startswith("INSERT INTO principal")
        assert insert.endswith("ON CONFLICT (identity_provider, subject_id) DO NOTHING")
        assert insert_params == ("windows", "bob")
        assert select.startswith("SELECT") and select.endswith("FOR UPDATE")

    @pytest.mark.asyncio
    async def test_create_upserts(self) -> None:
        conn = _conn([])
        user = User(identity_provider="windows", subject_id="bob", created_at=NOW)

        await PostgresUserRepository(conn).create(user)

        query, _ = conn.execute.await_args.args
        assert "ON CONFLICT (identity_provider, subject_id) DO UPDATE" in query

    @pytest.mark.asyncio
    async def test_statement_failure_not_retried_in_transaction(self) -> None:
        conn = _conn([])
        conn.execute.side_effect = psycopg.OperationalError("reset")

        with pytest.raises(psycopg.OperationalError):
            await PostgresUserRepository(conn).get("windows", "alice")
        assert conn.execute.await_count == 1


class TestClientRepository:
    @pytest.mark.asyncio
    async def test_maps_item_tree(self) -> None:
        top_id, child_id = uuid4(), uuid4()
        tree = {
            "id": str(top_id),
            "name": "app",
            "created_at": NOW.isoformat(),
            "securable_items": [
                {"id": str(child_id), "name": "billing", "created_at": NOW.isoformat()}
            ],
        }
        conn = _conn([("app", "App", tree, NOW, "admin", None, None, False)])

        client = await PostgresClientRepository(conn).get("app")

        assert client.top_level_securable_item.id == top_id
        assert client.top_level_securable_item.find(child_id).name == "billing"
        assert client.created_by == "admin"

    @pytest.mark.asyncio
    async def test_create_live_duplicate(self) -> None:
        conn = _conn([])
        conn.execute.return_value.rowcount = 0
        client = Client(
            id="app",
            name="App",
            created_at=NOW,
            top_level_securable_item=SecurableItem(id=uuid4(), name="app", created_at=NOW),
        )

        with pytest.raises(AlreadyExists):
            await PostgresClientRepository(conn).create(client)
        query, params = conn.execute.await_args.args
        assert query.endswith("WHERE client.is_deleted")
        assert params[2].obj["name"] == "app"


READ_ALLOW = {"grain": "app", "securable_item": "x", "name": "read", "action": "allow"}
WRITE = GranularPermission(PermissionKey("app", "x", "write"), PermissionAction.ALLOW)


def _grant(pool: _Pool) -> RetryingUseCase:
    use_case = GrantGranularPermissionsUseCase(unit_of_work_factory=create_uow_factory(pool))
    return RetryingUseCase(use_case, FAST)


class TestUnitOfWorkRetry:
    @pytest.mark.asyncio
    async def test_conflict_reruns_on_fresh_transaction(self) -> None:
        first = _conn([("windows", "alice", [READ_ALLOW], NOW, None, False)])
        first.execute.side_effect = psycopg.errors.SerializationFailure("conflict")
        second = _conn([("windows", "alice", [READ_ALLOW], NOW, None, False)])

        user = await _grant(_Pool(first, second)).execute("windows", "alice", [WRITE])

        assert sorted(g.qualified_name for g in user.granular_permissions) == [
            "app/x.read",
            "app/x.write",
        ]
        first.rollback.assert_awaited()
        first.commit.assert_not_awaited()
        second.commit.assert_awaited_once()
        second.rollback.assert_not_awaited()
        update, params = second.execute.await_args.args
        assert update.startswith("UPDATE principal")
        assert len(params[0].obj) == 2

    @pytest.mark.asyncio
    async def test_transaction_failure_is_transient(self) -> None:
        conn = _conn([])
        conn.execute.side_effect = psycopg.OperationalError("down")
        factory = create_uow_factory(_Pool(conn))

        with pytest.raises(TransientStorageError):
            async with factory() as uow:
                await uow.users.get("windows", "alice")
        conn.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_storage_error(self) -> None:
        conns = [_conn([]) for _ in range(FAST.max_attempts)]
        for conn in conns:
            conn.execute.side_effect = psycopg.OperationalError("down")

        with pytest.raises(StorageError):
            await _grant(_Pool(*conns)).execute("windows", "alice", [WRITE])
        for conn in conns:
            conn.execute.assert_awaited_once()
            conn.commit.assert_not_awaited()
