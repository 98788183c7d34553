"""PostgreSQL async connection pool and statement execution."""

from collections.abc import Sequence

from psycopg import AsyncConnection, AsyncCursor
from psycopg_pool import AsyncConnectionPool


def create_pool(conninfo: str, min_size: int = 2, max_size: int = 10) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must call await pool.open()
    before use (e.g. via PoolLifespanMiddleware in ASGI lifespan).
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )


async def execute(
    conn: AsyncConnection,
    query: str,
    params: Sequence[object] = (),
) -> AsyncCursor:
    """Execute one statement in the unit of work's transaction.

    Not retried here: a failed statement aborts the transaction, so the
    whole unit of work is retried instead (see ``RetryingUseCase``).
    """
    return await conn.execute(query, params)
