"""
PostgreSQL Unit of Work.

Holds one pooled connection and one open transaction for the
lifetime of a request.
"""
import time
from typing import Optional

import asyncpg
from asyncpg import Pool
from asyncpg.transaction import Transaction

from internal.infrastructure.metrics import DB_QUERY_DURATION
from pkg.cancellation import CancellationToken
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


class PostgresUnitOfWork:
    """
    Transaction boundary backed by an asyncpg connection.

    Usage::

        async with PostgresUnitOfWork(pool) as uow:
            repository = PostgresProductRepository(uow)
            ...
            await uow.commit(token)

    Anything not committed when the block exits is rolled back.
    """

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the unit of work.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool
        self._conn: Optional[asyncpg.Connection] = None
        self._tx: Optional[Transaction] = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn = await self._pool.acquire()
        try:
            await self._begin()
        except BaseException:
            await self._pool.release(self._conn)
            self._conn = None
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if self._tx is not None:
                await self._tx.rollback()
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("Rollback failed, discarding connection", error=str(e))
            self._conn.terminate()
        finally:
            self._tx = None
            await self._pool.release(self._conn)
            self._conn = None

    @property
    def connection(self) -> asyncpg.Connection:
        """
        Get the connection of the current transaction.

        Raises:
            RuntimeError: If used outside ``async with``.
        """
        if self._conn is None:
            raise RuntimeError("PostgresUnitOfWork used outside of 'async with'")
        return self._conn

    async def commit(self, token: CancellationToken) -> None:
        """
        Commit the open transaction and start a new one.

        Args:
            token: Cancellation token of the request.

        Raises:
            OperationCancelledError: If the token fires before the
                commit completes.
        """
        if self._tx is None:
            raise RuntimeError("PostgresUnitOfWork used outside of 'async with'")

        start = time.perf_counter()
        tx = self._tx
        await token.run(tx.commit())
        DB_QUERY_DURATION.labels(operation="commit").observe(time.perf_counter() - start)

        self._tx = None
        await self._begin()

    async def _begin(self) -> None:
        tx = self.connection.transaction()
        await tx.start()
        self._tx = tx
