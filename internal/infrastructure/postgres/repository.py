"""
PostgreSQL Product Repository.

Implements the repository pattern for Product persistence with asyncpg.
All statements run on the connection of the request's unit of work.
"""

import time
from decimal import Decimal
from typing import Any, List, Optional

import asyncpg
from asyncpg import Pool

from internal.domain.product import Product, ProductFilter
from internal.infrastructure.metrics import DB_QUERY_DURATION
from internal.infrastructure.postgres.unit_of_work import PostgresUnitOfWork
from pkg.cancellation import CancellationToken


class PostgresProductRepository:
    """
    PostgreSQL implementation of the Product Repository.

    Writes stay inside the unit of work transaction until it commits.
    """

    def __init__(self, unit_of_work: PostgresUnitOfWork) -> None:
        """
        Initialize the repository.

        Args:
            unit_of_work: Unit of work providing the connection.
        """
        self._uow = unit_of_work

    async def get_by_filter(
        self,
        product_filter: ProductFilter,
        token: CancellationToken,
    ) -> List[Product]:
        """
        Get all products matching the filter.

        Args:
            product_filter: Query descriptor; unset fields are ignored.
            token: Cancellation token of the request.

        Returns:
            Matching products ordered by id.
        """
        conditions: list[str] = []
        args: list[Any] = []

        if product_filter.id is not None:
            args.append(product_filter.id)
            conditions.append(f"id = ${len(args)}")
        if product_filter.name is not None:
            args.append(product_filter.name)
            conditions.append(f"name = ${len(args)}")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        query = f"""
            SELECT id, name, description, price, active
            FROM products
            {where}
            ORDER BY id
        """

        start = time.perf_counter()
        rows = await token.run(self._uow.connection.fetch(query, *args))
        DB_QUERY_DURATION.labels(operation="select").observe(time.perf_counter() - start)

        return [self._row_to_entity(row) for row in rows]

    async def get_by_id(
        self,
        product_id: int,
        token: CancellationToken,
    ) -> Optional[Product]:
        """
        Get a product by id.

        Args:
            product_id: The id of the product.
            token: Cancellation token of the request.

        Returns:
            Product if found, None otherwise.
        """
        start = time.perf_counter()
        row = await token.run(
            self._uow.connection.fetchrow(
                """
                SELECT id, name, description, price, active
                FROM products
                WHERE id = $1
                """,
                product_id,
            )
        )
        DB_QUERY_DURATION.labels(operation="select").observe(time.perf_counter() - start)

        if not row:
            return None

        return self._row_to_entity(row)

    async def add(self, product: Product, token: CancellationToken) -> Product:
        """
        Insert a product.

        Args:
            product: The product to insert.
            token: Cancellation token of the request.

        Returns:
            The inserted product with its database id.
        """
        start = time.perf_counter()
        row = await token.run(
            self._uow.connection.fetchrow(
                """
                INSERT INTO products (name, description, price, active)
                VALUES ($1, $2, $3, $4)
                RETURNING id, name, description, price, active
                """,
                product.name,
                product.description,
                product.price,
                product.active,
            )
        )
        DB_QUERY_DURATION.labels(operation="insert").observe(time.perf_counter() - start)

        return self._row_to_entity(row)

    async def update(self, product: Product, token: CancellationToken) -> None:
        """
        Update a product.

        Args:
            product: The product to update.
            token: Cancellation token of the request.
        """
        if product.id is None:
            raise ValueError("Cannot update a product without an id")

        start = time.perf_counter()
        await token.run(
            self._uow.connection.execute(
                """
                UPDATE products
                SET name = $2,
                    description = $3,
                    price = $4,
                    active = $5
                WHERE id = $1
                """,
                product.id,
                product.name,
                product.description,
                product.price,
                product.active,
            )
        )
        DB_QUERY_DURATION.labels(operation="update").observe(time.perf_counter() - start)

    def _row_to_entity(self, row: asyncpg.Record) -> Product:
        """
        Convert a database row to a Product entity.

        Args:
            row: Database row.

        Returns:
            Product entity.
        """
        return Product(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=Decimal(str(row["price"])),
            active=row["active"],
        )


async def create_pool(dsn: str, min_size: int = 5, max_size: int = 20) -> Pool:
    """
    Create an asyncpg connection pool.

    Args:
        dsn: Database connection string.
        min_size: Minimum pool size.
        max_size: Maximum pool size.

    Returns:
        asyncpg connection pool.
    """
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min_size,
        max_size=max_size,
    )


async def check_database(pool: Pool) -> bool:
    """
    Probe the database with a trivial query.

    Returns:
        True if the database answered.
    """
    async with pool.acquire() as conn:
        return await conn.fetchval("SELECT 1") == 1
