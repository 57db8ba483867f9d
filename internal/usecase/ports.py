"""
Persistence ports used by the product use cases.

Both collaborators are request-scoped and externally synchronized;
the use cases add no locking of their own.
"""
from typing import Optional, Protocol

from internal.domain.product import Product, ProductFilter
from pkg.cancellation import CancellationToken


class ProductRepository(Protocol):
    """Protocol for product repository operations."""

    async def get_by_filter(
        self,
        product_filter: ProductFilter,
        token: CancellationToken,
    ) -> list[Product]:
        """Get all products matching the filter."""
        ...

    async def get_by_id(
        self,
        product_id: int,
        token: CancellationToken,
    ) -> Optional[Product]:
        """Get product by identifier."""
        ...

    async def add(self, product: Product, token: CancellationToken) -> Product:
        """Insert a product and return it with its assigned identifier."""
        ...

    async def update(self, product: Product, token: CancellationToken) -> None:
        """Persist changes to an existing product."""
        ...


class UnitOfWork(Protocol):
    """Protocol for the transactional boundary of a request."""

    async def commit(self, token: CancellationToken) -> None:
        """Flush all pending changes atomically."""
        ...
