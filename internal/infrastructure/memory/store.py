"""
In-process Product storage.

Implements the repository and unit-of-work ports on top of a
dictionary. Writes are staged per unit of work and become visible
to other units of work only on commit.
"""
import asyncio
from dataclasses import replace
from typing import Iterable, Optional

from internal.domain.product import Product, ProductFilter
from pkg.cancellation import CancellationToken
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


class InMemoryProductStore:
    """
    Committed product state shared by all units of work.

    Identifiers come from a sequence that is never rolled back,
    like a database serial column.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None) -> None:
        """
        Initialize the store.

        Args:
            products: Products to seed; missing identifiers are assigned.
        """
        self._products: dict[int, Product] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

        for product in products or []:
            product_id = product.id if product.id is not None else self.reserve_id()
            self._products[product_id] = replace(product, id=product_id)
            self._next_id = max(self._next_id, product_id + 1)

    def reserve_id(self) -> int:
        """Take the next identifier from the sequence."""
        product_id = self._next_id
        self._next_id += 1
        return product_id

    async def ping(self) -> bool:
        """Health probe; the store is always reachable."""
        return True

    def get(self, product_id: int) -> Optional[Product]:
        """Get a copy of a committed product."""
        product = self._products.get(product_id)
        return replace(product) if product else None

    def all(self) -> list[Product]:
        """Get copies of all committed products ordered by identifier."""
        return [replace(p) for _, p in sorted(self._products.items())]

    async def apply(
        self,
        inserts: dict[int, Product],
        updates: dict[int, Product],
    ) -> None:
        """
        Apply staged changes atomically.

        Raises:
            LookupError: If an update targets a product that does not
                exist; nothing is applied in that case.
        """
        async with self._lock:
            missing = [
                product_id
                for product_id in updates
                if product_id not in self._products and product_id not in inserts
            ]
            if missing:
                raise LookupError(f"Products {missing} do not exist")

            for product_id, product in inserts.items():
                self._products[product_id] = replace(product)
            for product_id, product in updates.items():
                self._products[product_id] = replace(product)


class InMemoryUnitOfWork:
    """Unit of work staging writes against an InMemoryProductStore."""

    def __init__(self, store: InMemoryProductStore) -> None:
        """
        Initialize the unit of work.

        Args:
            store: Shared committed state.
        """
        self.store = store
        self._inserts: dict[int, Product] = {}
        self._updates: dict[int, Product] = {}

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.has_pending_changes:
            logger.debug(
                "Discarding uncommitted changes",
                inserts=len(self._inserts),
                updates=len(self._updates),
            )
        self._inserts.clear()
        self._updates.clear()

    @property
    def has_pending_changes(self) -> bool:
        """Whether there are staged writes not yet committed."""
        return bool(self._inserts or self._updates)

    def stage_insert(self, product: Product) -> None:
        """Stage a new product (identifier already assigned)."""
        self._inserts[product.id] = replace(product)

    def stage_update(self, product: Product) -> None:
        """Stage changes to an existing product."""
        if product.id in self._inserts:
            self._inserts[product.id] = replace(product)
        else:
            self._updates[product.id] = replace(product)

    def pending(self) -> list[Product]:
        """Copies of the staged products."""
        return [replace(p) for p in (*self._inserts.values(), *self._updates.values())]

    async def commit(self, token: CancellationToken) -> None:
        """
        Flush all staged writes atomically.

        Args:
            token: Cancellation token of the request.

        Raises:
            OperationCancelledError: If cancelled before the changes apply.
            LookupError: If an update targets a missing product.
        """
        await token.run(self.store.apply(dict(self._inserts), dict(self._updates)))
        self._inserts.clear()
        self._updates.clear()


class InMemoryProductRepository:
    """
    Product repository reading committed state overlaid with the
    unit of work's own staged writes.

    Returned entities are copies; mutating one changes nothing until
    it is passed to ``update`` and committed.
    """

    def __init__(self, unit_of_work: InMemoryUnitOfWork) -> None:
        """
        Initialize the repository.

        Args:
            unit_of_work: Unit of work that stages the writes.
        """
        self._uow = unit_of_work

    async def get_by_filter(
        self,
        product_filter: ProductFilter,
        token: CancellationToken,
    ) -> list[Product]:
        """
        Get all products matching the filter.

        Args:
            product_filter: Query descriptor.
            token: Cancellation token of the request.

        Returns:
            Matching products ordered by identifier.
        """
        return await token.run(self._select(product_filter))

    async def get_by_id(
        self,
        product_id: int,
        token: CancellationToken,
    ) -> Optional[Product]:
        """
        Get a product by identifier.

        Returns:
            Product if found, None otherwise.
        """
        found = await token.run(self._select(ProductFilter(id=product_id)))
        return found[0] if found else None

    async def add(self, product: Product, token: CancellationToken) -> Product:
        """
        Stage a new product.

        Returns:
            Copy of the product with its assigned identifier.
        """
        token.raise_if_cancelled()
        created = replace(product, id=self._uow.store.reserve_id())
        self._uow.stage_insert(created)
        return replace(created)

    async def update(self, product: Product, token: CancellationToken) -> None:
        """
        Stage changes to an existing product.

        Raises:
            ValueError: If the product has no identifier.
        """
        if product.id is None:
            raise ValueError("Cannot update a product without an id")
        token.raise_if_cancelled()
        self._uow.stage_update(product)

    async def _select(self, product_filter: ProductFilter) -> list[Product]:
        view = {p.id: p for p in self._uow.store.all()}
        view.update({p.id: p for p in self._uow.pending()})
        return [p for _, p in sorted(view.items()) if product_filter.matches(p)]
