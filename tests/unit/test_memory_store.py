"""
Unit tests for the in-memory repository and unit of work.
"""
from decimal import Decimal

import pytest

from internal.domain.product import Product, ProductFilter
from internal.infrastructure.memory import (
    InMemoryProductRepository,
    InMemoryProductStore,
    InMemoryUnitOfWork,
)
from pkg.cancellation import CancellationToken, OperationCancelledError


class TestInMemoryStore:
    """Tests for InMemoryProductStore seeding and sequence."""

    def test_seed_assigns_missing_ids(self):
        """Test that seeded products without ids get sequential ids."""
        store = InMemoryProductStore([Product(name="A"), Product(id=10, name="B"), Product(name="C")])

        assert [(p.id, p.name) for p in store.all()] == [(1, "A"), (10, "B"), (11, "C")]
        assert store.reserve_id() == 12

    @pytest.mark.asyncio
    async def test_apply_rejects_update_of_missing_product(self):
        """Test that a failing commit applies nothing."""
        store = InMemoryProductStore([Product(id=1, name="A")])

        with pytest.raises(LookupError):
            await store.apply(
                inserts={2: Product(id=2, name="B")},
                updates={5: Product(id=5, name="X")},
            )

        assert [p.id for p in store.all()] == [1]


class TestInMemoryUnitOfWork:
    """Tests for staging, visibility and commit."""

    @pytest.mark.asyncio
    async def test_insert_invisible_to_others_until_commit(self, store, token):
        """Test that staged inserts stay private to their unit of work."""
        writer_uow = InMemoryUnitOfWork(store)
        writer = InMemoryProductRepository(writer_uow)
        reader = InMemoryProductRepository(InMemoryUnitOfWork(store))

        created = await writer.add(Product(name="Widget"), token)

        assert await writer.get_by_id(created.id, token) == created
        assert await reader.get_by_id(created.id, token) is None

        await writer_uow.commit(token)

        assert await reader.get_by_id(created.id, token) == created

    @pytest.mark.asyncio
    async def test_returned_entities_are_copies(self, token):
        """Test that mutating a fetched product changes nothing by itself."""
        store = InMemoryProductStore([Product(id=1, name="Old")])
        repository = InMemoryProductRepository(InMemoryUnitOfWork(store))

        product = await repository.get_by_id(1, token)
        product.name = "Mutated"

        assert (await repository.get_by_id(1, token)).name == "Old"
        assert store.get(1).name == "Old"

    @pytest.mark.asyncio
    async def test_exit_without_commit_discards_changes(self, store, token):
        """Test that closing the unit of work drops staged writes."""
        async with InMemoryUnitOfWork(store) as uow:
            await InMemoryProductRepository(uow).add(Product(name="Widget"), token)
            assert uow.has_pending_changes

        assert not uow.has_pending_changes
        assert store.all() == []

    @pytest.mark.asyncio
    async def test_commit_applies_inserts_and_updates_together(self, token):
        """Test a commit with both kinds of staged writes."""
        store = InMemoryProductStore([Product(id=1, name="Old", price=Decimal("1"))])
        uow = InMemoryUnitOfWork(store)
        repository = InMemoryProductRepository(uow)

        existing = await repository.get_by_id(1, token)
        existing.apply_changes(name="New", description=None, price=Decimal("2"))
        await repository.update(existing, token)
        created = await repository.add(Product(name="Fresh"), token)

        assert store.get(1).name == "Old"
        await uow.commit(token)

        assert store.get(1).name == "New"
        assert store.get(created.id).name == "Fresh"
        assert not uow.has_pending_changes

    @pytest.mark.asyncio
    async def test_cancelled_commit_applies_nothing(self, store):
        """Test that a fired token aborts the commit."""
        live = CancellationToken()
        uow = InMemoryUnitOfWork(store)
        await InMemoryProductRepository(uow).add(Product(name="Widget"), live)

        fired = CancellationToken()
        fired.cancel()
        with pytest.raises(OperationCancelledError):
            await uow.commit(fired)

        assert store.all() == []
        assert uow.has_pending_changes

    @pytest.mark.asyncio
    async def test_filter_by_name(self, token):
        """Test exact-name filtering across active and inactive products."""
        store = InMemoryProductStore([
            Product(id=1, name="Widget", active=False),
            Product(id=2, name="Gadget"),
            Product(id=3, name="Widget"),
        ])
        repository = InMemoryProductRepository(InMemoryUnitOfWork(store))

        found = await repository.get_by_filter(ProductFilter(name="Widget"), token)

        assert [p.id for p in found] == [1, 3]

    @pytest.mark.asyncio
    async def test_update_without_id_rejected(self, repository, token):
        """Test that an unsaved product cannot be updated."""
        with pytest.raises(ValueError):
            await repository.update(Product(name="Ghost"), token)
