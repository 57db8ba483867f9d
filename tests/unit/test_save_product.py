"""
Unit tests for the save product use case.
"""
from decimal import Decimal

import pytest

from internal.domain.errors import DuplicateProductNameError, NullInputError
from internal.domain.product import Product, ProductFilter
from internal.infrastructure.memory import (
    InMemoryProductRepository,
    InMemoryProductStore,
    InMemoryUnitOfWork,
)
from internal.usecase.save_product import SaveProductUseCase
from pkg.cancellation import CancellationToken, OperationCancelledError


def _call_names(calls):
    return [c[0] for c in calls.mock_calls]


class TestSaveProductWithMocks:
    """Ordering and side effects of SaveProductUseCase."""

    @pytest.fixture
    def use_case(self, mock_repository, mock_unit_of_work):
        """Create use case instance."""
        return SaveProductUseCase(
            repository=mock_repository,
            unit_of_work=mock_unit_of_work,
        )

    @pytest.mark.asyncio
    async def test_reads_then_inserts_then_commits(
        self, use_case, calls, mock_repository, product_data, token
    ):
        """Test one read, one insert and one commit, in that order."""
        result = await use_case.execute(Product(**product_data), token)

        assert result.id == 1
        assert _call_names(calls) == ["get_by_filter", "add", "commit"]
        mock_repository.get_by_filter.assert_awaited_once_with(
            ProductFilter(id=None, name="Widget"),
            token,
        )

    @pytest.mark.asyncio
    async def test_commit_receives_token(self, use_case, mock_unit_of_work, product_data, token):
        """Test that the request token reaches the commit."""
        await use_case.execute(Product(**product_data), token)

        mock_unit_of_work.commit.assert_awaited_once_with(token)

    @pytest.mark.asyncio
    async def test_active_duplicate_rejected_without_writes(
        self, use_case, calls, mock_repository, product_data, token
    ):
        """Test that an active product with the same name blocks the save."""
        mock_repository.get_by_filter.return_value = [
            Product(id=7, name="Widget", active=True),
        ]

        with pytest.raises(DuplicateProductNameError) as exc_info:
            await use_case.execute(Product(**product_data), token)

        assert exc_info.value.name == "Widget"
        assert "already exists" in exc_info.value.message
        assert _call_names(calls) == ["get_by_filter"]

    @pytest.mark.asyncio
    async def test_inactive_duplicate_allowed(
        self, use_case, mock_repository, mock_unit_of_work, product_data, token
    ):
        """Test that inactive products with the same name do not block."""
        mock_repository.get_by_filter.return_value = [
            Product(id=7, name="Widget", active=False),
            Product(id=8, name="Widget", active=False),
        ]

        result = await use_case.execute(Product(**product_data), token)

        assert result.name == "Widget"
        mock_repository.add.assert_awaited_once()
        mock_unit_of_work.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_none_candidate_rejected_without_repository_access(
        self, use_case, calls, token
    ):
        """Test that a missing candidate never touches the repository."""
        with pytest.raises(NullInputError):
            await use_case.execute(None, token)

        assert calls.mock_calls == []

    @pytest.mark.asyncio
    async def test_insert_failure_propagates_without_commit(
        self, use_case, mock_repository, mock_unit_of_work, product_data, token
    ):
        """Test that persistence errors are neither wrapped nor retried."""
        failure = ConnectionError("database unavailable")
        mock_repository.add.side_effect = failure

        with pytest.raises(ConnectionError) as exc_info:
            await use_case.execute(Product(**product_data), token)

        assert exc_info.value is failure
        mock_repository.add.assert_awaited_once()
        mock_unit_of_work.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_propagates(
        self, use_case, mock_unit_of_work, product_data, token
    ):
        """Test that commit errors reach the caller unchanged."""
        mock_unit_of_work.commit.side_effect = OperationCancelledError("client_disconnected")

        with pytest.raises(OperationCancelledError) as exc_info:
            await use_case.execute(Product(**product_data), token)

        assert exc_info.value.reason == "client_disconnected"
        mock_unit_of_work.commit.assert_awaited_once()


class TestSaveProductScenarios:
    """End-to-end scenarios against the in-memory backend."""

    @pytest.mark.asyncio
    async def test_duplicate_of_active_product(self, token):
        """Scenario: an active "Widget" exists, saving another fails with no writes."""
        store = InMemoryProductStore([Product(id=1, name="Widget", price=Decimal("1"))])
        uow = InMemoryUnitOfWork(store)
        use_case = SaveProductUseCase(InMemoryProductRepository(uow), uow)

        with pytest.raises(DuplicateProductNameError):
            await use_case.execute(Product(name="Widget"), token)

        assert not uow.has_pending_changes
        assert [p.id for p in store.all()] == [1]

    @pytest.mark.asyncio
    async def test_save_into_empty_repository(self, store, unit_of_work, repository, token):
        """Scenario: empty repository, the product comes back with an id."""
        use_case = SaveProductUseCase(repository, unit_of_work)

        result = await use_case.execute(
            Product(name="Widget", price=Decimal("9.99")),
            token,
        )

        assert result.id is not None
        assert result.name == "Widget"
        assert result.price == Decimal("9.99")
        assert result.active is True
        assert store.get(result.id) == result

    @pytest.mark.asyncio
    async def test_save_next_to_inactive_namesake(self, token):
        """Test creating a product whose name is only used by inactive ones."""
        store = InMemoryProductStore([Product(id=4, name="Widget", active=False)])
        uow = InMemoryUnitOfWork(store)
        use_case = SaveProductUseCase(InMemoryProductRepository(uow), uow)

        result = await use_case.execute(Product(name="Widget"), token)

        assert result.id == 5
        assert [(p.id, p.active) for p in store.all()] == [(4, False), (5, True)]

    @pytest.mark.asyncio
    async def test_second_save_in_same_unit_of_work_sees_first(self, repository, unit_of_work, token):
        """Test that the duplicate check covers the request's own inserts."""
        use_case = SaveProductUseCase(repository, unit_of_work)
        await use_case.execute(Product(name="Widget"), token)

        with pytest.raises(DuplicateProductNameError):
            await use_case.execute(Product(name="Widget"), token)

    @pytest.mark.asyncio
    async def test_cancelled_token_leaves_store_untouched(self, store, unit_of_work, repository):
        """Test that a fired token aborts the save before anything is committed."""
        token = CancellationToken()
        token.cancel()
        use_case = SaveProductUseCase(repository, unit_of_work)

        with pytest.raises(OperationCancelledError):
            await use_case.execute(Product(name="Widget"), token)

        assert store.all() == []
