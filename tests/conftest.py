"""
Pytest configuration and fixtures.
"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from internal.domain.product import Product
from internal.infrastructure.memory import (
    InMemoryProductRepository,
    InMemoryProductStore,
    InMemoryUnitOfWork,
)
from pkg.cancellation import CancellationToken


@pytest.fixture
def token():
    """Cancellation token that never fires on its own."""
    return CancellationToken.none()


@pytest.fixture
def product_data():
    """Sample product data for tests."""
    return {
        "name": "Widget",
        "description": "A small widget",
        "price": Decimal("9.99"),
    }


@pytest.fixture
def store():
    """Empty in-memory product store."""
    return InMemoryProductStore()


@pytest.fixture
def unit_of_work(store):
    """Unit of work over the in-memory store."""
    return InMemoryUnitOfWork(store)


@pytest.fixture
def repository(unit_of_work):
    """Repository bound to the in-memory unit of work."""
    return InMemoryProductRepository(unit_of_work)


@pytest.fixture
def calls():
    """Parent mock recording the order of repository and commit calls."""
    return MagicMock()


@pytest.fixture
def mock_repository(calls):
    """Create mock product repository."""
    repo = AsyncMock()
    repo.get_by_filter = AsyncMock(return_value=[])
    repo.get_by_id = AsyncMock(return_value=None)
    repo.add = AsyncMock(side_effect=lambda product, token: Product(
        id=1,
        name=product.name,
        description=product.description,
        price=product.price,
        active=product.active,
    ))
    repo.update = AsyncMock(return_value=None)
    calls.attach_mock(repo.get_by_filter, "get_by_filter")
    calls.attach_mock(repo.get_by_id, "get_by_id")
    calls.attach_mock(repo.add, "add")
    calls.attach_mock(repo.update, "update")
    return repo


@pytest.fixture
def mock_unit_of_work(calls):
    """Create mock unit of work."""
    uow = AsyncMock()
    uow.commit = AsyncMock(return_value=None)
    calls.attach_mock(uow.commit, "commit")
    return uow
