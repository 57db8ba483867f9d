"""
Update Product Use Case.

Applies new name, description and price to an existing product.
"""
from decimal import Decimal
from typing import Optional

from internal.infrastructure.metrics import PRODUCT_OPERATIONS_TOTAL
from internal.usecase.ports import ProductRepository, UnitOfWork
from pkg.cancellation import CancellationToken
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


class UpdateProductInput:
    """Input DTO for updating a product."""

    def __init__(
        self,
        id: int,
        name: str,
        description: Optional[str],
        price: Decimal,
    ) -> None:
        """
        Initialize update product input.

        Args:
            id: Identifier of the product to update.
            name: New product name.
            description: New description.
            price: New price.
        """
        self.id = id
        self.name = name
        self.description = description
        self.price = price


class UpdateProductUseCase:
    """
    Use case for updating an existing product.

    A missing product is reported through the return value, not an
    exception. The duplicate-name rule is not re-checked here.
    """

    def __init__(
        self,
        repository: ProductRepository,
        unit_of_work: UnitOfWork,
    ) -> None:
        """
        Initialize the use case.

        Args:
            repository: Product repository for persistence.
            unit_of_work: Transaction boundary of the current request.
        """
        self._repository = repository
        self._unit_of_work = unit_of_work

    async def execute(
        self,
        input_dto: UpdateProductInput,
        token: CancellationToken,
    ) -> bool:
        """
        Execute the update product use case.

        Args:
            input_dto: Identifier and new field values.
            token: Cancellation token of the request.

        Returns:
            True once the update is committed, False if no product
            has the given identifier.
        """
        product = await self._repository.get_by_id(input_dto.id, token)
        if product is None:
            PRODUCT_OPERATIONS_TOTAL.labels(operation="update", outcome="not_found").inc()
            logger.info("Product to update not found", product_id=input_dto.id)
            return False

        product.apply_changes(
            name=input_dto.name,
            description=input_dto.description,
            price=input_dto.price,
        )

        await self._repository.update(product, token)
        await self._unit_of_work.commit(token)

        PRODUCT_OPERATIONS_TOTAL.labels(operation="update", outcome="updated").inc()
        logger.info("Product updated", product_id=product.id)

        return True
