"""
Save Product Use Case.

Creates a catalog product after checking that no active product
already uses the same name.
"""
from typing import Optional

from internal.domain.errors import DuplicateProductNameError, NullInputError
from internal.domain.product import Product, ProductFilter
from internal.infrastructure.metrics import PRODUCT_OPERATIONS_TOTAL
from internal.usecase.ports import ProductRepository, UnitOfWork
from pkg.cancellation import CancellationToken
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


class SaveProductUseCase:
    """
    Use case for creating a new product.

    Validation runs before any write; the insert and the commit
    happen in that order within the caller's unit of work.
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
        candidate: Optional[Product],
        token: CancellationToken,
    ) -> Product:
        """
        Execute the save product use case.

        This method:
        1. Validates the candidate
        2. Inserts it through the repository
        3. Commits the unit of work

        Args:
            candidate: Product to create.
            token: Cancellation token of the request.

        Returns:
            The persisted product with its identifier populated.

        Raises:
            NullInputError: If the candidate is None.
            DuplicateProductNameError: If an active product has the same name.
        """
        await self.validate(candidate, token)

        product = await self._repository.add(candidate, token)
        await self._unit_of_work.commit(token)

        PRODUCT_OPERATIONS_TOTAL.labels(operation="save", outcome="created").inc()
        logger.info("Product created", product_id=product.id, product_name=product.name)

        return product

    async def validate(
        self,
        candidate: Optional[Product],
        token: CancellationToken,
    ) -> None:
        """
        Check the candidate against the duplicate-name rule.

        Inactive products with the same name do not block creation.

        Raises:
            NullInputError: If the candidate is None.
            DuplicateProductNameError: If an active product has the same name.
        """
        if candidate is None:
            raise NullInputError("candidate")

        existing = await self._repository.get_by_filter(
            ProductFilter(id=None, name=candidate.name),
            token,
        )
        if any(p.active for p in existing):
            PRODUCT_OPERATIONS_TOTAL.labels(operation="save", outcome="rejected").inc()
            logger.warning("Duplicate product name rejected", product_name=candidate.name)
            raise DuplicateProductNameError(candidate.name)
