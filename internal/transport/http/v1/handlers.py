"""
FastAPI HTTP Handlers for Product Catalog API v1.

Implements REST endpoints for product operations.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from internal.domain.errors import ProductNotFoundError
from internal.domain.product import ProductFilter
from internal.transport.http.dependencies import (
    get_cancellation_token,
    get_repository,
    get_save_use_case,
    get_update_use_case,
)
from internal.transport.http.dto import (
    CreateProductRequest,
    ErrorResponse,
    ProductResponse,
    UpdateProductRequest,
    UpdateProductResponse,
)
from internal.transport.http.validation import validate_product_request
from internal.usecase.ports import ProductRepository
from internal.usecase.save_product import SaveProductUseCase
from internal.usecase.update_product import UpdateProductInput, UpdateProductUseCase
from pkg.cancellation import CancellationToken
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(prefix="/api/product", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Product created successfully"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Product name already in use"},
        503: {"model": ErrorResponse, "description": "Service unavailable"},
    },
)
async def create_product(
    request: CreateProductRequest,
    token: CancellationToken = Depends(get_cancellation_token),
    use_case: SaveProductUseCase = Depends(get_save_use_case),
) -> ProductResponse:
    """
    Create a new product.

    Args:
        request: Product creation request.
        token: Cancellation token of the request.
        use_case: Injected use case.

    Returns:
        Created product.
    """
    validate_product_request(request)

    logger.info("Creating product", product_name=request.name)

    product = await use_case.execute(request.to_entity(), token)

    return ProductResponse.from_entity(product)


@router.put(
    "",
    response_model=UpdateProductResponse,
    responses={
        200: {"description": "Product updated successfully"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def update_product(
    request: UpdateProductRequest,
    token: CancellationToken = Depends(get_cancellation_token),
    use_case: UpdateProductUseCase = Depends(get_update_use_case),
) -> UpdateProductResponse:
    """
    Update name, description and price of a product.

    Args:
        request: Product update request.
        token: Cancellation token of the request.
        use_case: Injected use case.

    Returns:
        Update result.
    """
    validate_product_request(request)

    logger.info("Updating product", product_id=request.id)

    updated = await use_case.execute(
        UpdateProductInput(
            id=request.id,
            name=request.name,
            description=request.description,
            price=request.price,
        ),
        token,
    )
    if not updated:
        raise ProductNotFoundError(request.id)

    return UpdateProductResponse(id=request.id, updated=True)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        200: {"description": "Product found"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def get_product(
    product_id: int,
    token: CancellationToken = Depends(get_cancellation_token),
    repository: ProductRepository = Depends(get_repository),
) -> ProductResponse:
    """
    Get a product by id.

    Args:
        product_id: Product identifier.

    Returns:
        Product data.
    """
    product = await repository.get_by_id(product_id, token)
    if product is None:
        raise ProductNotFoundError(product_id)

    return ProductResponse.from_entity(product)


@router.get("", response_model=List[ProductResponse])
async def list_products(
    name: Optional[str] = Query(None, description="Exact product name"),
    token: CancellationToken = Depends(get_cancellation_token),
    repository: ProductRepository = Depends(get_repository),
) -> List[ProductResponse]:
    """
    List products, optionally filtered by name.

    Returns:
        Matching products, active and inactive.
    """
    products = await repository.get_by_filter(ProductFilter(name=name), token)
    return [ProductResponse.from_entity(p) for p in products]
