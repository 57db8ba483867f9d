"""
Domain package for Product Catalog Service.

Contains domain entities and domain errors.
"""
from .product import Product, ProductFilter
from .errors import (
    DomainError,
    DomainValidationError,
    NullInputError,
    DuplicateProductNameError,
    ProductNotFoundError,
)

__all__ = [
    "Product",
    "ProductFilter",
    "DomainError",
    "DomainValidationError",
    "NullInputError",
    "DuplicateProductNameError",
    "ProductNotFoundError",
]
