"""
Use case package for Product Catalog Service.

Contains business logic and use cases.
"""
from .ports import ProductRepository, UnitOfWork
from .save_product import SaveProductUseCase
from .update_product import UpdateProductInput, UpdateProductUseCase

__all__ = [
    "ProductRepository",
    "UnitOfWork",
    "SaveProductUseCase",
    "UpdateProductInput",
    "UpdateProductUseCase",
]
