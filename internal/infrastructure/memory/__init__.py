"""
In-memory infrastructure package.
"""
from .store import InMemoryProductRepository, InMemoryProductStore, InMemoryUnitOfWork

__all__ = ["InMemoryProductRepository", "InMemoryProductStore", "InMemoryUnitOfWork"]
