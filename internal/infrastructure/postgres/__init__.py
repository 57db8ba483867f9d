"""
PostgreSQL infrastructure package.
"""
from .repository import PostgresProductRepository, check_database, create_pool
from .unit_of_work import PostgresUnitOfWork

__all__ = [
    "PostgresProductRepository",
    "PostgresUnitOfWork",
    "check_database",
    "create_pool",
]
