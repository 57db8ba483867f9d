"""
Metrics infrastructure package.
"""
from .prometheus import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    PRODUCT_OPERATIONS_TOTAL,
    DB_QUERY_DURATION,
    HEALTH_CHECK_STATUS,
)

__all__ = [
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "PRODUCT_OPERATIONS_TOTAL",
    "DB_QUERY_DURATION",
    "HEALTH_CHECK_STATUS",
]
