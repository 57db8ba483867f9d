"""
Logger package.
"""
from .logger import (
    setup_logging,
    get_logger,
    set_request_id,
    reset_request_id,
    get_request_id,
    StructuredLogger,
    StructuredFormatter,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "StructuredLogger",
    "StructuredFormatter",
]
