"""
Cancellation package.
"""
from .token import (
    CancellationToken,
    OperationCancelledError,
    REASON_CANCELLED,
    REASON_CLIENT_DISCONNECTED,
    REASON_DEADLINE_EXCEEDED,
)

__all__ = [
    "CancellationToken",
    "OperationCancelledError",
    "REASON_CANCELLED",
    "REASON_CLIENT_DISCONNECTED",
    "REASON_DEADLINE_EXCEEDED",
]
