"""
HTTP API v1.
"""
from .handlers import router

__all__ = ["router"]
