"""Common middleware for Guestlist."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
