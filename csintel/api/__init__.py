"""
HTTP surface: routers and shared dependencies.
"""
from .routers import ALL_ROUTERS

__all__ = ["ALL_ROUTERS"]
