"""
Common utilities and shared modules.
"""

from .cache import SimpleCache, cache
from .envelope import error_response, success_response, utc_timestamp

__all__ = [
    "SimpleCache",
    "cache",
    "error_response",
    "success_response",
    "utc_timestamp",
]
