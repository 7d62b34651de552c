"""
JSON response envelope shared by every route.

    {"success": true, "data": ..., "timestamp": "2025-01-01T00:00:00+00:00"}
    {"success": false, "error": "...", "timestamp": "..."}
"""

from datetime import datetime, timezone
from typing import Any, Dict


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(data: Any, **extra: Any) -> Dict[str, Any]:
    return {"success": True, "data": data, "timestamp": utc_timestamp(), **extra}


def error_response(error: str, **extra: Any) -> Dict[str, Any]:
    return {"success": False, "error": error, "timestamp": utc_timestamp(), **extra}
