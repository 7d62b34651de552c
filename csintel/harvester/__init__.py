from .base_adapter import BaseAdapter, IngestionResult, StaticAdapter
from .orchestrator import (
    ADAPTER_REGISTRY,
    UnknownSourceError,
    get_adapter,
    get_sync_status,
    ingest,
    sync_all,
    sync_source,
    test_source,
)

__all__ = [
    "ADAPTER_REGISTRY",
    "BaseAdapter",
    "IngestionResult",
    "StaticAdapter",
    "UnknownSourceError",
    "get_adapter",
    "get_sync_status",
    "ingest",
    "sync_all",
    "sync_source",
    "test_source",
]
