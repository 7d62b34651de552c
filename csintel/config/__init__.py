from .sources import (
    DATA_SOURCE_REGISTRY,
    DataSourceConfig,
    SourceCategory,
    SourceHealth,
    get_all_sources,
    get_source,
    get_sources_by_category,
)
from .settings import settings

__all__ = [
    "DATA_SOURCE_REGISTRY",
    "DataSourceConfig",
    "SourceCategory",
    "SourceHealth",
    "settings",
    "get_all_sources",
    "get_source",
    "get_sources_by_category",
]
