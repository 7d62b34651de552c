"""Ingestion adapters grouped by source category."""

from .conference import CONFERENCE_ADAPTERS
from .funding import FUNDING_ADAPTERS, parse_employee_count
from .market import MARKET_ADAPTERS
from .patent import PATENT_ADAPTERS
from .threat import THREAT_ADAPTERS

__all__ = [
    "CONFERENCE_ADAPTERS",
    "FUNDING_ADAPTERS",
    "MARKET_ADAPTERS",
    "PATENT_ADAPTERS",
    "THREAT_ADAPTERS",
    "parse_employee_count",
]
