"""
Base Adapter - Abstract interface for ingestion sources.

Each adapter stands in for an external intelligence feed:
- fetch(): return the source's records (static snapshot)
- store(): count, and optionally persist, what fetch() returned
- ingest(): wait out the simulated network delay, then fetch and store
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..config.settings import settings
from ..config.sources import SourceCategory

logger = logging.getLogger(__name__)


class IngestionResult:
    """Result of a single adapter ingestion."""

    def __init__(self, source: str, category: SourceCategory, data_key: str = "eventData"):
        self.source = source
        self.category = category
        self.data_key = data_key
        self.processed = 0
        self.created = 0
        self.updated = 0
        self.errors: List[Dict[str, str]] = []
        self.payload: Any = None
        self.summary: Dict[str, Any] = {}
        self.started_at = datetime.now(timezone.utc)
        self.completed_at: Optional[datetime] = None

    def complete(self):
        self.completed_at = datetime.now(timezone.utc)

    @property
    def duration_ms(self) -> int:
        if self.completed_at:
            return int((self.completed_at - self.started_at).total_seconds() * 1000)
        return 0

    def add_error(self, item: str, error: str):
        self.errors.append({"item": item, "error": error})

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
            "errors": len(self.errors),
            self.data_key: self.payload,
            "summary": self.summary,
            "timestamp": (self.completed_at or self.started_at).isoformat(),
            "duration": self.duration_ms,
        }
        if self.errors:
            data["errorDetails"] = self.errors
        return data


class BaseAdapter(ABC):
    """
    Abstract base class for ingestion adapters.

    Subclasses set source_id, category, delay_ms and data_key, and
    implement fetch(). Persisting adapters also override store().
    """

    source_id: str = ""
    category: SourceCategory
    delay_ms: int = 100
    data_key: str = "eventData"

    # Key of the record list inside a dict payload, used for counting
    record_field: Optional[str] = None

    @abstractmethod
    async def fetch(self, config: Dict[str, Any]) -> Any:
        """
        Return the source snapshot.

        Args:
            config: Caller-supplied options (filters, api keys)

        Returns:
            A list of records, or a dict describing an event / report
        """
        pass

    def build_summary(self, payload: Any) -> Dict[str, Any]:
        return {}

    def count_records(self, payload: Any) -> int:
        if isinstance(payload, list):
            return len(payload)
        if self.record_field and isinstance(payload, dict):
            return len(payload.get(self.record_field) or [])
        return 1

    async def store(
        self,
        payload: Any,
        result: IngestionResult,
        session: Optional[AsyncSession] = None,
    ) -> None:
        """Count records; every fetched record counts as created."""
        count = self.count_records(payload)
        result.processed = count
        result.created = count

    async def _simulate_latency(self):
        delay = self.delay_ms / 1000 * settings.ingestion_delay_scale
        if delay > 0:
            await asyncio.sleep(delay)

    async def ingest(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[AsyncSession] = None,
    ) -> IngestionResult:
        result = IngestionResult(self.source_id, self.category, self.data_key)
        await self._simulate_latency()

        payload = await self.fetch(config or {})
        result.payload = payload
        await self.store(payload, result, session)
        result.summary = self.build_summary(payload)
        result.complete()

        logger.info(
            f"Ingested {self.source_id}: processed={result.processed} "
            f"created={result.created} updated={result.updated} errors={len(result.errors)}"
        )
        return result


class StaticAdapter(BaseAdapter):
    """Adapter whose snapshot and summary are class-level constants."""

    snapshot: Any = None
    summary: Dict[str, Any] = {}

    async def fetch(self, config: Dict[str, Any]) -> Any:
        return self.snapshot

    def build_summary(self, payload: Any) -> Dict[str, Any]:
        return dict(self.summary)
