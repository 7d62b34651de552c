"""
Data ingestion routes, one path per source category:

    POST /api/data-ingestion/conference-intelligence {"source": "def_con_33"}
    GET  /api/data-ingestion/threat-intelligence?source=misp
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ...archivist import get_db
from ...common.cache import cache
from ...common.envelope import success_response
from ...config.settings import settings
from ...config.sources import DATA_SOURCE_REGISTRY
from ...harvester import UnknownSourceError, ingest
from ...harvester.orchestrator import get_category_sources, parse_category
from ..deps import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data-ingestion", tags=["ingestion"])


class IngestionRequest(BaseModel):
    source: Optional[str] = None
    config: Optional[Dict[str, Any]] = None


def _category_or_404(category: str):
    try:
        return parse_category(category)
    except UnknownSourceError:
        raise HTTPException(status_code=404, detail=f"Unknown ingestion category: {category}")


@router.get("/{category}")
async def describe_category(category: str, source: Optional[str] = Query(None)):
    """Available sources for a category, or one source's registry entry."""
    parsed = _category_or_404(category)
    sources = get_category_sources(parsed)

    if not source:
        key = f"ingestion:{parsed.value}"
        listing = cache.get(key)
        if listing is None:
            listing = {
                "category": parsed.value,
                "availableSources": sources,
                "description": f"{parsed.value.replace('_', ' ').title()} data sources",
            }
            cache.set(key, listing, settings.static_cache_ttl_seconds)
        return success_response(listing)

    if source not in sources:
        raise HTTPException(status_code=404, detail="Source not found")
    return success_response(DATA_SOURCE_REGISTRY[source].to_dict())


@router.post("/{category}")
async def ingest_category(
    category: str,
    request: IngestionRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    """Run the adapter for `source`; funding sources persist through the session."""
    try:
        parsed = parse_category(category)
    except UnknownSourceError:
        raise HTTPException(status_code=400, detail=f"Unknown ingestion category: {category}")
    if not request.source:
        raise HTTPException(status_code=400, detail="Source is required")

    try:
        result = await ingest(parsed, request.source, request.config, session)
    except UnknownSourceError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return success_response({"source": request.source, "category": parsed.value, **result.to_dict()})
