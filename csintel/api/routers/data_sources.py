"""
Data source registry routes: listing, status, sync, configure and test.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ...archivist import get_db
from ...archivist.portfolio_storage import get_sync_history
from ...common.envelope import success_response, utc_timestamp
from ...config.sources import DATA_SOURCE_REGISTRY, get_all_sources
from ...harvester import get_sync_status, sync_all, sync_source, test_source
from ..deps import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data-sources", tags=["data-sources"])


class DataSourceActionRequest(BaseModel):
    source: Optional[str] = None
    action: Optional[str] = None
    config: Optional[Dict[str, Any]] = None


class SyncRequest(BaseModel):
    sourceId: Optional[str] = None


def _source_entry(source_id: str, now: datetime) -> Dict[str, Any]:
    source = DATA_SOURCE_REGISTRY[source_id]
    return {
        **source.to_dict(),
        "lastSync": source.last_sync_time(now).isoformat(),
        "recordCount": source.record_count,
    }


@router.get("")
async def get_data_sources(
    action: str = Query("list"),
    source: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db),
):
    """List the registry, or report one source's health and sync history."""
    now = datetime.now(timezone.utc)

    if action == "list":
        sources = get_all_sources()
        by_category: Dict[str, int] = {}
        for s in sources:
            by_category[s.category.value] = by_category.get(s.category.value, 0) + 1
        return success_response({
            "sources": [_source_entry(s.id, now) for s in sources],
            "summary": {
                "totalSources": len(sources),
                "activeSources": sum(1 for s in sources if s.status == "available"),
                "byCategory": by_category,
                "lastUpdate": now.isoformat(),
            },
        })

    if action == "status" and source:
        if source not in DATA_SOURCE_REGISTRY:
            raise HTTPException(status_code=404, detail="Data source not found")
        history = await get_sync_history(session, source)
        return success_response({
            "source": {
                **_source_entry(source, now),
                "healthStatus": DATA_SOURCE_REGISTRY[source].health.value,
                "syncHistory": [
                    {
                        "timestamp": sync.started_at.isoformat(),
                        "status": sync.status,
                        "recordsProcessed": sync.records_processed,
                    }
                    for sync in history
                ],
            },
        })

    raise HTTPException(status_code=400, detail="Invalid action specified")


@router.post("")
async def data_source_action(
    request: DataSourceActionRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    """Run sync / configure / test against one registered source."""
    if not request.source or request.source not in DATA_SOURCE_REGISTRY:
        raise HTTPException(status_code=400, detail="Invalid data source")

    if request.action == "sync":
        result = await sync_source(request.source, session)
        response = success_response({
            "source": request.source,
            "syncResult": {
                "newRecords": result["newRecords"],
                "updatedRecords": result["updatedRecords"],
                "errors": result["errors"],
                "timestamp": result["timestamp"],
                "duration": result["duration"],
            },
        })
        response["success"] = result["success"]
        return response

    if request.action == "configure":
        logger.info(f"Configuration updated for {request.source}")
        return success_response({
            "source": request.source,
            "configuration": {**(request.config or {}), "updatedAt": utc_timestamp()},
        })

    if request.action == "test":
        result = await test_source(request.source)
        response = success_response({
            "source": request.source,
            "testResult": {
                "status": result["status"],
                "responseTime": result["responseTime"],
                "timestamp": result["timestamp"],
                "message": result["message"],
            },
        })
        response["success"] = result["success"]
        return response

    raise HTTPException(status_code=400, detail="Invalid action")


@router.post("/sync")
async def sync_data_source(
    request: SyncRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    """Sync one source, or every registered source with sourceId="all"."""
    if not request.sourceId:
        raise HTTPException(status_code=400, detail="sourceId is required")

    if request.sourceId == "all":
        return success_response(await sync_all(session))

    if request.sourceId not in DATA_SOURCE_REGISTRY:
        raise HTTPException(status_code=400, detail="Unknown data source")

    result = await sync_source(request.sourceId, session)
    return success_response({
        "sourceId": request.sourceId,
        "syncResult": {
            "success": result["success"],
            "recordsProcessed": result["recordsProcessed"],
            "newRecords": result["newRecords"],
            "processingTime": result["duration"] * 1000,
            "dataTypes": result["dataTypes"],
            "lastSync": result["timestamp"],
        },
        "message": f"Synchronized {result['recordsProcessed']} records from {request.sourceId}",
    })


@router.get("/sync")
async def get_sync_overview(
    action: str = Query("status"),
    session: AsyncSession = Depends(get_db),
):
    if action != "status":
        raise HTTPException(status_code=400, detail="Invalid action specified")
    return success_response(await get_sync_status(session))
