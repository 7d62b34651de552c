"""AI company analysis route."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ...analyst import analyze_company
from ...archivist import get_db
from ...common.envelope import success_response
from ..deps import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-company-analysis", tags=["analysis"])


class AnalysisRequest(BaseModel):
    companyName: str = ""
    analysisType: str = "comprehensive"


@router.post("")
async def run_company_analysis(
    request: AnalysisRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    try:
        analysis = await analyze_company(session, request.companyName, request.analysisType)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Company analysis for {analysis['query']!r} in {analysis['responseTime']}")
    return success_response(analysis)
