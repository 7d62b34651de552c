"""
Funding round routes.

/api/funding-rounds   - paged listing and manual entry
/api/funding-tracker  - filtered tracker with aggregate stats, article extraction
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from ...analyst import FundingArticle, extract_funding_batch, normalize_round_type
from ...analyst.aggregation import funding_by_group, funding_timeline, summarize_amounts
from ...archivist import get_db
from ...archivist.storage import (
    create_manual_funding_round,
    get_filtered_round_amounts,
    list_funding_rounds,
    normalize_amount,
    round_to_dict,
    save_funding_round,
)
from ...common.envelope import success_response
from ..deps import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["funding"])


# ----- Request Models -----

class CompanyInput(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    headquarters: Optional[str] = None
    country: Optional[str] = None
    foundedYear: Optional[int] = None
    primaryCategory: Optional[str] = None
    employeeCount: Optional[int] = None


class InvestorInput(BaseModel):
    name: str = Field(..., min_length=1)
    isLead: bool = False


class ManualRoundRequest(BaseModel):
    company: Optional[CompanyInput] = None
    roundType: Optional[str] = None
    amount: Union[int, str, None] = None
    announcedDate: Optional[date] = None
    valuation: Union[int, str, None] = None
    investors: List[InvestorInput] = Field(default_factory=list)
    sourceUrl: Optional[str] = None


class TrackerActionRequest(BaseModel):
    action: Optional[str] = None
    articles: List[FundingArticle] = Field(default_factory=list)


# ----- Funding rounds -----

@router.get("/api/funding-rounds")
async def get_funding_rounds(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    roundType: Optional[str] = None,
    country: Optional[str] = None,
    session: AsyncSession = Depends(get_db),
):
    rows, total = await list_funding_rounds(
        session,
        limit=limit,
        offset=(page - 1) * limit,
        search=search,
        round_type=roundType,
        country=country,
    )
    return success_response({
        "fundingRounds": rows,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    })


@router.post("/api/funding-rounds", status_code=201)
async def create_funding_round(
    request: ManualRoundRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    """Manual entry: upsert the company, then create the round and connect investors."""
    if request.company is None or not request.company.name or not request.roundType:
        raise HTTPException(status_code=400, detail="Company name and round type are required")

    company = request.company
    funding_round, created = await create_manual_funding_round(
        session,
        company={
            "name": company.name,
            "description": company.description,
            "website": company.website,
            "headquarters": company.headquarters,
            "country": company.country,
            "founded_year": company.foundedYear,
            "primary_category": company.primaryCategory,
            "employee_count": company.employeeCount,
        },
        round_type=normalize_round_type(request.roundType),
        amount_usd=normalize_amount(request.amount),
        announced_date=request.announcedDate,
        investors=[i.model_dump() for i in request.investors],
        valuation_usd=normalize_amount(request.valuation),
        source_url=request.sourceUrl,
    )
    if not created:
        return JSONResponse(
            status_code=200,
            content=success_response(round_to_dict(funding_round), duplicate=True),
        )
    return success_response(round_to_dict(funding_round), duplicate=False)


# ----- Funding tracker -----

@router.get("/api/funding-tracker")
async def get_funding_tracker(
    company: Optional[str] = None,
    investor: Optional[str] = None,
    roundType: Optional[str] = None,
    minAmount: Optional[int] = Query(None, ge=0),
    maxAmount: Optional[int] = Query(None, ge=0),
    startDate: Optional[date] = None,
    endDate: Optional[date] = None,
    source: Optional[str] = None,
    country: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
):
    filters: Dict[str, Any] = {
        "company": company,
        "investor": investor,
        "round_type": roundType,
        "min_amount": minAmount,
        "max_amount": maxAmount,
        "start_date": startDate,
        "end_date": endDate,
        "source": source,
        "country": country,
        "search": search,
    }
    rows, total = await list_funding_rounds(session, limit=limit, offset=offset, **filters)
    amounts = await get_filtered_round_amounts(session, **filters)

    return success_response({
        "fundingRounds": rows,
        "pagination": {
            "limit": limit,
            "offset": offset,
            "total": total,
            "hasMore": offset + len(rows) < total,
        },
        "stats": {
            **summarize_amounts(amounts),
            "byRoundType": [
                {"roundType": g["group"], "count": g["count"], "totalAmount": g["total"]}
                for g in funding_by_group(amounts, "round_type")
            ],
            "timeline": funding_timeline(amounts),
        },
    })


@router.post("/api/funding-tracker")
async def funding_tracker_action(
    request: TrackerActionRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    """Extract funding events from articles with the regex extractor and save them."""
    if request.action != "extract":
        raise HTTPException(status_code=400, detail="Invalid action")

    extracted = extract_funding_batch(request.articles)
    saved, duplicates = [], 0
    for event in extracted:
        funding_round, created = await save_funding_round(
            session,
            company_name=event.company_name,
            round_type=event.round_type,
            amount_usd=event.funding_amount,
            announced_date=event.announced_date.date(),
            lead_investors=event.lead_investors,
            participating_investors=event.participating_investors,
            valuation_usd=event.valuation,
            source=event.source or "article",
            source_url=event.url or None,
            confidence=event.confidence,
        )
        if created:
            saved.append(round_to_dict(funding_round))
        else:
            duplicates += 1

    logger.info(
        f"Funding tracker extraction: {len(request.articles)} articles, "
        f"{len(extracted)} extracted, {len(saved)} saved, {duplicates} duplicates"
    )
    return success_response({
        "articlesProcessed": len(request.articles),
        "extracted": len(extracted),
        "saved": len(saved),
        "duplicates": duplicates,
        "fundingRounds": saved,
    })
