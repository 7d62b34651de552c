"""
Company routes: search, profiles, team members, acquisitions, categorization
and the portfolio listing.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from ...analyst import categorize_company
from ...archivist import get_db
from ...archivist.portfolio_storage import (
    add_team_member,
    get_company_profile,
    list_portfolio,
    record_acquisition,
)
from ...archivist.storage import company_to_dict, get_company, list_companies, normalize_amount
from ...common.envelope import success_response
from ..deps import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["companies"])


class TeamMemberRequest(BaseModel):
    name: str = Field(..., min_length=1)
    title: Optional[str] = None
    linkedinUrl: Optional[str] = None
    isFounder: bool = False


class AcquisitionRequest(BaseModel):
    acquirer: str = Field(..., min_length=1)
    amount: Optional[str] = None
    announcedDate: Optional[date] = None
    status: str = "announced"


class CategorizeRequest(BaseModel):
    companyId: Optional[int] = None
    description: Optional[str] = None
    stage: Optional[str] = None
    funding: Optional[int] = None
    employees: Optional[int] = None


async def _company_or_404(session: AsyncSession, company_id: int):
    company = await get_company(session, company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


@router.get("/api/companies")
async def get_companies(
    search: Optional[str] = None,
    country: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
):
    companies, total = await list_companies(
        session, search=search, country=country, category=category, limit=limit, offset=offset
    )
    return success_response(
        [company_to_dict(c) for c in companies],
        pagination={"limit": limit, "offset": offset, "total": total},
    )


@router.post("/api/companies/categorize")
async def categorize(
    request: CategorizeRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    """Rule-based categorization of a description, or of a stored company."""
    description, stage, funding, employees = (
        request.description, request.stage, request.funding, request.employees
    )
    if request.companyId is not None:
        company = await _company_or_404(session, request.companyId)
        description = description or company.description
        stage = stage or company.current_stage
        funding = funding if funding is not None else company.total_funding
        employees = employees if employees is not None else company.employee_count

    try:
        category = categorize_company(description or "", stage, funding, employees)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return success_response({
        "primaryIndustry": category.primary_industry,
        "subSector": category.sub_sector,
        "businessModel": category.business_model,
        "targetMarket": category.target_market,
        "technologyStack": category.technology_stack,
        "competitivePosition": category.competitive_position,
        "growthStage": category.growth_stage,
        "riskLevel": category.risk_level,
        "marketOpportunity": category.market_opportunity,
        "confidence": category.confidence,
    })


@router.get("/api/companies/{company_id}")
async def get_company_detail(company_id: int, session: AsyncSession = Depends(get_db)):
    profile = await get_company_profile(session, company_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return success_response(profile)


@router.post("/api/companies/{company_id}/team", status_code=201)
async def create_team_member(
    company_id: int,
    request: TeamMemberRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    await _company_or_404(session, company_id)
    member = await add_team_member(
        session,
        company_id,
        request.name,
        title=request.title,
        linkedin_url=request.linkedinUrl,
        is_founder=request.isFounder,
    )
    return success_response({
        "id": member.id,
        "companyId": company_id,
        "name": member.name,
        "title": member.title,
        "linkedinUrl": member.linkedin_url,
        "isFounder": member.is_founder,
    })


@router.post("/api/companies/{company_id}/acquisitions", status_code=201)
async def create_acquisition(
    company_id: int,
    request: AcquisitionRequest,
    session: AsyncSession = Depends(get_db),
    api_key: str = Depends(verify_api_key),
):
    await _company_or_404(session, company_id)
    acquisition = await record_acquisition(
        session,
        company_id,
        request.acquirer,
        amount_usd=normalize_amount(request.amount),
        announced_date=request.announcedDate,
        status=request.status,
    )
    return success_response({
        "id": acquisition.id,
        "companyId": company_id,
        "acquirer": acquisition.acquirer_name,
        "amountUsd": acquisition.amount_usd,
        "announcedDate": acquisition.announced_date.isoformat() if acquisition.announced_date else None,
        "status": acquisition.status,
    })


@router.get("/api/portfolio")
async def get_portfolio(
    status: Optional[str] = None,
    session: AsyncSession = Depends(get_db),
):
    holdings = await list_portfolio(session, status=status)
    return success_response(
        holdings,
        summary={
            "totalCompanies": len(holdings),
            "totalInvested": sum(h["investmentAmount"] or 0 for h in holdings),
            "active": sum(1 for h in holdings if h["status"] == "active"),
        },
    )
