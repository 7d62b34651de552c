"""
Storage for company profile records (team, acquisitions, portfolio) and the
data source sync log.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    Acquisition,
    Company,
    DataSourceSync,
    PortfolioCompany,
    TeamMember,
    utc_now_naive,
)
from .storage import company_to_dict, get_company_rounds

logger = logging.getLogger(__name__)


# ----- Team members -----

async def add_team_member(
    session: AsyncSession,
    company_id: int,
    name: str,
    title: Optional[str] = None,
    linkedin_url: Optional[str] = None,
    is_founder: bool = False,
) -> TeamMember:
    member = TeamMember(
        company_id=company_id,
        name=name.strip(),
        title=title,
        linkedin_url=linkedin_url,
        is_founder=is_founder,
    )
    session.add(member)
    await session.flush()
    return member


async def list_team_members(session: AsyncSession, company_id: int) -> List[TeamMember]:
    stmt = (
        select(TeamMember)
        .where(TeamMember.company_id == company_id)
        .order_by(TeamMember.is_founder.desc(), TeamMember.name)
    )
    return list((await session.execute(stmt)).scalars().all())


# ----- Acquisitions -----

async def record_acquisition(
    session: AsyncSession,
    company_id: int,
    acquirer_name: str,
    amount_usd: Optional[int] = None,
    announced_date: Optional[date] = None,
    status: str = "announced",
) -> Acquisition:
    acquisition = Acquisition(
        company_id=company_id,
        acquirer_name=acquirer_name.strip(),
        amount_usd=amount_usd,
        announced_date=announced_date,
        status=status,
    )
    session.add(acquisition)
    await session.flush()
    logger.info(f"Recorded acquisition of company {company_id} by {acquirer_name}")
    return acquisition


async def list_acquisitions(session: AsyncSession, company_id: Optional[int] = None) -> List[Acquisition]:
    stmt = select(Acquisition).order_by(Acquisition.announced_date.desc())
    if company_id is not None:
        stmt = stmt.where(Acquisition.company_id == company_id)
    return list((await session.execute(stmt)).scalars().all())


# ----- Portfolio -----

async def upsert_portfolio_company(
    session: AsyncSession,
    company_id: int,
    **fields: Any,
) -> PortfolioCompany:
    """Create or update the portfolio record for a company and flag the company."""
    stmt = select(PortfolioCompany).where(PortfolioCompany.company_id == company_id)
    holding = (await session.execute(stmt)).scalars().first()
    fields = {k: v for k, v in fields.items() if v is not None}
    if holding is None:
        holding = PortfolioCompany(company_id=company_id, **fields)
        session.add(holding)
    else:
        for key, value in fields.items():
            setattr(holding, key, value)
        holding.updated_at = utc_now_naive()

    company = await session.get(Company, company_id)
    if company is not None:
        company.is_portfolio = True
    await session.flush()
    return holding


def portfolio_to_dict(holding: PortfolioCompany, company: Optional[Company] = None) -> Dict[str, Any]:
    data = {
        "id": holding.id,
        "companyId": holding.company_id,
        "investmentDate": holding.investment_date.isoformat() if holding.investment_date else None,
        "investmentAmount": holding.investment_amount,
        "ownershipPercentage": holding.ownership_percentage,
        "tractionScore": holding.traction_score,
        "activeUsers": holding.active_users,
        "status": holding.status,
    }
    if company is not None:
        data["company"] = company_to_dict(company)
    return data


async def list_portfolio(session: AsyncSession, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """Portfolio holdings joined with their company, largest investment first."""
    stmt = (
        select(PortfolioCompany, Company)
        .join(Company, PortfolioCompany.company_id == Company.id)
        .order_by(PortfolioCompany.investment_amount.desc())
    )
    if status:
        stmt = stmt.where(PortfolioCompany.status == status)
    return [portfolio_to_dict(h, c) for h, c in (await session.execute(stmt)).all()]


async def get_all_portfolio(session: AsyncSession) -> List[PortfolioCompany]:
    return list((await session.execute(select(PortfolioCompany))).scalars().all())


async def get_company_profile(session: AsyncSession, company_id: int) -> Optional[Dict[str, Any]]:
    """Company with rounds, team, acquisitions and portfolio record."""
    company = await session.get(Company, company_id)
    if company is None:
        return None

    team = await list_team_members(session, company_id)
    acquisitions = await list_acquisitions(session, company_id)
    stmt = select(PortfolioCompany).where(PortfolioCompany.company_id == company_id)
    holding = (await session.execute(stmt)).scalars().first()

    profile = company_to_dict(company)
    profile["fundingRounds"] = await get_company_rounds(session, company_id)
    profile["teamMembers"] = [
        {
            "id": m.id,
            "name": m.name,
            "title": m.title,
            "linkedinUrl": m.linkedin_url,
            "isFounder": m.is_founder,
        }
        for m in team
    ]
    profile["acquisitions"] = [
        {
            "id": a.id,
            "acquirer": a.acquirer_name,
            "amountUsd": a.amount_usd,
            "announcedDate": a.announced_date.isoformat() if a.announced_date else None,
            "status": a.status,
        }
        for a in acquisitions
    ]
    profile["portfolio"] = portfolio_to_dict(holding) if holding else None
    return profile


# ----- Data source sync log -----

async def record_sync(
    session: AsyncSession,
    source_id: str,
    new_records: int,
    updated_records: int,
    errors: int,
    duration_ms: int,
    started_at: Optional[datetime] = None,
) -> DataSourceSync:
    sync = DataSourceSync(
        source_id=source_id,
        status="success" if errors == 0 else "failed",
        records_processed=new_records + updated_records,
        new_records=new_records,
        updated_records=updated_records,
        errors=errors,
        duration_ms=duration_ms,
        started_at=started_at or utc_now_naive(),
        completed_at=utc_now_naive(),
    )
    session.add(sync)
    await session.flush()
    return sync


async def get_sync_history(session: AsyncSession, source_id: str, limit: int = 10) -> List[DataSourceSync]:
    stmt = (
        select(DataSourceSync)
        .where(DataSourceSync.source_id == source_id)
        .order_by(DataSourceSync.started_at.desc())
        .limit(limit)
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_recent_syncs(session: AsyncSession, limit: int = 50) -> List[DataSourceSync]:
    stmt = select(DataSourceSync).order_by(DataSourceSync.started_at.desc()).limit(limit)
    return list((await session.execute(stmt)).scalars().all())
