"""
Dashboard routes.

/api/dashboard/stats?type=summary|realtime|kpis|alerts
/api/dashboard/analytics?metric=funding-trends|market-analysis|performance-metrics|
                                investment-pipeline|investor-networks
"""

import logging
import random
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...analyst import aggregation
from ...archivist import get_db
from ...archivist.portfolio_storage import get_all_portfolio
from ...archivist.storage import get_all_companies, get_all_rounds, get_rounds_with_investors
from ...common.envelope import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

REALTIME_REFRESH_SECONDS = 30


async def _summary_stats(session: AsyncSession):
    companies = await get_all_companies(session)
    rounds = await get_all_rounds(session)
    portfolio = await get_all_portfolio(session)
    funding = aggregation.total_funding(companies, "total_funding")
    return success_response({
        "companies": {"total": len(companies), "label": "Companies Tracked"},
        "funding": {
            "total": funding,
            "label": "Total Funding",
            "formatted": f"${funding / 1_000_000_000:.1f}B",
        },
        "fundingRounds": {"total": len(rounds), "label": "Funding Rounds"},
        "portfolio": {"total": len(portfolio), "label": "Portfolio Companies"},
    })


def _realtime_stats():
    now = datetime.now(timezone.utc)
    return success_response(
        {
            "apiRequests": {"current": random.randint(50, 149), "label": "API Requests/min", "status": "healthy"},
            "responseTime": {"current": random.randint(20, 69), "label": "Avg Response Time (ms)", "status": "good"},
            "activeUsers": {"current": random.randint(5, 24), "label": "Active Users", "status": "normal"},
            "systemLoad": {"current": random.randint(10, 39), "label": "System Load (%)", "status": "low"},
        },
        nextUpdate=(now + timedelta(seconds=REALTIME_REFRESH_SECONDS)).isoformat(),
    )


@router.get("/stats")
async def get_stats(
    type: str = Query("summary"),
    session: AsyncSession = Depends(get_db),
):
    if type == "summary":
        return await _summary_stats(session)
    if type == "realtime":
        return _realtime_stats()
    if type == "kpis":
        companies = await get_all_companies(session)
        rounds = await get_all_rounds(session)
        portfolio = await get_all_portfolio(session)
        return success_response(aggregation.compute_kpis(companies, rounds, portfolio))
    if type == "alerts":
        companies = await get_all_companies(session)
        rounds = await get_all_rounds(session)
        portfolio = await get_all_portfolio(session)
        return success_response(aggregation.generate_alerts(companies, rounds, portfolio))

    raise HTTPException(status_code=400, detail="Invalid stats type")


@router.get("/analytics")
async def get_analytics(
    metric: str = Query("funding-trends"),
    session: AsyncSession = Depends(get_db),
):
    if metric == "funding-trends":
        companies = await get_all_companies(session)
        rounds = await get_all_rounds(session)
        return success_response(
            {
                "stageBreakdown": aggregation.stage_breakdown(companies),
                "timeline": aggregation.funding_timeline(rounds),
                "roundTypes": aggregation.funding_by_group(rounds, "round_type"),
            },
            metadata={"analysisType": metric, "totalRounds": len(rounds)},
        )

    if metric == "market-analysis":
        companies = await get_all_companies(session)
        categories = aggregation.market_map(companies)
        maturity = {stage: len(members) for stage, members in aggregation.group_by(companies, "current_stage").items()}
        return success_response({
            "marketMap": categories,
            "competitionMetrics": {
                "totalMarketSize": aggregation.total_funding(companies, "total_funding"),
                "averageCompanySize": aggregation.average_funding(companies, "employee_count"),
                "maturityDistribution": maturity,
            },
            "insights": aggregation.market_insights(categories),
        })

    if metric == "performance-metrics":
        companies = await get_all_companies(session)
        portfolio = await get_all_portfolio(session)
        funded = [c for c in companies if (c.total_funding or 0) > 0]
        held = max(len(portfolio), 1)
        return success_response({
            "fundingEfficiency": len(funded) / len(companies) * 100 if companies else 0,
            "scaleMetrics": {
                "averageEmployees": aggregation.average_funding(companies, "employee_count"),
                "fundingPerEmployee": (
                    sum((c.total_funding or 0) / max(c.employee_count or 1, 1) for c in companies) / len(companies)
                    if companies else 0
                ),
            },
            "portfolioHealth": {
                "activeUsers": sum(1 for p in portfolio if p.active_users) / held * 100,
                "averageTraction": sum(p.traction_score or 0 for p in portfolio) / held,
            },
            "investmentMetrics": {
                "totalDeployed": aggregation.total_funding(portfolio, "investment_amount"),
                "averageInvestment": aggregation.total_funding(portfolio, "investment_amount") / held,
                "portfolioCount": len(portfolio),
            },
        })

    if metric == "investment-pipeline":
        companies = await get_all_companies(session)
        portfolio = await get_all_portfolio(session)
        return success_response({
            **aggregation.investment_pipeline(companies),
            "portfolioStatus": {
                "totalPortfolio": len(portfolio),
                "activePortfolio": sum(1 for p in portfolio if p.status == "active"),
            },
        })

    if metric == "investor-networks":
        rounds = await get_rounds_with_investors(session)
        networks = aggregation.investor_networks(rounds, limit=None)
        return success_response({"networks": networks[:20], "totalPairs": len(networks)})

    raise HTTPException(status_code=400, detail="Invalid analytics metric")
