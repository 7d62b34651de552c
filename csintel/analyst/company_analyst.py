"""
AI company analysis.

Builds a market-context prompt from the database and asks Claude (through
Instructor, validated against CompanyAnalysis) for an investment view.
When no API key is configured, or the call fails for any reason, a
rule-based analysis built from the stored company data is returned instead.

Market context (top companies, funding trends, totals) is cached in-process
for settings.market_cache_ttl_seconds.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
import instructor
from anthropic import Anthropic, APIError, APITimeoutError, RateLimitError
from instructor.core import InstructorRetryException
from sqlalchemy.ext.asyncio import AsyncSession

from ..archivist.models import Company
from ..archivist.storage import (
    find_company_by_name,
    find_similar_companies,
    get_company_rounds,
    get_funding_trends,
    get_market_overview,
)
from ..config.settings import settings
from .schemas import AnalysisType, CompanyAnalysis, Recommendation

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a concise cybersecurity investment analyst. Provide data-driven, "
    "actionable insights. Be brief but comprehensive."
)

LATEST_ROUNDS_IN_PROMPT = 5
FALLBACK_CONFIDENCE = 65
FALLBACK_MARKET_OPPORTUNITY = (
    "Cybersecurity market continues to show strong growth potential with "
    "increasing demand for innovative solutions."
)

# Market context cache (single timestamped value, event-loop only)
_market_data_cache: Optional[Dict[str, Any]] = None
_cache_timestamp: float = 0.0

_client = None


def _get_client():
    """Lazily build the Instructor client; None when no API key is configured."""
    global _client
    if not settings.anthropic_api_key:
        return None
    if _client is None:
        anthropic_client = Anthropic(
            api_key=settings.anthropic_api_key,
            timeout=httpx.Timeout(settings.llm_timeout, connect=settings.llm_connect_timeout),
        )
        _client = instructor.from_anthropic(anthropic_client)
    return _client


def clear_market_cache() -> None:
    global _market_data_cache, _cache_timestamp
    _market_data_cache = None
    _cache_timestamp = 0.0


async def get_market_data(session: AsyncSession) -> Dict[str, Any]:
    """
    Return market context, refreshing it when older than the cache TTL.

    The returned dict carries a "cacheHit" flag so callers can report
    whether the database was queried.
    """
    global _market_data_cache, _cache_timestamp

    now = time.monotonic()
    if _market_data_cache is not None and now - _cache_timestamp < settings.market_cache_ttl_seconds:
        return {**_market_data_cache, "cacheHit": True}

    overview = await get_market_overview(session)
    _market_data_cache = {
        "topCompanies": overview["topCompanies"],
        "fundingTrends": await get_funding_trends(session),
        "marketAnalysis": {
            "totalCompanies": overview["totalCompanies"],
            "totalFunding": overview["totalFunding"],
            "averageFunding": overview["averageFunding"],
        },
    }
    _cache_timestamp = now
    logger.debug(f"Market data cache refreshed ({overview['totalCompanies']} companies)")
    return {**_market_data_cache, "cacheHit": False}


def _money(amount: Optional[float]) -> str:
    return f"${int(amount or 0):,}"


def build_analysis_prompt(
    query: str,
    analysis_type: str,
    company: Optional[Company],
    rounds: List[Dict[str, Any]],
    similar: List[Company],
    market: Dict[str, Any],
) -> str:
    market_analysis = market["marketAnalysis"]

    if analysis_type == AnalysisType.QUICK.value:
        if company:
            company_line = (
                f"Company Data: {company.name}, {company.primary_category}, "
                f"{_money(company.total_funding)} funding, {company.current_stage} stage."
            )
        else:
            company_line = "Company not found in database."
        return (
            f"Provide a quick investment analysis for {query} based on cybersecurity market trends.\n\n"
            f"Market Context: {market_analysis['totalCompanies']} companies with "
            f"{_money(market_analysis['totalFunding'])} total funding.\n\n"
            f"{company_line}\n\n"
            "Give a brief recommendation (buy/hold/avoid) with 2-3 key reasons."
        )

    lines = [
        "Analyze the following company and provide investment insights.",
        "",
        "COMPANY DATA:",
    ]
    if company:
        lines += [
            f"Company: {company.name}",
            f"Description: {company.description}",
            f"Category: {company.primary_category}",
            f"Total Funding: {_money(company.total_funding)}",
            f"Funding Rounds: {company.funding_rounds_count}",
            f"Current Stage: {company.current_stage}",
            f"Employees: {company.employee_count or 'Unknown'}",
            f"Technology: {company.core_technology}",
            f"Founded: {company.founded_year}",
            f"Headquarters: {company.headquarters}",
            "",
            "Funding History:",
        ]
        lines += [
            f"- {r['roundType']}: {_money(r['amountUsd'])} on {r['announcedDate'] or 'unknown date'}"
            for r in rounds
        ]
    else:
        lines.append(f'Company "{query}" not found in database.')

    if similar:
        lines += ["", "SIMILAR COMPANIES:"]
        lines += [f"- {c.name}: {c.primary_category}, {_money(c.total_funding)}" for c in similar]

    lines += ["", "MARKET CONTEXT:", "Top Funded Companies:"]
    lines += [
        f"- {c['name']}: {c['primaryCategory']}, {_money(c['totalFunding'])} ({c['currentStage']})"
        for c in market["topCompanies"]
    ]
    lines += ["", "Funding Trends by Round Type:"]
    lines += [
        f"- {t['roundType']}: {t['count']} rounds, {_money(t['totalAmount'])}"
        for t in market["fundingTrends"]
    ]
    lines += [
        "",
        "Market Overview:",
        f"- Total Companies Tracked: {market_analysis['totalCompanies']}",
        f"- Total Market Funding: {_money(market_analysis['totalFunding'])}",
        f"- Average Funding per Company: {_money(round(market_analysis['averageFunding']))}",
        "",
        "Provide a concise analysis covering:",
        "1. Company overview and positioning",
        "2. Funding analysis and valuation insights",
        "3. Market comparison and competitive landscape",
        "4. Investment recommendation (strong_buy, buy, hold, avoid)",
        "5. Key risks and opportunities",
        "6. Market timing assessment",
    ]
    return "\n".join(lines)


def fallback_analysis(query: str, company: Optional[Company]) -> CompanyAnalysis:
    """Database-only analysis used when the AI call is unavailable."""
    if company is None:
        return CompanyAnalysis(
            company_name=query,
            found=False,
            overview="Company not found in database.",
            funding_analysis="No funding data available.",
            market_position="Unable to determine market position.",
            recommendation=Recommendation.HOLD,
            confidence=FALLBACK_CONFIDENCE,
            key_strengths=["Market research needed"],
            key_risks=["Limited information available"],
            market_opportunity=FALLBACK_MARKET_OPPORTUNITY,
            investment_thesis="Gather more company-specific information before making investment decision.",
        )

    return CompanyAnalysis(
        company_name=query,
        found=True,
        overview=f"{company.name} is a {company.primary_category} company based in {company.headquarters}.",
        funding_analysis=(
            f"Total funding: {_money(company.total_funding)} across "
            f"{company.funding_rounds_count} rounds."
        ),
        market_position=f"Currently at {company.current_stage} stage in the cybersecurity market.",
        recommendation=Recommendation.HOLD,
        confidence=FALLBACK_CONFIDENCE,
        key_strengths=[
            company.primary_category or "Cybersecurity focus",
            company.core_technology or "Technical innovation",
        ],
        key_risks=["Competitive market", "Execution risks"],
        market_opportunity=FALLBACK_MARKET_OPPORTUNITY,
        investment_thesis=(
            "Monitor for additional funding rounds and market traction "
            "before making investment decision."
        ),
    )


def _call_model(prompt: str, analysis_type: str) -> CompanyAnalysis:
    client = _get_client()
    max_tokens = (
        settings.llm_max_tokens_quick
        if analysis_type == AnalysisType.QUICK.value
        else settings.llm_max_tokens_comprehensive
    )
    response, completion = client.messages.create_with_completion(
        model=settings.llm_model,
        max_tokens=max_tokens,
        temperature=settings.llm_temperature,
        system=SYSTEM_PROMPT,
        messages=[{"role": "user", "content": prompt}],
        response_model=CompanyAnalysis,
    )
    if completion is not None and hasattr(completion, "usage"):
        logger.debug(
            f"Claude call tokens: in={completion.usage.input_tokens}, out={completion.usage.output_tokens}"
        )
    return response


async def analyze_company(
    session: AsyncSession,
    company_name: str,
    analysis_type: str = AnalysisType.COMPREHENSIVE.value,
) -> Dict[str, Any]:
    """
    Analyze a company against current market context.

    Args:
        session: Database session
        company_name: Company to analyze (substring match against stored names)
        analysis_type: "comprehensive" or "quick"

    Returns:
        Analysis fields (camelCase) plus query, analysisType, responseTime
        and contextData. Fallback results also carry an "error" note.

    Raises:
        ValueError: Blank company name or unsupported analysis type
    """
    started = time.perf_counter()

    if not company_name or not company_name.strip():
        raise ValueError("Company name is required")
    if analysis_type not in {t.value for t in AnalysisType}:
        raise ValueError('Invalid analysis type. Must be "comprehensive" or "quick"')

    query = company_name.strip()
    company = await find_company_by_name(session, query)
    rounds: List[Dict[str, Any]] = []
    similar: List[Company] = []
    if company is not None:
        rounds = await get_company_rounds(session, company.id, limit=LATEST_ROUNDS_IN_PROMPT)
    else:
        similar = await find_similar_companies(session, query)

    market = await get_market_data(session)

    error_note = None
    if _get_client() is None:
        logger.warning("Anthropic API key not configured, using fallback analysis")
        analysis = fallback_analysis(query, company)
        error_note = "AI configuration missing, using database analysis"
    else:
        prompt = build_analysis_prompt(query, analysis_type, company, rounds, similar, market)
        try:
            analysis = _call_model(prompt, analysis_type)
            analysis.company_name = analysis.company_name or query
            analysis.found = company is not None
        except (APITimeoutError, RateLimitError, APIError, InstructorRetryException) as e:
            logger.error(f"AI company analysis failed for {query!r}: {type(e).__name__}: {e}")
            analysis = fallback_analysis(query, company)
            error_note = "AI service unavailable, using fallback analysis"
        except Exception as e:
            logger.error(f"Unexpected error during company analysis for {query!r}: {type(e).__name__}: {e}")
            analysis = fallback_analysis(query, company)
            error_note = "AI service unavailable, using fallback analysis"

    result = {
        "query": query,
        "analysisType": analysis_type,
        "responseTime": f"{int((time.perf_counter() - started) * 1000)}ms",
        "contextData": {
            "hasCompanyData": company is not None,
            "similarCompaniesCount": len(similar),
            "marketCompaniesCount": market["marketAnalysis"]["totalCompanies"],
            "cacheUsed": market["cacheHit"],
        },
        **analysis.to_response(),
    }
    if error_note:
        result["error"] = error_note
    return result
