"""
Storage pipeline for companies, funding rounds and investors.

Deduplication of funding rounds runs in three tiers:
- TIER 1: content hash (normalized company | amount | round | date)
- TIER 2: same source URL
- TIER 3: same company, amount within 10% and date within 7 days
"""

import hashlib
import json
import re
import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from sqlalchemy import select, func, nullslast
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    Company,
    FundingRound,
    FundingRoundInvestor,
    Investor,
    utc_now_naive,
)

logger = logging.getLogger(__name__)


# Amount tolerance and date window for TIER 3 fuzzy matching
DEDUP_AMOUNT_TOLERANCE = 0.10
DEDUP_DATE_WINDOW_DAYS = 7

_LEGAL_SUFFIX_RE = re.compile(r"\b(inc|llc|corp|ltd|co|lp|llp)\b\.?")


# ----- Normalization helpers -----

def normalize_name(name: Optional[str]) -> str:
    """
    Normalize a company or investor name for matching.

    Lowercases, strips legal suffixes (inc, llc, corp, ltd, co, lp, llp),
    drops punctuation and collapses whitespace.

        "Acme Security, Inc." → "acme security"
    """
    if not name:
        return ""
    clean = _LEGAL_SUFFIX_RE.sub("", name.lower())
    clean = re.sub(r"[^a-z0-9\s]", "", clean)
    return re.sub(r"\s+", " ", clean).strip()


def normalize_amount(amount: Union[str, int, float, None]) -> Optional[int]:
    """
    Normalize an amount to integer USD.

    Examples:
        "$30M" → 30000000
        "$30 million" → 30000000
        "$2.5B" → 2500000000
        "$500K" → 500000
        "$25-30 million" → 25000000 (takes first number)
        "€100 million" → 100000000 (treats as equivalent USD)
        12500000 → 12500000
        None / "undisclosed" → None
    """
    if amount is None or isinstance(amount, bool):
        return None
    if isinstance(amount, (int, float)):
        return int(amount) if amount > 0 else None

    clean = amount.replace("$", "").replace("€", "").replace("£", "")
    clean = clean.replace(",", "").strip().lower()
    clean = re.sub(r'^(usd|us|eur|gbp)\s*', '', clean)
    clean = re.sub(r'^(approximately|approx\.?|around|about|up\s+to|nearly|over|~)\s*', '', clean)

    if not clean or "undisclosed" in clean or "unknown" in clean:
        return None

    # "25-30 million" / "25 to 30 million" → first number
    clean = re.sub(r'(\d+(?:\.\d+)?)\s*(?:-|–|to)\s*\d+(?:\.\d+)?', r'\1', clean)

    match = re.match(r'([\d.]+)\s*(million|mn|mm|m|billion|bn|b|thousand|k)?', clean)
    if not match:
        return None

    try:
        num = float(match.group(1))
    except ValueError:
        return None

    multiplier = match.group(2) or ""
    if multiplier in ("million", "m", "mn", "mm"):
        return round(num * 1_000_000)
    elif multiplier in ("billion", "b", "bn"):
        return round(num * 1_000_000_000)
    elif multiplier in ("thousand", "k"):
        return round(num * 1_000)
    return round(num) if num > 0 else None


def content_hash(
    company_name: str,
    amount_usd: Optional[int],
    round_type: Optional[str],
    announced_date: Optional[date],
) -> str:
    """sha256 over normalized company | amount | round | date."""
    key_data = "|".join([
        normalize_name(company_name),
        str(amount_usd or ""),
        (round_type or "").strip().lower(),
        announced_date.isoformat() if announced_date else "",
    ])
    return hashlib.sha256(key_data.encode()).hexdigest()


def _json_list(values: Optional[Iterable[str]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps(list(values))


def _load_json_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Ignoring malformed JSON list: {raw[:80]}")
        return []
    return value if isinstance(value, list) else []


# ----- Serialization -----

def company_to_dict(company: Company) -> Dict[str, Any]:
    return {
        "id": company.id,
        "name": company.name,
        "description": company.description,
        "foundedYear": company.founded_year,
        "headquarters": company.headquarters,
        "country": company.country,
        "website": company.website,
        "primaryCategory": company.primary_category,
        "secondaryCategories": _load_json_list(company.secondary_categories_json),
        "targetMarket": company.target_market,
        "coreTechnology": company.core_technology,
        "totalFunding": company.total_funding or 0,
        "fundingRoundsCount": company.funding_rounds_count,
        "lastFundingDate": company.last_funding_date.isoformat() if company.last_funding_date else None,
        "currentStage": company.current_stage,
        "employeeCount": company.employee_count,
        "estimatedRevenue": company.estimated_revenue,
        "growthRate": company.growth_rate,
        "patentsCount": company.patents_count,
        "marketCap": company.market_cap,
        "competitors": _load_json_list(company.competitors_json),
        "isPortfolio": company.is_portfolio,
    }


def round_to_dict(
    funding_round: FundingRound,
    company: Optional[Company] = None,
    investors: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    data = {
        "id": funding_round.id,
        "companyId": funding_round.company_id,
        "roundType": funding_round.round_type,
        "amountUsd": funding_round.amount_usd,
        "valuationUsd": funding_round.valuation_usd,
        "announcedDate": funding_round.announced_date.isoformat() if funding_round.announced_date else None,
        "leadInvestor": funding_round.lead_investor,
        "source": funding_round.source,
        "sourceUrl": funding_round.source_url,
        "confidence": funding_round.confidence,
        "investors": investors or [],
    }
    if company is not None:
        data["company"] = {
            "id": company.id,
            "name": company.name,
            "primaryCategory": company.primary_category,
            "country": company.country,
            "headquarters": company.headquarters,
        }
    return data


# ----- Companies -----

async def find_company(
    session: AsyncSession,
    name: str,
    website: Optional[str] = None,
) -> Optional[Company]:
    """Find a company by case-insensitive name, then by website."""
    stmt = select(Company).where(func.lower(Company.name) == name.strip().lower())
    company = (await session.execute(stmt)).scalars().first()
    if company is None and website:
        stmt = select(Company).where(Company.website == website)
        company = (await session.execute(stmt)).scalars().first()
    return company


async def upsert_company(
    session: AsyncSession,
    name: str,
    **fields: Any,
) -> Tuple[Company, bool]:
    """
    Create a company or update an existing one (matched by name or website).

    Only non-None fields overwrite existing values. List fields
    `secondary_categories` and `competitors` are stored as JSON.

    Returns:
        (company, created)
    """
    if "secondary_categories" in fields:
        fields["secondary_categories_json"] = _json_list(fields.pop("secondary_categories"))
    if "competitors" in fields:
        fields["competitors_json"] = _json_list(fields.pop("competitors"))
    fields = {k: v for k, v in fields.items() if v is not None}

    company = await find_company(session, name, fields.get("website"))
    if company is not None:
        for key, value in fields.items():
            setattr(company, key, value)
        company.updated_at = utc_now_naive()
        await session.flush()
        return company, False

    company = Company(name=name.strip(), **fields)
    session.add(company)
    await session.flush()
    logger.info(f"Created company: {company.name}")
    return company, True


async def get_or_create_company(
    session: AsyncSession,
    name: str,
    **fields: Any,
) -> Tuple[Company, bool]:
    """Return the existing company untouched, or create it with `fields`."""
    company = await find_company(session, name, fields.get("website"))
    if company is not None:
        return company, False
    return await upsert_company(session, name, **fields)


async def get_company(session: AsyncSession, company_id: int) -> Optional[Company]:
    return await session.get(Company, company_id)


async def list_companies(
    session: AsyncSession,
    search: Optional[str] = None,
    country: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Company], int]:
    """
    Fetch companies ordered by total funding.

    Args:
        search: Substring match on name, description or category
        country: Exact country match
        category: Exact primary category match
        limit: Max results
        offset: Pagination offset

    Returns:
        (companies, total matching count)
    """
    stmt = select(Company)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            Company.name.ilike(pattern)
            | Company.description.ilike(pattern)
            | Company.primary_category.ilike(pattern)
        )
    if country:
        stmt = stmt.where(Company.country == country)
    if category:
        stmt = stmt.where(Company.primary_category == category)

    total = (await session.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()

    stmt = stmt.order_by(Company.total_funding.desc(), Company.name).offset(offset).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def get_all_companies(session: AsyncSession) -> List[Company]:
    result = await session.execute(select(Company).order_by(Company.id))
    return list(result.scalars().all())


async def find_company_by_name(session: AsyncSession, name: str) -> Optional[Company]:
    """First company whose name contains `name` (case-insensitive)."""
    stmt = (
        select(Company)
        .where(Company.name.ilike(f"%{name.strip()}%"))
        .order_by(Company.total_funding.desc())
    )
    return (await session.execute(stmt)).scalars().first()


async def find_similar_companies(session: AsyncSession, name: str, limit: int = 3) -> List[Company]:
    """Companies sharing the first name token, or matching category / technology."""
    term = name.strip()
    first_token = term.split(" ")[0] if term else term
    stmt = (
        select(Company)
        .where(
            Company.name.ilike(f"%{first_token}%")
            | Company.primary_category.ilike(f"%{term}%")
            | Company.core_technology.ilike(f"%{term}%")
        )
        .order_by(Company.total_funding.desc())
        .limit(limit)
    )
    return list((await session.execute(stmt)).scalars().all())


# ----- Investors -----

async def get_or_create_investor(
    session: AsyncSession,
    name: str,
    **fields: Any,
) -> Tuple[Investor, bool]:
    """Match investors on normalized name so "Accel" and "Accel, LLC" collapse."""
    normalized = normalize_name(name)
    stmt = select(Investor).where(Investor.normalized_name == normalized)
    investor = (await session.execute(stmt)).scalars().first()
    if investor is not None:
        for key, value in fields.items():
            if value is not None:
                setattr(investor, key, value)
        return investor, False

    investor = Investor(name=name.strip(), normalized_name=normalized, **{
        k: v for k, v in fields.items() if v is not None
    })
    session.add(investor)
    await session.flush()
    return investor, True


async def _round_investors(
    session: AsyncSession,
    round_ids: List[int],
) -> Dict[int, List[Dict[str, Any]]]:
    """Investors per round id, leads first."""
    if not round_ids:
        return {}
    stmt = (
        select(FundingRoundInvestor, Investor)
        .join(Investor, FundingRoundInvestor.investor_id == Investor.id)
        .where(FundingRoundInvestor.round_id.in_(round_ids))
        .order_by(FundingRoundInvestor.is_lead.desc(), Investor.name)
    )
    by_round: Dict[int, List[Dict[str, Any]]] = {}
    for link, investor in (await session.execute(stmt)).all():
        by_round.setdefault(link.round_id, []).append({
            "id": investor.id,
            "name": investor.name,
            "isLead": link.is_lead,
        })
    return by_round


# ----- Funding rounds -----

async def find_duplicate_round(
    session: AsyncSession,
    company_id: Optional[int],
    round_hash: str,
    amount_usd: Optional[int],
    announced_date: Optional[date],
    source_url: Optional[str] = None,
) -> Optional[FundingRound]:
    """
    Find an existing round that matches on any dedup tier.

    Returns:
        The matching FundingRound or None
    """
    # TIER 1: exact content hash
    stmt = select(FundingRound).where(FundingRound.content_hash == round_hash)
    existing = (await session.execute(stmt)).scalars().first()
    if existing:
        logger.debug(f"Duplicate round (content hash): id={existing.id}")
        return existing

    # TIER 2: same source URL
    if source_url:
        stmt = select(FundingRound).where(FundingRound.source_url == source_url)
        existing = (await session.execute(stmt)).scalars().first()
        if existing:
            logger.debug(f"Duplicate round (source url): id={existing.id}")
            return existing

    # TIER 3: same company, similar amount, close date
    if company_id is None or not amount_usd or not announced_date:
        return None

    low = int(amount_usd * (1 - DEDUP_AMOUNT_TOLERANCE))
    high = int(amount_usd * (1 + DEDUP_AMOUNT_TOLERANCE))
    window = timedelta(days=DEDUP_DATE_WINDOW_DAYS)
    stmt = select(FundingRound).where(
        FundingRound.company_id == company_id,
        FundingRound.amount_usd >= low,
        FundingRound.amount_usd <= high,
        FundingRound.announced_date >= announced_date - window,
        FundingRound.announced_date <= announced_date + window,
    )
    existing = (await session.execute(stmt)).scalars().first()
    if existing:
        logger.debug(f"Duplicate round (amount/date window): id={existing.id}")
    return existing


async def save_funding_round(
    session: AsyncSession,
    company_name: str,
    round_type: str,
    amount_usd: Optional[int] = None,
    announced_date: Optional[date] = None,
    lead_investors: Iterable[str] = (),
    participating_investors: Iterable[str] = (),
    valuation_usd: Optional[int] = None,
    source: Optional[str] = None,
    source_url: Optional[str] = None,
    confidence: float = 1.0,
    company_fields: Optional[Dict[str, Any]] = None,
) -> Tuple[FundingRound, bool]:
    """
    Persist a funding round, linking investors and updating company totals.

    Returns:
        (funding_round, created). created is False when a duplicate was found.
    """
    company, _ = await upsert_company(session, company_name, **(company_fields or {}))

    round_hash = content_hash(company.name, amount_usd, round_type, announced_date)
    duplicate = await find_duplicate_round(
        session, company.id, round_hash, amount_usd, announced_date, source_url
    )
    if duplicate is not None:
        return duplicate, False

    leads = [name.strip() for name in lead_investors if name and name.strip()]
    funding_round = FundingRound(
        company_id=company.id,
        content_hash=round_hash,
        round_type=round_type,
        amount_usd=amount_usd,
        valuation_usd=valuation_usd,
        announced_date=announced_date,
        lead_investor=leads[0] if leads else None,
        source=source,
        source_url=source_url,
        confidence=confidence,
    )
    session.add(funding_round)
    await session.flush()

    linked: set[int] = set()
    for name, is_lead in [(n, True) for n in leads] + [(n, False) for n in participating_investors]:
        if not name or not name.strip():
            continue
        investor, _ = await get_or_create_investor(session, name)
        if investor.id in linked:
            continue
        linked.add(investor.id)
        session.add(FundingRoundInvestor(
            round_id=funding_round.id,
            investor_id=investor.id,
            is_lead=is_lead,
        ))

    company.total_funding = (company.total_funding or 0) + (amount_usd or 0)
    company.funding_rounds_count = (company.funding_rounds_count or 0) + 1
    if announced_date and (company.last_funding_date is None or announced_date >= company.last_funding_date):
        company.last_funding_date = announced_date
        company.current_stage = round_type
    elif company.current_stage is None:
        company.current_stage = round_type
    company.updated_at = utc_now_naive()

    await session.flush()
    logger.info(
        f"Saved funding round: {company.name} {round_type} "
        f"${amount_usd or 0:,} ({len(linked)} investors)"
    )
    return funding_round, True


async def create_manual_funding_round(
    session: AsyncSession,
    company: Dict[str, Any],
    round_type: str,
    amount_usd: Optional[int] = None,
    announced_date: Optional[date] = None,
    investors: Optional[List[Dict[str, Any]]] = None,
    valuation_usd: Optional[int] = None,
    source_url: Optional[str] = None,
) -> Tuple[FundingRound, bool]:
    """
    Manual-entry path: upsert the company, then create the round.

    `investors` items are {"name": str, "isLead": bool}; investors are
    connected when they exist and created otherwise.
    """
    company_fields = dict(company)
    company_name = company_fields.pop("name")
    investors = investors or []
    return await save_funding_round(
        session,
        company_name=company_name,
        round_type=round_type,
        amount_usd=amount_usd,
        announced_date=announced_date,
        lead_investors=[i["name"] for i in investors if i.get("isLead")],
        participating_investors=[i["name"] for i in investors if not i.get("isLead")],
        valuation_usd=valuation_usd,
        source="manual",
        source_url=source_url,
        company_fields=company_fields,
    )


def _apply_round_filters(
    stmt,
    company: Optional[str] = None,
    investor: Optional[str] = None,
    round_type: Optional[str] = None,
    min_amount: Optional[int] = None,
    max_amount: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    source: Optional[str] = None,
    country: Optional[str] = None,
    search: Optional[str] = None,
):
    if company:
        stmt = stmt.where(Company.name.ilike(f"%{company.strip()}%"))
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            Company.name.ilike(pattern)
            | Company.description.ilike(pattern)
            | FundingRound.lead_investor.ilike(pattern)
        )
    if investor:
        investor_rounds = (
            select(FundingRoundInvestor.round_id)
            .join(Investor, FundingRoundInvestor.investor_id == Investor.id)
            .where(Investor.normalized_name.like(f"%{normalize_name(investor)}%"))
        )
        stmt = stmt.where(FundingRound.id.in_(investor_rounds))
    if round_type:
        stmt = stmt.where(func.lower(FundingRound.round_type) == round_type.lower())
    if min_amount is not None:
        stmt = stmt.where(FundingRound.amount_usd >= min_amount)
    if max_amount is not None:
        stmt = stmt.where(FundingRound.amount_usd <= max_amount)
    if start_date:
        stmt = stmt.where(FundingRound.announced_date >= start_date)
    if end_date:
        stmt = stmt.where(FundingRound.announced_date <= end_date)
    if source:
        stmt = stmt.where(FundingRound.source == source)
    if country:
        stmt = stmt.where(Company.country == country)
    return stmt


async def list_funding_rounds(
    session: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    **filters: Any,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Fetch funding rounds (newest first) with company and investors.

    Args:
        limit: Max results
        offset: Pagination offset
        **filters: company, investor, round_type, min_amount, max_amount,
            start_date, end_date, source, country, search

    Returns:
        (rounds as dicts, total matching count)
    """
    base = select(FundingRound, Company).join(Company, FundingRound.company_id == Company.id)
    base = _apply_round_filters(base, **filters)

    count_stmt = select(func.count(FundingRound.id)).join(Company, FundingRound.company_id == Company.id)
    total = (await session.execute(_apply_round_filters(count_stmt, **filters))).scalar_one()

    stmt = (
        base.order_by(nullslast(FundingRound.announced_date.desc()), FundingRound.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    rows = (await session.execute(stmt)).all()
    investors = await _round_investors(session, [r.id for r, _ in rows])
    return [round_to_dict(r, c, investors.get(r.id)) for r, c in rows], total


async def get_filtered_round_amounts(session: AsyncSession, **filters: Any) -> List[Dict[str, Any]]:
    """Amount / round type / date of every round matching filters (no paging)."""
    stmt = select(
        FundingRound.amount_usd, FundingRound.round_type, FundingRound.announced_date
    ).join(Company, FundingRound.company_id == Company.id)
    stmt = _apply_round_filters(stmt, **filters)
    return [
        {"amount_usd": amount, "round_type": round_type, "announced_date": announced}
        for amount, round_type, announced in (await session.execute(stmt)).all()
    ]


async def get_all_rounds(session: AsyncSession) -> List[FundingRound]:
    result = await session.execute(select(FundingRound).order_by(FundingRound.id))
    return list(result.scalars().all())


async def get_company_rounds(
    session: AsyncSession,
    company_id: int,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    stmt = (
        select(FundingRound)
        .where(FundingRound.company_id == company_id)
        .order_by(nullslast(FundingRound.announced_date.desc()))
    )
    if limit:
        stmt = stmt.limit(limit)
    rounds = list((await session.execute(stmt)).scalars().all())
    investors = await _round_investors(session, [r.id for r in rounds])
    return [round_to_dict(r, investors=investors.get(r.id)) for r in rounds]


async def get_rounds_with_investors(session: AsyncSession) -> List[Dict[str, Any]]:
    """Every round with its investor names, for co-investment analysis."""
    stmt = select(FundingRound, Company).join(Company, FundingRound.company_id == Company.id)
    rows = (await session.execute(stmt)).all()
    investors = await _round_investors(session, [r.id for r, _ in rows])
    return [
        {
            "round_id": r.id,
            "company": c.name,
            "amount_usd": r.amount_usd,
            "investors": [i["name"] for i in investors.get(r.id, [])],
        }
        for r, c in rows
    ]


async def get_funding_trends(session: AsyncSession) -> List[Dict[str, Any]]:
    """Round count and total amount grouped by round type, largest first."""
    total = func.coalesce(func.sum(FundingRound.amount_usd), 0)
    stmt = (
        select(FundingRound.round_type, func.count(FundingRound.id), total)
        .group_by(FundingRound.round_type)
        .order_by(total.desc())
    )
    return [
        {"roundType": round_type, "count": count, "totalAmount": int(amount or 0)}
        for round_type, count, amount in (await session.execute(stmt)).all()
    ]


async def get_market_overview(session: AsyncSession, top_n: int = 10) -> Dict[str, Any]:
    """Top funded companies plus company count, total and average funding."""
    top_stmt = select(Company).order_by(Company.total_funding.desc()).limit(top_n)
    top_companies = list((await session.execute(top_stmt)).scalars().all())

    totals_stmt = select(
        func.count(Company.id),
        func.coalesce(func.sum(Company.total_funding), 0),
        func.coalesce(func.avg(Company.total_funding), 0),
    )
    count, total, average = (await session.execute(totals_stmt)).one()
    return {
        "topCompanies": [
            {
                "name": c.name,
                "primaryCategory": c.primary_category,
                "totalFunding": c.total_funding or 0,
                "currentStage": c.current_stage,
                "coreTechnology": c.core_technology,
            }
            for c in top_companies
        ],
        "totalCompanies": count,
        "totalFunding": int(total or 0),
        "averageFunding": float(average or 0),
    }
