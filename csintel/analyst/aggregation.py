"""
Funding aggregation helpers.

Pure, synchronous computations over lists of records fetched from the
database. Records may be ORM objects or dicts; fields are read by name.
Null amounts are filtered out of every statistic.
"""

from collections import OrderedDict
from itertools import combinations
from typing import Any, Dict, Iterable, List, Mapping, Optional


# Number of distinct primary categories treated as full market coverage
MARKET_CATEGORY_UNIVERSE = 12

HIGH_VALUE_SERIES_B_USD = 100_000_000
MARKET_CONCENTRATION_SHARE = 0.40
MAX_ALERTS = 5


def _get(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _amounts(records: Iterable[Any], key: str) -> List[float]:
    return [v for v in (_get(r, key) for r in records) if v is not None]


# ----- Core statistics -----

def total_funding(records: Iterable[Any], key: str = "amount_usd") -> int:
    return int(sum(_amounts(records, key)))


def average_funding(records: Iterable[Any], key: str = "amount_usd") -> float:
    values = _amounts(records, key)
    if not values:
        return 0
    return sum(values) / len(values)


def median_funding(records: Iterable[Any], key: str = "amount_usd") -> float:
    values = sorted(_amounts(records, key))
    if not values:
        return 0
    mid = len(values) // 2
    if len(values) % 2:
        return values[mid]
    return (values[mid - 1] + values[mid]) / 2


def group_by(records: Iterable[Any], key: str) -> "OrderedDict[str, List[Any]]":
    """Group records by field value in first-seen order; None groups as "unknown"."""
    groups: "OrderedDict[str, List[Any]]" = OrderedDict()
    for record in records:
        value = _get(record, key)
        groups.setdefault(value if value is not None else "unknown", []).append(record)
    return groups


def funding_by_group(
    records: Iterable[Any],
    group_key: str,
    amount_key: str = "amount_usd",
) -> List[Dict[str, Any]]:
    """Count, total and average per group, largest total first."""
    rows = []
    for group, members in group_by(records, group_key).items():
        rows.append({
            "group": group,
            "count": len(members),
            "total": total_funding(members, amount_key),
            "average": average_funding(members, amount_key),
        })
    return sorted(rows, key=lambda r: r["total"], reverse=True)


def summarize_amounts(records: Iterable[Any], key: str = "amount_usd") -> Dict[str, Any]:
    records = list(records)
    return {
        "count": len(records),
        "totalAmount": total_funding(records, key),
        "averageAmount": average_funding(records, key),
        "medianAmount": median_funding(records, key),
    }


# ----- Dashboard breakdowns -----

def stage_breakdown(companies: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {
            "stage": row["group"],
            "count": row["count"],
            "totalFunding": row["total"],
            "averageFunding": row["average"],
        }
        for row in funding_by_group(companies, "current_stage", "total_funding")
    ]


def market_map(companies: Iterable[Any], top_n: int = 3) -> List[Dict[str, Any]]:
    """Per-category funding with market share of all funding."""
    companies = list(companies)
    overall = total_funding(companies, "total_funding")
    result = []
    for category, members in group_by(companies, "primary_category").items():
        category_total = total_funding(members, "total_funding")
        leaders = sorted(members, key=lambda c: _get(c, "total_funding") or 0, reverse=True)[:top_n]
        result.append({
            "category": category,
            "companyCount": len(members),
            "totalFunding": category_total,
            "averageFunding": average_funding(members, "total_funding"),
            "marketShare": round(category_total / overall * 100, 2) if overall else 0,
            "topCompanies": [_get(c, "name") for c in leaders],
        })
    return sorted(result, key=lambda r: r["totalFunding"], reverse=True)


def funding_timeline(rounds: Iterable[Any]) -> List[Dict[str, Any]]:
    """Round count and total per YYYY-MM of announced_date, oldest first."""
    buckets: Dict[str, List[Any]] = {}
    for r in rounds:
        announced = _get(r, "announced_date")
        if announced is None:
            continue
        buckets.setdefault(announced.strftime("%Y-%m"), []).append(r)
    return [
        {"period": period, "count": len(members), "totalAmount": total_funding(members)}
        for period, members in sorted(buckets.items())
    ]


# ----- KPIs and alerts -----

def compute_kpis(
    companies: Iterable[Any],
    rounds: Iterable[Any],
    portfolio: Iterable[Any],
) -> Dict[str, Any]:
    companies, rounds, portfolio = list(companies), list(rounds), list(portfolio)

    company_count = len(companies)
    funding_total = total_funding(companies, "total_funding")

    successful = [
        p for p in portfolio
        if _get(p, "status") == "active" and (_get(p, "traction_score") or 0) >= 50
    ]
    success_rate = len(successful) / len(portfolio) * 100 if portfolio else 0

    complete = [
        c for c in companies
        if _get(c, "description") and _get(c, "primary_category") and _get(c, "website")
    ]
    data_quality = len(complete) / company_count * 100 if company_count else 0

    categories = {_get(c, "primary_category") for c in companies if _get(c, "primary_category")}
    coverage = min(100.0, len(categories) / MARKET_CATEGORY_UNIVERSE * 100)

    return {
        "totalCompanies": company_count,
        "totalFunding": funding_total,
        "averageFunding": funding_total / max(company_count, 1),
        "medianRoundSize": median_funding(rounds),
        "totalRounds": len(rounds),
        "portfolioCompanies": len(portfolio),
        "successRate": round(success_rate, 1),
        "dataQuality": round(data_quality, 1),
        "marketCoverage": round(coverage, 1),
    }


def generate_alerts(
    companies: Iterable[Any],
    rounds: Iterable[Any],
    portfolio: Iterable[Any],
) -> Dict[str, Any]:
    """
    Rule-based dashboard alerts, capped at MAX_ALERTS.

    Rules:
    - Series B round above $100M (high value)
    - Portfolio company with traction < 30 and no active users (attention)
    - Category holding more than 40% of companies (concentration)
    - System health info message (always present)
    """
    companies, rounds, portfolio = list(companies), list(rounds), list(portfolio)
    names = {_get(c, "id"): _get(c, "name") for c in companies}
    alerts: List[Dict[str, Any]] = []

    for r in rounds:
        round_type = (_get(r, "round_type") or "").lower().replace("-", " ")
        amount = _get(r, "amount_usd") or 0
        if round_type == "series b" and amount > HIGH_VALUE_SERIES_B_USD:
            alerts.append({
                "type": "high_value_round",
                "severity": "high",
                "title": "High-value Series B",
                "message": f"{names.get(_get(r, 'company_id'), 'Unknown company')} raised ${amount / 1_000_000:.0f}M in a Series B",
            })

    for p in portfolio:
        if (_get(p, "traction_score") or 0) < 30 and not _get(p, "active_users"):
            alerts.append({
                "type": "portfolio_attention",
                "severity": "medium",
                "title": "Portfolio company needs attention",
                "message": f"{names.get(_get(p, 'company_id'), 'Portfolio company')} has low traction and no active users",
            })

    if companies:
        for category, members in group_by(companies, "primary_category").items():
            share = len(members) / len(companies)
            if share > MARKET_CONCENTRATION_SHARE:
                alerts.append({
                    "type": "market_concentration",
                    "severity": "medium",
                    "title": "Market concentration",
                    "message": f"{category} accounts for {share * 100:.0f}% of tracked companies",
                })

    alerts.append({
        "type": "system_health",
        "severity": "low",
        "title": "System health",
        "message": f"All systems operational: {len(companies)} companies, {len(rounds)} rounds tracked",
    })

    alerts = alerts[:MAX_ALERTS]
    summary = {"high": 0, "medium": 0, "low": 0}
    for alert in alerts:
        summary[alert["severity"]] += 1
    return {"alerts": alerts, "summary": {"total": len(alerts), **summary}}


# ----- Investor networks -----

def investor_networks(
    rounds: Iterable[Any],
    limit: Optional[int] = 20,
) -> List[Dict[str, Any]]:
    """
    Co-investment pairs across rounds.

    Each round contributes one co-investment to every unordered pair of its
    investors. Relationship strength is min(1, count / 5).
    """
    pairs: Dict[tuple, Dict[str, Any]] = {}
    for r in rounds:
        investors = sorted(set(_get(r, "investors") or []))
        for a, b in combinations(investors, 2):
            entry = pairs.setdefault((a, b), {"count": 0, "totalAmount": 0, "companies": []})
            entry["count"] += 1
            entry["totalAmount"] += _get(r, "amount_usd") or 0
            company = _get(r, "company")
            if company and company not in entry["companies"]:
                entry["companies"].append(company)

    networks = [
        {
            "investorA": a,
            "investorB": b,
            "coInvestments": entry["count"],
            "totalAmount": entry["totalAmount"],
            "companies": entry["companies"],
            "relationshipStrength": min(1.0, entry["count"] / 5),
        }
        for (a, b), entry in pairs.items()
    ]
    networks.sort(key=lambda n: (n["coInvestments"], n["totalAmount"]), reverse=True)
    return networks[:limit] if limit else networks


# ----- Investment pipeline -----

PIPELINE_STAGES = ("Seed", "Series A", "Series B")
STAGE_SCORES = {"Series B": 10, "Series A": 8, "Seed": 5}


def investment_score(company: Any) -> int:
    """Base 50, plus funding traction, team size and stage maturity; capped at 100."""
    funding = _get(company, "total_funding") or 0
    employees = _get(company, "employee_count") or 0
    score = 50

    if funding > 50_000_000:
        score += 25
    elif funding > 10_000_000:
        score += 20
    elif funding > 1_000_000:
        score += 15
    elif funding > 0:
        score += 10

    if employees > 100:
        score += 15
    elif employees > 50:
        score += 12
    elif employees > 20:
        score += 10
    elif employees > 10:
        score += 8

    score += STAGE_SCORES.get(_get(company, "current_stage"), 0)
    return min(100, score)


def investment_recommendation(score: int) -> str:
    if score >= 85:
        return "strong_buy"
    if score >= 70:
        return "buy"
    if score >= 55:
        return "hold"
    return "research"


def investment_pipeline(companies: Iterable[Any], top_n: int = 10) -> Dict[str, Any]:
    """Score early-stage companies and summarize the pipeline."""
    opportunities = []
    for c in companies:
        if _get(c, "current_stage") not in PIPELINE_STAGES:
            continue
        score = investment_score(c)
        opportunities.append({
            "id": _get(c, "id"),
            "name": _get(c, "name"),
            "category": _get(c, "primary_category"),
            "stage": _get(c, "current_stage"),
            "funding": _get(c, "total_funding") or 0,
            "employees": _get(c, "employee_count"),
            "score": score,
            "recommendation": investment_recommendation(score),
        })
    opportunities.sort(key=lambda o: o["score"], reverse=True)

    stages: Dict[str, int] = {}
    for o in opportunities:
        stages[o["stage"]] = stages.get(o["stage"], 0) + 1

    return {
        "opportunities": opportunities[:top_n],
        "pipelineMetrics": {
            "totalOpportunities": len(opportunities),
            "highPotential": sum(1 for o in opportunities if o["score"] > 80),
            "mediumPotential": sum(1 for o in opportunities if 60 < o["score"] <= 80),
            "averageScore": (
                sum(o["score"] for o in opportunities) / len(opportunities) if opportunities else 0
            ),
            "stageDistribution": stages,
        },
    }


def market_insights(categories: List[Dict[str, Any]]) -> List[str]:
    """Headline sentences for a market_map() result."""
    if not categories:
        return []
    top = categories[0]
    total = sum(c["totalFunding"] for c in categories)
    per_category = sum(c["companyCount"] for c in categories) / len(categories)
    return [
        f"{top['category']} leads with {top['companyCount']} companies and "
        f"${top['totalFunding'] / 1_000_000:.0f}M funding",
        f"Total market size: ${total / 1_000_000_000:.1f}B across {len(categories)} categories",
        f"Average {per_category:.0f} companies per category",
    ]
