"""
Funding data adapters.

Crunchbase company profiles, the GrowthList startup feed and OpenVC investor
profiles. When a session is supplied the records are written through the
archivist: companies and rounds are upserted (deduplicated by the round dedup
tiers) and investors are matched on normalized name, so created / updated
reflect what the database already held.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...analyst.extractor import normalize_round_type
from ...archivist.storage import (
    get_or_create_investor,
    normalize_amount,
    save_funding_round,
    upsert_company,
)
from ...config.sources import SourceCategory
from ..base_adapter import IngestionResult, StaticAdapter

logger = logging.getLogger(__name__)

# Crunchbase employee ranges -> representative headcount
EMPLOYEE_RANGES = {
    "1-10": 5,
    "11-50": 25,
    "51-100": 75,
    "101-250": 175,
    "251-500": 375,
    "501-1000": 750,
    "1001-5000": 2500,
    "5001-10000": 7500,
    "10000+": 15000,
}


def parse_employee_count(value: Optional[str]) -> Optional[int]:
    """Map a Crunchbase employee range to a headcount; bare integers pass through."""
    if not value:
        return None
    value = value.strip()
    if value in EMPLOYEE_RANGES:
        return EMPLOYEE_RANGES[value]
    try:
        return int(value)
    except ValueError:
        return None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date_parser.parse(value).date()
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable date: {value!r}")
        return None


class FundingAdapter(StaticAdapter):
    category = SourceCategory.FUNDING
    data_key = "records"

    def record_key(self, record: Dict[str, Any]) -> str:
        return record.get("name", "unknown")

    async def store_record(self, session: AsyncSession, record: Dict[str, Any]) -> bool:
        """Persist one record. Returns True when it was newly created."""
        raise NotImplementedError

    async def store(
        self,
        payload: List[Dict[str, Any]],
        result: IngestionResult,
        session: Optional[AsyncSession] = None,
    ) -> None:
        if session is None:
            await super().store(payload, result, session)
            return

        for record in payload:
            result.processed += 1
            try:
                if await self.store_record(session, record):
                    result.created += 1
                else:
                    result.updated += 1
            except (SQLAlchemyError, ValueError) as e:
                logger.error(f"{self.source_id}: failed to store {self.record_key(record)}: {e}")
                result.add_error(self.record_key(record), str(e))


class CrunchbaseAdapter(FundingAdapter):
    source_id = "crunchbase"
    delay_ms = 150
    snapshot = [
        {
            "uuid": "cb-001",
            "name": "CyberDefense Pro",
            "short_description": "AI-powered threat detection and response platform",
            "founded_on": "2020",
            "location": "San Francisco, CA",
            "country": "United States",
            "website": "https://cyberdefensepro.com",
            "num_employees_enum": "51-100",
            "categories": ["Cybersecurity", "Artificial Intelligence", "Enterprise Software"],
            "funding_rounds": [
                {
                    "investment_type": "series_a",
                    "announced_on": "2023-06-15",
                    "money_raised_usd": 15000000,
                    "lead_investors": ["Sequoia Capital"],
                },
            ],
        },
        {
            "uuid": "cb-002",
            "name": "SecureCloud Systems",
            "short_description": "Cloud security posture management for multi-cloud environments",
            "founded_on": "2019",
            "location": "Austin, TX",
            "country": "United States",
            "website": "https://securecloud.io",
            "num_employees_enum": "101-250",
            "categories": ["Cybersecurity", "Cloud Security", "SaaS"],
            "funding_rounds": [
                {
                    "investment_type": "seed",
                    "announced_on": "2020-02-10",
                    "money_raised_usd": 3500000,
                    "lead_investors": ["Accel Partners"],
                },
                {
                    "investment_type": "series_a",
                    "announced_on": "2022-11-08",
                    "money_raised_usd": 22000000,
                    "lead_investors": ["Andreessen Horowitz"],
                },
            ],
        },
    ]

    def build_summary(self, payload):
        rounds = [r for record in payload for r in record["funding_rounds"]]
        return {
            "companies": len(payload),
            "fundingRounds": len(rounds),
            "totalFunding": sum(r["money_raised_usd"] for r in rounds),
        }

    async def store_record(self, session: AsyncSession, record: Dict[str, Any]) -> bool:
        categories = record.get("categories") or []
        company, created = await upsert_company(
            session,
            record["name"],
            description=record.get("short_description"),
            founded_year=int(record["founded_on"][:4]) if record.get("founded_on") else None,
            headquarters=record.get("location"),
            country=record.get("country"),
            website=record.get("website"),
            employee_count=parse_employee_count(record.get("num_employees_enum")),
            primary_category=categories[0] if categories else None,
            secondary_categories=categories[1:] or None,
        )
        for funding in record.get("funding_rounds", []):
            await save_funding_round(
                session,
                company_name=company.name,
                round_type=normalize_round_type(funding["investment_type"]),
                amount_usd=funding.get("money_raised_usd"),
                announced_date=_parse_date(funding.get("announced_on")),
                lead_investors=funding.get("lead_investors", []),
                source=self.source_id,
            )
        return created


class GrowthListAdapter(FundingAdapter):
    source_id = "growthlist"
    delay_ms = 90
    snapshot = [
        {
            "name": "ZeroTrust Security",
            "description": "Zero trust network access for distributed workforces",
            "fundingAmount": "$18M",
            "fundingStage": "Series A",
            "fundingDate": "2024-01-15",
            "investors": ["Kleiner Perkins", "GV"],
            "location": "Palo Alto, CA",
            "founded": 2021,
            "employees": 45,
            "website": "https://zerotrustsec.com",
        },
        {
            "name": "CloudShield Analytics",
            "description": "Security analytics for cloud-native workloads",
            "fundingAmount": "$8.5M",
            "fundingStage": "Seed",
            "fundingDate": "2024-01-08",
            "investors": ["Bessemer Venture Partners", "Lightspeed"],
            "location": "Seattle, WA",
            "founded": 2022,
            "employees": 28,
            "website": "https://cloudshield.ai",
        },
        {
            "name": "ThreatIntel Pro",
            "description": "Threat intelligence aggregation and enrichment",
            "fundingAmount": "$35M",
            "fundingStage": "Series B",
            "fundingDate": "2024-01-22",
            "investors": ["Insight Partners", "Accel"],
            "location": "Boston, MA",
            "founded": 2019,
            "employees": 120,
            "website": "https://threatintelpro.com",
        },
    ]

    def build_summary(self, payload):
        amounts = [normalize_amount(r["fundingAmount"]) or 0 for r in payload]
        stages: Dict[str, int] = {}
        for record in payload:
            stages[record["fundingStage"]] = stages.get(record["fundingStage"], 0) + 1
        return {
            "startups": len(payload),
            "totalFunding": sum(amounts),
            "byStage": stages,
        }

    async def store_record(self, session: AsyncSession, record: Dict[str, Any]) -> bool:
        company, created = await upsert_company(
            session,
            record["name"],
            description=record.get("description"),
            founded_year=record.get("founded"),
            headquarters=record.get("location"),
            employee_count=record.get("employees"),
            website=record.get("website"),
            primary_category="Cybersecurity",
        )
        investors = record.get("investors") or []
        await save_funding_round(
            session,
            company_name=company.name,
            round_type=normalize_round_type(record["fundingStage"]),
            amount_usd=normalize_amount(record.get("fundingAmount")),
            announced_date=_parse_date(record.get("fundingDate")),
            lead_investors=investors[:1],
            participating_investors=investors[1:],
            source=self.source_id,
        )
        return created


class OpenVCAdapter(FundingAdapter):
    source_id = "openvc"
    delay_ms = 80
    snapshot = [
        {
            "name": "CyberStarts",
            "type": "VC Firm",
            "location": "Tel Aviv, Israel",
            "stageFocus": ["Pre-Seed", "Seed"],
            "checkSize": "$250K-$2M",
            "website": "https://cyberstarts.com",
        },
        {
            "name": "Team8",
            "type": "VC Firm",
            "location": "Tel Aviv, Israel",
            "stageFocus": ["Seed", "Series A"],
            "checkSize": "$1M-$10M",
            "website": "https://team8.vc",
        },
        {
            "name": "Strategic Cyber Ventures",
            "type": "VC Firm",
            "location": "Washington, DC",
            "stageFocus": ["Series A", "Series B"],
            "checkSize": "$5M-$25M",
            "website": "https://scv.vc",
        },
    ]

    def build_summary(self, payload):
        stages = sorted({stage for record in payload for stage in record["stageFocus"]})
        return {"investors": len(payload), "stagesCovered": stages}

    async def store_record(self, session: AsyncSession, record: Dict[str, Any]) -> bool:
        _, created = await get_or_create_investor(
            session,
            record["name"],
            investor_type=record.get("type"),
            location=record.get("location"),
            website=record.get("website"),
            stage_focus_json=json.dumps(record.get("stageFocus") or []),
            check_size=record.get("checkSize"),
        )
        return created


FUNDING_ADAPTERS = {
    adapter.source_id: adapter
    for adapter in (CrunchbaseAdapter, GrowthListAdapter, OpenVCAdapter)
}
