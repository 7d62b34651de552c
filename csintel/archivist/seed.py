"""
Database seeding from the bundled startup dataset.
"""

import logging
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from .portfolio_storage import add_team_member, record_acquisition, upsert_portfolio_company
from .seed_data import (
    SEED_ACQUISITIONS,
    SEED_COMPANIES,
    SEED_PORTFOLIO,
    SEED_ROUNDS,
    SEED_TEAM_MEMBERS,
)
from .storage import find_company, save_funding_round, upsert_company

logger = logging.getLogger(__name__)


async def seed_database(session: AsyncSession) -> Dict[str, int]:
    """
    Seed companies and their related records.

    Companies that already exist are left untouched, along with their
    rounds, team, acquisitions and portfolio records, so reruns are safe.

    Returns:
        Counts of created records by type
    """
    counts = {"companies": 0, "funding_rounds": 0, "team_members": 0, "acquisitions": 0, "portfolio": 0}
    company_ids: Dict[str, int] = {}

    for data in SEED_COMPANIES:
        fields = dict(data)
        name = fields.pop("name")
        if await find_company(session, name, fields.get("website")) is not None:
            logger.debug(f"Seed: {name} already exists, skipping")
            continue
        company, _ = await upsert_company(session, name, **fields)
        company_ids[name] = company.id
        counts["companies"] += 1

    for data in SEED_ROUNDS:
        if data["company_name"] not in company_ids:
            continue
        _, created = await save_funding_round(session, source="seed", **data)
        if created:
            counts["funding_rounds"] += 1

    for data in SEED_TEAM_MEMBERS:
        fields = dict(data)
        company_id = company_ids.get(fields.pop("company_name"))
        if company_id is None:
            continue
        await add_team_member(session, company_id, **fields)
        counts["team_members"] += 1

    for data in SEED_ACQUISITIONS:
        fields = dict(data)
        company_id = company_ids.get(fields.pop("company_name"))
        if company_id is None:
            continue
        await record_acquisition(session, company_id, **fields)
        counts["acquisitions"] += 1

    for data in SEED_PORTFOLIO:
        fields = dict(data)
        company_id = company_ids.get(fields.pop("company_name"))
        if company_id is None:
            continue
        await upsert_portfolio_company(session, company_id, **fields)
        counts["portfolio"] += 1

    await session.commit()
    logger.info(f"Seed complete: {counts}")
    return counts
