"""
Tests for ingestion adapters: counting, summaries and funding persistence.

Run with: pytest tests/test_adapters.py -v
"""

from unittest.mock import AsyncMock, patch

import pytest

from csintel.archivist.storage import find_company, list_funding_rounds
from csintel.harvester.adapters import (
    CONFERENCE_ADAPTERS,
    FUNDING_ADAPTERS,
    PATENT_ADAPTERS,
    THREAT_ADAPTERS,
    parse_employee_count,
)


class TestParseEmployeeCount:

    @pytest.mark.parametrize("raw,expected", [
        ("51-100", 75),
        ("10000+", 15000),
        ("42", 42),
        ("lots", None),
        (None, None),
    ])
    def test_ranges(self, raw, expected):
        assert parse_employee_count(raw) == expected


class TestStaticAdapters:
    """Non-persisting adapters count every fetched record as created."""

    async def test_threat_feed(self):
        result = await THREAT_ADAPTERS["misp"]().ingest()
        data = result.to_dict()

        assert data["processed"] == 1
        assert data["created"] == 1
        assert data["updated"] == 0
        assert data["records"][0]["uuid"] == "misp-001"
        assert data["summary"] == {"dataType": "threat_indicators", "recordCount": 1}
        assert "errorDetails" not in data

    async def test_conference_counts_presenting_startups(self):
        result = await CONFERENCE_ADAPTERS["def_con_33"]().ingest()
        data = result.to_dict()

        assert data["processed"] == 2
        assert data["eventData"]["event"] == "DEF CON 33"
        assert data["summary"]["startupsPresenting"] == 85

    async def test_summary_is_a_copy(self):
        adapter_cls = PATENT_ADAPTERS["uspto_open_data"]
        result = await adapter_cls().ingest()
        result.summary["totalPatents"] = 0
        assert adapter_cls.summary["totalPatents"] == 125000


class TestFundingAdapters:

    async def test_crunchbase_without_session_only_counts(self):
        result = await FUNDING_ADAPTERS["crunchbase"]().ingest()
        assert result.processed == 2
        assert result.created == 2
        assert result.summary == {
            "companies": 2,
            "fundingRounds": 3,
            "totalFunding": 40_500_000,
        }

    async def test_crunchbase_persists_companies_and_rounds(self, session):
        adapter = FUNDING_ADAPTERS["crunchbase"]()
        first = await adapter.ingest(session=session)
        assert (first.created, first.updated) == (2, 0)

        company = await find_company(session, "SecureCloud Systems")
        assert company.employee_count == 175
        assert company.primary_category == "Cybersecurity"
        assert company.total_funding == 25_500_000
        assert company.current_stage == "Series A"

        # Rerun: companies update, rounds dedup
        second = await adapter.ingest(session=session)
        assert (second.created, second.updated) == (0, 2)
        _, total = await list_funding_rounds(session, source="crunchbase")
        assert total == 3
        company = await find_company(session, "SecureCloud Systems")
        assert company.total_funding == 25_500_000

    async def test_growthlist_links_investors(self, session):
        await FUNDING_ADAPTERS["growthlist"]().ingest(session=session)

        rounds, total = await list_funding_rounds(session, company="ZeroTrust")
        assert total == 1
        assert rounds[0]["amountUsd"] == 18_000_000
        assert rounds[0]["leadInvestor"] == "Kleiner Perkins"
        assert [i["name"] for i in rounds[0]["investors"]] == ["Kleiner Perkins", "GV"]

    async def test_openvc_upserts_investors(self, session):
        adapter = FUNDING_ADAPTERS["openvc"]()
        first = await adapter.ingest(session=session)
        second = await adapter.ingest(session=session)
        assert first.created == 3
        assert (second.created, second.updated) == (0, 3)

    async def test_record_failure_is_collected(self, session):
        adapter = FUNDING_ADAPTERS["growthlist"]()
        with patch.object(adapter, "store_record", AsyncMock(side_effect=ValueError("bad record"))):
            result = await adapter.ingest(session=session)

        assert result.processed == 3
        assert result.created == 0
        data = result.to_dict()
        assert data["errors"] == 3
        assert data["errorDetails"][0] == {"item": "ZeroTrust Security", "error": "bad record"}
