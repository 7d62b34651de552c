"""
Tests for the ingestion orchestrator: dispatch, simulated syncs and status.

Run with: pytest tests/test_orchestrator.py -v
"""

import pytest

from csintel.archivist.portfolio_storage import get_recent_syncs, get_sync_history
from csintel.config.sources import DATA_SOURCE_REGISTRY, SourceCategory
from csintel.harvester import orchestrator
from csintel.harvester.orchestrator import UnknownSourceError


class TestDispatch:

    @pytest.mark.parametrize("raw", ["threat_intelligence", "threat-intelligence", " Threat-Intelligence "])
    def test_parse_category(self, raw):
        assert orchestrator.parse_category(raw) == SourceCategory.THREAT_INTELLIGENCE

    def test_unknown_category(self):
        with pytest.raises(UnknownSourceError):
            orchestrator.parse_category("weather")

    def test_unknown_source_in_known_category(self):
        with pytest.raises(UnknownSourceError, match="Unknown funding source"):
            orchestrator.get_adapter("funding", "misp")

    def test_category_sources(self):
        assert orchestrator.get_category_sources("funding") == ["crunchbase", "growthlist", "openvc"]

    async def test_ingest_by_hyphenated_category(self):
        result = await orchestrator.ingest("threat-intelligence", "cisa_kev")
        assert result.source == "cisa_kev"
        assert result.payload[0]["cveID"] == "CVE-2024-0001"


class TestSyncSource:

    async def test_unknown_source(self):
        with pytest.raises(UnknownSourceError):
            await orchestrator.sync_source("nope")

    async def test_result_shape(self):
        result = await orchestrator.sync_source("crunchbase")
        assert result["sourceId"] == "crunchbase"
        assert (result["newRecords"], result["updatedRecords"], result["errors"]) == (34, 78, 1)
        assert result["recordsProcessed"] == 112
        assert result["success"] is False
        assert "investor_networks" in result["dataTypes"]
        assert 10 <= result["duration"] <= 40

    async def test_unlisted_source_fails(self):
        result = await orchestrator.sync_source("misp")
        assert result["success"] is False
        assert result["errors"] == 1
        assert result["dataTypes"] == []

    async def test_recorded_with_session(self, session):
        result = await orchestrator.sync_source("intellizence", session)
        history = await get_sync_history(session, "intellizence")
        assert len(history) == 1
        assert history[0].status == "success"
        assert history[0].new_records == 23
        assert history[0].duration_ms == result["duration"] * 1000


class TestConnectionTest:

    async def test_follows_registry_health(self):
        healthy = await orchestrator.test_source("misp")
        assert healthy["status"] == "healthy"
        assert healthy["success"] is True
        assert healthy["message"] == "Connection successful"
        assert 100 <= healthy["responseTime"] <= 2100

        warned = await orchestrator.test_source("crunchbase")
        assert warned["status"] == "warning"
        assert warned["success"] is True
        assert warned["message"] == "Connection with warnings"

    async def test_unknown_source(self):
        with pytest.raises(UnknownSourceError):
            await orchestrator.test_source("nope")


class TestSyncAll:

    async def test_failures_do_not_stop_other_sources(self):
        report = await orchestrator.sync_all(source_ids=["intellizence", "datarade", "bogus"])

        assert [r["sourceId"] for r in report["results"]] == ["intellizence", "datarade", "bogus"]
        assert "Unknown data source" in report["results"][2]["error"]
        assert report["summary"] == {
            "totalSources": 3,
            "successful": 1,
            "failed": 2,
            "newRecords": 90,
            "updatedRecords": 134,
            "errors": 3,
        }

    async def test_full_sync_recorded(self, session):
        report = await orchestrator.sync_all(session)
        assert report["summary"]["totalSources"] == len(DATA_SOURCE_REGISTRY)
        assert report["summary"]["successful"] == 5

        syncs = await get_recent_syncs(session, limit=100)
        assert len(syncs) == len(DATA_SOURCE_REGISTRY)


class TestSyncStatus:

    async def test_registry_only(self):
        status = await orchestrator.get_sync_status()
        assert status["totalSources"] == len(DATA_SOURCE_REGISTRY)
        assert sum(status["sourceCategories"].values()) == len(DATA_SOURCE_REGISTRY)
        assert status["avgSuccessRate"] is None
        assert status["lastGlobalSync"] is None

    async def test_success_rate_from_recorded_syncs(self, session):
        await orchestrator.sync_source("intellizence", session)
        await orchestrator.sync_source("crunchbase", session)

        status = await orchestrator.get_sync_status(session)
        assert status["avgSuccessRate"] == 50.0
        assert status["lastGlobalSync"] is not None
