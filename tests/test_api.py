"""
API tests against the FastAPI app with get_db bound to a test database.

Run with: pytest tests/test_api.py -v
"""

import pytest

from csintel.config.sources import DATA_SOURCE_REGISTRY
from csintel.security import data_protection_manager


class TestEnvelopeAndAuth:

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["configuration"]["database"] == "sqlite"
        assert body["configuration"]["aiAnalysis"] is False
        assert body["configuration"]["dataSources"] == len(DATA_SOURCE_REGISTRY)

    async def test_success_envelope(self, client, seeded):
        body = (await client.get("/api/companies")).json()
        assert body["success"] is True
        assert "timestamp" in body
        assert isinstance(body["data"], list)

    async def test_missing_api_key(self, client):
        response = await client.post("/api/funding-rounds", json={})
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "API key required",
            "timestamp": response.json()["timestamp"],
        }

    async def test_invalid_api_key(self, client):
        response = await client.post("/api/funding-rounds", json={}, headers={"X-API-Key": "wrong"})
        assert response.status_code == 403
        assert response.json()["error"] == "Invalid API key"

    async def test_validation_error_is_400(self, client, seeded):
        response = await client.get("/api/companies", params={"limit": 0})
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "limit" in response.json()["error"]

    async def test_unknown_route_uses_envelope(self, client):
        response = await client.get("/api/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Not Found"


class TestCompanies:

    async def test_list_and_filter(self, client, seeded):
        body = (await client.get("/api/companies", params={"limit": 3})).json()
        assert body["pagination"] == {"limit": 3, "offset": 0, "total": 12}
        assert body["data"][0]["name"] == "Descope"

        body = (await client.get("/api/companies", params={"country": "United Kingdom"})).json()
        assert [c["name"] for c in body["data"]] == ["QuantumSec"]

    async def test_profile(self, client, seeded):
        companies = (await client.get("/api/companies", params={"search": "Descope"})).json()["data"]
        body = (await client.get(f"/api/companies/{companies[0]['id']}")).json()

        profile = body["data"]
        assert profile["totalFunding"] == 188_000_000
        assert [r["roundType"] for r in profile["fundingRounds"]] == ["Series B", "Seed"]
        assert len(profile["teamMembers"]) == 2

    async def test_unknown_profile(self, client, seeded):
        response = await client.get("/api/companies/9999")
        assert response.status_code == 404
        assert response.json()["error"] == "Company not found"

    async def test_add_team_member_and_acquisition(self, client, seeded, auth_headers):
        company_id = (await client.get("/api/companies", params={"search": "Oneleet"})).json()["data"][0]["id"]

        response = await client.post(
            f"/api/companies/{company_id}/team",
            json={"name": "Sam Lee", "title": "CTO"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["name"] == "Sam Lee"

        response = await client.post(
            f"/api/companies/{company_id}/acquisitions",
            json={"acquirer": "Cisco", "amount": "$250M", "announcedDate": "2025-11-01"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["amountUsd"] == 250_000_000

        profile = (await client.get(f"/api/companies/{company_id}")).json()["data"]
        assert [m["name"] for m in profile["teamMembers"]] == ["Bryan Onel", "Sam Lee"]
        assert profile["acquisitions"][0]["acquirer"] == "Cisco"

    async def test_team_member_for_unknown_company(self, client, seeded, auth_headers):
        response = await client.post("/api/companies/9999/team", json={"name": "X"}, headers=auth_headers)
        assert response.status_code == 404

    async def test_categorize_description(self, client, auth_headers):
        response = await client.post(
            "/api/companies/categorize",
            json={"description": "Cloud security platform for threat detection", "stage": "Series A"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["primaryIndustry"] == "Cybersecurity"

    async def test_categorize_requires_description(self, client, auth_headers):
        response = await client.post("/api/companies/categorize", json={}, headers=auth_headers)
        assert response.status_code == 400

    async def test_portfolio(self, client, seeded):
        body = (await client.get("/api/portfolio")).json()
        assert body["summary"] == {"totalCompanies": 3, "totalInvested": 10_000_000, "active": 3}
        assert body["data"][0]["company"]["name"] == "CyberShield AI"


class TestFundingRounds:

    async def test_paged_listing(self, client, seeded):
        body = (await client.get("/api/funding-rounds", params={"limit": 5, "page": 2})).json()
        assert body["data"]["pagination"] == {"page": 2, "limit": 5, "total": 12, "pages": 3}
        assert len(body["data"]["fundingRounds"]) == 5

    async def test_manual_round_then_duplicate(self, client, auth_headers):
        payload = {
            "company": {"name": "Vaultline", "country": "USA"},
            "roundType": "series_a",
            "amount": "$12M",
            "announcedDate": "2025-02-01",
            "investors": [{"name": "Insight Partners", "isLead": True}],
        }
        response = await client.post("/api/funding-rounds", json=payload, headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["duplicate"] is False
        assert body["data"]["roundType"] == "Series A"
        assert body["data"]["amountUsd"] == 12_000_000
        assert body["data"]["leadInvestor"] == "Insight Partners"

        response = await client.post("/api/funding-rounds", json=payload, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["duplicate"] is True

    async def test_manual_round_requires_company_and_type(self, client, auth_headers):
        response = await client.post(
            "/api/funding-rounds", json={"company": {"name": "X"}}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Company name and round type are required"

    async def test_tracker_filters_and_stats(self, client, seeded):
        body = (await client.get("/api/funding-tracker", params={"roundType": "Seed"})).json()
        data = body["data"]
        assert data["pagination"]["total"] == 7
        assert data["stats"]["count"] == 7
        assert data["stats"]["byRoundType"][0]["roundType"] == "Seed"
        assert all(r["roundType"] == "Seed" for r in data["fundingRounds"])

    async def test_tracker_extract(self, client, auth_headers):
        articles = [
            {"text": "Acme Security raises $20 million Series A led by Accel and Sequoia Capital.",
             "url": "https://news.example/acme"},
            {"text": "Nothing to see here."},
        ]
        response = await client.post(
            "/api/funding-tracker", json={"action": "extract", "articles": articles}, headers=auth_headers
        )
        data = response.json()["data"]
        assert data["articlesProcessed"] == 2
        assert data["extracted"] == 1
        assert data["saved"] == 1

        response = await client.post(
            "/api/funding-tracker", json={"action": "extract", "articles": articles}, headers=auth_headers
        )
        assert response.json()["data"]["duplicates"] == 1

    async def test_tracker_unknown_action(self, client, auth_headers):
        response = await client.post("/api/funding-tracker", json={"action": "scrape"}, headers=auth_headers)
        assert response.status_code == 400


class TestDashboard:

    async def test_summary(self, client, seeded):
        data = (await client.get("/api/dashboard/stats")).json()["data"]
        assert data["companies"]["total"] == 12
        assert data["fundingRounds"]["total"] == 12
        assert data["portfolio"]["total"] == 3
        assert data["funding"]["total"] == 347_000_000
        assert data["funding"]["formatted"] == "$0.3B"

    async def test_realtime_has_next_update(self, client):
        body = (await client.get("/api/dashboard/stats", params={"type": "realtime"})).json()
        assert "nextUpdate" in body
        assert 50 <= body["data"]["apiRequests"]["current"] < 150

    async def test_alerts_flag_low_traction_portfolio(self, client, seeded):
        data = (await client.get("/api/dashboard/stats", params={"type": "alerts"})).json()["data"]
        assert "portfolio_attention" in [a["type"] for a in data["alerts"]]

    @pytest.mark.parametrize("metric", [
        "funding-trends",
        "market-analysis",
        "performance-metrics",
        "investment-pipeline",
        "investor-networks",
    ])
    async def test_analytics_metrics(self, client, seeded, metric):
        response = await client.get("/api/dashboard/analytics", params={"metric": metric})
        assert response.status_code == 200
        assert response.json()["success"] is True

    async def test_investor_networks_counts_every_pair(self, client, auth_headers):
        investors = ["Accel", "Greylock", "Sequoia", "Benchmark", "Index", "Kleiner", "Redpoint", "Battery"]
        response = await client.post(
            "/api/funding-rounds",
            json={"company": {"name": "Mesh Security"}, "roundType": "Seed", "amount": 5_000_000,
                  "announcedDate": "2025-03-01",
                  "investors": [{"name": name} for name in investors]},
            headers=auth_headers,
        )
        assert response.status_code == 201

        data = (await client.get("/api/dashboard/analytics", params={"metric": "investor-networks"})).json()["data"]
        assert data["totalPairs"] == 28
        assert len(data["networks"]) == 20

    async def test_invalid_stats_type(self, client):
        response = await client.get("/api/dashboard/stats", params={"type": "bogus"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid stats type"


class TestDataSources:

    async def test_list(self, client):
        data = (await client.get("/api/data-sources")).json()["data"]
        assert data["summary"]["totalSources"] == len(DATA_SOURCE_REGISTRY)
        assert len(data["sources"]) == len(DATA_SOURCE_REGISTRY)

    async def test_status_includes_recorded_history(self, client, auth_headers):
        await client.post("/api/data-sources/sync", json={"sourceId": "finro"}, headers=auth_headers)

        data = (await client.get("/api/data-sources", params={"action": "status", "source": "finro"})).json()["data"]
        assert data["source"]["healthStatus"] == "healthy"
        assert len(data["source"]["syncHistory"]) == 1
        assert data["source"]["syncHistory"][0]["recordsProcessed"] == 17

    async def test_status_unknown_source(self, client):
        response = await client.get("/api/data-sources", params={"action": "status", "source": "nope"})
        assert response.status_code == 404

    async def test_sync_action_reports_failure_in_envelope(self, client, auth_headers):
        response = await client.post(
            "/api/data-sources", json={"source": "crunchbase", "action": "sync"}, headers=auth_headers
        )
        body = response.json()
        assert response.status_code == 200
        assert body["success"] is False
        assert body["data"]["syncResult"]["errors"] == 1

    async def test_configure_and_test(self, client, auth_headers):
        body = (await client.post(
            "/api/data-sources",
            json={"source": "misp", "action": "configure", "config": {"apiKey": "abc"}},
            headers=auth_headers,
        )).json()
        assert body["data"]["configuration"]["apiKey"] == "abc"
        assert "updatedAt" in body["data"]["configuration"]

        body = (await client.post(
            "/api/data-sources", json={"source": "misp", "action": "test"}, headers=auth_headers
        )).json()
        assert body["data"]["testResult"]["message"] == "Connection successful"

    async def test_invalid_source_and_action(self, client, auth_headers):
        response = await client.post("/api/data-sources", json={"source": "nope", "action": "sync"},
                                     headers=auth_headers)
        assert response.json()["error"] == "Invalid data source"
        response = await client.post("/api/data-sources", json={"source": "misp", "action": "delete"},
                                     headers=auth_headers)
        assert response.json()["error"] == "Invalid action"

    async def test_sync_all_then_status(self, client, auth_headers):
        response = await client.post("/api/data-sources/sync", json={"sourceId": "all"}, headers=auth_headers)
        assert response.json()["data"]["summary"]["totalSources"] == len(DATA_SOURCE_REGISTRY)

        data = (await client.get("/api/data-sources/sync")).json()["data"]
        assert data["avgSuccessRate"] == round(5 / len(DATA_SOURCE_REGISTRY) * 100, 1)
        assert data["schedule"] == "disabled"

    async def test_sync_requires_source_id(self, client, auth_headers):
        response = await client.post("/api/data-sources/sync", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "sourceId is required"


class TestIngestion:

    async def test_category_listing(self, client):
        data = (await client.get("/api/data-ingestion/funding")).json()["data"]
        assert data["availableSources"] == ["crunchbase", "growthlist", "openvc"]

    async def test_source_entry(self, client):
        data = (await client.get("/api/data-ingestion/threat-intelligence", params={"source": "misp"})).json()["data"]
        assert data["id"] == "misp"
        assert data["category"] == "threat_intelligence"

    async def test_unknown_category_and_source(self, client):
        assert (await client.get("/api/data-ingestion/weather")).status_code == 404
        response = await client.get("/api/data-ingestion/funding", params={"source": "misp"})
        assert response.status_code == 404

    async def test_ingest_funding_persists(self, client, auth_headers):
        response = await client.post(
            "/api/data-ingestion/funding", json={"source": "growthlist"}, headers=auth_headers
        )
        data = response.json()["data"]
        assert data["created"] == 3
        assert data["summary"]["totalFunding"] == 61_500_000

        body = (await client.get("/api/companies", params={"search": "ZeroTrust"})).json()
        assert body["pagination"]["total"] == 1

    async def test_ingest_conference(self, client, auth_headers):
        response = await client.post(
            "/api/data-ingestion/conference-intelligence", json={"source": "def_con_33"}, headers=auth_headers
        )
        data = response.json()["data"]
        assert data["processed"] == 2
        assert data["eventData"]["event"] == "DEF CON 33"

    async def test_ingest_requires_known_source(self, client, auth_headers):
        response = await client.post("/api/data-ingestion/funding", json={}, headers=auth_headers)
        assert response.json()["error"] == "Source is required"
        response = await client.post("/api/data-ingestion/funding", json={"source": "misp"}, headers=auth_headers)
        assert response.status_code == 400

    async def test_ingest_unknown_category(self, client, auth_headers):
        response = await client.post("/api/data-ingestion/weather", json={"source": "x"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Unknown ingestion category: weather"


class TestAnalysis:

    async def test_fallback_analysis(self, client, seeded, auth_headers):
        response = await client.post(
            "/api/ai-company-analysis", json={"companyName": "Descope"}, headers=auth_headers
        )
        data = response.json()["data"]
        assert data["found"] is True
        assert data["recommendation"] == "hold"
        assert data["error"] == "AI configuration missing, using database analysis"

    async def test_blank_name(self, client, auth_headers):
        response = await client.post("/api/ai-company-analysis", json={"companyName": " "}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Company name is required"


class TestSecureData:

    async def test_classifications(self, client):
        data = (await client.get("/api/secure-data", params={"action": "classifications"})).json()["data"]
        assert "exploit_data" in data["classifications"]
        assert set(data["details"]) == set(data["classifications"])

    async def test_vulnerability_data_masked_for_anonymous(self, client):
        data = (await client.get("/api/secure-data", params={"action": "vulnerability-data"})).json()["data"]
        assert data["exploitCode"] == "[REDACTED]"
        assert data["cve"] == "CVE-2024-0001"

    async def test_audit_logs_need_operational_access(self, client):
        response = await client.get("/api/secure-data", params={"action": "audit-logs"})
        assert response.status_code == 403
        assert response.json()["error"] == "Access denied: Insufficient permissions"

        response = await client.get(
            "/api/secure-data", params={"action": "audit-logs", "userId": "ops_employee"}
        )
        data = response.json()["data"]
        assert data["summary"]["totalLogs"] == len(data["logs"])
        assert data["summary"]["totalLogs"] >= 1

    async def test_invalid_get_action(self, client):
        response = await client.get("/api/secure-data", params={"action": "dump"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid action parameter"

    async def test_encrypt_then_decrypt(self, client, auth_headers):
        response = await client.post(
            "/api/secure-data",
            json={
                "action": "encrypt-data",
                "userId": "security_admin",
                "classification": "vulnerability_high",
                "data": {"cve": "CVE-2024-0001"},
            },
            headers=auth_headers,
        )
        encrypted = response.json()["data"]["encrypted"]

        response = await client.post(
            "/api/secure-data",
            json={"action": "decrypt-data", "userId": "security_admin", "data": encrypted},
            headers=auth_headers,
        )
        assert response.json()["data"]["decrypted"] == {"cve": "CVE-2024-0001"}

        response = await client.post(
            "/api/secure-data",
            json={"action": "decrypt-data", "userId": "ops_employee", "data": encrypted},
            headers=auth_headers,
        )
        assert response.status_code == 403
        assert response.json()["error"].startswith("Decryption failed")

    async def test_decrypt_plain_text_payload(self, client, auth_headers):
        encrypted = data_protection_manager.encrypt_data("rotate keys on friday", "vulnerability_high")
        response = await client.post(
            "/api/secure-data",
            json={"action": "decrypt-data", "userId": "security_admin", "data": encrypted},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["decrypted"] == "rotate keys on friday"

    async def test_encrypt_denied_without_write_access(self, client, auth_headers):
        response = await client.post(
            "/api/secure-data",
            json={"action": "encrypt-data", "userId": "ops_employee",
                  "classification": "exploit_data", "data": {"x": 1}},
            headers=auth_headers,
        )
        assert response.status_code == 403

    async def test_verify_access(self, client, auth_headers):
        response = await client.post(
            "/api/secure-data",
            json={"action": "verify-access", "userId": "security_admin",
                  "targetClassification": "exploit_data", "targetAction": "write"},
            headers=auth_headers,
        )
        assert response.json()["data"]["hasAccess"] is True

        response = await client.post(
            "/api/secure-data",
            json={"action": "verify-access", "userId": "security_admin"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Target classification and action required"

    async def test_user_required(self, client, auth_headers):
        response = await client.post("/api/secure-data", json={"action": "mask-data"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "User ID required"
