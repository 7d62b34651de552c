"""
Tests for funding aggregation helpers used by the dashboard and tracker.

Run with: pytest tests/test_aggregation.py -v
"""

from datetime import date
from types import SimpleNamespace

import pytest

from csintel.analyst.aggregation import (
    average_funding,
    compute_kpis,
    funding_by_group,
    funding_timeline,
    generate_alerts,
    group_by,
    investment_pipeline,
    investment_recommendation,
    investment_score,
    investor_networks,
    market_insights,
    market_map,
    median_funding,
    stage_breakdown,
    summarize_amounts,
    total_funding,
)


@pytest.fixture
def rounds():
    return [
        {"company_id": 1, "round_type": "Series A", "amount_usd": 10_000_000, "announced_date": date(2024, 1, 10)},
        {"company_id": 2, "round_type": "Seed", "amount_usd": 2_000_000, "announced_date": date(2024, 1, 25)},
        {"company_id": 1, "round_type": "Series B", "amount_usd": 150_000_000, "announced_date": date(2024, 3, 2)},
        {"company_id": 3, "round_type": "Series A", "amount_usd": None, "announced_date": None},
    ]


@pytest.fixture
def companies():
    return [
        SimpleNamespace(id=1, name="Aegis", primary_category="Cloud Security", current_stage="Series B",
                        total_funding=160_000_000, employee_count=150, description="d", website="https://a.io"),
        SimpleNamespace(id=2, name="Bastion", primary_category="Cloud Security", current_stage="Seed",
                        total_funding=2_000_000, employee_count=12, description="d", website=None),
        SimpleNamespace(id=3, name="Cipher", primary_category="Identity", current_stage="Series A",
                        total_funding=0, employee_count=None, description=None, website=None),
    ]


class TestCoreStatistics:
    """Null amounts are ignored by every statistic."""

    def test_total_skips_nulls(self, rounds):
        assert total_funding(rounds) == 162_000_000

    def test_average_of_non_null(self, rounds):
        assert average_funding(rounds) == 54_000_000

    def test_median_odd_count(self, rounds):
        assert median_funding(rounds) == 10_000_000

    def test_median_even_count(self):
        records = [{"amount_usd": v} for v in (1, 3, 5, 7)]
        assert median_funding(records) == 4

    def test_empty_inputs_are_zero(self):
        assert total_funding([]) == 0
        assert average_funding([]) == 0
        assert median_funding([]) == 0

    def test_summarize_amounts(self, rounds):
        summary = summarize_amounts(rounds)
        assert summary["count"] == 4
        assert summary["totalAmount"] == 162_000_000
        assert summary["medianAmount"] == 10_000_000


class TestGrouping:

    def test_group_by_preserves_first_seen_order(self, rounds):
        groups = group_by(rounds, "round_type")
        assert list(groups) == ["Series A", "Seed", "Series B"]
        assert len(groups["Series A"]) == 2

    def test_null_key_groups_as_unknown(self):
        groups = group_by([{"stage": None}, {"stage": "Seed"}], "stage")
        assert set(groups) == {"unknown", "Seed"}

    def test_funding_by_group_sorted_by_total(self, rounds):
        rows = funding_by_group(rounds, "round_type")
        assert [r["group"] for r in rows] == ["Series B", "Series A", "Seed"]
        series_a = rows[1]
        assert series_a["count"] == 2
        assert series_a["total"] == 10_000_000
        assert series_a["average"] == 10_000_000

    def test_stage_breakdown_uses_company_totals(self, companies):
        rows = stage_breakdown(companies)
        assert rows[0] == {
            "stage": "Series B",
            "count": 1,
            "totalFunding": 160_000_000,
            "averageFunding": 160_000_000,
        }


class TestMarketMap:

    def test_market_share_and_leaders(self, companies):
        categories = market_map(companies)
        cloud = categories[0]
        assert cloud["category"] == "Cloud Security"
        assert cloud["companyCount"] == 2
        assert cloud["marketShare"] == 100.0
        assert cloud["topCompanies"] == ["Aegis", "Bastion"]
        assert categories[1]["marketShare"] == 0

    def test_insights(self, companies):
        insights = market_insights(market_map(companies))
        assert len(insights) == 3
        assert insights[0].startswith("Cloud Security leads with 2 companies")
        assert market_insights([]) == []


class TestTimeline:

    def test_monthly_buckets_oldest_first(self, rounds):
        timeline = funding_timeline(rounds)
        assert timeline == [
            {"period": "2024-01", "count": 2, "totalAmount": 12_000_000},
            {"period": "2024-03", "count": 1, "totalAmount": 150_000_000},
        ]


class TestKpisAndAlerts:

    def test_kpis(self, companies, rounds):
        portfolio = [
            {"status": "active", "traction_score": 80},
            {"status": "active", "traction_score": 20},
        ]
        kpis = compute_kpis(companies, rounds, portfolio)
        assert kpis["totalCompanies"] == 3
        assert kpis["totalFunding"] == 162_000_000
        assert kpis["averageFunding"] == 54_000_000
        assert kpis["successRate"] == 50.0
        assert kpis["dataQuality"] == 33.3
        assert kpis["marketCoverage"] == 16.7

    def test_kpis_on_empty_database(self):
        kpis = compute_kpis([], [], [])
        assert kpis["averageFunding"] == 0
        assert kpis["successRate"] == 0
        assert kpis["dataQuality"] == 0

    def test_alert_rules(self, companies, rounds):
        portfolio = [{"company_id": 2, "traction_score": 10, "active_users": 0}]
        result = generate_alerts(companies, rounds, portfolio)
        types = [a["type"] for a in result["alerts"]]
        assert types == ["high_value_round", "portfolio_attention", "market_concentration", "system_health"]
        assert "Aegis raised $150M" in result["alerts"][0]["message"]
        assert result["summary"] == {"total": 4, "high": 1, "medium": 2, "low": 1}

    def test_alerts_capped(self, companies):
        big_rounds = [{"company_id": 1, "round_type": "Series B", "amount_usd": 200_000_000}] * 10
        result = generate_alerts(companies, big_rounds, [])
        assert len(result["alerts"]) == 5
        assert result["summary"]["high"] == 5


class TestInvestorNetworks:

    def test_pairs_counted_per_round(self):
        rounds = [
            {"company": "Aegis", "amount_usd": 10, "investors": ["Accel", "Sequoia", "Index"]},
            {"company": "Bastion", "amount_usd": 5, "investors": ["Sequoia", "Accel"]},
        ]
        networks = investor_networks(rounds)
        top = networks[0]
        assert (top["investorA"], top["investorB"]) == ("Accel", "Sequoia")
        assert top["coInvestments"] == 2
        assert top["totalAmount"] == 15
        assert top["companies"] == ["Aegis", "Bastion"]
        assert top["relationshipStrength"] == pytest.approx(0.4)
        assert len(networks) == 3

    def test_single_investor_rounds_have_no_pairs(self):
        assert investor_networks([{"investors": ["Accel"]}]) == []


class TestInvestmentPipeline:

    def test_score_components(self):
        company = {"total_funding": 60_000_000, "employee_count": 150, "current_stage": "Series B"}
        assert investment_score(company) == 100

    def test_recommendation_thresholds(self):
        assert investment_recommendation(85) == "strong_buy"
        assert investment_recommendation(70) == "buy"
        assert investment_recommendation(55) == "hold"
        assert investment_recommendation(54) == "research"

    def test_pipeline_only_early_stages(self, companies):
        extra = SimpleNamespace(id=4, name="Delta", primary_category="SIEM", current_stage="Series D",
                                total_funding=500_000_000, employee_count=900)
        pipeline = investment_pipeline(companies + [extra])
        names = [o["name"] for o in pipeline["opportunities"]]
        assert "Delta" not in names
        assert names[0] == "Aegis"
        assert pipeline["pipelineMetrics"]["totalOpportunities"] == 3
        assert pipeline["pipelineMetrics"]["stageDistribution"] == {"Series B": 1, "Series A": 1, "Seed": 1}
