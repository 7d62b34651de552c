"""
Tests for the regex funding extractor with sample press releases.

Run with: pytest tests/test_extractor.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from csintel.analyst import FundingArticle, extract_funding, extract_funding_batch, normalize_round_type
from csintel.analyst.extractor import extract_investors, parse_published_date


@pytest.fixture
def sample_article_text():
    return "Acme Security raises $20 million Series A led by Accel and Sequoia Capital."


class TestExtractFunding:
    """Full extraction from a single article."""

    def test_complete_announcement(self, sample_article_text):
        result = extract_funding(sample_article_text, source="TechCrunch", url="https://tc.example/acme")

        assert result is not None
        assert result.company_name == "Acme Security"
        assert result.funding_amount == 20_000_000
        assert result.round_type == "Series A"
        assert result.lead_investors == ["Accel", "Sequoia Capital"]
        assert result.participating_investors == []
        assert result.confidence == 1.0
        assert result.source == "TechCrunch"

    def test_abbreviated_amount_and_valuation(self):
        text = "Nimbus Defense raised $150M Series C, valued at $2 billion, led by Index Ventures."
        result = extract_funding(text)

        assert result.funding_amount == 150_000_000
        assert result.round_type == "Series C"
        assert result.valuation == 2_000_000_000
        assert result.lead_investors == ["Index Ventures"]

    @pytest.mark.parametrize("amount,expected", [
        ("4.1M", 4_100_000),
        ("8.2M", 8_200_000),
        ("2.01 billion", 2_010_000_000),
    ])
    def test_decimal_amounts_are_not_truncated(self, amount, expected):
        result = extract_funding(f"Acme Security raises ${amount} Series A led by Accel")
        assert result.funding_amount == expected

    def test_participants_are_not_leads(self):
        lead, participating = extract_investors(
            "The round was led by Accel, with participation from Accel and Greylock."
        )
        assert lead == ["Accel"]
        assert participating == ["Greylock"]

    def test_no_company_returns_none(self):
        assert extract_funding("Funding news today: $5 million raised") is None

    def test_no_amount_returns_none(self):
        assert extract_funding("Acme Security raises funding from friends") is None

    def test_partial_confidence(self):
        result = extract_funding("Acme Security raises $3 million seed round")
        assert result.round_type == "Seed"
        assert result.confidence == 0.8

    def test_missing_round_is_unknown(self):
        result = extract_funding("Acme Security raises $3 million")
        assert result.round_type == "Unknown"
        assert result.confidence == 0.6


class TestExtractFundingBatch:

    def test_keeps_only_confident_results(self, sample_article_text):
        articles = [
            FundingArticle(text=sample_article_text, url="https://a.example/1"),
            FundingArticle(text="Acme Security raises $3 million", url="https://a.example/2"),
            FundingArticle(text="No funding news here"),
        ]
        results = extract_funding_batch(articles)
        assert [r.url for r in results] == ["https://a.example/1"]

    def test_title_is_searched(self):
        article = FundingArticle(
            title="Vaultline raises $12 million Series A",
            text="The round was led by Insight Partners.",
        )
        results = extract_funding_batch([article])
        assert len(results) == 1
        assert results[0].company_name == "Vaultline"
        assert results[0].title == "Vaultline raises $12 million Series A"


class TestNormalizeRoundType:

    @pytest.mark.parametrize("raw,expected", [
        ("series_b", "Series B"),
        ("Series-C", "Series C"),
        ("a", "Series A"),
        ("pre-seed", "Pre-Seed"),
        ("Seed", "Seed"),
        ("bridge round", "Bridge"),
        ("IPO", "IPO"),
    ])
    def test_canonical_labels(self, raw, expected):
        assert normalize_round_type(raw) == expected

    def test_unknown_passes_through(self):
        assert normalize_round_type(" Growth Equity ") == "Growth Equity"


class TestPublishedDate:

    def test_iso_date_is_utc(self):
        parsed = parse_published_date("2024-03-15")
        assert parsed == datetime(2024, 3, 15, tzinfo=timezone.utc)

    def test_unparseable_falls_back_to_now(self):
        parsed = parse_published_date("not a date")
        assert abs(datetime.now(timezone.utc) - parsed) < timedelta(seconds=5)
