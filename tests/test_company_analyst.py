"""
Tests for AI company analysis: fallback path, model path and market cache.

No real Anthropic calls are made; the client and model call are patched.

Run with: pytest tests/test_company_analyst.py -v
"""

from unittest.mock import MagicMock, patch

import pytest

from csintel.analyst import company_analyst
from csintel.analyst.schemas import CompanyAnalysis, Recommendation


class TestValidation:

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name(self, session, name):
        with pytest.raises(ValueError, match="Company name is required"):
            await company_analyst.analyze_company(session, name)

    async def test_bad_analysis_type(self, session):
        with pytest.raises(ValueError, match="Invalid analysis type"):
            await company_analyst.analyze_company(session, "Descope", "deep")


class TestFallback:
    """Without an API key the analysis is built from stored data."""

    async def test_known_company(self, session, seeded):
        result = await company_analyst.analyze_company(session, "descope")

        assert result["query"] == "descope"
        assert result["found"] is True
        assert result["recommendation"] == "hold"
        assert result["confidence"] == 65
        assert "$188,000,000" in result["fundingAnalysis"]
        assert result["error"] == "AI configuration missing, using database analysis"
        assert result["contextData"]["hasCompanyData"] is True
        assert result["contextData"]["marketCompaniesCount"] == 12
        assert result["responseTime"].endswith("ms")

    async def test_unknown_company(self, session, seeded):
        result = await company_analyst.analyze_company(session, "Nonexistent Widgets", "quick")

        assert result["found"] is False
        assert result["analysisType"] == "quick"
        assert result["overview"] == "Company not found in database."
        assert result["contextData"]["hasCompanyData"] is False

    async def test_market_context_is_cached(self, session, seeded):
        first = await company_analyst.analyze_company(session, "Descope")
        second = await company_analyst.analyze_company(session, "Oneleet")
        assert first["contextData"]["cacheUsed"] is False
        assert second["contextData"]["cacheUsed"] is True

        company_analyst.clear_market_cache()
        third = await company_analyst.analyze_company(session, "Oneleet")
        assert third["contextData"]["cacheUsed"] is False


class TestModelPath:

    async def test_model_answer_is_returned(self, session, seeded):
        answer = CompanyAnalysis(
            company_name="",
            overview="Identity platform",
            recommendation=Recommendation.BUY,
            confidence=0.9,
        )
        with patch.object(company_analyst, "_get_client", return_value=MagicMock()), \
                patch.object(company_analyst, "_call_model", return_value=answer) as call_model:
            result = await company_analyst.analyze_company(session, "Descope")

        prompt, analysis_type = call_model.call_args.args
        assert "Descope" in prompt
        assert analysis_type == "comprehensive"
        assert result["companyName"] == "Descope"
        assert result["found"] is True
        assert result["recommendation"] == "buy"
        assert result["confidence"] == 90
        assert "error" not in result

    async def test_model_failure_falls_back(self, session, seeded):
        with patch.object(company_analyst, "_get_client", return_value=MagicMock()), \
                patch.object(company_analyst, "_call_model", side_effect=RuntimeError("boom")):
            result = await company_analyst.analyze_company(session, "Descope")

        assert result["recommendation"] == "hold"
        assert result["confidence"] == 65
        assert result["error"] == "AI service unavailable, using fallback analysis"


class TestConfidenceClamp:

    @pytest.mark.parametrize("raw,expected", [(0.85, 85), (85, 85), (140, 100), (-5, 0), (None, 50)])
    def test_clamp(self, raw, expected):
        assert CompanyAnalysis(company_name="x", confidence=raw).confidence == expected
