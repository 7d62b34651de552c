"""
Pydantic schemas for funding extraction, categorization and company analysis.

CompanyAnalysis is also the Instructor response model, so the LLM output is
validated against it.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from enum import Enum
from datetime import datetime


class RoundType(str, Enum):
    """Canonical funding round labels."""
    PRE_SEED = "Pre-Seed"
    SEED = "Seed"
    SERIES_A = "Series A"
    SERIES_B = "Series B"
    SERIES_C = "Series C"
    SERIES_D = "Series D"
    BRIDGE = "Bridge"
    CONVERTIBLE = "Convertible"
    IPO = "IPO"
    ACQUISITION = "Acquisition"
    UNKNOWN = "Unknown"


class Recommendation(str, Enum):
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    AVOID = "avoid"


class AnalysisType(str, Enum):
    COMPREHENSIVE = "comprehensive"
    QUICK = "quick"


class FundingArticle(BaseModel):
    """Raw article text submitted for funding extraction."""
    text: str = Field(..., min_length=1)
    source: str = ""
    url: str = ""
    title: str = ""
    published_date: Optional[str] = None


class ExtractedFunding(BaseModel):
    """Funding event pulled from article text by the regex extractor."""
    company_name: str
    funding_amount: int
    currency: str = "USD"
    round_type: str = RoundType.UNKNOWN.value
    lead_investors: List[str] = Field(default_factory=list)
    participating_investors: List[str] = Field(default_factory=list)
    announced_date: datetime
    valuation: Optional[int] = None
    confidence: float = Field(ge=0.0, le=1.0)
    source: str = ""
    url: str = ""
    title: str = ""


class CompanyCategory(BaseModel):
    """Rule-based classification of a company from its description."""
    primary_industry: str
    sub_sector: str
    business_model: str
    target_market: str
    technology_stack: List[str]
    competitive_position: str
    growth_stage: str
    risk_level: str  # low, medium, high
    market_opportunity: str  # small, medium, large, massive
    confidence: float = 0.87


class CompanyAnalysis(BaseModel):
    """Investment analysis for a single company."""
    company_name: str = Field(description="Company that was analyzed")
    found: bool = Field(default=False, description="Whether the company exists in the database")
    overview: str = Field(default="", description="Brief company overview")
    funding_analysis: Optional[str] = Field(
        default=None,
        description="Funding and valuation insights"
    )
    market_position: Optional[str] = Field(
        default=None,
        description="Market positioning and competitive landscape"
    )
    recommendation: Recommendation = Field(
        default=Recommendation.HOLD,
        description="One of strong_buy, buy, hold, avoid"
    )
    confidence: int = Field(default=50, description="Confidence 0-100")
    key_strengths: List[str] = Field(default_factory=list)
    key_risks: List[str] = Field(default_factory=list)
    market_opportunity: Optional[str] = None
    investment_thesis: Optional[str] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v) -> int:
        """LLMs sometimes answer 0.85 instead of 85, or overshoot 100."""
        if v is None:
            return 50
        v = float(v)
        if 0 < v <= 1:
            v *= 100
        return int(max(0, min(100, round(v))))

    def to_response(self) -> dict:
        return {
            "companyName": self.company_name,
            "found": self.found,
            "overview": self.overview,
            "fundingAnalysis": self.funding_analysis,
            "marketPosition": self.market_position,
            "recommendation": self.recommendation.value,
            "confidence": self.confidence,
            "keyStrengths": self.key_strengths,
            "keyRisks": self.key_risks,
            "marketOpportunity": self.market_opportunity,
            "investmentThesis": self.investment_thesis,
        }
