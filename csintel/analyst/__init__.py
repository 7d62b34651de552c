from .schemas import (
    AnalysisType,
    CompanyAnalysis,
    CompanyCategory,
    ExtractedFunding,
    FundingArticle,
    Recommendation,
    RoundType,
)
from .extractor import (
    extract_funding,
    extract_funding_batch,
    normalize_round_type,
)
from .categorization import categorize_company
from .company_analyst import analyze_company, get_market_data

__all__ = [
    "AnalysisType",
    "CompanyAnalysis",
    "CompanyCategory",
    "ExtractedFunding",
    "FundingArticle",
    "Recommendation",
    "RoundType",
    "extract_funding",
    "extract_funding_batch",
    "normalize_round_type",
    "categorize_company",
    "analyze_company",
    "get_market_data",
]
