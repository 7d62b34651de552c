"""
Rule-based company categorization.

Scores a company description against keyword tables to derive industry,
sub-sector, business model, target market and technology stack, then
combines stage / funding / headcount into positioning and risk labels.
"""

from typing import Dict, List, Optional

from .schemas import CompanyCategory

DEFAULT_INDUSTRY = "Technology"

# Keyword hits required before an industry is considered a match
MIN_INDUSTRY_SCORE = 2

CATEGORIZATION_CONFIDENCE = 0.87

INDUSTRY_KEYWORDS: Dict[str, List[str]] = {
    "Cybersecurity": [
        "security", "cyber", "threat", "malware", "firewall", "encryption",
        "vulnerability", "breach", "attack", "defense", "protection",
    ],
    "Artificial Intelligence": [
        "ai", "artificial intelligence", "machine learning", "ml", "neural",
        "deep learning", "nlp", "computer vision", "automation",
    ],
    "Cloud Computing": [
        "cloud", "saas", "paas", "iaas", "serverless", "microservices",
        "container", "kubernetes", "devops",
    ],
    "Financial Technology": [
        "fintech", "financial", "banking", "payment", "blockchain",
        "cryptocurrency", "trading", "lending", "insurance",
    ],
    "Healthcare Technology": [
        "healthtech", "medical", "healthcare", "telemedicine", "biotech",
        "pharma", "diagnostics", "therapy", "patient",
    ],
    "Enterprise Software": [
        "enterprise", "b2b", "crm", "erp", "workflow", "productivity",
        "collaboration", "analytics", "business intelligence",
    ],
}

SUB_SECTOR_KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    "Cybersecurity": {
        "AI Security": ["ai security", "machine learning security", "ai-powered", "ai-driven"],
        "Cloud Security": ["cloud security", "cspm", "cwpp", "cloud native security"],
        "Network Security": ["network security", "firewall", "intrusion", "ddos"],
        "Identity & Access Management": ["identity", "iam", "authentication", "access management", "zero trust"],
        "Data Protection": ["data protection", "encryption", "dlp", "privacy", "backup"],
        "Threat Intelligence": ["threat intelligence", "threat detection", "threat hunting"],
        "Security Operations": ["soc", "siem", "soar", "security operations", "incident response"],
        "Compliance & Governance": ["compliance", "governance", "grc", "audit", "risk management"],
    },
    "Artificial Intelligence": {
        "Natural Language Processing": ["nlp", "natural language", "text analysis", "language model"],
        "Computer Vision": ["computer vision", "image recognition", "video analysis"],
        "Machine Learning Platform": ["ml platform", "mlops", "model training", "machine learning platform"],
        "Conversational AI": ["chatbot", "conversational", "virtual assistant", "voice assistant"],
        "Predictive Analytics": ["predictive", "forecasting", "prediction"],
        "AI Infrastructure": ["ai infrastructure", "gpu", "inference", "ai chips"],
    },
}

BUSINESS_MODEL_KEYWORDS: Dict[str, List[str]] = {
    "SaaS": ["saas", "software as a service", "subscription", "cloud-based"],
    "Platform": ["platform", "marketplace", "ecosystem"],
    "Enterprise License": ["enterprise license", "on-premise", "perpetual license"],
    "Freemium": ["freemium", "free tier", "open source"],
    "Usage-Based": ["usage-based", "pay-as-you-go", "consumption", "per api call"],
    "Professional Services": ["consulting", "professional services", "managed services"],
}

TARGET_MARKET_KEYWORDS: Dict[str, List[str]] = {
    "Enterprise": ["enterprise", "fortune 500", "large organizations", "corporations"],
    "SMB": ["smb", "small business", "mid-market", "small and medium"],
    "Developer": ["developer", "devops", "engineering teams", "api"],
    "Consumer": ["consumer", "individual", "personal", "b2c"],
    "Government": ["government", "public sector", "federal", "defense"],
}

TECHNOLOGY_KEYWORDS: Dict[str, List[str]] = {
    "Machine Learning": ["machine learning", "ml", "ai", "neural network", "deep learning"],
    "Cloud Native": ["cloud native", "kubernetes", "containers", "microservices", "serverless"],
    "Blockchain": ["blockchain", "distributed ledger", "smart contract", "web3"],
    "Big Data": ["big data", "data lake", "data pipeline", "petabyte"],
    "Real-time": ["real-time", "real time", "streaming", "low latency"],
    "API-First": ["api-first", "api first", "rest api", "graphql"],
}

MARKET_OPPORTUNITY = {
    "Cybersecurity": "massive",
    "Artificial Intelligence": "massive",
    "Cloud Computing": "massive",
    "Financial Technology": "large",
    "Healthcare Technology": "large",
    "Enterprise Software": "large",
}


def _has_keyword(text: str, keyword: str) -> bool:
    # Short keywords ("ai", "ml") must match as whole words
    if len(keyword) <= 3:
        return keyword in text.replace("-", " ").replace(",", " ").replace(".", " ").split()
    return keyword in text


def _score(text: str, keywords: List[str]) -> int:
    return sum(1 for kw in keywords if _has_keyword(text, kw))


def _best_match(text: str, table: Dict[str, List[str]], minimum: int = 1) -> Optional[str]:
    best, best_score = None, 0
    for label, keywords in table.items():
        score = _score(text, keywords)
        if score > best_score:
            best, best_score = label, score
    return best if best_score >= minimum else None


def determine_primary_industry(text: str) -> str:
    return _best_match(text, INDUSTRY_KEYWORDS, MIN_INDUSTRY_SCORE) or DEFAULT_INDUSTRY


def determine_sub_sector(text: str, industry: str) -> str:
    table = SUB_SECTOR_KEYWORDS.get(industry)
    if not table:
        return f"General {industry}"
    return _best_match(text, table) or next(iter(table))


def determine_business_model(text: str) -> str:
    return _best_match(text, BUSINESS_MODEL_KEYWORDS) or "SaaS"


def determine_target_market(text: str) -> str:
    return _best_match(text, TARGET_MARKET_KEYWORDS) or "Enterprise"


def determine_technology_stack(text: str) -> List[str]:
    stack = [tech for tech, keywords in TECHNOLOGY_KEYWORDS.items() if _score(text, keywords)]
    return stack or ["Cloud Native"]


def determine_competitive_position(text: str, stage: str, funding: int) -> str:
    if any(word in text for word in ("first", "pioneer", "innovative")):
        return "Market Leader"
    if funding > 50_000_000 or "series c" in stage:
        return "Strong Competitor"
    if funding > 10_000_000 or "series b" in stage:
        return "Growing Player"
    return "Emerging Player"


def determine_growth_stage(stage: str, funding: int, employees: int) -> str:
    if "seed" in stage or funding < 5_000_000:
        return "Early Stage"
    if "series a" in stage or funding < 20_000_000:
        return "Growth Stage"
    if "series b" in stage or funding < 50_000_000:
        return "Expansion Stage"
    if employees > 200 or funding >= 50_000_000:
        return "Scale Stage"
    return "Growth Stage"


def assess_risk_level(text: str, stage: str) -> str:
    """Score stage and description risk factors; >= 4 is high, >= 2 medium."""
    score = 0
    if "seed" in stage:
        score += 2
    elif "series a" in stage:
        score += 1
    if "new market" in text or "emerging" in text:
        score += 1
    if "regulated" in text or "compliance" in text:
        score += 1
    if "cutting edge" in text or "breakthrough" in text:
        score += 1

    if score >= 4:
        return "high"
    if score >= 2:
        return "medium"
    return "low"


def categorize_company(
    description: str,
    stage: Optional[str] = None,
    funding: Optional[int] = None,
    employees: Optional[int] = None,
) -> CompanyCategory:
    """
    Categorize a company from its description plus optional stage, total
    funding (USD) and employee count.

    Raises:
        ValueError: If description is blank
    """
    if not description or not description.strip():
        raise ValueError("Company description is required")

    text = description.lower()
    stage_text = (stage or "").lower().replace("-", " ").replace("_", " ")
    funding = funding or 0
    employees = employees or 0

    industry = determine_primary_industry(text)
    return CompanyCategory(
        primary_industry=industry,
        sub_sector=determine_sub_sector(text, industry),
        business_model=determine_business_model(text),
        target_market=determine_target_market(text),
        technology_stack=determine_technology_stack(text),
        competitive_position=determine_competitive_position(text, stage_text, funding),
        growth_stage=determine_growth_stage(stage_text, funding, employees),
        risk_level=assess_risk_level(text, stage_text),
        market_opportunity=MARKET_OPPORTUNITY.get(industry, "medium"),
        confidence=CATEGORIZATION_CONFIDENCE,
    )
