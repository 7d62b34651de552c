"""
Regex-based funding extraction from news article text.

Pulls company, amount, round type, investors and valuation out of
announcement-style prose ("Acme raises $20M Series A led by Accel").

Confidence scoring:
- company name found: +0.3
- amount found: +0.3
- round type found: +0.2
- any investor found: +0.2

Articles without a company or an amount yield nothing; batch extraction
keeps only results above MIN_BATCH_CONFIDENCE.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from dateutil import parser as date_parser

from .schemas import ExtractedFunding, FundingArticle, RoundType

logger = logging.getLogger(__name__)

MIN_BATCH_CONFIDENCE = 0.6

_FUNDING_VERBS = r"(?i:raises?|raised|secured?|closes?|closed|announced?|gets?|received?)"

COMPANY_PATTERNS = [
    re.compile(r"([A-Z][a-zA-Z0-9 &.-]+?)\s+" + _FUNDING_VERBS + r"\b"),
    re.compile(r"(?i:startup|company)\s+([A-Z][a-zA-Z0-9 &.-]+?)\s+(?i:raises?|raised)\b"),
    re.compile(r"([A-Z][a-zA-Z0-9 &.-]+?)\s+(?i:has\s+)?" + _FUNDING_VERBS + r"\b"),
]

AMOUNT_PATTERNS = [
    re.compile(r"\$(\d+(?:\.\d+)?)\s*(million|billion|m|b)\b", re.IGNORECASE),
    re.compile(r"(\d+(?:\.\d+)?)\s*(million)\s*dollars?", re.IGNORECASE),
    re.compile(r"(\d+(?:\.\d+)?)\s*(billion)\s*dollars?", re.IGNORECASE),
    re.compile(r"\$(\d+(?:,\d{3})*(?:\.\d+)?)"),
]

ROUND_TYPE_PATTERNS = [
    re.compile(r"series\s+([a-h])\b", re.IGNORECASE),
    re.compile(r"(pre-seed|seed)\s+(?:round|funding|financing)", re.IGNORECASE),
    re.compile(r"(bridge|convertible)\s+(?:round|funding|note)", re.IGNORECASE),
    re.compile(r"\b(ipo|acquisition)\b", re.IGNORECASE),
]

INVESTOR_PATTERNS = [
    re.compile(r"led\s+by\s+([^,.\n]+)", re.IGNORECASE),
    re.compile(r"(?:lead\s+)?investors?\s+(?:include|are)\s+([^.\n]+)", re.IGNORECASE),
    re.compile(r"participated\s+by\s+([^.\n]+)", re.IGNORECASE),
    re.compile(r"(?:with\s+participation\s+from|joined\s+by)\s+([^.\n]+)", re.IGNORECASE),
]

VALUATION_PATTERNS = [
    re.compile(r"valued?\s+at\s+\$(\d+(?:\.\d+)?)\s*(million|billion|m|b)\b", re.IGNORECASE),
    re.compile(r"valuation\s+of\s+\$(\d+(?:\.\d+)?)\s*(million|billion|m|b)\b", re.IGNORECASE),
]

_MULTIPLIERS = {
    "million": 1_000_000,
    "m": 1_000_000,
    "billion": 1_000_000_000,
    "b": 1_000_000_000,
}


def normalize_round_type(round_type: str) -> str:
    """
    Map free-form round labels onto canonical RoundType values.

        "series b" / "b" / "Series-B" → "Series B"
        "pre-seed" → "Pre-Seed"
        "Growth Equity" → "Growth Equity" (unknown labels pass through)
    """
    normalized = round_type.strip().lower().replace("_", " ").replace("series-", "series ")

    for letter in "abcd":
        if normalized == letter or f"series {letter}" in normalized:
            return f"Series {letter.upper()}"
    if "pre-seed" in normalized or "pre seed" in normalized:
        return RoundType.PRE_SEED.value
    if "seed" in normalized:
        return RoundType.SEED.value
    if "bridge" in normalized:
        return RoundType.BRIDGE.value
    if "convertible" in normalized:
        return RoundType.CONVERTIBLE.value
    if "ipo" in normalized:
        return RoundType.IPO.value
    if "acquisition" in normalized:
        return RoundType.ACQUISITION.value
    return round_type.strip()


def _clean_company_name(name: str) -> str:
    name = re.sub(r"\b(Inc|LLC|Corp|Ltd|Co)\b\.?", "", name, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", name).strip(" ,.-")


def _clean_investor_name(name: str) -> str:
    name = re.sub(r"^(and|&)\s+", "", name.strip(), flags=re.IGNORECASE)
    name = re.sub(r"\s+(and|&)\s*$", "", name, flags=re.IGNORECASE)
    return name.strip()


def _parse_investor_list(text: str) -> List[str]:
    parts = re.split(r",|\sand\s", text)
    cleaned = [_clean_investor_name(p) for p in parts]
    return [p for p in cleaned if 2 < len(p) < 50]


def _apply_multiplier(raw: str, unit: Optional[str]) -> int:
    amount = float(raw.replace(",", ""))
    if unit:
        amount *= _MULTIPLIERS.get(unit.lower(), 1)
    return int(round(amount))


def extract_company_name(text: str) -> Optional[str]:
    for pattern in COMPANY_PATTERNS:
        match = pattern.search(text)
        if match:
            name = match.group(1).strip()
            if 2 < len(name) < 50:
                return name
    return None


def extract_amount(text: str) -> Optional[int]:
    for pattern in AMOUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            unit = match.group(2) if pattern.groups > 1 else None
            return _apply_multiplier(match.group(1), unit)
    return None


def extract_round_type(text: str) -> Optional[str]:
    for pattern in ROUND_TYPE_PATTERNS:
        match = pattern.search(text)
        if match:
            raw = match.group(1)
            if pattern is ROUND_TYPE_PATTERNS[0]:
                raw = f"series {raw}"
            return normalize_round_type(raw)
    return None


def extract_investors(text: str) -> Tuple[List[str], List[str]]:
    """Return (lead, participating) investors; "led by" mentions are leads."""
    lead: List[str] = []
    participating: List[str] = []
    for pattern in INVESTOR_PATTERNS:
        for match in pattern.finditer(text):
            investors = _parse_investor_list(match.group(1))
            if "led by" in match.group(0).lower():
                lead.extend(investors)
            else:
                participating.extend(investors)

    # De-duplicate, preserving first-seen order; a lead is never also a participant
    lead = list(dict.fromkeys(lead))
    participating = [p for p in dict.fromkeys(participating) if p not in lead]
    return lead, participating


def extract_valuation(text: str) -> Optional[int]:
    for pattern in VALUATION_PATTERNS:
        match = pattern.search(text)
        if match:
            return _apply_multiplier(match.group(1), match.group(2))
    return None


def parse_published_date(value: Optional[str]) -> datetime:
    """Parse a publish date; unparseable or missing values fall back to now (UTC)."""
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        logger.debug(f"Unparseable published date: {value!r}")
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_funding(
    text: str,
    source: str = "",
    url: str = "",
    title: str = "",
    published_date: Optional[str] = None,
) -> Optional[ExtractedFunding]:
    """
    Extract a single funding event from article text.

    Args:
        text: Article body (title may be prepended by the caller)
        source: Publication name
        url: Article URL
        title: Article headline
        published_date: Free-form publish date

    Returns:
        ExtractedFunding, or None when no company or no amount is found
    """
    company_name = extract_company_name(text)
    if not company_name:
        return None
    confidence = 0.3

    amount = extract_amount(text)
    if not amount:
        return None
    confidence += 0.3

    round_type = extract_round_type(text)
    if round_type:
        confidence += 0.2

    lead, participating = extract_investors(text)
    if lead or participating:
        confidence += 0.2

    return ExtractedFunding(
        company_name=_clean_company_name(company_name),
        funding_amount=amount,
        round_type=round_type or RoundType.UNKNOWN.value,
        lead_investors=lead,
        participating_investors=participating,
        announced_date=parse_published_date(published_date),
        valuation=extract_valuation(text),
        confidence=round(confidence, 2),
        source=source,
        url=url,
        title=title,
    )


def extract_funding_batch(articles: Iterable[FundingArticle]) -> List[ExtractedFunding]:
    """Extract from many articles, keeping results with confidence > MIN_BATCH_CONFIDENCE."""
    results = []
    for article in articles:
        text = f"{article.title}\n{article.text}" if article.title else article.text
        try:
            extracted = extract_funding(
                text,
                source=article.source,
                url=article.url,
                title=article.title,
                published_date=article.published_date,
            )
        except ValueError as e:
            logger.error(f"Error processing article {article.url or article.title!r}: {e}")
            continue
        if extracted and extracted.confidence > MIN_BATCH_CONFIDENCE:
            results.append(extracted)
    logger.info(f"Extracted {len(results)} funding events from batch")
    return results
