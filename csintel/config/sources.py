"""
Data Source Registry - Configuration for the 33 external intelligence sources.

Each source has a category (which ingestion adapter group handles it), an
update cadence, and the mock sync metadata reported by the data-sources API
until a real sync log exists for it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional


class SourceCategory(Enum):
    """Adapter group responsible for a data source."""
    FUNDING = "funding"
    THREAT_INTELLIGENCE = "threat_intelligence"
    PATENT_INTELLIGENCE = "patent_intelligence"
    MARKET_INTELLIGENCE = "market_intelligence"
    CONFERENCE_INTELLIGENCE = "conference_intelligence"


class SourceHealth(Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class DataSourceConfig:
    """Configuration for a single external data source."""
    id: str
    name: str
    url: str
    source_type: str
    description: str
    update_frequency: str
    category: SourceCategory
    status: str = "available"

    # Mock sync metadata (replaced by data_source_syncs rows once synced)
    last_sync_offset: timedelta = timedelta(0)
    record_count: int = 0
    health: SourceHealth = SourceHealth.HEALTHY

    def last_sync_time(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.now(timezone.utc)
        return now - self.last_sync_offset

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "type": self.source_type,
            "description": self.description,
            "status": self.status,
            "updateFrequency": self.update_frequency,
            "category": self.category.value,
        }


def _hours(n: float) -> timedelta:
    return timedelta(hours=n)


def _days(n: float) -> timedelta:
    return timedelta(days=n)


_F = SourceCategory.FUNDING
_T = SourceCategory.THREAT_INTELLIGENCE
_P = SourceCategory.PATENT_INTELLIGENCE
_M = SourceCategory.MARKET_INTELLIGENCE
_C = SourceCategory.CONFERENCE_INTELLIGENCE
_WARN = SourceHealth.WARNING


DATA_SOURCE_REGISTRY: Dict[str, DataSourceConfig] = {
    # ----- Investment & Funding -----
    "intellizence": DataSourceConfig(
        id="intellizence",
        name="Intellizence Startup Funding API",
        url="https://intellizence.com/product/startup-funding-dataset/",
        source_type="api",
        description="Real-time startup funding, VC/PE deals, investor profiles",
        update_frequency="real-time",
        category=_F,
        last_sync_offset=_hours(2),
        record_count=1250,
    ),
    "finro": DataSourceConfig(
        id="finro",
        name="Finro Cybersecurity Valuation Benchmarks",
        url="https://www.finrofca.com/news/cybersecurity-valuation-mid-2025",
        source_type="dataset",
        description="Revenue multiples, niche valuations, M&A trends",
        update_frequency="quarterly",
        category=_F,
        last_sync_offset=_days(7),
        record_count=89,
    ),
    "datarade": DataSourceConfig(
        id="datarade",
        name="Datarade Startup APIs",
        url="https://datarade.ai/data-categories/startup-data",
        source_type="api_marketplace",
        description="Founding dates, funding rounds, team bios, market size",
        update_frequency="daily",
        category=_F,
        last_sync_offset=_days(1),
        record_count=2100,
    ),
    "crunchbase": DataSourceConfig(
        id="crunchbase",
        name="Crunchbase API",
        url="https://data.crunchbase.com/docs",
        source_type="api",
        description="Startup profiles, funding history, investor networks",
        update_frequency="daily",
        category=_F,
        last_sync_offset=_hours(6),
        record_count=3400,
        health=_WARN,  # Rate limited
    ),
    "sec_edgar": DataSourceConfig(
        id="sec_edgar",
        name="SEC EDGAR Database",
        url="https://www.sec.gov/edgar.shtml",
        source_type="xml_api",
        description="Form D filings, stealth rounds, public disclosures",
        update_frequency="daily",
        category=_F,
        last_sync_offset=_hours(12),
        record_count=567,
    ),
    "growthlist": DataSourceConfig(
        id="growthlist",
        name="GrowthList Cybersecurity Startups",
        url="https://growthlist.co/cyber-security-startups/",
        source_type="scraping",
        description="Weekly updated list of funded cybersecurity startups",
        update_frequency="weekly",
        category=_F,
        last_sync_offset=_days(3),
        record_count=234,
    ),
    "openvc": DataSourceConfig(
        id="openvc",
        name="OpenVC Cybersecurity Investors",
        url="https://www.openvc.app/investor-lists/cybersecurity-investors",
        source_type="scraping",
        description="150+ cybersecurity-focused VC firms with filters",
        update_frequency="monthly",
        category=_F,
        last_sync_offset=_days(14),
        record_count=156,
        health=_WARN,  # No official API
    ),

    # ----- Threat Intelligence -----
    "misp": DataSourceConfig(
        id="misp",
        name="MISP Threat Intelligence Platform",
        url="https://www.misp-project.org/",
        source_type="api",
        description="Malware hashes, phishing URLs, threat actor profiles",
        update_frequency="real-time",
        category=_T,
        last_sync_offset=timedelta(minutes=30),
        record_count=45000,
    ),
    "alienvault_otx": DataSourceConfig(
        id="alienvault_otx",
        name="AlienVault OTX",
        url="https://otx.alienvault.com/",
        source_type="api",
        description="Community-driven threat indicators, curated pulses",
        update_frequency="real-time",
        category=_T,
        last_sync_offset=timedelta(minutes=45),
        record_count=125000,
    ),
    "cisa_kev": DataSourceConfig(
        id="cisa_kev",
        name="CISA KEV Catalog",
        url="https://www.cisa.gov/known-exploited-vulnerabilities-catalog",
        source_type="feed",
        description="Known exploited vulnerabilities with CVE mapping",
        update_frequency="daily",
        category=_T,
        last_sync_offset=_hours(8),
        record_count=1200,
    ),
    "whoisxml_threats": DataSourceConfig(
        id="whoisxml_threats",
        name="WhoisXML Threat Feeds",
        url="https://www.whoisxmlapi.com/blog/threat-intelligence-feeds-guide",
        source_type="api",
        description="Malicious domains, IPs, predictive threat indicators",
        update_frequency="hourly",
        category=_T,
        last_sync_offset=_hours(2),
        record_count=89000,
        health=_WARN,  # API key required
    ),
    "github_threat_intel": DataSourceConfig(
        id="github_threat_intel",
        name="GitHub Threat Intelligence Lists",
        url="https://github.com/hslatman/awesome-threat-intelligence",
        source_type="curated_repo",
        description="Dozens of open feeds, including botnet trackers and APT lists",
        update_frequency="weekly",
        category=_T,
        last_sync_offset=_days(5),
        record_count=350,
    ),
    "soc_radar_feeds": DataSourceConfig(
        id="soc_radar_feeds",
        name="SOC Radar Threat Intelligence",
        url="https://socradar.io/the-ultimate-list-of-free-and-open-source-threat-intelligence-feeds/",
        source_type="feed_aggregator",
        description="Comprehensive list of free and open-source threat feeds",
        update_frequency="daily",
        category=_T,
        last_sync_offset=_hours(18),
        record_count=25000,
    ),
    "soc_radar_attacks": DataSourceConfig(
        id="soc_radar_attacks",
        name="SOC Radar Major Cyber Attacks",
        url="https://socradar.io/resources/radar/major-cyber-attacks/",
        source_type="dataset",
        description="Global cyber attacks database with downloadable Excel sheets",
        update_frequency="monthly",
        category=_T,
        last_sync_offset=_days(10),
        record_count=2800,
    ),
    "mitre_attack_framework": DataSourceConfig(
        id="mitre_attack_framework",
        name="MITRE ATT&CK Framework",
        url="https://attack.mitre.org/",
        source_type="framework_api",
        description="Adversary tactics, techniques, and procedures (TTPs) with attack IDs",
        update_frequency="quarterly",
        category=_T,
        last_sync_offset=_days(30),
        record_count=800,
    ),

    # ----- Patent & Innovation -----
    "uspto_open_data": DataSourceConfig(
        id="uspto_open_data",
        name="USPTO Open Data",
        url="https://developer.uspto.gov/data",
        source_type="api",
        description="Patent filings, citations, inventor networks",
        update_frequency="weekly",
        category=_P,
        last_sync_offset=_days(4),
        record_count=125000,
    ),
    "google_patents": DataSourceConfig(
        id="google_patents",
        name="Google Patents Public Datasets",
        url="https://console.cloud.google.com/marketplace/product/google_patents_public_datasets",
        source_type="bigquery",
        description="Patent metadata, semantic search, citation analysis",
        update_frequency="weekly",
        category=_P,
        last_sync_offset=_days(6),
        record_count=890000,
        health=_WARN,  # Requires BigQuery setup
    ),
    "cybersecurity_datasets_github": DataSourceConfig(
        id="cybersecurity_datasets_github",
        name="Cybersecurity Datasets GitHub",
        url="https://github.com/gfek/Real-CyberSecurity-Datasets",
        source_type="public_repo",
        description="Malware, botnet, ICS, and cloud security research datasets",
        update_frequency="monthly",
        category=_P,
        last_sync_offset=_days(15),
        record_count=450,
    ),

    # ----- Market Intelligence -----
    "acs_global_cybersecurity_report": DataSourceConfig(
        id="acs_global_cybersecurity_report",
        name="ACS Global Cybersecurity Market Report",
        url="https://acsmi.org/blogs/global-cybersecurity-market-report-2025-original-data-amp-industry-outlook",
        source_type="report",
        description="Sector growth, regional investment, public/private split",
        update_frequency="annually",
        category=_M,
        last_sync_offset=_days(30),
        record_count=1,
    ),
    "gitnux_cybersecurity_stats": DataSourceConfig(
        id="gitnux_cybersecurity_stats",
        name="Gitnux Cybersecurity Stats",
        url="https://gitnux.org/cybersecurity-industry-statistics/",
        source_type="dataset",
        description="Threat frequency, breach costs, urgency scores",
        update_frequency="quarterly",
        category=_M,
        last_sync_offset=_days(45),
        record_count=150,
    ),
    "global_trade_magazine": DataSourceConfig(
        id="global_trade_magazine",
        name="Global Trade Magazine",
        url="https://www.globaltrademag.com/cybersecurity-the-resilient-sector-amid-global-market-uncertainty/",
        source_type="commentary",
        description="Strategic resilience, investor sentiment, macro trends",
        update_frequency="monthly",
        category=_M,
        last_sync_offset=_days(20),
        record_count=25,
    ),
    "rsa_launch_pad": DataSourceConfig(
        id="rsa_launch_pad",
        name="RSA Launch Pad",
        url="https://www.rsaconference.com/usa/programs/launch-pad",
        source_type="web_scrape",
        description="Finalists, judges, pitch decks, strategic blurbs",
        update_frequency="annually",
        category=_M,
        last_sync_offset=_days(120),
        record_count=45,
        health=_WARN,  # Seasonal availability
    ),
    "black_hat_archives": DataSourceConfig(
        id="black_hat_archives",
        name="Black Hat Archives",
        url="https://www.blackhat.com/html/archives.html",
        source_type="archive",
        description="Speaker decks, tool demos, startup showcases",
        update_frequency="annually",
        category=_M,
        last_sync_offset=_days(90),
        record_count=2800,
    ),
    "cyber_events_database": DataSourceConfig(
        id="cyber_events_database",
        name="Cyber Events Database (CISSM)",
        url="https://cissm.umd.edu/cyber-events-database",
        source_type="downloadable_dataset",
        description="Global cyber events, threat actor attribution, industry targeting",
        update_frequency="monthly",
        category=_M,
        last_sync_offset=_days(25),
        record_count=15000,
    ),
    "black_hat_usa": DataSourceConfig(
        id="black_hat_usa",
        name="Black Hat USA",
        url="https://www.blackhat.com/us-25/",
        source_type="event_intelligence",
        description="Startup spotlight, investor briefings (Aug 2-7, Las Vegas)",
        update_frequency="annually",
        category=_M,
        last_sync_offset=_days(180),
        record_count=120,
        health=_WARN,  # Seasonal availability
    ),

    # ----- Conference Intelligence -----
    "def_con_33": DataSourceConfig(
        id="def_con_33",
        name="DEF CON 33",
        url="https://defcon.org/",
        source_type="conference_intelligence",
        description="Hacker-led startup demos, informal VC access (Aug 7-10, Las Vegas)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(150),
        record_count=85,
        health=_WARN,  # Seasonal availability
    ),
    "cybersec_europe": DataSourceConfig(
        id="cybersec_europe",
        name="Cybersec Europe",
        url="https://www.cyberseceurope.com/",
        source_type="conference_intelligence",
        description="Startup zone, EU innovation funding (May 21-22, Brussels)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(200),
        record_count=45,
    ),
    "infosec_world": DataSourceConfig(
        id="infosec_world",
        name="InfoSec World",
        url="https://www.infosecworld.com/",
        source_type="conference_intelligence",
        description="Startup showcase, CISO investor panels (Oct 27-29, Orlando)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(60),
        record_count=67,
    ),
    "blue_team_con": DataSourceConfig(
        id="blue_team_con",
        name="Blue Team Con",
        url="https://www.blueteamcon.com/",
        source_type="conference_intelligence",
        description="Startup demos, SOC tooling pitches (Sep 6-7, Chicago)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(120),
        record_count=32,
    ),
    "iccs_conference": DataSourceConfig(
        id="iccs_conference",
        name="International Conference on Cyber Security (ICCS)",
        url="https://iccs.fordham.edu/",
        source_type="conference_intelligence",
        description="Academic + startup crossover, funding panels (Jul 14-16, NYC)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(170),
        record_count=78,
    ),
    "gartner_security_summit": DataSourceConfig(
        id="gartner_security_summit",
        name="Gartner Security & Risk Management Summit",
        url="https://www.gartner.com/en/conferences/na/security-risk-management-us",
        source_type="conference_intelligence",
        description="Emerging tech showcase, investor briefings (Jun 9-11, National Harbor)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(240),
        record_count=156,
    ),
    "cyberuk": DataSourceConfig(
        id="cyberuk",
        name="CYBERUK",
        url="https://www.cyberuk.gov.uk/",
        source_type="conference_intelligence",
        description="UK government-backed startup funding tracks (May 6-8, Manchester)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(210),
        record_count=89,
    ),
    "sans_orlando": DataSourceConfig(
        id="sans_orlando",
        name="SANS Orlando 2025",
        url="https://www.sans.org/cyber-security-training-events/orlando-2025/",
        source_type="conference_intelligence",
        description="Startup booths, training-linked demos (Apr 13-18, Orlando)",
        update_frequency="annually",
        category=_C,
        last_sync_offset=_days(270),
        record_count=234,
    ),
}


def get_source(source_id: str) -> DataSourceConfig:
    """Get data source configuration by id."""
    if source_id not in DATA_SOURCE_REGISTRY:
        raise ValueError(f"Unknown data source: {source_id}")
    return DATA_SOURCE_REGISTRY[source_id]


def get_all_sources() -> List[DataSourceConfig]:
    """Get all data source configurations."""
    return list(DATA_SOURCE_REGISTRY.values())


def get_sources_by_category(category: SourceCategory) -> List[DataSourceConfig]:
    """Get sources handled by a specific adapter group."""
    return [s for s in DATA_SOURCE_REGISTRY.values() if s.category == category]
