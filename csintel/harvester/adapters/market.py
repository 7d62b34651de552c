"""
Market intelligence adapters.

Market reports, statistics digests, trade commentary, launch-pad finalists
and event archives.
"""

from ...config.sources import SourceCategory
from ..base_adapter import StaticAdapter


class MarketAdapter(StaticAdapter):
    category = SourceCategory.MARKET_INTELLIGENCE


class ACSReportAdapter(MarketAdapter):
    source_id = "acs_global_cybersecurity_report"
    delay_ms = 120
    data_key = "reportData"
    snapshot = {
        "id": "acs-2025-report",
        "title": "Global Cybersecurity Market Report 2025",
        "sectors": [
            {"name": "Identity & Access Management", "growth": "15.2%", "marketSize": "$18.6B"},
            {"name": "Network Security", "growth": "12.8%", "marketSize": "$24.3B"},
            {"name": "Cloud Security", "growth": "22.1%", "marketSize": "$14.7B"},
            {"name": "Endpoint Security", "growth": "18.5%", "marketSize": "$16.9B"},
        ],
        "regionalData": {
            "northAmerica": {"investment": "$45.2B", "growth": "14.3%"},
            "europe": {"investment": "$28.7B", "growth": "16.8%"},
            "asiaPacific": {"investment": "$31.4B", "growth": "19.2%"},
        },
        "publicPrivateSplit": {"publicInvestment": "35%", "privateInvestment": "65%"},
    }
    summary = {
        "totalMarketSize": "$105.5B",
        "averageGrowth": "17.2%",
        "sectorsAnalyzed": 4,
        "regionsAnalyzed": 3,
    }


class GitnuxStatsAdapter(MarketAdapter):
    source_id = "gitnux_cybersecurity_stats"
    delay_ms = 95
    data_key = "statistics"
    snapshot = [
        {
            "category": "Threat Frequency",
            "metrics": [
                {"name": "Ransomware attacks per day", "value": "4,000+", "urgencyScore": 9.2},
                {"name": "Phishing emails sent daily", "value": "3.4B", "urgencyScore": 8.7},
                {"name": "Data breaches per year", "value": "1,001+", "urgencyScore": 9.5},
            ],
        },
        {
            "category": "Breach Costs",
            "metrics": [
                {"name": "Average data breach cost", "value": "$4.88M", "urgencyScore": 8.9},
                {"name": "Cost per stolen record", "value": "$165", "urgencyScore": 7.8},
                {"name": "Ransomware recovery cost", "value": "$1.85M", "urgencyScore": 9.1},
            ],
        },
    ]

    def build_summary(self, payload):
        scores = [m["urgencyScore"] for group in payload for m in group["metrics"]]
        return {
            "totalMetrics": len(scores),
            "averageUrgencyScore": round(sum(scores) / len(scores), 1) if scores else 0,
            "categoriesAnalyzed": len(payload),
            "highUrgencyMetrics": sum(1 for s in scores if s >= 8.8),
        }


class GlobalTradeMagazineAdapter(MarketAdapter):
    source_id = "global_trade_magazine"
    delay_ms = 85
    data_key = "commentary"
    snapshot = {
        "id": "gtm-cybersecurity-resilience-2025",
        "title": "Cybersecurity: The Resilient Sector Amid Global Market Uncertainty",
        "insights": [
            {
                "topic": "Strategic Resilience",
                "content": "Cybersecurity sector shows 23% growth despite economic headwinds",
                "sentiment": "positive",
                "confidence": 0.89,
            },
            {
                "topic": "Investor Sentiment",
                "content": "VC funding in cybersecurity up 18% year-over-year",
                "sentiment": "positive",
                "confidence": 0.92,
            },
            {
                "topic": "Macro Trends",
                "content": "Remote work driving increased security spending",
                "sentiment": "neutral",
                "confidence": 0.85,
            },
        ],
        "marketOutlook": "bullish",
        "riskFactors": ["regulatory changes", "talent shortage", "market saturation"],
    }

    def build_summary(self, payload):
        insights = payload["insights"]
        sentiment = {"positive": 0, "neutral": 0, "negative": 0}
        for insight in insights:
            sentiment[insight["sentiment"]] += 1
        return {
            "insightsExtracted": len(insights),
            "averageConfidence": round(sum(i["confidence"] for i in insights) / len(insights), 2),
            "sentimentBreakdown": sentiment,
            "riskFactorsIdentified": len(payload["riskFactors"]),
        }


class RSALaunchPadAdapter(MarketAdapter):
    source_id = "rsa_launch_pad"
    delay_ms = 110
    data_key = "startups"
    snapshot = [
        {
            "name": "SecureFlow AI",
            "category": "AI-Powered Security",
            "stage": "Series A",
            "description": "Automated threat detection using machine learning",
            "judges": ["CISO Panel", "VC Partners"],
            "pitchTheme": "Zero-day detection automation",
        },
        {
            "name": "QuantumShield",
            "category": "Quantum Cryptography",
            "stage": "Seed",
            "description": "Post-quantum cryptographic solutions",
            "judges": ["Technical Advisory Board"],
            "pitchTheme": "Quantum-resistant encryption",
        },
    ]
    summary = {
        "totalFinalists": 45,
        "categoriesRepresented": 12,
        "averageStage": "Series A",
        "judgesPanels": 8,
    }


class BlackHatArchivesAdapter(MarketAdapter):
    source_id = "black_hat_archives"
    delay_ms = 140
    data_key = "archives"
    snapshot = [
        {
            "year": 2024,
            "presentations": 245,
            "toolDemos": 89,
            "startupShowcases": 23,
            "topCategories": ["AI Security", "Cloud Security", "IoT Security"],
        },
        {
            "year": 2023,
            "presentations": 238,
            "toolDemos": 76,
            "startupShowcases": 19,
            "topCategories": ["Zero Trust", "DevSecOps", "Threat Hunting"],
        },
    ]

    def build_summary(self, payload):
        return {
            "totalPresentations": sum(a["presentations"] for a in payload),
            "totalToolDemos": sum(a["toolDemos"] for a in payload),
            "totalStartupShowcases": sum(a["startupShowcases"] for a in payload),
            "yearsAnalyzed": len(payload),
        }


class CyberEventsDatabaseAdapter(MarketAdapter):
    source_id = "cyber_events_database"
    delay_ms = 160
    data_key = "events"
    snapshot = [
        {
            "id": "ce-2024-001",
            "date": "2024-01-15",
            "type": "Ransomware",
            "targetIndustry": "Healthcare",
            "threatActor": "LockBit",
            "attribution": "High confidence",
            "impact": "Critical",
        },
        {
            "id": "ce-2024-002",
            "date": "2024-02-03",
            "type": "Data Breach",
            "targetIndustry": "Financial Services",
            "threatActor": "APT29",
            "attribution": "Medium confidence",
            "impact": "High",
        },
    ]
    summary = {
        "totalEvents": 15000,
        "threatActorsTracked": 450,
        "industriesTargeted": 18,
        "attributionConfidence": "Medium-High",
    }


class BlackHatUSAAdapter(MarketAdapter):
    source_id = "black_hat_usa"
    delay_ms = 75
    data_key = "eventData"
    snapshot = {
        "event": "Black Hat USA 2025",
        "dates": "August 2-7, 2025",
        "location": "Las Vegas, NV",
        "startupSpotlight": [
            {
                "name": "CyberGuard Pro",
                "category": "Endpoint Security",
                "fundingStage": "Series B",
                "investorBriefing": "August 5, 2025",
            },
            {
                "name": "ThreatVision AI",
                "category": "Threat Intelligence",
                "fundingStage": "Series A",
                "investorBriefing": "August 6, 2025",
            },
        ],
        "investorBriefings": 12,
        "expectedAttendance": 17000,
    }
    summary = {
        "startupsSpotlighted": 120,
        "investorBriefings": 12,
        "expectedAttendance": 17000,
        "daysOfEvent": 6,
    }


MARKET_ADAPTERS = {
    adapter.source_id: adapter
    for adapter in (
        ACSReportAdapter,
        GitnuxStatsAdapter,
        GlobalTradeMagazineAdapter,
        RSALaunchPadAdapter,
        BlackHatArchivesAdapter,
        CyberEventsDatabaseAdapter,
        BlackHatUSAAdapter,
    )
}
