"""
Seed dataset: recently funded cybersecurity startups.

Company funding totals are not listed here; they accumulate from SEED_ROUNDS
when the rounds are saved.
"""

from datetime import date


SEED_COMPANIES = [
    {
        "name": "Realm Security",
        "description": "Advanced security platform providing comprehensive threat detection and response capabilities for enterprise environments.",
        "founded_year": 2023,
        "headquarters": "Wellesley, Massachusetts",
        "country": "USA",
        "website": "https://www.realm.security",
        "primary_category": "Threat Detection",
        "secondary_categories": ["Enterprise Security", "Cloud Security"],
        "target_market": "Enterprise",
        "employee_count": 25,
        "estimated_revenue": 2_000_000,
        "growth_rate": 150.0,
        "core_technology": "AI/ML",
        "patents_count": 2,
        "market_cap": 45_000_000,
        "competitors": ["CrowdStrike", "SentinelOne", "Palo Alto Networks"],
    },
    {
        "name": "Exaforce",
        "description": "Cloud-native security orchestration platform enabling automated incident response and threat mitigation.",
        "founded_year": 2022,
        "headquarters": "San Jose, California",
        "country": "USA",
        "website": "https://www.exaforce.com",
        "primary_category": "Cloud Security",
        "secondary_categories": ["Security Orchestration", "Automation"],
        "target_market": "Enterprise",
        "current_stage": "Pre-Seed",
        "employee_count": 15,
        "estimated_revenue": 500_000,
        "growth_rate": 200.0,
        "core_technology": "AI/ML",
        "patents_count": 1,
    },
    {
        "name": "Oneleet",
        "description": "Security platform focused on protecting distributed systems and microservices architectures.",
        "founded_year": 2023,
        "headquarters": "Beaverton, Oregon",
        "country": "USA",
        "website": "https://www.oneleet.com",
        "primary_category": "Application Security",
        "secondary_categories": ["Container Security", "Microservices"],
        "target_market": "Enterprise",
        "employee_count": 40,
        "estimated_revenue": 5_000_000,
        "growth_rate": 180.0,
        "core_technology": "Container Security",
        "patents_count": 3,
        "market_cap": 99_000_000,
        "competitors": ["Aqua Security", "Sysdig", "Snyk"],
    },
    {
        "name": "Descope",
        "description": "Modern authentication and user management platform with passwordless capabilities and fraud prevention.",
        "founded_year": 2022,
        "headquarters": "Tel Aviv, Israel",
        "country": "Israel",
        "website": "https://www.descope.com",
        "primary_category": "Identity Management",
        "secondary_categories": ["Authentication", "Fraud Prevention"],
        "target_market": "Enterprise",
        "employee_count": 75,
        "estimated_revenue": 12_000_000,
        "growth_rate": 250.0,
        "core_technology": "Passwordless Auth",
        "patents_count": 5,
        "market_cap": 264_000_000,
        "competitors": ["Auth0", "Okta", "Ping Identity"],
    },
    {
        "name": "RNOX Security",
        "description": "Next-generation endpoint protection platform with advanced threat hunting and forensics capabilities.",
        "founded_year": 2021,
        "headquarters": "New Rochelle, New York",
        "country": "USA",
        "website": "https://www.rnoxsecurity.com",
        "primary_category": "Endpoint Security",
        "secondary_categories": ["Threat Hunting", "Forensics"],
        "target_market": "Enterprise",
        "employee_count": 30,
        "estimated_revenue": 3_000_000,
        "growth_rate": 175.0,
        "core_technology": "AI/ML",
        "patents_count": 2,
        "market_cap": 24_000_000,
        "competitors": ["Carbon Black", "CrowdStrike Falcon", "Microsoft Defender"],
    },
    {
        "name": "Finosec",
        "description": "Financial services security platform specializing in fraud detection and compliance automation.",
        "founded_year": 2023,
        "headquarters": "Alpharetta, Georgia",
        "country": "USA",
        "website": "https://www.finosec.com",
        "primary_category": "Financial Security",
        "secondary_categories": ["Fraud Detection", "Compliance"],
        "target_market": "Financial Services",
        "current_stage": "Pre-Seed",
        "employee_count": 12,
        "estimated_revenue": 400_000,
        "growth_rate": 300.0,
        "core_technology": "AI/ML",
        "patents_count": 1,
    },
    {
        "name": "Solidcore.ai",
        "description": "AI-powered infrastructure security platform preventing unauthorized changes to critical systems.",
        "founded_year": 2022,
        "headquarters": "Menlo Park, California",
        "country": "USA",
        "website": "https://www.solidcore.ai",
        "primary_category": "Infrastructure Security",
        "secondary_categories": ["Configuration Management", "Change Control"],
        "target_market": "Enterprise",
        "employee_count": 18,
        "estimated_revenue": 1_500_000,
        "growth_rate": 220.0,
        "core_technology": "AI/ML",
        "patents_count": 3,
        "market_cap": 12_000_000,
    },
    {
        "name": "CloudBurst Technologies",
        "description": "Multi-cloud security posture management with automated compliance and risk assessment.",
        "founded_year": 2021,
        "headquarters": "New York, New York",
        "country": "USA",
        "website": "https://www.burst.cloud",
        "primary_category": "Cloud Security",
        "secondary_categories": ["CSPM", "Compliance", "Risk Management"],
        "target_market": "Enterprise",
        "employee_count": 55,
        "estimated_revenue": 8_000_000,
        "growth_rate": 190.0,
        "core_technology": "Cloud Native",
        "patents_count": 4,
        "market_cap": 129_000_000,
        "competitors": ["Wiz", "Orca Security", "Lacework"],
    },
    {
        "name": "Lifeguard",
        "description": "Identity threat detection and response platform protecting against account takeover and insider threats.",
        "founded_year": 2023,
        "headquarters": "Austin, Texas",
        "country": "USA",
        "website": "https://www.trylifeguard.com",
        "primary_category": "Identity Security",
        "secondary_categories": ["Threat Detection", "Account Protection"],
        "target_market": "Enterprise",
        "employee_count": 22,
        "estimated_revenue": 2_500_000,
        "growth_rate": 210.0,
        "core_technology": "Behavioral Analytics",
        "patents_count": 2,
        "market_cap": 21_000_000,
    },
    {
        "name": "Shield (Miami)",
        "description": "Comprehensive data protection and privacy platform for healthcare and financial institutions.",
        "founded_year": 2022,
        "headquarters": "Miami, Florida",
        "country": "USA",
        "website": "https://www.getshield.xyz",
        "primary_category": "Data Protection",
        "secondary_categories": ["Privacy", "Compliance", "Healthcare"],
        "target_market": "Healthcare",
        "employee_count": 28,
        "estimated_revenue": 4_000_000,
        "growth_rate": 185.0,
        "core_technology": "Encryption",
        "patents_count": 3,
        "market_cap": 57_000_000,
        "competitors": ["Varonis", "Nightfall", "BigID"],
    },
    {
        "name": "CyberShield AI",
        "description": "AI-powered threat detection and response platform for mid-market SOC teams.",
        "founded_year": 2021,
        "headquarters": "San Francisco, California",
        "country": "USA",
        "website": "https://www.cybershield.ai",
        "primary_category": "Threat Detection",
        "secondary_categories": ["Security Operations"],
        "target_market": "SMB",
        "employee_count": 60,
        "estimated_revenue": 6_000_000,
        "growth_rate": 160.0,
        "core_technology": "AI/ML",
        "patents_count": 4,
    },
    {
        "name": "QuantumSec",
        "description": "Post-quantum cryptography toolkit for securing data in transit and at rest.",
        "founded_year": 2020,
        "headquarters": "London, United Kingdom",
        "country": "United Kingdom",
        "website": "https://www.quantumsec.io",
        "primary_category": "Data Protection",
        "secondary_categories": ["Cryptography"],
        "target_market": "Enterprise",
        "employee_count": 35,
        "estimated_revenue": 1_200_000,
        "growth_rate": 90.0,
        "core_technology": "Post-Quantum Cryptography",
        "patents_count": 7,
    },
]


SEED_ROUNDS = [
    {
        "company_name": "Realm Security",
        "announced_date": date(2025, 10, 8),
        "round_type": "Series A",
        "amount_usd": 15_000_000,
        "lead_investors": ["Jump Capital"],
        "participating_investors": ["Accomplice VC", "Glasswing Ventures"],
        "valuation_usd": 45_000_000,
    },
    {
        "company_name": "Oneleet",
        "announced_date": date(2025, 10, 2),
        "round_type": "Series A",
        "amount_usd": 33_000_000,
        "lead_investors": ["Dawn Capital"],
        "participating_investors": ["Arash Ferdowsi", "Frank Slootman"],
        "valuation_usd": 99_000_000,
    },
    {
        "company_name": "Descope",
        "announced_date": date(2023, 2, 14),
        "round_type": "Seed",
        "amount_usd": 53_000_000,
        "lead_investors": ["Lightspeed Venture Partners"],
        "participating_investors": ["TCV", "Notable Capital"],
    },
    {
        "company_name": "Descope",
        "announced_date": date(2025, 9, 30),
        "round_type": "Series B",
        "amount_usd": 135_000_000,
        "lead_investors": ["Great North Ventures"],
        "participating_investors": ["Amiram Shachar", "Assaf Rappaport", "Lightspeed Venture Partners"],
        "valuation_usd": 264_000_000,
    },
    {
        "company_name": "RNOX Security",
        "announced_date": date(2025, 9, 28),
        "round_type": "Seed",
        "amount_usd": 8_000_000,
        "lead_investors": ["Great North Ventures"],
        "participating_investors": ["Business Finland", "Hannu Turunen"],
        "valuation_usd": 24_000_000,
    },
    {
        "company_name": "CloudBurst Technologies",
        "announced_date": date(2024, 4, 11),
        "round_type": "Seed",
        "amount_usd": 36_000_000,
        "lead_investors": ["In-Q-Tel"],
        "participating_investors": ["Strategic Capital"],
    },
    {
        "company_name": "CloudBurst Technologies",
        "announced_date": date(2025, 9, 23),
        "round_type": "Series A",
        "amount_usd": 7_000_000,
        "lead_investors": ["Borderless Capital"],
        "participating_investors": ["Bloccelerate", "CoinFund Management", "In-Q-Tel", "Strategic Capital"],
        "valuation_usd": 43_000_000,
    },
    {
        "company_name": "Lifeguard",
        "announced_date": date(2025, 9, 23),
        "round_type": "Seed",
        "amount_usd": 7_000_000,
        "lead_investors": ["SCOp Venture Capital"],
        "valuation_usd": 21_000_000,
    },
    {
        "company_name": "Shield (Miami)",
        "announced_date": date(2025, 9, 22),
        "round_type": "Seed",
        "amount_usd": 19_000_000,
        "lead_investors": ["Giant Ventures"],
        "participating_investors": ["American Express", "Andreessen Horowitz", "Banco Santander"],
        "valuation_usd": 57_000_000,
    },
    {
        "company_name": "Solidcore.ai",
        "announced_date": date(2025, 9, 24),
        "round_type": "Seed",
        "amount_usd": 4_000_000,
        "lead_investors": ["Runtime Ventures"],
        "participating_investors": ["EPIC Ventures"],
        "valuation_usd": 12_000_000,
    },
    {
        "company_name": "CyberShield AI",
        "announced_date": date(2024, 6, 15),
        "round_type": "Series A",
        "amount_usd": 25_000_000,
        "lead_investors": ["Andreessen Horowitz"],
        "participating_investors": ["Accel"],
    },
    {
        "company_name": "QuantumSec",
        "announced_date": date(2023, 11, 2),
        "round_type": "Seed",
        "amount_usd": 5_000_000,
        "lead_investors": ["Accel"],
    },
]


SEED_TEAM_MEMBERS = [
    {"company_name": "Descope", "name": "Slavik Markovich", "title": "CEO & Co-Founder", "is_founder": True},
    {"company_name": "Descope", "name": "Rishi Bhargava", "title": "Co-Founder", "is_founder": True},
    {"company_name": "Oneleet", "name": "Bryan Onel", "title": "CEO & Founder", "is_founder": True},
    {"company_name": "CyberShield AI", "name": "Maya Chen", "title": "CEO & Co-Founder", "is_founder": True},
    {"company_name": "CyberShield AI", "name": "David Park", "title": "CTO", "is_founder": False},
    {"company_name": "QuantumSec", "name": "Alex Rivera", "title": "Founder", "is_founder": True},
]


SEED_ACQUISITIONS = [
    {
        "company_name": "QuantumSec",
        "acquirer_name": "Thales",
        "amount_usd": 60_000_000,
        "announced_date": date(2025, 6, 3),
        "status": "announced",
    },
]


# Portfolio holdings: traction_score < 30 with no active users triggers an attention alert
SEED_PORTFOLIO = [
    {
        "company_name": "CyberShield AI",
        "investment_date": date(2024, 6, 15),
        "investment_amount": 5_000_000,
        "ownership_percentage": 8.5,
        "traction_score": 78,
        "active_users": 1200,
        "status": "active",
    },
    {
        "company_name": "QuantumSec",
        "investment_date": date(2023, 11, 2),
        "investment_amount": 2_000_000,
        "ownership_percentage": 12.0,
        "traction_score": 25,
        "active_users": 0,
        "status": "active",
    },
    {
        "company_name": "Realm Security",
        "investment_date": date(2025, 10, 8),
        "investment_amount": 3_000_000,
        "ownership_percentage": 6.0,
        "traction_score": 60,
        "active_users": 150,
        "status": "active",
    },
]
