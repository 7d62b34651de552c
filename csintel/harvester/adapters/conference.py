"""
Conference intelligence adapters.

Startup demos, investor activity and funding tracks captured at security
conferences. Each event snapshot carries the startups presenting, which is
what processed / created count.
"""

from ...config.sources import SourceCategory
from ..base_adapter import StaticAdapter


class ConferenceAdapter(StaticAdapter):
    category = SourceCategory.CONFERENCE_INTELLIGENCE
    data_key = "eventData"


class DefCon33Adapter(ConferenceAdapter):
    source_id = "def_con_33"
    delay_ms = 130
    record_field = "startupDemos"
    snapshot = {
        "event": "DEF CON 33",
        "dates": "August 7-10, 2025",
        "location": "Las Vegas, NV",
        "startupDemos": [
            {
                "name": "HackerShield",
                "category": "Red Team Tools",
                "demoType": "Live Demo",
                "vcInterest": "High",
                "informalMeetings": 3,
            },
            {
                "name": "ExploitGuard",
                "category": "Vulnerability Management",
                "demoType": "Tool Showcase",
                "vcInterest": "Medium",
                "informalMeetings": 2,
            },
        ],
        "vcAccess": {"informalMeetings": 45, "scheduledPitches": 12, "networkingEvents": 8},
        "hackerCommunityFeedback": {"toolsShowcased": 85, "communityVotes": 1250, "averageRating": 4.2},
    }
    summary = {
        "startupsPresenting": 85,
        "vcMeetings": 45,
        "communityEngagement": 1250,
        "daysOfEvent": 4,
    }


class CybersecEuropeAdapter(ConferenceAdapter):
    source_id = "cybersec_europe"
    delay_ms = 105
    record_field = "startupZone"
    snapshot = {
        "event": "Cybersec Europe",
        "dates": "May 21-22, 2025",
        "location": "Brussels, Belgium",
        "startupZone": [
            {
                "name": "EuroSecure",
                "country": "Germany",
                "fundingStage": "Series A",
                "euInnovationFunding": "€2.5M",
                "category": "Privacy Tech",
            },
            {
                "name": "CyberDefense Nordic",
                "country": "Sweden",
                "fundingStage": "Seed",
                "euInnovationFunding": "€800K",
                "category": "Industrial Security",
            },
        ],
        "euFunding": {
            "totalAvailable": "€50M",
            "applicants": 156,
            "approvedGrants": 23,
            "averageGrant": "€2.2M",
        },
        "regionalFocus": {"gdprCompliance": 89, "digitalSovereignty": 67, "criticalInfrastructure": 45},
    }
    summary = {"euStartups": 45, "totalFunding": "€50M", "grantApprovals": 23, "daysOfEvent": 2}


class InfoSecWorldAdapter(ConferenceAdapter):
    source_id = "infosec_world"
    delay_ms = 115
    record_field = "startupShowcase"
    snapshot = {
        "event": "InfoSec World",
        "dates": "October 27-29, 2025",
        "location": "Orlando, FL",
        "startupShowcase": [
            {
                "name": "SecureOps Pro",
                "category": "Security Operations",
                "cisoRating": 4.5,
                "investorInterest": "High",
                "panelPresentation": True,
            },
            {
                "name": "ThreatScope AI",
                "category": "Threat Detection",
                "cisoRating": 4.2,
                "investorInterest": "Medium",
                "panelPresentation": False,
            },
        ],
        "cisoInvestorPanels": [
            {"title": "CISO Investment Priorities 2025", "panelists": 8, "startupsPitched": 12, "fundingCommitments": 3},
            {"title": "Enterprise Security Budgets", "panelists": 6, "startupsPitched": 8, "fundingCommitments": 2},
        ],
        "networkingMetrics": {"cisoAttendees": 450, "investorAttendees": 89, "startupMeetings": 234},
    }
    summary = {
        "startupsShowcased": 67,
        "cisoAttendees": 450,
        "investorMeetings": 234,
        "fundingCommitments": 5,
    }


class BlueTeamConAdapter(ConferenceAdapter):
    source_id = "blue_team_con"
    delay_ms = 95
    record_field = "startupDemos"
    snapshot = {
        "event": "Blue Team Con",
        "dates": "September 6-7, 2025",
        "location": "Chicago, IL",
        "startupDemos": [
            {
                "name": "SOCAutomation",
                "category": "Security Orchestration",
                "toolType": "SOAR Platform",
                "blueTeamRating": 4.7,
                "socAdoption": "High",
            },
            {
                "name": "DefenseMatrix",
                "category": "Incident Response",
                "toolType": "IR Platform",
                "blueTeamRating": 4.3,
                "socAdoption": "Medium",
            },
        ],
        "socToolingPitches": {
            "totalPitches": 32,
            "automationTools": 12,
            "threatHuntingTools": 8,
            "incidentResponseTools": 7,
            "complianceTools": 5,
        },
        "blueTeamFeedback": {"practitionerAttendees": 890, "toolEvaluations": 156, "adoptionCommitments": 23},
    }
    summary = {
        "socToolsPitched": 32,
        "practitionerAttendees": 890,
        "adoptionCommitments": 23,
        "daysOfEvent": 2,
    }


class ICCSConferenceAdapter(ConferenceAdapter):
    source_id = "iccs_conference"
    delay_ms = 125
    record_field = "academicStartupCrossover"
    snapshot = {
        "event": "International Conference on Cyber Security (ICCS)",
        "dates": "July 14-16, 2025",
        "location": "New York, NY",
        "academicStartupCrossover": [
            {
                "startup": "CyberResearch Labs",
                "academicPartner": "MIT CSAIL",
                "researchArea": "Quantum Cryptography",
                "fundingReceived": "$3.2M",
                "publicationCount": 12,
            },
            {
                "startup": "SecureAI Systems",
                "academicPartner": "Stanford HAI",
                "researchArea": "AI Security",
                "fundingReceived": "$5.8M",
                "publicationCount": 8,
            },
        ],
        "fundingPanels": [
            {
                "title": "Academic-Industry Funding Bridges",
                "participants": 15,
                "fundingCommitments": "$12M",
                "startupsPresented": 8,
            },
            {
                "title": "Research Commercialization",
                "participants": 12,
                "fundingCommitments": "$8.5M",
                "startupsPresented": 6,
            },
        ],
        "researchMetrics": {"papersPresented": 78, "startupCollaborations": 23, "fundingOpportunities": 45},
    }
    summary = {
        "academicPartnerships": 23,
        "totalFunding": "$20.5M",
        "researchPapers": 78,
        "daysOfEvent": 3,
    }


class GartnerSummitAdapter(ConferenceAdapter):
    source_id = "gartner_security_summit"
    delay_ms = 140
    record_field = "emergingTechShowcase"
    snapshot = {
        "event": "Gartner Security & Risk Management Summit",
        "dates": "June 9-11, 2025",
        "location": "National Harbor, MD",
        "emergingTechShowcase": [
            {
                "technology": "Zero Trust Architecture",
                "startups": 12,
                "gartnerRating": "High Potential",
                "marketSize": "$15.2B",
                "adoptionTimeline": "2-3 years",
            },
            {
                "technology": "AI-Powered Security",
                "startups": 18,
                "gartnerRating": "Transformational",
                "marketSize": "$22.8B",
                "adoptionTimeline": "1-2 years",
            },
        ],
        "investorBriefings": [
            {
                "title": "Security Market Outlook 2025-2027",
                "attendees": 89,
                "startupsHighlighted": 25,
                "investmentCommitments": "$45M",
            },
            {
                "title": "Emerging Security Technologies",
                "attendees": 67,
                "startupsHighlighted": 18,
                "investmentCommitments": "$32M",
            },
        ],
        "analystInsights": {"marketPredictions": 15, "technologyTrends": 23, "investmentRecommendations": 12},
    }
    summary = {
        "emergingTechnologies": 2,
        "totalStartups": 30,
        "investmentCommitments": "$77M",
        "analystInsights": 50,
    }


class CyberUKAdapter(ConferenceAdapter):
    source_id = "cyberuk"
    delay_ms = 110
    record_field = "startupShowcase"
    snapshot = {
        "event": "CYBERUK",
        "dates": "May 6-8, 2025",
        "location": "Manchester, UK",
        "governmentFundingTracks": [
            {
                "program": "UK Cyber Innovation Fund",
                "totalFunding": "£25M",
                "applicants": 67,
                "approved": 12,
                "averageGrant": "£2.1M",
            },
            {
                "program": "Defence Cyber Accelerator",
                "totalFunding": "£15M",
                "applicants": 45,
                "approved": 8,
                "averageGrant": "£1.9M",
            },
        ],
        "startupShowcase": [
            {
                "name": "CyberDefence UK",
                "category": "Critical Infrastructure",
                "governmentBacking": "£3.2M",
                "securityClearance": "SC Level",
                "contractsPipeline": "£12M",
            },
            {
                "name": "QuantumSecure Ltd",
                "category": "Quantum Security",
                "governmentBacking": "£2.8M",
                "securityClearance": "DV Level",
                "contractsPipeline": "£8.5M",
            },
        ],
        "governmentMetrics": {
            "totalInvestment": "£40M",
            "startupsSupported": 20,
            "contractsAwarded": "£20.5M",
            "internationalPartnerships": 15,
        },
    }
    summary = {
        "governmentFunding": "£40M",
        "startupsSupported": 20,
        "contractsAwarded": "£20.5M",
        "daysOfEvent": 3,
    }


class SANSOrlandoAdapter(ConferenceAdapter):
    source_id = "sans_orlando"
    delay_ms = 120
    record_field = "startupBooths"
    snapshot = {
        "event": "SANS Orlando 2025",
        "dates": "April 13-18, 2025",
        "location": "Orlando, FL",
        "startupBooths": [
            {
                "name": "TrainingTech Security",
                "category": "Security Training",
                "trainingIntegration": "Hands-on Labs",
                "certificationTies": ["GSEC", "GCIH"],
                "attendeeInterest": "High",
            },
            {
                "name": "CyberSkills Pro",
                "category": "Skills Assessment",
                "trainingIntegration": "Assessment Platform",
                "certificationTies": ["GIAC", "CISSP"],
                "attendeeInterest": "Medium",
            },
        ],
        "trainingLinkedDemos": {
            "totalDemos": 234,
            "handsOnLabs": 89,
            "certificationPrep": 67,
            "skillsAssessment": 45,
            "practicalTools": 33,
        },
        "educationMetrics": {
            "trainingAttendees": 2800,
            "certificationCandidates": 890,
            "toolAdoptions": 156,
            "courseIntegrations": 23,
        },
    }
    summary = {
        "startupBooths": 234,
        "trainingAttendees": 2800,
        "certificationCandidates": 890,
        "daysOfEvent": 6,
    }


CONFERENCE_ADAPTERS = {
    adapter.source_id: adapter
    for adapter in (
        DefCon33Adapter,
        CybersecEuropeAdapter,
        InfoSecWorldAdapter,
        BlueTeamConAdapter,
        ICCSConferenceAdapter,
        GartnerSummitAdapter,
        CyberUKAdapter,
        SANSOrlandoAdapter,
    )
}
