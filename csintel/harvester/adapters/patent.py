"""Patent and research dataset adapters."""

from ...config.sources import SourceCategory
from ..base_adapter import StaticAdapter


class PatentAdapter(StaticAdapter):
    category = SourceCategory.PATENT_INTELLIGENCE


class USPTOAdapter(PatentAdapter):
    source_id = "uspto_open_data"
    delay_ms = 100
    data_key = "patents"
    snapshot = [
        {
            "patentNumber": "US11234567B2",
            "title": "System and Method for Detecting Malicious Network Traffic Using Machine Learning",
            "assignee": "CyberSecure Technologies Inc.",
            "filingDate": "2023-03-15",
            "publicationDate": "2024-01-20",
            "inventors": ["John Smith", "Jane Doe"],
            "categories": ["Network Security", "Machine Learning", "Threat Detection"],
            "claims": 20,
        },
    ]
    summary = {"totalPatents": 125000, "cybersecurityPatents": 8500, "recentFilings": 234}


class GooglePatentsAdapter(PatentAdapter):
    source_id = "google_patents"
    delay_ms = 150
    data_key = "patents"
    snapshot = [
        {
            "patentNumber": "US20240123456A1",
            "title": "Zero Trust Authentication Framework for Cloud Environments",
            "assignee": "CloudGuard Security Ltd.",
            "filingDate": "2023-08-10",
            "publicationDate": "2024-02-15",
            "semanticAnalysis": {
                "relevanceScore": 0.94,
                "keyTerms": ["zero trust", "authentication", "cloud security"],
                "technologyCluster": "Identity & Access Management",
            },
            "citedBy": 3,
        },
    ]
    summary = {"totalPatents": 890000, "cybersecurityRelevant": 12500, "highRelevanceScore": 3400}


class CybersecurityDatasetsAdapter(PatentAdapter):
    source_id = "cybersecurity_datasets_github"
    delay_ms = 80
    data_key = "datasets"
    snapshot = [
        {
            "name": "CICIDS2017",
            "category": "Network Intrusion Detection",
            "size": "51.1 GB",
            "format": "CSV",
            "lastUpdated": "2023-12-01",
            "stars": 1250,
        },
        {
            "name": "EMBER Malware Dataset",
            "category": "Malware Classification",
            "size": "9.2 GB",
            "format": "JSON",
            "lastUpdated": "2024-01-15",
            "stars": 890,
        },
    ]
    summary = {
        "totalDatasets": 450,
        "malwareDatasets": 125,
        "networkDatasets": 89,
        "icsDatasets": 67,
        "cloudSecurityDatasets": 169,
    }


PATENT_ADAPTERS = {
    adapter.source_id: adapter
    for adapter in (USPTOAdapter, GooglePatentsAdapter, CybersecurityDatasetsAdapter)
}
