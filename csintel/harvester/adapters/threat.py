"""
Threat intelligence adapters.

Indicator feeds, exploited-vulnerability catalogs, attack databases and the
MITRE ATT&CK technique list. Records are counted, not persisted.
"""

from ...config.sources import SourceCategory
from ..base_adapter import StaticAdapter


class ThreatAdapter(StaticAdapter):
    category = SourceCategory.THREAT_INTELLIGENCE
    delay_ms = 0
    data_key = "records"
    data_type = ""

    def build_summary(self, payload):
        return {"dataType": self.data_type, "recordCount": len(payload)}


class MISPAdapter(ThreatAdapter):
    source_id = "misp"
    data_type = "threat_indicators"
    snapshot = [
        {
            "uuid": "misp-001",
            "info": "APT29 Malware Campaign",
            "threat_level": "high",
            "analysis": "completed",
            "date": "2024-01-15",
            "attributes": [
                {"type": "md5", "value": "a1b2c3d4e5f6789012345678901234567", "category": "Payload delivery"},
                {"type": "domain", "value": "malicious-domain.com", "category": "Network activity"},
                {"type": "ip-dst", "value": "192.168.1.100", "category": "Network activity"},
            ],
            "tags": ["APT29", "Cozy Bear", "Government", "Espionage"],
        },
    ]


class AlienVaultOTXAdapter(ThreatAdapter):
    source_id = "alienvault_otx"
    data_type = "threat_pulses"
    snapshot = [
        {
            "id": "otx-001",
            "name": "Ransomware Infrastructure",
            "description": "C2 servers and payment infrastructure for ransomware groups",
            "created": "2024-01-10",
            "modified": "2024-01-15",
            "indicators": [
                {"type": "domain", "indicator": "ransomware-c2.net", "is_active": True},
                {"type": "bitcoin", "indicator": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa", "is_active": True},
            ],
            "tags": ["ransomware", "c2", "cryptocurrency"],
        },
    ]


class CISAKEVAdapter(ThreatAdapter):
    source_id = "cisa_kev"
    data_type = "vulnerabilities"
    snapshot = [
        {
            "cveID": "CVE-2024-0001",
            "vendorProject": "Microsoft",
            "product": "Windows",
            "vulnerabilityName": "Windows Kernel Elevation of Privilege",
            "dateAdded": "2024-01-08",
            "shortDescription": "Windows kernel contains an elevation of privilege vulnerability",
            "requiredAction": "Apply updates per vendor instructions",
            "dueDate": "2024-02-08",
            "knownRansomwareCampaignUse": "Known",
        },
    ]


class SOCRadarAttacksAdapter(ThreatAdapter):
    source_id = "soc_radar_attacks"
    data_type = "cyber_attacks"
    snapshot = [
        {
            "id": "attack-001",
            "date": "2024-01-12",
            "target": "Healthcare Provider",
            "attack_type": "Ransomware",
            "threat_actor": "LockBit",
            "impact": "Data encryption and exfiltration",
            "affected_records": 500000,
            "industry": "Healthcare",
            "country": "United States",
            "recovery_time": "72 hours",
            "ransom_amount": 2000000,
        },
    ]


def _technique(technique_id, name, tactic, platforms, mitigation):
    return {
        "id": technique_id,
        "name": name,
        "tactic": tactic,
        "platforms": platforms,
        "mitigation": mitigation,
    }


_DESKTOP = ["Windows", "macOS", "Linux"]


class MITREAttackAdapter(ThreatAdapter):
    source_id = "mitre_attack_framework"
    data_type = "attack_techniques"
    snapshot = [
        _technique("T1036", "Masquerading", "Defense Evasion", _DESKTOP, "Execution Prevention, Code Signing"),
        _technique(
            "T1059", "Command and Scripting Interpreter", "Execution", _DESKTOP,
            "Execution Prevention, Disable or Remove Feature",
        ),
        _technique("T1480", "Execution Guardrails", "Defense Evasion", _DESKTOP, "Code Signing, Application Control"),
        _technique(
            "T1530", "Data from Cloud Storage Object", "Collection", ["AWS", "Azure", "GCP"],
            "User Account Management, Audit",
        ),
        _technique("T1497.001", "System Checks", "Defense Evasion", _DESKTOP, "Execution Prevention"),
        _technique(
            "T1505", "Server Software Component", "Persistence", ["Windows", "Linux", "Network"],
            "Code Signing, Privileged Account Management",
        ),
        _technique(
            "T1218", "Signed Binary Proxy Execution", "Defense Evasion", ["Windows"],
            "Execution Prevention, Application Control",
        ),
        _technique(
            "T1547.001", "Registry Run Keys / Startup Folder", "Persistence", ["Windows"],
            "User Account Control, Audit",
        ),
        _technique(
            "T1071.001", "Web Protocols", "Command and Control", _DESKTOP,
            "Network Intrusion Prevention, Restrict Web-Based Content",
        ),
        _technique(
            "T1110", "Brute Force", "Credential Access", _DESKTOP + ["Office 365", "SaaS"],
            "Account Use Policies, Multi-factor Authentication",
        ),
        _technique(
            "T1486", "Data Encrypted for Impact", "Impact", _DESKTOP,
            "Data Backup, Behavior Prevention on Endpoint",
        ),
        _technique("T1566", "Phishing", "Initial Access", _DESKTOP, "User Training, Email Security"),
    ]


THREAT_ADAPTERS = {
    adapter.source_id: adapter
    for adapter in (
        MISPAdapter,
        AlienVaultOTXAdapter,
        CISAKEVAdapter,
        SOCRadarAttacksAdapter,
        MITREAttackAdapter,
    )
}
