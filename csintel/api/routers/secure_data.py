"""
Secure data routes: classification listing, masked threat data, audit logs,
compliance reports, and encrypt / decrypt / mask / verify-access actions.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ...common.cache import cache
from ...common.envelope import success_response, utc_timestamp
from ...config.settings import settings
from ...security import DATA_CLASSIFICATIONS, AccessDeniedError, data_protection_manager
from ..deps import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/secure-data", tags=["secure-data"])

AUDIT_LOG_WINDOW = timedelta(days=7)
COMPLIANCE_REPORT_WINDOW = timedelta(days=30)
ACCESS_DENIED = "Access denied: Insufficient permissions"

SAMPLE_VULNERABILITY = {
    "cve": "CVE-2024-0001",
    "title": "Critical Windows Kernel Privilege Escalation",
    "description": "A privilege escalation vulnerability exists in the Windows kernel",
    "severity": "critical",
    "cvss": 9.8,
    "exploitCode": "int main() { HANDLE hDevice = CreateFile(VULNERABLE_DRIVER, ...); return 0; }",
    "internalNotes": "CONFIDENTIAL: discovered during red team exercise. Affects government systems.",
    "sourceCode": "kernel32.dll!NtCreateFile vulnerable function at offset 0x12345",
    "affectedSystems": ["Windows 10", "Windows 11", "Windows Server 2019"],
    "patchStatus": "Available",
    "threatActors": ["APT29", "Lazarus Group"],
    "exploitComplexity": "Low",
    "publicExploits": 3,
    "mitigations": [
        "Apply Microsoft security update KB5034441",
        "Enable Windows Defender Application Control",
        "Implement least privilege access",
    ],
}

SAMPLE_THREAT = {
    "threatId": "THREAT-2024-001",
    "threatActor": "APT29 (Cozy Bear)",
    "campaign": "Operation CloudHopper 2.0",
    "description": "Advanced persistent threat targeting cloud infrastructure",
    "ttps": [
        "T1566.001 - Spearphishing Attachment",
        "T1059.001 - PowerShell",
        "T1055 - Process Injection",
    ],
    "iocs": [
        {"type": "domain", "value": "malicious-c2-server.com", "confidence": 95},
        {"type": "ip", "value": "192.168.100.50", "confidence": 90},
        {"type": "hash", "value": "a1b2c3d4e5f6789012345678901234567890abcd", "confidence": 98},
    ],
    "targets": ["Government", "Healthcare", "Financial Services"],
    "attribution": {
        "country": "Russia",
        "confidence": 85,
        "evidence": "CLASSIFIED: Signals intelligence and human sources confirm attribution",
    },
    "countermeasures": [
        "Block known C2 domains at DNS level",
        "Deploy advanced email security",
        "Implement behavioral monitoring",
    ],
    "internalAssessment": (
        "HIGH CONFIDENCE: This threat actor has demonstrated capability to compromise critical infrastructure"
    ),
}


class SecureDataRequest(BaseModel):
    action: Optional[str] = None
    userId: Optional[str] = None
    data: Any = None
    classification: Optional[str] = None
    targetClassification: Optional[str] = None
    targetAction: Optional[str] = None


def _window(start: Optional[datetime], end: Optional[datetime], default: timedelta):
    end = end or datetime.now(timezone.utc)
    start = start or end - default
    return start, end


def _require_operational_read(user_id: str) -> None:
    if not data_protection_manager.verify_access(user_id, "operational_data", "read"):
        raise HTTPException(status_code=403, detail=ACCESS_DENIED)


@router.get("")
async def get_secure_data(
    action: Optional[str] = Query(None),
    userId: str = Query("anonymous"),
    classification: Optional[str] = Query(None),
    startDate: Optional[datetime] = Query(None),
    endDate: Optional[datetime] = Query(None),
    filterUserId: Optional[str] = Query(None),
):
    data_protection_manager.log_data_access(userId, "api_access", action or "unknown", True)

    if action == "classifications":
        catalogue = cache.get("secure-data:classifications")
        if catalogue is None:
            catalogue = {
                "classifications": list(DATA_CLASSIFICATIONS),
                "details": {name: c.to_dict() for name, c in DATA_CLASSIFICATIONS.items()},
            }
            cache.set("secure-data:classifications", catalogue, settings.static_cache_ttl_seconds)
        return success_response(catalogue)

    if action == "vulnerability-data":
        return success_response(
            data_protection_manager.mask_sensitive_data(
                SAMPLE_VULNERABILITY, userId, classification or "vulnerability_high"
            )
        )

    if action == "threat-intelligence":
        return success_response(
            data_protection_manager.mask_sensitive_data(
                SAMPLE_THREAT, userId, classification or "threat_intelligence"
            )
        )

    if action == "audit-logs":
        _require_operational_read(userId)
        start, end = _window(startDate, endDate, AUDIT_LOG_WINDOW)
        logs = data_protection_manager.get_audit_logs(start, end, filterUserId)
        return success_response({
            "logs": [entry.to_dict() for entry in logs],
            "summary": {
                "totalLogs": len(logs),
                "period": {"start": start.isoformat(), "end": end.isoformat()},
            },
        })

    if action == "compliance-report":
        _require_operational_read(userId)
        start, end = _window(startDate, endDate, COMPLIANCE_REPORT_WINDOW)
        return success_response(data_protection_manager.generate_compliance_report(start, end))

    raise HTTPException(status_code=400, detail="Invalid action parameter")


@router.post("")
async def secure_data_action(
    request: SecureDataRequest,
    api_key: str = Depends(verify_api_key),
):
    user_id = request.userId
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID required")

    if request.action == "encrypt-data":
        if not request.classification or not request.data:
            raise HTTPException(status_code=400, detail="Classification and data required")
        if not data_protection_manager.verify_access(user_id, request.classification, "write"):
            data_protection_manager.log_data_access(user_id, "encrypt", request.classification, False)
            raise HTTPException(status_code=403, detail=ACCESS_DENIED)

        encrypted = data_protection_manager.encrypt_data(json.dumps(request.data), request.classification)
        data_protection_manager.log_data_access(user_id, "encrypt", request.classification, True)
        return success_response({
            "encrypted": encrypted,
            "classification": request.classification,
            "timestamp": utc_timestamp(),
        })

    if request.action == "decrypt-data":
        if not request.data or not isinstance(request.data, dict):
            raise HTTPException(status_code=400, detail="Encrypted data required")
        classification = request.data.get("classification") or "unknown"
        try:
            decrypted = data_protection_manager.decrypt_data(request.data, user_id)
        except (AccessDeniedError, ValueError) as e:
            data_protection_manager.log_data_access(
                user_id, "decrypt", classification, False, {"error": str(e)}
            )
            raise HTTPException(status_code=403, detail=f"Decryption failed: {e}")
        try:
            payload = json.loads(decrypted)
        except json.JSONDecodeError:
            payload = decrypted
        return success_response({
            "decrypted": payload,
            "classification": classification,
            "timestamp": utc_timestamp(),
        })

    if request.action == "mask-data":
        if not request.classification or not request.data:
            raise HTTPException(status_code=400, detail="Classification and data required")
        masked = data_protection_manager.mask_sensitive_data(request.data, user_id, request.classification)
        data_protection_manager.log_data_access(user_id, "mask", request.classification, True)
        return success_response({
            "masked": masked,
            "classification": request.classification,
            "timestamp": utc_timestamp(),
        })

    if request.action == "verify-access":
        if not request.targetClassification or not request.targetAction:
            raise HTTPException(status_code=400, detail="Target classification and action required")
        has_access = data_protection_manager.verify_access(
            user_id, request.targetClassification, request.targetAction
        )
        data_protection_manager.log_data_access(user_id, "access_check", request.targetClassification, has_access)
        return success_response({
            "hasAccess": has_access,
            "classification": request.targetClassification,
            "action": request.targetAction,
            "timestamp": utc_timestamp(),
        })

    raise HTTPException(status_code=400, detail="Invalid action")
