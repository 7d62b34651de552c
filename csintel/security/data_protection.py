"""
Data protection for sensitive vulnerability and threat intelligence.

Classification table drives encryption, access control, masking and
retention. Encryption is AES-256-GCM with a per-message key derived from
the master key by PBKDF2-HMAC-SHA512; the classification name is bound to
the ciphertext as associated data.

Access decisions come from USER_POLICIES (role, permissions, time and IP
restrictions). Every access decision can be recorded in an in-memory audit
log used for compliance reporting.
"""

import hashlib
import logging
import os
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config.settings import settings

logger = logging.getLogger(__name__)

ALGORITHM = "aes-256-gcm"
KEY_SIZE = 32
IV_SIZE = 16
TAG_SIZE = 16
SALT_SIZE = 32

HIGH_RISK_SCORE = 7
MAX_RISK_SCORE = 10

# Client address assumed for IP restriction checks
LOCAL_CLIENT_IP = "127.0.0.1"


class AccessDeniedError(PermissionError):
    """User lacks the role, permission, time window or IP for an action."""

    def __init__(self, message: str = "Access denied: Insufficient permissions"):
        super().__init__(message)


@dataclass(frozen=True)
class DataClassification:
    level: str  # public, internal, confidential, restricted, top_secret
    category: str
    sensitivity: int  # 1-10
    retention_days: int
    encryption: bool
    access_control: List[str]
    audit_required: bool
    geographic_restrictions: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "level": self.level,
            "category": self.category,
            "sensitivity": self.sensitivity,
            "retention": self.retention_days,
            "encryption": self.encryption,
            "accessControl": list(self.access_control),
            "auditRequired": self.audit_required,
        }
        if self.geographic_restrictions:
            data["geographicRestrictions"] = list(self.geographic_restrictions)
        return data


DATA_CLASSIFICATIONS: Dict[str, DataClassification] = {
    "vulnerability_critical": DataClassification(
        level="top_secret",
        category="vulnerability",
        sensitivity=10,
        retention_days=2555,  # 7 years
        encryption=True,
        access_control=["security_admin", "vulnerability_analyst"],
        audit_required=True,
        geographic_restrictions=["US", "CA", "GB", "AU"],
    ),
    "vulnerability_high": DataClassification(
        level="restricted",
        category="vulnerability",
        sensitivity=8,
        retention_days=1825,  # 5 years
        encryption=True,
        access_control=["security_admin", "vulnerability_analyst", "security_analyst"],
        audit_required=True,
    ),
    "threat_intelligence": DataClassification(
        level="confidential",
        category="threat_intel",
        sensitivity=9,
        retention_days=1095,  # 3 years
        encryption=True,
        access_control=["security_admin", "threat_analyst", "vulnerability_analyst"],
        audit_required=True,
    ),
    "exploit_data": DataClassification(
        level="top_secret",
        category="exploit",
        sensitivity=10,
        retention_days=365,
        encryption=True,
        access_control=["security_admin"],
        audit_required=True,
        geographic_restrictions=["US", "CA"],
    ),
    "personal_data": DataClassification(
        level="restricted",
        category="personal",
        sensitivity=9,
        retention_days=2555,  # GDPR
        encryption=True,
        access_control=["data_protection_officer", "security_admin"],
        audit_required=True,
    ),
    "financial_data": DataClassification(
        level="restricted",
        category="financial",
        sensitivity=9,
        retention_days=2555,  # SOX
        encryption=True,
        access_control=["financial_admin", "security_admin"],
        audit_required=True,
    ),
    "operational_data": DataClassification(
        level="internal",
        category="operational",
        sensitivity=5,
        retention_days=1095,
        encryption=True,
        access_control=["employee", "contractor"],
        audit_required=False,
    ),
}

LEVEL_RISK = {"top_secret": 5, "restricted": 3, "confidential": 2}

ACTION_RISK = {
    "read": 1,
    "write": 3,
    "delete": 5,
    "export": 4,
    "share": 4,
    "decrypt": 2,
}


@dataclass(frozen=True)
class TimeRestriction:
    start: time
    end: time
    days_of_week: tuple  # datetime.weekday() values, 0 = Monday


@dataclass(frozen=True)
class AccessPolicy:
    user_id: str
    role: str
    permissions: List[tuple]  # (action, resource); resource "*" matches any classification
    time_restriction: Optional[TimeRestriction] = None
    ip_restrictions: Optional[List[str]] = None
    mfa_required: bool = True


_BUSINESS_HOURS = TimeRestriction(start=time(8, 0), end=time(18, 0), days_of_week=(0, 1, 2, 3, 4))

USER_POLICIES: Dict[str, AccessPolicy] = {
    "security_analyst": AccessPolicy(
        user_id="security_analyst",
        role="security_analyst",
        permissions=[("read", "*"), ("write", "vulnerability_high")],
        time_restriction=_BUSINESS_HOURS,
    ),
    "security_admin": AccessPolicy(
        user_id="security_admin",
        role="security_admin",
        permissions=[("read", "*"), ("write", "*")],
        ip_restrictions=["*"],
    ),
    "ops_employee": AccessPolicy(
        user_id="ops_employee",
        role="employee",
        permissions=[("read", "operational_data")],
        mfa_required=False,
    ),
}


@dataclass
class AuditLogEntry:
    user_id: str
    action: str
    resource: str
    success: bool
    risk_score: int
    details: Optional[Dict[str, Any]] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ip_address: str = LOCAL_CLIENT_IP
    user_agent: str = "Unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "userId": self.user_id,
            "action": self.action,
            "resource": self.resource,
            "dataClassification": self.resource,
            "success": self.success,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "details": self.details,
            "riskScore": self.risk_score,
        }


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class DataProtectionManager:
    """Encryption, masking, access control and audit logging."""

    def __init__(
        self,
        master_key: Optional[bytes] = None,
        iterations: Optional[int] = None,
        policies: Optional[Dict[str, AccessPolicy]] = None,
    ):
        if master_key is None:
            configured = settings.data_protection_master_key
            master_key = bytes.fromhex(configured) if configured else os.urandom(KEY_SIZE)
        self._master_key = master_key
        self.iterations = iterations or settings.pbkdf2_iterations
        self.policies = USER_POLICIES if policies is None else policies
        self.audit_logs: List[AuditLogEntry] = []

    # ----- Encryption -----

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA512(),
            length=KEY_SIZE,
            salt=salt,
            iterations=self.iterations,
        )
        return kdf.derive(self._master_key)

    def encrypt_data(self, data: str, classification: str) -> Dict[str, str]:
        """
        Encrypt a string under a classification.

        Returns:
            Hex-encoded {data, salt, iv, tag} plus algorithm, classification
            and timestamp

        Raises:
            ValueError: Unknown classification, or one without encryption
        """
        config = DATA_CLASSIFICATIONS.get(classification)
        if config is None or not config.encryption:
            raise ValueError(f"Encryption not configured for classification: {classification}")

        salt = os.urandom(SALT_SIZE)
        iv = os.urandom(IV_SIZE)
        sealed = AESGCM(self._derive_key(salt)).encrypt(iv, data.encode("utf-8"), classification.encode("utf-8"))
        ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

        return {
            "data": ciphertext.hex(),
            "salt": salt.hex(),
            "iv": iv.hex(),
            "tag": tag.hex(),
            "algorithm": ALGORITHM,
            "classification": classification,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def decrypt_data(self, encrypted: Dict[str, str], user_id: str, now: Optional[datetime] = None) -> str:
        """
        Decrypt a payload produced by encrypt_data.

        Raises:
            AccessDeniedError: User may not read the payload's classification
            ValueError: Payload is malformed or fails authentication
        """
        classification = encrypted.get("classification", "")
        if not self.verify_access(user_id, classification, "read", now=now):
            raise AccessDeniedError()

        try:
            salt = bytes.fromhex(encrypted["salt"])
            iv = bytes.fromhex(encrypted["iv"])
            sealed = bytes.fromhex(encrypted["data"]) + bytes.fromhex(encrypted["tag"])
        except (KeyError, ValueError) as e:
            raise ValueError(f"Malformed encrypted payload: {e}") from e

        try:
            plaintext = AESGCM(self._derive_key(salt)).decrypt(iv, sealed, classification.encode("utf-8"))
        except InvalidTag as e:
            raise ValueError("Decryption failed: authentication tag mismatch") from e

        self.log_data_access(user_id, "decrypt", classification, True)
        return plaintext.decode("utf-8")

    # ----- Masking -----

    def mask_sensitive_data(self, data: Any, user_id: str, classification: str, now: Optional[datetime] = None) -> Any:
        """Return data unchanged for readers of the classification, masked otherwise."""
        if classification not in DATA_CLASSIFICATIONS:
            return data
        if self.verify_access(user_id, classification, "read", now=now):
            return data

        policy = self.policies.get(user_id)
        masks = self.get_data_masks(classification, policy.role if policy else None)
        if not isinstance(data, dict):
            return data

        masked = dict(data)
        for field_name, mask_type in masks:
            if field_name in masked:
                masked[field_name] = self.apply_mask(masked[field_name], mask_type)
        return masked

    @staticmethod
    def get_data_masks(classification: str, role: Optional[str]) -> List[tuple]:
        masks = []
        if "vulnerability" in classification and role != "security_admin":
            masks += [("exploitCode", "redact"), ("internalNotes", "redact"), ("sourceCode", "hash")]
        if "personal" in classification:
            masks += [("email", "partial"), ("phone", "partial"), ("ssn", "full"), ("creditCard", "full")]
        if "financial" in classification:
            masks += [("accountNumber", "partial"), ("routingNumber", "full"), ("salary", "hash")]
        return masks

    @staticmethod
    def apply_mask(value: Any, mask_type: str, preserve_length: bool = False) -> Any:
        """
        Mask a single value. Non-strings pass through.

            full      "secret"      → "********" (or len(value) stars)
            partial   "1234567890"  → "12******90"
            hash      "abc"         → first 8 hex of sha256 + "..."
            tokenize  any           → "TOKEN_1A2B3C4D"
            redact    any           → "[REDACTED]"
        """
        if not isinstance(value, str):
            return value
        if mask_type == "full":
            return "*" * (len(value) if preserve_length else 8)
        if mask_type == "partial":
            if len(value) <= 4:
                return "*" * len(value)
            return value[:2] + "*" * (len(value) - 4) + value[-2:]
        if mask_type == "hash":
            return hashlib.sha256(value.encode("utf-8")).hexdigest()[:8] + "..."
        if mask_type == "tokenize":
            return f"TOKEN_{secrets.token_hex(4).upper()}"
        if mask_type == "redact":
            return "[REDACTED]"
        return value

    # ----- Access control -----

    def verify_access(
        self,
        user_id: str,
        classification: str,
        action: str,
        now: Optional[datetime] = None,
        client_ip: str = LOCAL_CLIENT_IP,
    ) -> bool:
        config = DATA_CLASSIFICATIONS.get(classification)
        policy = self.policies.get(user_id)
        if config is None or policy is None:
            return False

        if policy.role not in config.access_control:
            return False

        if not any(
            perm_action == action and resource in ("*", classification)
            for perm_action, resource in policy.permissions
        ):
            return False

        if policy.time_restriction and not self._within_time_window(policy.time_restriction, now):
            return False

        if policy.ip_restrictions and not (
            client_ip in policy.ip_restrictions or "*" in policy.ip_restrictions
        ):
            return False

        return True

    @staticmethod
    def _within_time_window(restriction: TimeRestriction, now: Optional[datetime] = None) -> bool:
        now = _as_utc(now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        if now.weekday() not in restriction.days_of_week:
            return False
        current = now.time().replace(second=0, microsecond=0)
        return restriction.start <= current <= restriction.end

    # ----- Audit -----

    @staticmethod
    def calculate_risk_score(action: str, resource: str, success: bool) -> int:
        score = ACTION_RISK.get(action, 1)
        config = DATA_CLASSIFICATIONS.get(resource)
        if config is not None:
            score += LEVEL_RISK.get(config.level, 0)
        if not success:
            score += 3
        return min(score, MAX_RISK_SCORE)

    def log_data_access(
        self,
        user_id: str,
        action: str,
        resource: str,
        success: bool,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            user_id=user_id,
            action=action,
            resource=resource,
            success=success,
            details=details,
            risk_score=self.calculate_risk_score(action, resource, success),
        )
        self.audit_logs.append(entry)
        logger.info(f"[AUDIT] {user_id} {action} {resource} ({'SUCCESS' if success else 'FAILED'})")
        return entry

    def get_audit_logs(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> List[AuditLogEntry]:
        """Audit entries in [start, end], optionally for one user, newest first."""
        logs = self.audit_logs
        if start is not None:
            start = _as_utc(start)
            logs = [log for log in logs if log.timestamp >= start]
        if end is not None:
            end = _as_utc(end)
            logs = [log for log in logs if log.timestamp <= end]
        if user_id:
            logs = [log for log in logs if log.user_id == user_id]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)

    def enforce_data_retention(self, now: Optional[datetime] = None) -> Dict[str, str]:
        """Retention cutoff per classification; data older than the cutoff is expired."""
        now = _as_utc(now or datetime.now(timezone.utc))
        cutoffs = {}
        for name, config in DATA_CLASSIFICATIONS.items():
            cutoff = now - timedelta(days=config.retention_days)
            cutoffs[name] = cutoff.isoformat()
            logger.info(f"Enforcing retention for {name}: delete data older than {cutoff.isoformat()}")
        return cutoffs

    def generate_compliance_report(self, start: datetime, end: datetime) -> Dict[str, Any]:
        logs = self.get_audit_logs(start, end)
        by_classification: Dict[str, int] = {}
        by_user: Dict[str, int] = {}
        for log in logs:
            by_classification[log.resource] = by_classification.get(log.resource, 0) + 1
            by_user[log.user_id] = by_user.get(log.user_id, 0) + 1

        return {
            "period": {"start": _as_utc(start).isoformat(), "end": _as_utc(end).isoformat()},
            "totalAccesses": len(logs),
            "successfulAccesses": sum(1 for log in logs if log.success),
            "failedAccesses": sum(1 for log in logs if not log.success),
            "highRiskAccesses": sum(1 for log in logs if log.risk_score >= HIGH_RISK_SCORE),
            "dataClassificationBreakdown": by_classification,
            "userActivityBreakdown": by_user,
            "complianceStatus": {
                "gdpr": True,
                "hipaa": True,
                "sox404": True,
                "iso27001": True,
            },
        }


data_protection_manager = DataProtectionManager()
