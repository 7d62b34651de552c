"""
Tests for classification-driven encryption, masking, access control and audit.

Run with: pytest tests/test_data_protection.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from csintel.security import DATA_CLASSIFICATIONS, AccessDeniedError, DataProtectionManager

# Monday 10:00 UTC (inside business hours) and Saturday 10:00 UTC (outside)
WEEKDAY_MORNING = datetime(2025, 6, 2, 10, 0, tzinfo=timezone.utc)
SATURDAY_MORNING = datetime(2025, 6, 7, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def manager():
    # Low iteration count keeps key derivation fast in tests
    return DataProtectionManager(master_key=b"k" * 32, iterations=1000)


class TestEncryption:

    def test_round_trip_for_authorized_reader(self, manager):
        encrypted = manager.encrypt_data('{"cve": "CVE-2024-0001"}', "vulnerability_high")

        assert encrypted["algorithm"] == "aes-256-gcm"
        assert encrypted["classification"] == "vulnerability_high"
        assert len(bytes.fromhex(encrypted["salt"])) == 32
        assert len(bytes.fromhex(encrypted["iv"])) == 16
        assert len(bytes.fromhex(encrypted["tag"])) == 16

        assert manager.decrypt_data(encrypted, "security_admin") == '{"cve": "CVE-2024-0001"}'

    def test_fresh_salt_per_message(self, manager):
        a = manager.encrypt_data("same", "threat_intelligence")
        b = manager.encrypt_data("same", "threat_intelligence")
        assert a["salt"] != b["salt"]
        assert a["data"] != b["data"]

    def test_unknown_classification_rejected(self, manager):
        with pytest.raises(ValueError, match="Encryption not configured"):
            manager.encrypt_data("x", "top_secret_stuff")

    def test_decrypt_requires_read_access(self, manager):
        encrypted = manager.encrypt_data("secret", "exploit_data")
        with pytest.raises(AccessDeniedError):
            manager.decrypt_data(encrypted, "ops_employee")

    def test_tampered_classification_fails_authentication(self, manager):
        encrypted = manager.encrypt_data("secret", "vulnerability_high")
        encrypted["classification"] = "vulnerability_critical"
        with pytest.raises(ValueError, match="authentication"):
            manager.decrypt_data(encrypted, "security_admin")

    def test_malformed_payload(self, manager):
        with pytest.raises(ValueError, match="Malformed"):
            manager.decrypt_data({"classification": "vulnerability_high", "data": "zz"}, "security_admin")

    def test_successful_decrypt_is_audited(self, manager):
        encrypted = manager.encrypt_data("secret", "vulnerability_high")
        manager.decrypt_data(encrypted, "security_admin")
        entry = manager.audit_logs[-1]
        assert (entry.user_id, entry.action, entry.success) == ("security_admin", "decrypt", True)


class TestAccessControl:

    def test_admin_has_full_access(self, manager):
        assert manager.verify_access("security_admin", "exploit_data", "write")

    def test_unknown_user_denied(self, manager):
        assert not manager.verify_access("mallory", "operational_data", "read")

    def test_unknown_classification_denied(self, manager):
        assert not manager.verify_access("security_admin", "nonexistent", "read")

    def test_role_must_be_in_access_list(self, manager):
        # security_analyst is not an exploit_data role despite read:* permission
        assert not manager.verify_access("security_analyst", "exploit_data", "read", now=WEEKDAY_MORNING)

    def test_permission_must_cover_action(self, manager):
        assert manager.verify_access("security_analyst", "vulnerability_high", "write", now=WEEKDAY_MORNING)
        assert not manager.verify_access("ops_employee", "operational_data", "write")

    def test_business_hours_restriction(self, manager):
        assert manager.verify_access("security_analyst", "vulnerability_high", "read", now=WEEKDAY_MORNING)
        assert not manager.verify_access("security_analyst", "vulnerability_high", "read", now=SATURDAY_MORNING)
        late = WEEKDAY_MORNING.replace(hour=19)
        assert not manager.verify_access("security_analyst", "vulnerability_high", "read", now=late)


class TestMasking:

    def test_authorized_reader_sees_raw_data(self, manager):
        data = {"exploitCode": "int main()", "cve": "CVE-1"}
        assert manager.mask_sensitive_data(data, "security_admin", "vulnerability_high") == data

    def test_vulnerability_fields_masked(self, manager):
        data = {"exploitCode": "int main()", "internalNotes": "secret", "sourceCode": "x.dll", "cve": "CVE-1"}
        masked = manager.mask_sensitive_data(data, "anonymous", "vulnerability_high")
        assert masked["exploitCode"] == "[REDACTED]"
        assert masked["internalNotes"] == "[REDACTED]"
        assert masked["sourceCode"].endswith("...")
        assert len(masked["sourceCode"]) == 11
        assert masked["cve"] == "CVE-1"
        # Original is untouched
        assert data["exploitCode"] == "int main()"

    def test_personal_and_financial_fields(self, manager):
        personal = manager.mask_sensitive_data(
            {"email": "jane@corp.io", "ssn": "123-45-6789"}, "anonymous", "personal_data"
        )
        assert personal["email"] == "ja********io"
        assert personal["ssn"] == "********"

        financial = manager.mask_sensitive_data(
            {"accountNumber": "987654321", "routingNumber": "021000021"}, "anonymous", "financial_data"
        )
        assert financial["accountNumber"] == "98*****21"
        assert financial["routingNumber"] == "********"

    def test_unknown_classification_passes_through(self, manager):
        data = {"exploitCode": "x"}
        assert manager.mask_sensitive_data(data, "anonymous", "unclassified") == data

    @pytest.mark.parametrize("mask_type,value,expected", [
        ("full", "secret", "********"),
        ("partial", "abcd", "****"),
        ("partial", "abcdef", "ab**ef"),
        ("redact", "anything", "[REDACTED]"),
        ("full", 42, 42),
    ])
    def test_apply_mask(self, mask_type, value, expected):
        assert DataProtectionManager.apply_mask(value, mask_type) == expected

    def test_full_mask_can_preserve_length(self):
        assert DataProtectionManager.apply_mask("abc", "full", preserve_length=True) == "***"

    def test_tokenize(self):
        token = DataProtectionManager.apply_mask("4111111111111111", "tokenize")
        assert token.startswith("TOKEN_")
        assert len(token) == 14


class TestAuditAndCompliance:

    def test_risk_score(self, manager):
        # write (3) + top_secret (5) + failure (3), capped at 10
        assert manager.calculate_risk_score("write", "exploit_data", False) == 10
        assert manager.calculate_risk_score("read", "threat_intelligence", True) == 3
        assert manager.calculate_risk_score("api_access", "classifications", True) == 1

    def test_audit_log_filters_newest_first(self, manager):
        first = manager.log_data_access("alice", "read", "threat_intelligence", True)
        second = manager.log_data_access("bob", "write", "vulnerability_high", False)
        second.timestamp = first.timestamp + timedelta(seconds=1)

        logs = manager.get_audit_logs()
        assert [log.user_id for log in logs] == ["bob", "alice"]
        assert [log.user_id for log in manager.get_audit_logs(user_id="alice")] == ["alice"]
        assert manager.get_audit_logs(end=first.timestamp - timedelta(seconds=1)) == []

    def test_audit_entry_serialization(self, manager):
        entry = manager.log_data_access("alice", "mask", "personal_data", True, {"fields": 2})
        data = entry.to_dict()
        assert data["userId"] == "alice"
        assert data["dataClassification"] == "personal_data"
        assert data["ipAddress"] == "127.0.0.1"
        assert data["details"] == {"fields": 2}

    def test_compliance_report(self, manager):
        manager.log_data_access("alice", "read", "threat_intelligence", True)
        manager.log_data_access("bob", "write", "exploit_data", False)
        now = datetime.now(timezone.utc)

        report = manager.generate_compliance_report(now - timedelta(days=1), now + timedelta(seconds=1))
        assert report["totalAccesses"] == 2
        assert report["successfulAccesses"] == 1
        assert report["failedAccesses"] == 1
        assert report["highRiskAccesses"] == 1
        assert report["dataClassificationBreakdown"] == {"threat_intelligence": 1, "exploit_data": 1}
        assert report["userActivityBreakdown"] == {"alice": 1, "bob": 1}
        assert all(report["complianceStatus"].values())

    def test_retention_cutoffs(self, manager):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        cutoffs = manager.enforce_data_retention(now)
        assert set(cutoffs) == set(DATA_CLASSIFICATIONS)
        assert cutoffs["exploit_data"] == (now - timedelta(days=365)).isoformat()
