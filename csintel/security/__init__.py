"""Classification-driven encryption, masking, access control and auditing."""

from .data_protection import (
    DATA_CLASSIFICATIONS,
    USER_POLICIES,
    AccessDeniedError,
    DataProtectionManager,
    data_protection_manager,
)

__all__ = [
    "DATA_CLASSIFICATIONS",
    "USER_POLICIES",
    "AccessDeniedError",
    "DataProtectionManager",
    "data_protection_manager",
]
