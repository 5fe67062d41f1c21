from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Actor role used for authorization at the HTTP boundary."""

    MEMBER = "member"
    APPROVER = "approver"


class AbsenceStatus(str, Enum):
    """Absence request lifecycle. APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
