from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Group:
    group_id: int
    group_name: str
    status: str = "active"


@dataclass(frozen=True)
class Session:
    """A scheduled occurrence of a group. Read-only for the absence workflow."""

    session_id: int
    group_id: int
    session_date: Optional[date] = None
    session_number: int = 1
    status: str = "scheduled"


@dataclass(frozen=True)
class LeaveQuota:
    group_id: int
    total_quota: int
    used_quota: int = 0
    last_used_at: Optional[datetime] = None

    @property
    def is_exhausted(self) -> bool:
        return self.used_quota >= self.total_quota
