from __future__ import annotations

from typing import Optional, Protocol

from .model import Group, LeaveQuota, Session


class GroupRepository(Protocol):
    """Read-only access to groups, their sessions and leave quotas."""

    def get_group(self, *, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def get_session(self, *, session_id: int) -> Optional[Session]:
        raise NotImplementedError

    def get_leave_quota(self, *, group_id: int) -> Optional[LeaveQuota]:
        raise NotImplementedError
