from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Group, LeaveQuota, Session
from .repository import GroupRepository


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_group(self, *, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT group_id, group_name, status FROM `groups` WHERE group_id=%s",
                (int(group_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Group(group_id=int(r["group_id"]), group_name=r["group_name"], status=r["status"])

    def get_session(self, *, session_id: int) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, group_id, session_date, session_number, status
                FROM schedule_sessions
                WHERE session_id=%s
                """,
                (int(session_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Session(
                session_id=int(r["session_id"]),
                group_id=int(r["group_id"]),
                session_date=r.get("session_date"),
                session_number=int(r.get("session_number") or 1),
                status=r.get("status") or "scheduled",
            )

    def get_leave_quota(self, *, group_id: int) -> Optional[LeaveQuota]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT group_id, total_quota, used_quota, last_used_at
                FROM group_leave_quotas
                WHERE group_id=%s
                """,
                (int(group_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveQuota(
                group_id=int(r["group_id"]),
                total_quota=int(r["total_quota"]),
                used_quota=int(r["used_quota"]),
                last_used_at=r.get("last_used_at"),
            )
