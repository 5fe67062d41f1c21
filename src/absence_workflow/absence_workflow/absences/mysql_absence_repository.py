from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AbsenceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Absence
from .repository import AbsenceRepository

_COLUMNS = """
    absence_id, group_id, session_id, requested_by, reason, status,
    decided_by, decided_at, decision_note, created_at
"""


def _row_to_absence(r: dict) -> Absence:
    decided_by = r.get("decided_by")
    return Absence(
        absence_id=int(r["absence_id"]),
        group_id=int(r["group_id"]),
        session_id=int(r["session_id"]),
        requested_by=int(r["requested_by"]),
        reason=r.get("reason") or "",
        status=AbsenceStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=int(decided_by) if decided_by is not None else None,
        decided_at=r.get("decided_at"),
        decision_note=r.get("decision_note"),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        group_id: int,
        session_id: int,
        requested_by: int,
        reason: str,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absences(group_id, session_id, requested_by, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(group_id),
                    int(session_id),
                    int(requested_by),
                    reason,
                    AbsenceStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, absence_id: int) -> Optional[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absences WHERE absence_id=%s",
                (int(absence_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _row_to_absence(r)

    def decide(
        self,
        *,
        absence_id: int,
        status: AbsenceStatus,
        decided_by: int,
        decided_at: datetime,
        decision_note: Optional[str] = None,
        consume_quota: bool = False,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # The status predicate makes this the only serialization point
            # between concurrent deciders: one UPDATE matches, the rest see 0 rows.
            cur.execute(
                """
                UPDATE absences
                SET status=%s, decided_by=%s, decided_at=%s, decision_note=%s
                WHERE absence_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    decision_note,
                    int(absence_id),
                    AbsenceStatus.PENDING.value,
                ),
            )
            if cur.rowcount != 1:
                return False

            if consume_quota:
                cur.execute(
                    """
                    UPDATE group_leave_quotas q
                    JOIN absences a ON a.group_id = q.group_id
                    SET q.used_quota = q.used_quota + 1, q.last_used_at = %s
                    WHERE a.absence_id = %s
                    """,
                    (decided_at, int(absence_id)),
                )
            return True

    def list_absences(
        self,
        *,
        group_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[Absence]:
        clauses = ["1=1"]
        params: list[object] = []

        if group_id is not None:
            clauses.append("group_id=%s")
            params.append(int(group_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM absences
                WHERE {where}
                ORDER BY created_at DESC, absence_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_absence(r) for r in fetchall(cur)]
