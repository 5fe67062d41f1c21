from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AbsenceStatus


@dataclass(frozen=True)
class Absence:
    """An absence reported by a group member for one scheduled session.

    ``decided_by`` and ``decided_at`` are set exactly when ``status`` is
    terminal; they only change through :meth:`decided`.
    """

    absence_id: int
    group_id: int
    session_id: int
    requested_by: int
    reason: str
    status: AbsenceStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == AbsenceStatus.PENDING

    def decided(
        self,
        *,
        status: AbsenceStatus,
        decided_by: int,
        decided_at: datetime,
        decision_note: Optional[str] = None,
    ) -> "Absence":
        return replace(
            self,
            status=status,
            decided_by=int(decided_by),
            decided_at=decided_at,
            decision_note=decision_note,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "absence_id": self.absence_id,
            "group_id": self.group_id,
            "session_id": self.session_id,
            "requested_by": self.requested_by,
            "reason": self.reason,
            "status": self.status.value,
            "decided_by": self.decided_by,
            "decided_at": isoformat_or_none(self.decided_at),
            "decision_note": self.decision_note,
            "created_at": isoformat_or_none(self.created_at),
        }
