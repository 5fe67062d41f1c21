from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus
from .model import Absence


class AbsenceRepository(Protocol):
    def create(
        self,
        *,
        group_id: int,
        session_id: int,
        requested_by: int,
        reason: str,
        created_at: datetime,
    ) -> int:
        """Insert a PENDING absence and return its store-assigned id."""

        raise NotImplementedError

    def get(self, *, absence_id: int) -> Optional[Absence]:
        raise NotImplementedError

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
        """Move a PENDING absence to ``status`` in one conditional write.

        Returns False when no PENDING row with ``absence_id`` existed at write
        time. With ``consume_quota`` the group's leave quota is charged in the
        same transaction.
        """

        raise NotImplementedError

    def list_absences(
        self,
        *,
        group_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[Absence]:
        """Newest first (created_at DESC, absence_id DESC)."""

        raise NotImplementedError
