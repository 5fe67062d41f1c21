from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..audit.model import AuditEvent
from ..audit.sink import AuditSink
from ..common.datetime_utils import now_local
from ..common.validators import require_max_length, require_positive_int
from ..core.constants import (
    ABSENCE_ENTITY,
    DEFAULT_LIST_LIMIT,
    DEFAULT_MAX_NOTE_LENGTH,
    DEFAULT_MAX_REASON_LENGTH,
    MAX_LIST_LIMIT,
)
from ..core.enums import AbsenceStatus, AuditAction
from ..core.exceptions import (
    AlreadyDecidedError,
    AuthorizationError,
    InvalidRelationError,
    NotFoundError,
    QuotaExhaustedError,
    ValidationError,
)
from ..groups.repository import GroupRepository
from ..users.actor import Actor
from .model import Absence
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowPolicy:
    max_reason_length: int = DEFAULT_MAX_REASON_LENGTH
    max_note_length: int = DEFAULT_MAX_NOTE_LENGTH
    allow_self_decision: bool = False
    enforce_leave_quota: bool = True


@dataclass(frozen=True)
class AbsenceOutcome:
    """Result of a state-changing call: the stored record and the event it produced."""

    absence: Absence
    event: AuditEvent


class AbsenceService:
    """Submission, decision and listing of absence requests.

    Holds no per-request state: the acting user is passed into every call and
    the store's conditional update is the only guard against racing deciders.
    """

    def __init__(
        self,
        absences: AbsenceRepository,
        groups: GroupRepository,
        audit: AuditSink,
        *,
        policy: Optional[WorkflowPolicy] = None,
        clock: Callable = now_local,
    ):
        self._absences = absences
        self._groups = groups
        self._audit = audit
        self._policy = policy or WorkflowPolicy()
        self._clock = clock

    def _emit(self, event: AuditEvent) -> None:
        try:
            self._audit.emit(event)
        except Exception:
            logger.warning(
                "audit delivery failed for %s %s#%s",
                event.action.value,
                event.entity,
                event.entity_id,
                exc_info=True,
            )

    @staticmethod
    def _require_actor(actor: Actor) -> int:
        return require_positive_int(getattr(actor, "actor_id", None), "Actor id")

    def create_absence(
        self,
        *,
        actor: Actor,
        group_id: int,
        session_id: int,
        reason: Optional[str],
    ) -> AbsenceOutcome:
        actor_id = self._require_actor(actor)
        group_id = require_positive_int(group_id, "Group id")
        session_id = require_positive_int(session_id, "Session id")
        reason = require_max_length(reason, "Reason", self._policy.max_reason_length)

        if not self._groups.get_group(group_id=group_id):
            raise NotFoundError(f"Group {group_id} not found")
        session = self._groups.get_session(session_id=session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")
        if session.group_id != group_id:
            raise InvalidRelationError(f"Session {session_id} does not belong to group {group_id}")

        if self._policy.enforce_leave_quota:
            quota = self._groups.get_leave_quota(group_id=group_id)
            if quota and quota.is_exhausted:
                raise QuotaExhaustedError(f"Group {group_id} has used all {quota.total_quota} leave days")

        created_at = self._clock()
        absence_id = self._absences.create(
            group_id=group_id,
            session_id=session_id,
            requested_by=actor_id,
            reason=reason,
            created_at=created_at,
        )
        absence = Absence(
            absence_id=int(absence_id),
            group_id=group_id,
            session_id=session_id,
            requested_by=actor_id,
            reason=reason,
            status=AbsenceStatus.PENDING,
            created_at=created_at,
        )

        event = AuditEvent(
            action=AuditAction.CREATE,
            entity=ABSENCE_ENTITY,
            entity_id=absence.absence_id,
            actor_id=actor_id,
            occurred_at=created_at,
            after=absence.to_dict(),
        )
        self._emit(event)
        return AbsenceOutcome(absence=absence, event=event)

    def decide_absence(
        self,
        *,
        actor: Actor,
        absence_id: int,
        approve: bool,
        note: Optional[str] = None,
    ) -> AbsenceOutcome:
        """Approve or reject a pending absence.

        Role checks happen at the boundary before this is called. Exactly one
        of several concurrent calls for the same id succeeds; the others get
        :class:`AlreadyDecidedError`.
        """
        actor_id = self._require_actor(actor)
        absence_id = require_positive_int(absence_id, "Absence id")
        if not isinstance(approve, bool):
            raise ValidationError("approve must be true or false")
        note = require_max_length(note, "Note", self._policy.max_note_length) or None

        before = self._absences.get(absence_id=absence_id)
        if not before:
            raise NotFoundError(f"Absence {absence_id} not found")
        if not before.is_pending:
            raise AlreadyDecidedError(f"Absence {absence_id} was already {before.status.value.lower()}")
        if not self._policy.allow_self_decision and before.requested_by == actor_id:
            raise AuthorizationError("You cannot decide your own absence request")

        status = AbsenceStatus.APPROVED if approve else AbsenceStatus.REJECTED
        decided_at = self._clock()
        changed = self._absences.decide(
            absence_id=absence_id,
            status=status,
            decided_by=actor_id,
            decided_at=decided_at,
            decision_note=note,
            consume_quota=approve and self._policy.enforce_leave_quota,
        )
        if not changed:
            # Rows are never deleted, so a miss here means another decider won.
            raise AlreadyDecidedError(f"Absence {absence_id} was already decided")

        after = before.decided(
            status=status,
            decided_by=actor_id,
            decided_at=decided_at,
            decision_note=note,
        )
        event = AuditEvent(
            action=AuditAction.UPDATE,
            entity=ABSENCE_ENTITY,
            entity_id=absence_id,
            actor_id=actor_id,
            occurred_at=decided_at,
            before=before.to_dict(),
            after=after.to_dict(),
        )
        self._emit(event)
        return AbsenceOutcome(absence=after, event=event)

    def get_absence(self, *, absence_id: int) -> Absence:
        absence_id = require_positive_int(absence_id, "Absence id")
        absence = self._absences.get(absence_id=absence_id)
        if not absence:
            raise NotFoundError(f"Absence {absence_id} not found")
        return absence

    @staticmethod
    def _clamp_limit(limit: Optional[int]) -> int:
        if limit is None:
            return DEFAULT_LIST_LIMIT
        return min(require_positive_int(limit, "limit"), MAX_LIST_LIMIT)

    def list_absences(self, *, limit: Optional[int] = None) -> Sequence[Absence]:
        return self._absences.list_absences(limit=self._clamp_limit(limit))

    def list_absences_by_group(self, *, group_id, limit: Optional[int] = None) -> Sequence[Absence]:
        if group_id is None:
            raise ValidationError("Group id is required")
        group_id = require_positive_int(group_id, "Group id")
        return self._absences.list_absences(group_id=group_id, limit=self._clamp_limit(limit))
