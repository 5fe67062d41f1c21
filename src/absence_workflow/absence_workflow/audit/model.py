from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEvent:
    """Immutable record of one create or state change, and who caused it."""

    action: AuditAction
    entity: str
    entity_id: int
    actor_id: int
    occurred_at: datetime
    after: Dict[str, Any]
    before: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "actor_id": self.actor_id,
            "occurred_at": isoformat_or_none(self.occurred_at),
            "before": self.before,
            "after": self.after,
        }
