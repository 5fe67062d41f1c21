from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import require_positive_int
from ..core.exceptions import ValidationError


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


@dataclass(frozen=True)
class SubmitAbsenceRequest:
    group_id: int
    session_id: int
    reason: str = ""

    @classmethod
    def from_json(cls, payload: Any) -> "SubmitAbsenceRequest":
        data = _require_mapping(payload)
        return cls(
            group_id=require_positive_int(data.get("group_id"), "group_id"),
            session_id=require_positive_int(data.get("session_id"), "session_id"),
            reason=_optional_str(data, "reason") or "",
        )


@dataclass(frozen=True)
class DecideAbsenceRequest:
    approve: bool
    note: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "DecideAbsenceRequest":
        data = _require_mapping(payload)
        approve = data.get("approve")
        if not isinstance(approve, bool):
            raise ValidationError("approve must be true or false")
        return cls(approve=approve, note=_optional_str(data, "note"))
