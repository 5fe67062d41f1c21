from __future__ import annotations

import pytest

from absence_workflow.absences.schemas import DecideAbsenceRequest, SubmitAbsenceRequest
from absence_workflow.core.exceptions import ValidationError


def test_submit_request_accepts_numeric_strings_and_missing_reason():
    req = SubmitAbsenceRequest.from_json({"group_id": "7", "session_id": 42})

    assert req == SubmitAbsenceRequest(group_id=7, session_id=42, reason="")


@pytest.mark.parametrize(
    "payload",
    [None, "x", {"group_id": 7}, {"group_id": 7.5, "session_id": 1}, {"group_id": 7, "session_id": 1, "reason": []}],
)
def test_submit_request_rejects_bad_payloads(payload):
    with pytest.raises(ValidationError):
        SubmitAbsenceRequest.from_json(payload)


def test_decide_request_requires_real_boolean():
    assert DecideAbsenceRequest.from_json({"approve": False}) == DecideAbsenceRequest(approve=False)
    assert DecideAbsenceRequest.from_json({"approve": True, "note": "ok"}).note == "ok"

    for payload in ({}, {"approve": "true"}, {"approve": 0}, {"approve": None}):
        with pytest.raises(ValidationError):
            DecideAbsenceRequest.from_json(payload)
