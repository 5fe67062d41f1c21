from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import mysql.connector
import pytest

from absence_workflow.absences.model import Absence
from absence_workflow.absences.service import AbsenceService, WorkflowPolicy
from absence_workflow.core.enums import AbsenceStatus, Role
from absence_workflow.groups.model import Group, LeaveQuota, Session
from absence_workflow.users.actor import Actor
from absence_workflow.users.model import User


class InMemoryGroups:
    def __init__(self):
        self.groups: dict[int, Group] = {}
        self.sessions: dict[int, Session] = {}
        self.quotas: dict[int, LeaveQuota] = {}

    def add_group(self, group_id: int, name: Optional[str] = None) -> Group:
        group = Group(group_id=group_id, group_name=name or f"Group {group_id}")
        self.groups[group_id] = group
        return group

    def add_session(self, session_id: int, group_id: int) -> Session:
        session = Session(session_id=session_id, group_id=group_id, session_date=date(2026, 11, 2))
        self.sessions[session_id] = session
        return session

    def set_quota(self, group_id: int, total: int, used: int = 0) -> None:
        self.quotas[group_id] = LeaveQuota(group_id=group_id, total_quota=total, used_quota=used)

    def charge_quota(self, group_id: int, at: datetime) -> None:
        quota = self.quotas.get(group_id)
        if quota:
            self.quotas[group_id] = replace(quota, used_quota=quota.used_quota + 1, last_used_at=at)

    def get_group(self, *, group_id):
        return self.groups.get(int(group_id))

    def get_session(self, *, session_id):
        return self.sessions.get(int(session_id))

    def get_leave_quota(self, *, group_id):
        return self.quotas.get(int(group_id))


class InMemoryAbsences:
    """Thread-safe stand-in for the absences table.

    ``decide`` mirrors ``UPDATE ... WHERE absence_id=? AND status='PENDING'``:
    the check and the write happen under one lock.
    """

    def __init__(self, groups: InMemoryGroups, *, start_id: int = 1):
        self._groups = groups
        self._lock = threading.Lock()
        self._rows: dict[int, Absence] = {}
        self._next_id = start_id
        self.decide_calls = 0

    def create(self, *, group_id, session_id, requested_by, reason, created_at):
        with self._lock:
            absence_id = self._next_id
            self._next_id += 1
            self._rows[absence_id] = Absence(
                absence_id=absence_id,
                group_id=int(group_id),
                session_id=int(session_id),
                requested_by=int(requested_by),
                reason=reason,
                status=AbsenceStatus.PENDING,
                created_at=created_at,
            )
            return absence_id

    def get(self, *, absence_id):
        with self._lock:
            return self._rows.get(int(absence_id))

    def decide(self, *, absence_id, status, decided_by, decided_at, decision_note=None, consume_quota=False):
        with self._lock:
            self.decide_calls += 1
            row = self._rows.get(int(absence_id))
            if not row or row.status != AbsenceStatus.PENDING:
                return False
            self._rows[int(absence_id)] = row.decided(
                status=status,
                decided_by=decided_by,
                decided_at=decided_at,
                decision_note=decision_note,
            )
            if consume_quota:
                self._groups.charge_quota(row.group_id, decided_at)
            return True

    def list_absences(self, *, group_id=None, limit=200):
        with self._lock:
            rows = [r for r in self._rows.values() if group_id is None or r.group_id == int(group_id)]
        rows.sort(key=lambda r: (r.created_at, r.absence_id), reverse=True)
        return rows[:limit]


class RecordingAuditSink:
    def __init__(self):
        self.events = []

    def emit(self, event) -> None:
        self.events.append(event)


class FailingAuditSink:
    def __init__(self):
        self.attempts = 0

    def emit(self, event) -> None:
        self.attempts += 1
        raise RuntimeError("audit store down")


class InMemoryUsers:
    def __init__(self, *users: User):
        self.users = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))


class TickingClock:
    """Each call is one minute after the previous one."""

    def __init__(self, start: datetime = datetime(2026, 10, 1, 9, 0, 0)):
        self._now = start
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            current = self._now
            self._now += timedelta(minutes=1)
            return current


@pytest.fixture
def groups() -> InMemoryGroups:
    repo = InMemoryGroups()
    repo.add_group(7, "Conversation A1")
    repo.add_group(8, "IELTS Prep")
    repo.add_session(42, 7)
    repo.add_session(43, 7)
    repo.add_session(50, 8)
    return repo


@pytest.fixture
def absences(groups) -> InMemoryAbsences:
    return InMemoryAbsences(groups, start_id=101)


@pytest.fixture
def audit() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def make_service(absences, groups, audit, clock):
    def _make(policy: Optional[WorkflowPolicy] = None, sink=None, repo=None) -> AbsenceService:
        return AbsenceService(
            repo or absences,
            groups,
            sink if sink is not None else audit,
            policy=policy,
            clock=clock,
        )

    return _make


@pytest.fixture
def service(make_service) -> AbsenceService:
    return make_service()


@pytest.fixture
def member() -> Actor:
    return Actor(actor_id=3, role=Role.MEMBER)


@pytest.fixture
def approver() -> Actor:
    return Actor(actor_id=9, role=Role.APPROVER)


@pytest.fixture
def other_approver() -> Actor:
    return Actor(actor_id=10, role=Role.APPROVER)


@pytest.fixture
def failing_audit() -> FailingAuditSink:
    return FailingAuditSink()


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        User(user_id=3, full_name="Mali Student", username="mali", role=Role.MEMBER),
        User(user_id=9, full_name="Anan Admin", username="anan", role=Role.APPROVER),
        User(user_id=10, full_name="Kanya Admin", username="kanya", role=Role.APPROVER),
        User(user_id=11, full_name="Former Staff", username="former", role=Role.APPROVER, is_active=False),
    )


class FakeCursor:
    """Records statements; answers with canned rows/rowcounts in order."""

    def __init__(self, *, rows=None, rowcounts=None, lastrowid=1, fail_on=None):
        self.executed = []
        self._rows = list(rows or [])
        self._rowcounts = list(rowcounts or [])
        self.rowcount = 0
        self.lastrowid = lastrowid
        self._fail_on = fail_on
        self.closed = False

    def execute(self, sql, params=None):
        if self._fail_on and self._fail_on in sql:
            raise mysql.connector.Error("boom")
        self.executed.append((" ".join(sql.split()), params))
        self.rowcount = self._rowcounts.pop(0) if self._rowcounts else 1

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, cursor: FakeCursor):
        self.cursor = cursor
        self.connections = []

    def connect(self):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


@pytest.fixture
def fake_db():
    def _make(**kwargs) -> FakeConnectionFactory:
        return FakeConnectionFactory(FakeCursor(**kwargs))

    return _make
