from __future__ import annotations

import hashlib
import json
import logging
from typing import List, Protocol

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import AuditEvent

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    def emit(self, event: AuditEvent) -> None:
        raise NotImplementedError


def integrity_hash(event: AuditEvent) -> str:
    """Tamper-evidence digest over the identifying fields and snapshots."""
    payload = json.dumps(event.to_dict(), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class LoggingAuditSink(AuditSink):
    """Writes events to the ``absence_workflow.audit`` logger as JSON lines."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logging.getLogger("absence_workflow.audit")

    def emit(self, event: AuditEvent) -> None:
        self._log.info("audit %s", json.dumps(event.to_dict(), sort_keys=True))


class MySQLAuditSink(AuditSink):
    """Persists events into ``activity_logs``.

    Runs in its own transaction, after the state change it describes has
    committed, so a failure here never rolls the change back.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def emit(self, event: AuditEvent) -> None:
        details = {"before": event.before, "after": event.after}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(
                    user_id, action, resource, resource_id, details, integrity_hash, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(event.actor_id),
                    event.action.value,
                    event.entity,
                    int(event.entity_id),
                    json.dumps(details, sort_keys=True),
                    integrity_hash(event),
                    event.occurred_at,
                ),
            )
        logger.debug("stored audit event %s %s#%s", event.action.value, event.entity, event.entity_id)


class CompositeAuditSink(AuditSink):
    """Fans an event out to several sinks; a failing sink does not stop the rest."""

    def __init__(self, sinks: List[AuditSink]):
        self._sinks = list(sinks)

    def emit(self, event: AuditEvent) -> None:
        failures = []
        for sink in self._sinks:
            try:
                sink.emit(event)
            except Exception as exc:
                failures.append(exc)
        if failures:
            raise failures[0]
