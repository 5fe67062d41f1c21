from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.repository import AbsenceRepository
from .absences.service import AbsenceService, WorkflowPolicy
from .audit.sink import AuditSink, CompositeAuditSink, LoggingAuditSink, MySQLAuditSink
from .database.connection import DBConfig, DatabaseConnection
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .users.actor import ActorResolver
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    groups_repo: GroupRepository
    absences_repo: AbsenceRepository
    audit_sink: AuditSink

    actor_resolver: ActorResolver
    absence_service: AbsenceService


def build_audit_sink(kind: str, conn: DatabaseConnection) -> AuditSink:
    kind = (kind or "mysql").strip().lower()
    if kind == "log":
        return LoggingAuditSink()
    if kind == "mysql":
        return CompositeAuditSink([MySQLAuditSink(conn), LoggingAuditSink()])
    raise ValueError(f"Unsupported AUDIT_SINK: {kind!r}")


def build_container(
    *,
    db_config: dict,
    policy: Optional[WorkflowPolicy] = None,
    audit_sink: str = "mysql",
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    groups_repo = MySQLGroupRepository(conn)
    absences_repo = MySQLAbsenceRepository(conn)
    sink = build_audit_sink(audit_sink, conn)

    return Container(
        conn=conn,
        users_repo=users_repo,
        groups_repo=groups_repo,
        absences_repo=absences_repo,
        audit_sink=sink,
        actor_resolver=ActorResolver(users_repo),
        absence_service=AbsenceService(absences_repo, groups_repo, sink, policy=policy),
    )
