from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .absences.controller import register as register_absences
from .absences.service import WorkflowPolicy
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_MAX_NOTE_LENGTH, DEFAULT_MAX_REASON_LENGTH
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def policy_from_settings(settings: Any) -> WorkflowPolicy:
    return WorkflowPolicy(
        max_reason_length=int(getattr(settings, "MAX_REASON_LENGTH", DEFAULT_MAX_REASON_LENGTH)),
        max_note_length=int(getattr(settings, "MAX_NOTE_LENGTH", DEFAULT_MAX_NOTE_LENGTH)),
        allow_self_decision=bool(getattr(settings, "ALLOW_SELF_DECISION", False)),
        enforce_leave_quota=bool(getattr(settings, "ENFORCE_LEAVE_QUOTA", True)),
    )


def create_app(settings: Any = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    if settings is None:
        settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            getattr(settings, "__name__", settings_module),
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            policy=policy_from_settings(settings),
            audit_sink=str(getattr(settings, "AUDIT_SINK", "mysql")),
        )

    app.extensions["absence_workflow"] = container
    register_error_handlers(app)
    register_absences(app, container)

    return app
