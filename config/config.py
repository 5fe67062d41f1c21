import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.environ.get("DB_HOST", "localhost"),
        "port": int(os.environ.get("DB_PORT", "3306")),
        "user": os.environ.get("DB_USER", "root"),
        "password": os.environ.get("DB_PASSWORD", default_password),
        "database": os.environ.get("DB_NAME", "absence_db"),
        "connection_timeout": int(os.environ.get("DB_CONNECT_TIMEOUT", "10")),
    }


# Workflow policy shared by every environment
MAX_REASON_LENGTH = int(os.environ.get("MAX_REASON_LENGTH", "1000"))
MAX_NOTE_LENGTH = int(os.environ.get("MAX_NOTE_LENGTH", "500"))
ALLOW_SELF_DECISION = env_flag("ALLOW_SELF_DECISION", "0")
ENFORCE_LEAVE_QUOTA = env_flag("ENFORCE_LEAVE_QUOTA", "1")
AUDIT_SINK = os.environ.get("AUDIT_SINK", "mysql")
