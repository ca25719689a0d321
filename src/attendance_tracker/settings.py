"""Key/value settings stored in the database."""
import logging

from attendance_tracker.db import get_connection
from attendance_tracker.models import DEFAULT_TARGET_PERCENTAGE

logger = logging.getLogger(__name__)

DEFAULT_TARGET_KEY = "default_attendance_target"


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def get_default_target(db_path: str) -> float:
    raw = get_setting(db_path, DEFAULT_TARGET_KEY)
    if raw is None:
        return DEFAULT_TARGET_PERCENTAGE
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s setting %r", DEFAULT_TARGET_KEY, raw)
        return DEFAULT_TARGET_PERCENTAGE
