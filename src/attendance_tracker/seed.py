"""Seed the database with the default holiday table."""
import json
from pathlib import Path
from attendance_tracker.db import get_connection

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the holiday table has any entries."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM holidays").fetchone()[0]
    conn.close()
    return count > 0


def seed_holidays(db_path: str) -> None:
    """Insert the default holidays from holidays.json as yearly recurring entries.

    Entries may carry a "year" to pin them to a single year.
    """
    data = json.loads((CONTENT_DIR / "holidays.json").read_text())
    conn = get_connection(db_path)
    for h in data["holidays"]:
        conn.execute(
            "INSERT INTO holidays (year, month, day, name) VALUES (?, ?, ?, ?)",
            (h.get("year"), h["month"], h["day"], h["name"]),
        )
    conn.commit()
    conn.close()


def seed_all(db_path: str) -> None:
    """Seed everything. Idempotent: skips if already seeded."""
    if is_seeded(db_path):
        return
    seed_holidays(db_path)
