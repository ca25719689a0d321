"""Configurable holiday table stored in the database.

Rows with ``year`` NULL recur every year; rows with a year only apply to
that year. This is how movable holidays get their correct date each year.
"""
import logging
from datetime import date

from attendance_tracker.db import get_connection
from attendance_tracker.workdays import DEFAULT_HOLIDAYS

logger = logging.getLogger(__name__)


def add_holiday(db_path: str, month: int, day: int, name: str = "", year: int | None = None) -> bool:
    """Add a holiday. Returns False if the same entry already exists."""
    # Validates the month/day pair; Feb 29 is checked against a leap year.
    date(year or 2000, month, day)
    conn = get_connection(db_path)
    existing = conn.execute(
        "SELECT id FROM holidays WHERE month = ? AND day = ? AND year IS ?",
        (month, day, year),
    ).fetchone()
    if existing:
        conn.close()
        return False
    conn.execute(
        "INSERT INTO holidays (year, month, day, name) VALUES (?, ?, ?, ?)",
        (year, month, day, name),
    )
    conn.commit()
    conn.close()
    logger.info("Added holiday %s %02d-%02d (%s)", year or "every year", month, day, name)
    return True


def remove_holiday(db_path: str, month: int, day: int, year: int | None = None) -> bool:
    conn = get_connection(db_path)
    cur = conn.execute(
        "DELETE FROM holidays WHERE month = ? AND day = ? AND year IS ?",
        (month, day, year),
    )
    conn.commit()
    conn.close()
    return cur.rowcount > 0


def list_holidays(db_path: str) -> list[dict]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT year, month, day, name FROM holidays ORDER BY year IS NOT NULL, year, month, day"
    ).fetchall()
    conn.close()
    return [dict(r) for r in rows]


def load_holidays(db_path: str, years=None) -> frozenset:
    """Build a holiday table for the working-day calendar.

    Falls back to DEFAULT_HOLIDAYS when nothing has been configured.
    ``years`` limits dated entries to those years; None keeps them all.
    """
    rows = list_holidays(db_path)
    if not rows:
        return DEFAULT_HOLIDAYS
    wanted = set(years) if years is not None else None
    table = set()
    for r in rows:
        if r["year"] is None:
            table.add((r["month"], r["day"]))
        elif wanted is None or r["year"] in wanted:
            table.add(date(r["year"], r["month"], r["day"]))
    return frozenset(table)
