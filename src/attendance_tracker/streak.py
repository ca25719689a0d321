"""Day-level "marked present" streak per user."""
import logging
import sqlite3
from dataclasses import replace
from datetime import date, datetime, timedelta

from attendance_tracker.db import get_connection
from attendance_tracker.models import PRESENT, AttendanceStreak

logger = logging.getLogger(__name__)


def advance_streak(existing: AttendanceStreak | None, user_id: str, today: date,
                   now: str | None = None) -> AttendanceStreak:
    """Apply one "present" mark made on ``today`` to a streak.

    Marking twice on the same day only touches ``updated_at``. A mark the
    day after ``last_checked_date`` extends the streak; anything else
    (a gap, a missing date, a date in the future) restarts it at 1.
    """
    now = now or datetime.now().isoformat()
    today_str = today.isoformat()
    yesterday_str = (today - timedelta(days=1)).isoformat()

    if existing is None:
        return AttendanceStreak(
            user_id=user_id, current_streak=1, last_checked_date=today_str,
            total_days_marked=1, longest_streak=1, updated_at=now,
        )

    if existing.last_checked_date == yesterday_str:
        current = existing.current_streak + 1
        return replace(
            existing,
            current_streak=current,
            last_checked_date=today_str,
            total_days_marked=existing.total_days_marked + 1,
            longest_streak=max(existing.longest_streak, current),
            updated_at=now,
        )

    if existing.last_checked_date == today_str:
        if existing.current_streak == 0 and existing.total_days_marked == 0:
            # Record exists but nothing was ever counted.
            return replace(
                existing, current_streak=1, total_days_marked=1,
                longest_streak=max(existing.longest_streak, 1), updated_at=now,
            )
        return replace(existing, updated_at=now)

    return replace(
        existing,
        current_streak=1,
        last_checked_date=today_str,
        total_days_marked=existing.total_days_marked + 1,
        longest_streak=max(existing.longest_streak, 1),
        updated_at=now,
    )


def _row_to_streak(row) -> AttendanceStreak:
    return AttendanceStreak(
        user_id=row["user_id"],
        current_streak=row["current_streak"],
        last_checked_date=row["last_checked_date"] or None,
        total_days_marked=row["total_days_marked"],
        longest_streak=row["longest_streak"],
        updated_at=row["updated_at"],
    )


def read_streak(conn: sqlite3.Connection, user_id: str) -> AttendanceStreak | None:
    row = conn.execute("SELECT * FROM attendance_streaks WHERE user_id = ?", (user_id,)).fetchone()
    return _row_to_streak(row) if row else None


def write_streak(conn: sqlite3.Connection, streak: AttendanceStreak) -> None:
    conn.execute(
        """INSERT INTO attendance_streaks
            (user_id, current_streak, last_checked_date, total_days_marked, longest_streak, updated_at)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id) DO UPDATE SET
            current_streak=excluded.current_streak,
            last_checked_date=excluded.last_checked_date,
            total_days_marked=excluded.total_days_marked,
            longest_streak=excluded.longest_streak,
            updated_at=excluded.updated_at""",
        (streak.user_id, streak.current_streak, streak.last_checked_date,
         streak.total_days_marked, streak.longest_streak, streak.updated_at),
    )


def update_attendance_streak(conn: sqlite3.Connection, user_id: str, today: date,
                             now: str | None = None) -> AttendanceStreak:
    """Advance and store the user's streak. Does not commit."""
    streak = advance_streak(read_streak(conn, user_id), user_id, today, now)
    write_streak(conn, streak)
    logger.debug("Streak for %s: current=%d longest=%d",
                 user_id, streak.current_streak, streak.longest_streak)
    return streak


def get_attendance_streak(db_path: str, user_id: str) -> AttendanceStreak | None:
    conn = get_connection(db_path)
    streak = read_streak(conn, user_id)
    conn.close()
    return streak


def empty_streak(user_id: str) -> AttendanceStreak:
    return AttendanceStreak(user_id=user_id, updated_at=datetime.now().isoformat())


def rebuild_streak(db_path: str, user_id: str) -> AttendanceStreak | None:
    """Re-derive a user's streak from their present records and store it.

    Used to reconcile a streak that fell out of step with the raw records.
    Returns None (and stores nothing) when the user has no present marks.
    """
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT DISTINCT date FROM attendance_records WHERE user_id = ? AND status = ? ORDER BY date",
        (user_id, PRESENT),
    ).fetchall()
    if not rows:
        conn.close()
        return None

    days = [date.fromisoformat(r["date"]) for r in rows]
    longest = run = 1
    for prev, cur in zip(days, days[1:]):
        run = run + 1 if cur - prev == timedelta(days=1) else 1
        longest = max(longest, run)

    streak = AttendanceStreak(
        user_id=user_id,
        current_streak=run,
        last_checked_date=days[-1].isoformat(),
        total_days_marked=len(days),
        longest_streak=longest,
        updated_at=datetime.now().isoformat(),
    )
    with conn:
        write_streak(conn, streak)
    conn.close()
    logger.info("Rebuilt streak for %s from %d marked days", user_id, len(days))
    return streak
