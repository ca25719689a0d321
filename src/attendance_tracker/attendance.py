"""Marking and correcting attendance.

A mark writes the raw record, rebuilds the class's stats cache row and,
for "present" marks, advances the user's streak. All three writes share
one transaction, so a failure leaves none of them applied.
"""
import logging
import sqlite3
from collections.abc import Collection
from datetime import date, datetime

from attendance_tracker.classrooms import get_classes_for_day
from attendance_tracker.dates import coerce_date
from attendance_tracker.db import get_connection
from attendance_tracker.errors import RecordNotFoundError, StoreError, ValidationError
from attendance_tracker.models import ABSENT, PRESENT, STATUSES, AttendanceRecord, record_id
from attendance_tracker.stats import recompute_subject_stats
from attendance_tracker.streak import update_attendance_streak
from attendance_tracker.workdays import DEFAULT_HOLIDAYS, is_working_day

logger = logging.getLogger(__name__)

BACKFILL_REASON = "Not marked"


def _check_status(status: str) -> str:
    status = (status or "").strip().lower()
    if status not in STATUSES:
        raise ValidationError(f"Status must be one of {', '.join(STATUSES)}, got {status!r}")
    return status


def _resolve_day(on_date) -> date:
    if on_date is None:
        return date.today()
    day = coerce_date(on_date, "attendance date")
    if day is None:
        raise ValidationError(f"Unrecognized attendance date: {on_date}")
    return day


def _row_to_record(row) -> AttendanceRecord:
    return AttendanceRecord(
        user_id=row["user_id"],
        classroom_id=row["classroom_id"],
        class_id=row["class_id"],
        date=row["date"],
        status=row["status"],
        marked_at=row["marked_at"],
        updated_at=row["updated_at"],
        reason=row["reason"],
    )


def _put_record(conn: sqlite3.Connection, record: AttendanceRecord) -> None:
    conn.execute(
        """INSERT INTO attendance_records
            (id, user_id, classroom_id, class_id, date, status, reason, marked_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            classroom_id=excluded.classroom_id,
            status=excluded.status,
            reason=excluded.reason,
            marked_at=excluded.marked_at,
            updated_at=excluded.updated_at""",
        (record.id, record.user_id, record.classroom_id, record.class_id, record.date,
         record.status, record.reason, record.marked_at, record.updated_at),
    )


def mark_attendance(db_path: str, user_id: str, classroom_id: str, class_id: str,
                    status: str, reason: str | None = None, on_date=None) -> AttendanceRecord:
    """Record a user's attendance for one class on one day (default today).

    Marking the same class twice on a day overwrites the earlier mark.

    Raises:
        ValidationError: unknown status or unreadable date.
        StoreError: the database write failed; nothing was applied.
    """
    status = _check_status(status)
    day = _resolve_day(on_date)
    now = datetime.now().isoformat()
    record = AttendanceRecord(
        user_id=user_id,
        classroom_id=classroom_id,
        class_id=class_id,
        date=day.isoformat(),
        status=status,
        marked_at=now,
        updated_at=now,
        reason=reason if status == ABSENT and reason else None,
    )

    conn = get_connection(db_path)
    try:
        with conn:
            _put_record(conn, record)
            recompute_subject_stats(conn, user_id, classroom_id, class_id, now)
            if status == PRESENT:
                update_attendance_streak(conn, user_id, day, now)
    except sqlite3.Error as e:
        logger.error("Failed to mark attendance %s: %s", record.id, e)
        raise StoreError("Failed to mark attendance") from e
    finally:
        conn.close()

    logger.info("Marked %s %s for class %s on %s", user_id, status, class_id, record.date)
    return record


def update_attendance(db_path: str, user_id: str, class_id: str, on_date, status: str,
                      reason: str | None = None) -> AttendanceRecord:
    """Correct the status of an existing record.

    The stats cache is rebuilt; the streak is left alone. A reason is kept
    only for absences: a new reason replaces the old one, and switching to
    present clears it.
    """
    status = _check_status(status)
    day = _resolve_day(on_date).isoformat()
    key = record_id(user_id, class_id, day)
    now = datetime.now().isoformat()

    conn = get_connection(db_path)
    try:
        with conn:
            row = conn.execute("SELECT * FROM attendance_records WHERE id = ?", (key,)).fetchone()
            if row is None:
                raise RecordNotFoundError(f"No attendance record for class {class_id} on {day}")
            record = _row_to_record(row)
            record.status = status
            record.updated_at = now
            if status == PRESENT:
                record.reason = None
            elif reason:
                record.reason = reason
            conn.execute(
                "UPDATE attendance_records SET status=?, reason=?, updated_at=? WHERE id=?",
                (record.status, record.reason, record.updated_at, key),
            )
            recompute_subject_stats(conn, user_id, record.classroom_id, class_id, now)
    except sqlite3.Error as e:
        logger.error("Failed to update attendance %s: %s", key, e)
        raise StoreError("Failed to update attendance") from e
    finally:
        conn.close()

    logger.info("Corrected %s to %s", key, status)
    return record


def get_attendance_record(db_path: str, user_id: str, class_id: str, on_date) -> AttendanceRecord | None:
    day = coerce_date(on_date, "attendance date")
    if day is None:
        return None
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT * FROM attendance_records WHERE id = ?",
        (record_id(user_id, class_id, day.isoformat()),),
    ).fetchone()
    conn.close()
    return _row_to_record(row) if row else None


def get_records_for(db_path: str, user_id: str, class_id: str) -> list[AttendanceRecord]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM attendance_records WHERE user_id = ? AND class_id = ? ORDER BY date",
        (user_id, class_id),
    ).fetchall()
    conn.close()
    return [_row_to_record(r) for r in rows]


def count_attended_days(db_path: str, user_id: str) -> int:
    """Distinct calendar days with at least one present mark."""
    conn = get_connection(db_path)
    count = conn.execute(
        "SELECT COUNT(DISTINCT date) FROM attendance_records WHERE user_id = ? AND status = ?",
        (user_id, PRESENT),
    ).fetchone()[0]
    conn.close()
    return count


def backfill_absences(db_path: str, user_id: str, on_date, today: date | None = None,
                      holidays: Collection = DEFAULT_HOLIDAYS) -> list[str]:
    """Mark every class scheduled on ``on_date`` that has no record as absent.

    Skips non-working days and dates after today. The streak is never
    touched. Returns the ids of the classes that were marked.
    """
    today = today or date.today()
    day = _resolve_day(on_date)
    if day > today or not is_working_day(day, holidays):
        return []

    now = datetime.now().isoformat()
    marked = []
    conn = get_connection(db_path)
    try:
        with conn:
            for classroom, cls in get_classes_for_day(db_path, user_id, day):
                key = record_id(user_id, cls.id, day.isoformat())
                if conn.execute("SELECT 1 FROM attendance_records WHERE id = ?", (key,)).fetchone():
                    continue
                _put_record(conn, AttendanceRecord(
                    user_id=user_id, classroom_id=classroom["id"], class_id=cls.id,
                    date=day.isoformat(), status=ABSENT, marked_at=now, updated_at=now,
                    reason=BACKFILL_REASON,
                ))
                recompute_subject_stats(conn, user_id, classroom["id"], cls.id, now)
                marked.append(cls.id)
    except sqlite3.Error as e:
        logger.error("Failed to backfill absences for %s on %s: %s", user_id, day, e)
        raise StoreError("Failed to backfill absences") from e
    finally:
        conn.close()

    if marked:
        logger.info("Backfilled %d absences for %s on %s", len(marked), user_id, day)
    return marked
