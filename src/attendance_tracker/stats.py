"""Per-class attendance statistics cache.

One row per (user, classroom, class). The row is rebuilt from every raw
attendance record of that user/class whenever one of them changes, so it
never drifts from the records. Counters are never patched in place.
"""
import logging
import sqlite3
from datetime import datetime

from attendance_tracker.db import get_connection
from attendance_tracker.models import (
    DEFAULT_TARGET_PERCENTAGE, PRESENT, SubjectAttendanceStats, stats_id,
)
from attendance_tracker.util import ceil_days, percentage, round2

logger = logging.getLogger(__name__)


def compute_stats(records) -> dict:
    """Aggregate raw records (rows or dicts with date/status) into counters."""
    total = len(records)
    attended = sum(1 for r in records if r["status"] == PRESENT)
    latest = max(records, key=lambda r: (r["date"], r["updated_at"] or r["marked_at"]), default=None)
    return {
        "total_classes": total,
        "attended_classes": attended,
        "absent_classes": total - attended,
        "attendance_percentage": round2(percentage(attended, total)),
        "last_marked_date": latest["date"] if latest else None,
        "last_marked_status": latest["status"] if latest else None,
    }


def _row_to_stats(row) -> SubjectAttendanceStats:
    return SubjectAttendanceStats(
        user_id=row["user_id"],
        classroom_id=row["classroom_id"],
        class_id=row["class_id"],
        subject=row["subject"] or "",
        instructor=row["instructor"] or "",
        total_classes=row["total_classes"],
        attended_classes=row["attended_classes"],
        absent_classes=row["absent_classes"],
        attendance_percentage=row["attendance_percentage"],
        last_marked_date=row["last_marked_date"],
        last_marked_status=row["last_marked_status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def recompute_subject_stats(conn: sqlite3.Connection, user_id: str, classroom_id: str,
                            class_id: str, now: str | None = None) -> SubjectAttendanceStats:
    """Rebuild and store the cache row for one user/class. Does not commit.

    Subject and instructor are copied from the class schedule only when
    the row is first created.
    """
    now = now or datetime.now().isoformat()
    records = conn.execute(
        "SELECT date, status, marked_at, updated_at FROM attendance_records WHERE user_id = ? AND class_id = ?",
        (user_id, class_id),
    ).fetchall()
    counts = compute_stats(records)
    key = stats_id(user_id, classroom_id, class_id)

    existing = conn.execute("SELECT id FROM subject_attendance_stats WHERE id = ?", (key,)).fetchone()
    if existing:
        conn.execute(
            """UPDATE subject_attendance_stats SET total_classes=?, attended_classes=?,
                absent_classes=?, attendance_percentage=?, last_marked_date=?,
                last_marked_status=?, updated_at=?
            WHERE id=?""",
            (counts["total_classes"], counts["attended_classes"], counts["absent_classes"],
             counts["attendance_percentage"], counts["last_marked_date"],
             counts["last_marked_status"], now, key),
        )
    else:
        schedule = conn.execute(
            "SELECT name, instructor FROM class_schedules WHERE id = ?", (class_id,)
        ).fetchone()
        conn.execute(
            """INSERT INTO subject_attendance_stats
                (id, user_id, classroom_id, class_id, subject, instructor, total_classes,
                attended_classes, absent_classes, attendance_percentage, last_marked_date,
                last_marked_status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (key, user_id, classroom_id, class_id,
             schedule["name"] if schedule else "",
             schedule["instructor"] if schedule else "",
             counts["total_classes"], counts["attended_classes"], counts["absent_classes"],
             counts["attendance_percentage"], counts["last_marked_date"],
             counts["last_marked_status"], now, now),
        )
    row = conn.execute("SELECT * FROM subject_attendance_stats WHERE id = ?", (key,)).fetchone()
    logger.debug("Stats %s: %d/%d present", key, counts["attended_classes"], counts["total_classes"])
    return _row_to_stats(row)


def get_subject_stats(db_path: str, user_id: str, classroom_id: str,
                      class_id: str) -> SubjectAttendanceStats | None:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT * FROM subject_attendance_stats WHERE id = ?",
        (stats_id(user_id, classroom_id, class_id),),
    ).fetchone()
    conn.close()
    return _row_to_stats(row) if row else None


def get_user_subject_stats(db_path: str, user_id: str) -> list[SubjectAttendanceStats]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM subject_attendance_stats WHERE user_id = ? ORDER BY subject, class_id",
        (user_id,),
    ).fetchall()
    conn.close()
    return [_row_to_stats(r) for r in rows]


def summarize_stats(stats: SubjectAttendanceStats,
                    required_percentage: float = DEFAULT_TARGET_PERCENTAGE) -> dict:
    """How many more of this class to attend, and how many can be skipped,
    to stay at ``required_percentage`` over the classes held so far."""
    required_attended = ceil_days(required_percentage / 100 * stats.total_classes)
    max_absences = stats.total_classes - required_attended
    return {
        "class_id": stats.class_id,
        "classroom_id": stats.classroom_id,
        "subject": stats.subject,
        "instructor": stats.instructor,
        "total_classes": stats.total_classes,
        "attended_classes": stats.attended_classes,
        "absent_classes": stats.absent_classes,
        "attendance_percentage": stats.attendance_percentage,
        "required_attendance_percentage": required_percentage,
        "is_attendance_critical": (stats.total_classes > 0
                                   and stats.attendance_percentage < required_percentage),
        "classes_to_attend": max(0, required_attended - stats.attended_classes),
        "classes_can_skip": max(0, max_absences - stats.absent_classes),
        "last_marked_date": stats.last_marked_date,
        "last_marked_status": stats.last_marked_status,
    }
