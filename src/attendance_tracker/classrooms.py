"""Users, classrooms and class schedules."""
import logging
import uuid
from datetime import date, datetime

from attendance_tracker.db import get_connection
from attendance_tracker.dates import coerce_date
from attendance_tracker.errors import ValidationError
from attendance_tracker.models import ClassSchedule, SemesterWindow
from attendance_tracker.settings import get_default_target
from attendance_tracker.workdays import WEEKDAY_NAMES, weekday_name

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def create_user(db_path: str, user_id: str, name: str, nickname: str = "",
                created_at: str | None = None) -> dict:
    """Register a user. ``created_at`` doubles as the registration date."""
    created_at = created_at or datetime.now().isoformat()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO users (id, name, nickname, created_at) VALUES (?, ?, ?, ?)",
        (user_id, name, nickname, created_at),
    )
    conn.commit()
    user = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    conn.close()
    logger.info("Created user %s", user_id)
    return dict(user)


def get_user(db_path: str, user_id: str) -> dict | None:
    conn = get_connection(db_path)
    user = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    conn.close()
    return dict(user) if user else None


def set_semester(db_path: str, user_id: str, start_date: str, end_date: str,
                 attendance_target: float | None = None) -> None:
    """Store a user's semester window. Dates are kept as entered."""
    if coerce_date(start_date, "semester start date") is None:
        raise ValidationError(f"Unrecognized semester start date: {start_date}")
    if coerce_date(end_date, "semester end date") is None:
        raise ValidationError(f"Unrecognized semester end date: {end_date}")
    if attendance_target is not None and not 0 <= attendance_target <= 100:
        raise ValidationError("Attendance target must be between 0 and 100")
    conn = get_connection(db_path)
    cur = conn.execute(
        """UPDATE users SET semester_start_date=?, semester_end_date=?,
            attendance_target=COALESCE(?, attendance_target)
        WHERE id=?""",
        (start_date, end_date, attendance_target, user_id),
    )
    conn.commit()
    conn.close()
    if cur.rowcount == 0:
        raise ValidationError(f"Unknown user: {user_id}")


def get_target_percentage(db_path: str, user: dict) -> float:
    if user.get("attendance_target") is not None:
        return float(user["attendance_target"])
    return get_default_target(db_path)


def get_semester_window(db_path: str, user_id: str) -> SemesterWindow | None:
    """The user's semester window, or None if it isn't fully set up."""
    user = get_user(db_path, user_id)
    if not user:
        return None
    start = coerce_date(user["semester_start_date"], "semester start date")
    end = coerce_date(user["semester_end_date"], "semester end date")
    if start is None or end is None:
        return None
    return SemesterWindow(
        start_date=start,
        end_date=end,
        registration_date=coerce_date(user["created_at"], "registration date"),
        target_percentage=get_target_percentage(db_path, user),
    )


def create_classroom(db_path: str, name: str, created_by: str,
                     attendance_target: float = 75) -> str:
    classroom_id = _new_id()
    now = datetime.now().isoformat()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO classrooms (id, name, attendance_target, created_by, created_at) VALUES (?, ?, ?, ?, ?)",
        (classroom_id, name, attendance_target, created_by, now),
    )
    conn.execute(
        "INSERT INTO classroom_members (classroom_id, user_id, joined_at) VALUES (?, ?, ?)",
        (classroom_id, created_by, now),
    )
    conn.commit()
    conn.close()
    return classroom_id


def join_classroom(db_path: str, classroom_id: str, user_id: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT OR IGNORE INTO classroom_members (classroom_id, user_id, joined_at) VALUES (?, ?, ?)",
        (classroom_id, user_id, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def get_user_classrooms(db_path: str, user_id: str) -> list[dict]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT c.* FROM classrooms c
        JOIN classroom_members m ON m.classroom_id = c.id
        WHERE m.user_id = ?
        ORDER BY c.name""",
        (user_id,),
    ).fetchall()
    conn.close()
    return [dict(r) for r in rows]


def add_class(db_path: str, classroom_id: str, name: str, day: str, instructor: str = "",
              start_time: str = "", end_time: str = "", location: str = "") -> ClassSchedule:
    day = day.strip().capitalize()
    if day not in WEEKDAY_NAMES:
        raise ValidationError(f"Unknown weekday: {day}")
    cls = ClassSchedule(
        id=_new_id(), classroom_id=classroom_id, name=name, day=day,
        instructor=instructor, start_time=start_time, end_time=end_time, location=location,
    )
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO class_schedules (id, classroom_id, name, instructor, day, start_time, end_time, location)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (cls.id, cls.classroom_id, cls.name, cls.instructor, cls.day,
         cls.start_time, cls.end_time, cls.location),
    )
    conn.commit()
    conn.close()
    return cls


def _row_to_class(row) -> ClassSchedule:
    return ClassSchedule(
        id=row["id"], classroom_id=row["classroom_id"], name=row["name"], day=row["day"],
        instructor=row["instructor"] or "", start_time=row["start_time"] or "",
        end_time=row["end_time"] or "", location=row["location"] or "",
    )


def get_class_schedule(db_path: str, classroom_id: str) -> list[ClassSchedule]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM class_schedules WHERE classroom_id = ? ORDER BY day, start_time",
        (classroom_id,),
    ).fetchall()
    conn.close()
    return [_row_to_class(r) for r in rows]


def get_class(db_path: str, class_id: str) -> ClassSchedule | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM class_schedules WHERE id = ?", (class_id,)).fetchone()
    conn.close()
    return _row_to_class(row) if row else None


def get_classes_for_day(db_path: str, user_id: str, day: date) -> list[tuple[dict, ClassSchedule]]:
    """(classroom, class) pairs scheduled on ``day``'s weekday for this user."""
    name = weekday_name(day)
    result = []
    for classroom in get_user_classrooms(db_path, user_id):
        for cls in get_class_schedule(db_path, classroom["id"]):
            if cls.day == name:
                result.append((classroom, cls))
    result.sort(key=lambda pair: pair[1].start_time)
    return result
