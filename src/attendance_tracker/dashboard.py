"""Dashboard aggregation: today's classes, streak, per-class summaries and
the semester projection."""
import logging
from datetime import date

from attendance_tracker.attendance import count_attended_days, get_attendance_record
from attendance_tracker.classrooms import (
    get_classes_for_day, get_semester_window, get_target_percentage, get_user,
    get_user_classrooms,
)
from attendance_tracker.holidays import load_holidays
from attendance_tracker.projector import project_with_pre_registration
from attendance_tracker.semester import get_semester_progress
from attendance_tracker.stats import get_subject_stats, get_user_subject_stats, summarize_stats
from attendance_tracker.streak import empty_streak, get_attendance_streak
from attendance_tracker.util import percentage, round_half_up

logger = logging.getLogger(__name__)

SAFE_MARGIN = 5.0


def get_attendance_label(score: float, target: float) -> str:
    if score >= target + SAFE_MARGIN:
        return "SAFE"
    elif score >= target:
        return "ON THE EDGE"
    return "BELOW TARGET"


def get_attendance_color(score: float, target: float) -> str:
    if score >= target + SAFE_MARGIN:
        return "green"
    elif score >= target:
        return "yellow"
    return "red"


def get_todays_classes(db_path: str, user_id: str, today: date | None = None) -> list[dict]:
    today = today or date.today()
    classes = []
    for classroom, cls in get_classes_for_day(db_path, user_id, today):
        record = get_attendance_record(db_path, user_id, cls.id, today)
        stats = get_subject_stats(db_path, user_id, classroom["id"], cls.id)
        classes.append({
            "id": f"{cls.id}_{today.isoformat()}",
            "class_id": cls.id,
            "classroom_id": classroom["id"],
            "subject": cls.name,
            "time": f"{cls.start_time} - {cls.end_time}",
            "instructor": cls.instructor,
            "room": cls.location,
            "is_checked_in": record is not None,
            "attendance_status": record.status if record else None,
            "reason": record.reason if record else None,
            "total_classes": stats.total_classes if stats else 0,
            "attended_classes": stats.attended_classes if stats else 0,
            "required_attendance_percentage": classroom["attendance_target"],
        })
    return classes


def get_attendance_summaries(db_path: str, user_id: str) -> list[dict]:
    targets = {c["id"]: c["attendance_target"] for c in get_user_classrooms(db_path, user_id)}
    user = get_user(db_path, user_id) or {}
    fallback = get_target_percentage(db_path, user)
    return [
        summarize_stats(s, targets.get(s.classroom_id) or fallback)
        for s in get_user_subject_stats(db_path, user_id)
    ]


def get_semester_info(db_path: str, user_id: str, today: date | None = None,
                      holidays=None) -> dict | None:
    """Semester progress plus the pre-registration projection.

    Returns None when the user's semester window isn't set up.
    """
    window = get_semester_window(db_path, user_id)
    if window is None:
        return None
    if holidays is None:
        holidays = load_holidays(db_path, range(window.start_date.year, window.end_date.year + 1))

    progress = get_semester_progress(window.start_date, window.end_date, today, holidays)
    attended = count_attended_days(db_path, user_id)
    calc = project_with_pre_registration(
        window.start_date, window.end_date, window.registration_date, attended,
        window.target_percentage, today, holidays,
    )
    return {
        "start_date": window.start_date.isoformat(),
        "end_date": window.end_date.isoformat(),
        "total_working_days": progress.total_working_days,
        "elapsed_working_days": progress.elapsed_working_days,
        "remaining_working_days": calc.remaining_working_days,
        "progress_percentage": progress.progress_percentage,
        "target_attendance_percentage": window.target_percentage,
        "attended_days": attended,
        "required_attendance_days": calc.required_days,
        "can_skip_days": calc.can_skip_days,
        "is_on_track": calc.is_on_track,
        "current_performance_percentage": calc.current_percentage,
        "target_days_for_semester": calc.target_days_for_semester,
        "projected_final_percentage": calc.projected_final_percentage,
    }


def get_dashboard_data(db_path: str, user_id: str, today: date | None = None) -> dict | None:
    user = get_user(db_path, user_id)
    if not user:
        return None
    today = today or date.today()

    todays_classes = get_todays_classes(db_path, user_id, today)
    total = sum(c["total_classes"] for c in todays_classes)
    attended = sum(c["attended_classes"] for c in todays_classes)
    semester_info = get_semester_info(db_path, user_id, today)
    if semester_info is None:
        logger.info("Semester window missing for %s", user_id)

    return {
        "user_name": user["nickname"] or user["name"] or "Student",
        "todays_classes": todays_classes,
        "attendance_streak": get_attendance_streak(db_path, user_id) or empty_streak(user_id),
        "attendance_summary": get_attendance_summaries(db_path, user_id),
        "overall_attendance_percentage": round_half_up(percentage(attended, total)),
        "semester_info": semester_info,
        "setup_required": semester_info is None,
    }
