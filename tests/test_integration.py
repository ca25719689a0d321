# tests/test_integration.py
"""End-to-end test of the core workflow."""
from datetime import date, timedelta
from attendance_tracker.db import init_db
from attendance_tracker.seed import seed_all
from attendance_tracker.classrooms import create_user, create_classroom, add_class, set_semester
from attendance_tracker.attendance import mark_attendance, backfill_absences, update_attendance
from attendance_tracker.holidays import load_holidays
from attendance_tracker.stats import get_subject_stats
from attendance_tracker.streak import get_attendance_streak, rebuild_streak
from attendance_tracker.workdays import is_working_day
from attendance_tracker.dashboard import get_dashboard_data


def test_two_weeks_of_attendance(tmp_db):
    """Simulate two weeks of marks and verify all systems agree."""
    init_db(tmp_db)
    seed_all(tmp_db)
    create_user(tmp_db, "u1", "Asha", created_at="2025-04-01T08:00:00")
    room = create_classroom(tmp_db, "CSE 3A", "u1")
    classes = [add_class(tmp_db, room, f"Subject {d}", d) for d in
               ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")]
    set_semester(tmp_db, "u1", "01/04/2025", "30/04/2025", 75)
    by_day = {c.day: c for c in classes}
    holidays = load_holidays(tmp_db)

    day = date(2025, 4, 1)
    end = date(2025, 4, 12)
    while day <= end:
        name = day.strftime("%A")
        # Wednesdays are never marked; backfill picks them up
        if is_working_day(day, holidays) and name != "Wednesday":
            mark_attendance(tmp_db, "u1", room, by_day[name].id, "present", on_date=day)
        backfill_absences(tmp_db, "u1", day, today=end, holidays=holidays)
        day += timedelta(days=1)

    wed = get_subject_stats(tmp_db, "u1", room, by_day["Wednesday"].id)
    assert (wed.total_classes, wed.absent_classes) == (2, 2)
    # April 10th is a holiday: neither marked nor backfilled
    thu = get_subject_stats(tmp_db, "u1", room, by_day["Thursday"].id)
    assert thu.total_classes == 1

    # Present on 1, 3-5, 7-8, 11-12
    streak = get_attendance_streak(tmp_db, "u1")
    assert streak.current_streak == 2
    assert streak.longest_streak == 3
    assert streak.total_days_marked == 8

    # Correcting the 2nd joins 1-5 into one run once the streak is rebuilt
    update_attendance(tmp_db, "u1", by_day["Wednesday"].id, "2025-04-02", "present")
    assert get_subject_stats(tmp_db, "u1", room, by_day["Wednesday"].id).attended_classes == 1
    assert get_attendance_streak(tmp_db, "u1").longest_streak == 3
    rebuilt = rebuild_streak(tmp_db, "u1")
    assert rebuilt.longest_streak == 5
    assert rebuilt.current_streak == 2

    data = get_dashboard_data(tmp_db, "u1", today=end)
    assert data["setup_required"] is False
    assert data["semester_info"]["attended_days"] == 9
    assert data["semester_info"]["total_working_days"] == 24
