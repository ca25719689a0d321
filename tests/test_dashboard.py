# tests/test_dashboard.py
from datetime import date
from attendance_tracker.db import init_db
from attendance_tracker.classrooms import create_user, create_classroom, add_class, set_semester
from attendance_tracker.attendance import mark_attendance
from attendance_tracker.settings import set_setting
from attendance_tracker.dashboard import (
    get_attendance_label, get_attendance_color, get_dashboard_data, get_semester_info,
    get_todays_classes, get_attendance_summaries,
)

TODAY = date(2025, 4, 15)  # Tuesday


def _setup(db, target=None):
    init_db(db)
    create_user(db, "u1", "Asha Verma", nickname="Asha", created_at="2025-04-08T09:30:00")
    room = create_classroom(db, "CSE 3A", "u1", attendance_target=75)
    cls = add_class(db, room, "Operating Systems", "Tuesday", instructor="Dr. Rao",
                    start_time="09:00", end_time="10:00", location="B-204")
    set_semester(db, "u1", "01/04/2025", "30/04/2025", target)
    return room, cls


def test_attendance_label():
    assert get_attendance_label(85, 75) == "SAFE"
    assert get_attendance_label(77, 75) == "ON THE EDGE"
    assert get_attendance_label(60, 75) == "BELOW TARGET"
    assert get_attendance_color(60, 75) == "red"

def test_dashboard_unknown_user(tmp_db):
    init_db(tmp_db)
    assert get_dashboard_data(tmp_db, "ghost") is None

def test_dashboard_requires_setup_without_semester(tmp_db):
    init_db(tmp_db)
    create_user(tmp_db, "u1", "Asha")
    data = get_dashboard_data(tmp_db, "u1", today=TODAY)
    assert data["setup_required"] is True
    assert data["semester_info"] is None

def test_dashboard_without_registration_date_is_set_up(tmp_db):
    init_db(tmp_db)
    create_user(tmp_db, "u1", "Asha", created_at="not a date")
    set_semester(tmp_db, "u1", "01/04/2025", "30/04/2025")
    data = get_dashboard_data(tmp_db, "u1", today=TODAY)
    assert data["setup_required"] is False
    info = data["semester_info"]
    assert info["elapsed_working_days"] == 12
    assert info["remaining_working_days"] == 13
    assert info["current_performance_percentage"] == 0.0
    assert data["attendance_streak"].current_streak == 0
    assert data["overall_attendance_percentage"] == 0
    assert data["user_name"] == "Asha"

def test_semester_info_with_pre_registration(tmp_db):
    room, cls = _setup(tmp_db)
    for day in ("2025-04-08", "2025-04-09", "2025-04-11", "2025-04-14", "2025-04-15"):
        mark_attendance(tmp_db, "u1", room, cls.id, "present", on_date=day)
    info = get_semester_info(tmp_db, "u1", today=TODAY)
    assert info["total_working_days"] == 24
    assert info["elapsed_working_days"] == 12
    assert info["progress_percentage"] == 50.0
    assert info["attended_days"] == 5
    assert info["target_attendance_percentage"] == 75.0
    assert info["required_attendance_days"] == 8
    assert info["can_skip_days"] == 5
    assert info["remaining_working_days"] == 13
    assert info["current_performance_percentage"] == 76.92
    assert info["is_on_track"] is True

def test_user_target_overrides_default(tmp_db):
    _setup(tmp_db, target=80)
    info = get_semester_info(tmp_db, "u1", today=TODAY)
    assert info["target_attendance_percentage"] == 80.0
    assert info["target_days_for_semester"] == 20  # ceil(19.2)

def test_configured_default_target(tmp_db):
    _setup(tmp_db)
    set_setting(tmp_db, "default_attendance_target", "80")
    assert get_semester_info(tmp_db, "u1", today=TODAY)["target_attendance_percentage"] == 80.0

def test_todays_classes(tmp_db):
    room, cls = _setup(tmp_db)
    mark_attendance(tmp_db, "u1", room, cls.id, "present", on_date="2025-04-08")
    classes = get_todays_classes(tmp_db, "u1", today=TODAY)
    assert len(classes) == 1
    c = classes[0]
    assert c["subject"] == "Operating Systems"
    assert c["time"] == "09:00 - 10:00"
    assert c["is_checked_in"] is False
    assert c["total_classes"] == 1
    mark_attendance(tmp_db, "u1", room, cls.id, "absent", reason="Sick", on_date=TODAY)
    c = get_todays_classes(tmp_db, "u1", today=TODAY)[0]
    assert c["is_checked_in"] is True
    assert c["attendance_status"] == "absent"
    assert c["reason"] == "Sick"
    assert get_todays_classes(tmp_db, "u1", today=date(2025, 4, 16)) == []

def test_dashboard_full(tmp_db):
    room, cls = _setup(tmp_db)
    for day in ("2025-04-08", "2025-04-09", "2025-04-15"):
        mark_attendance(tmp_db, "u1", room, cls.id, "present", on_date=day)
    mark_attendance(tmp_db, "u1", room, cls.id, "absent", on_date="2025-04-11")
    data = get_dashboard_data(tmp_db, "u1", today=TODAY)
    assert data["setup_required"] is False
    assert data["user_name"] == "Asha"
    assert data["overall_attendance_percentage"] == 75
    assert data["attendance_streak"].current_streak == 1
    assert data["attendance_streak"].longest_streak == 2
    summary = data["attendance_summary"]
    assert len(summary) == 1
    assert summary[0]["required_attendance_percentage"] == 75
    assert summary[0]["classes_can_skip"] == 0

def test_summaries_empty(tmp_db):
    _setup(tmp_db)
    assert get_attendance_summaries(tmp_db, "u1") == []
