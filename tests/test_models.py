"""Tests for data model classes."""
from attendance_tracker.models import (
    AttendanceRecord, AttendanceStreak, SubjectAttendanceStats, Projection,
    PreRegistrationProjection, ClassSchedule,
)


def test_record_id_is_user_class_date():
    r = AttendanceRecord(user_id="u1", classroom_id="room", class_id="os",
                         date="2025-04-01", status="present", marked_at="2025-04-01T09:00:00")
    assert r.id == "u1_os_2025-04-01"
    assert r.reason is None


def test_streak_defaults():
    s = AttendanceStreak(user_id="u1")
    assert s.current_streak == 0
    assert s.longest_streak == 0
    assert s.total_days_marked == 0
    assert s.last_checked_date is None


def test_stats_id_and_defaults():
    s = SubjectAttendanceStats(user_id="u1", classroom_id="room", class_id="os")
    assert s.id == "u1_room_os"
    assert s.attendance_percentage == 0.0
    assert s.subject == ""


def test_projection_defaults():
    p = Projection()
    assert p.is_on_track is True
    assert p.required_days == 0


def test_pre_registration_projection_extends_projection():
    p = PreRegistrationProjection(required_days=3, pre_registration_days=7)
    assert isinstance(p, Projection)
    assert p.to_dict()["pre_registration_days"] == 7


def test_class_schedule_defaults():
    c = ClassSchedule(id="os", classroom_id="room", name="Operating Systems", day="Tuesday")
    assert c.instructor == ""
    assert c.location == ""
