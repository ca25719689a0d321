# tests/test_projector.py
from datetime import date
from attendance_tracker.projector import project, project_with_pre_registration

# April 2025 has 24 working days (see test_semester.py).
START, END = "01/04/2025", "30/04/2025"


def test_project_behind_target():
    p = project(attended_days=28, elapsed_working_days=40, total_working_days=100, target_percentage=75)
    assert p.current_percentage == 70.0
    assert p.target_days_for_semester == 75
    assert p.required_days == 47
    assert p.remaining_working_days == 60
    assert p.can_skip_days == 13
    assert p.is_on_track is False
    assert p.projected_final_percentage == 70.0

def test_project_ahead_of_target():
    p = project(40, 40, 100, 75)
    assert p.current_percentage == 100.0
    assert p.required_days == 35
    assert p.can_skip_days == 25
    assert p.is_on_track is True
    assert p.projected_final_percentage == 100.0

def test_project_nothing_elapsed():
    p = project(0, 0, 100, 75)
    assert p.current_percentage == 0
    assert p.required_days == 75
    assert p.can_skip_days == 25
    assert p.projected_final_percentage == 0

def test_project_zero_total():
    p = project(0, 0, 0, 75)
    assert p.target_days_for_semester == 0
    assert p.required_days == 0
    assert p.projected_final_percentage == 0

def test_project_required_never_negative():
    p = project(90, 95, 100, 75)
    assert p.required_days == 0
    assert p.can_skip_days == 5

def test_project_rounds_to_two_places():
    p = project(1, 3, 10, 75)
    assert p.current_percentage == 33.33
    assert p.projected_final_percentage == 33.33

def test_target_days_ignores_float_noise():
    # 0.8 * 90 is 72.00000000000001 in floating point
    assert project(0, 0, 90, 80).target_days_for_semester == 72

def test_project_malformed_inputs_degrade():
    p = project("lots", 40, 100, 75)
    assert p.current_percentage == 0
    assert p.required_days == 75
    assert project(-3, 40, 100, 75).required_days == 75

def test_project_default_target():
    assert project(28, 40, 100, None).target_days_for_semester == 75
    assert project(28, 40, 100, "high").target_days_for_semester == 75

def test_can_skip_monotonic_in_absences():
    previous = None
    for absent in range(0, 41):
        p = project(40 - absent, 40, 100, 75)
        if previous is not None:
            assert p.can_skip_days <= previous
        previous = p.can_skip_days


def test_pre_registration_registered_after_semester_end():
    p = project_with_pre_registration(START, END, "01/05/2025", 10, 75, today=date(2025, 4, 15))
    assert p.is_on_track is True
    assert p.required_days == 0
    assert p.can_skip_days == 0
    assert p.remaining_working_days == 0
    assert p.target_days_for_semester == 0
    assert p.projected_final_percentage == 0

def test_pre_registration_semester_not_started():
    p = project_with_pre_registration(START, END, "2025-03-01", 0, 75, today=date(2025, 3, 20))
    assert p.is_on_track is True
    assert p.required_days == 18
    assert p.target_days_for_semester == 18
    assert p.remaining_working_days == 24
    assert p.can_skip_days == 0

def test_pre_registration_blends_assumed_and_actual():
    p = project_with_pre_registration(START, END, "2025-04-08T10:00:00Z", 5, 75, today=date(2025, 4, 15))
    assert p.pre_registration_days == 7
    assert p.post_registration_days == 6
    assert p.assumed_pre_registration_attendance == 5  # 5.25 rounded
    assert p.actual_post_registration_performance == 83.33
    assert p.current_percentage == 76.92
    assert p.is_on_track is True
    assert p.target_days_for_semester == 18
    assert p.required_days == 8
    assert p.remaining_working_days == 13
    assert p.can_skip_days == 5
    assert p.projected_final_percentage == 86.81

def test_pre_registration_assumption_rounds_half_up():
    p = project_with_pre_registration(START, END, "08/04/2025", 3, 50, today=date(2025, 4, 15))
    assert p.assumed_pre_registration_attendance == 4  # 3.5

def test_pre_registration_before_semester_start_counts_from_start():
    p = project_with_pre_registration(START, END, "01/03/2025", 6, 75, today=date(2025, 4, 7))
    assert p.pre_registration_days == 0
    assert p.post_registration_days == 6
    assert p.assumed_pre_registration_attendance == 0
    assert p.current_percentage == 100.0
    assert p.remaining_working_days == 19
    assert p.required_days == 12
    assert p.can_skip_days == 7

def test_pre_registration_after_semester_end():
    p = project_with_pre_registration(START, END, "08/04/2025", 10, 75, today=date(2025, 5, 10))
    assert p.post_registration_days == 18
    assert p.remaining_working_days == 0
    assert p.required_days == 3
    assert p.can_skip_days == 0
    assert p.current_percentage == 60.0
    assert p.is_on_track is False
    assert p.projected_final_percentage == 62.5

def test_pre_registration_invalid_registration_falls_back():
    p = project_with_pre_registration(START, END, "whenever", 5, 75, today=date(2025, 4, 7))
    assert p.pre_registration_days == 0
    assert p.post_registration_days == 6
    assert p.current_percentage == 83.33
    assert p.remaining_working_days == 19
    assert p.required_days == 13
    assert p.can_skip_days == 6
    assert p.is_on_track is True
    assert p.projected_final_percentage == 86.81

def test_pre_registration_missing_semester_dates():
    p = project_with_pre_registration(None, END, "08/04/2025", 5, 75, today=date(2025, 4, 15))
    assert p.required_days == 0
    assert p.is_on_track is True

def test_projection_to_dict():
    d = project(28, 40, 100, 75).to_dict()
    assert d["required_days"] == 47
    assert set(d) >= {"can_skip_days", "is_on_track", "projected_final_percentage"}

def test_pre_registration_before_start_is_on_track_for_full_attendance():
    # Working days in March must not count against a user registered early
    p = project_with_pre_registration(START, END, "01/03/2025", 6, 75, today=date(2025, 4, 7))
    assert p.post_registration_days == 6
    assert p.is_on_track is True
    assert p.actual_post_registration_performance == 100.0

def test_pre_registration_post_window_stops_at_semester_end():
    during = project_with_pre_registration(START, END, "08/04/2025", 10, 75, today=date(2025, 4, 30))
    after = project_with_pre_registration(START, END, "08/04/2025", 10, 75, today=date(2025, 5, 10))
    assert during.post_registration_days == after.post_registration_days == 18

def test_project_remaining_clamped_when_elapsed_exceeds_total():
    p = project(50, 110, 100, 75)
    assert p.remaining_working_days == 0
    assert p.can_skip_days == 0
    assert p.required_days == 25
    assert p.projected_final_percentage == 50.0

def test_project_out_of_range_target_is_clamped_and_logged(caplog):
    with caplog.at_level("WARNING", logger="attendance_tracker.projector"):
        p = project(10, 10, 10, 150)
    assert p.target_days_for_semester == 10
    assert "out of range" in caplog.text

def test_project_in_range_target_logs_nothing(caplog):
    with caplog.at_level("WARNING", logger="attendance_tracker.projector"):
        project(10, 10, 10, 80)
    assert "out of range" not in caplog.text
