"""Data classes for the attendance domain model."""
from dataclasses import dataclass, asdict
from datetime import date
from typing import Optional

PRESENT = "present"
ABSENT = "absent"
STATUSES = (PRESENT, ABSENT)

DEFAULT_TARGET_PERCENTAGE = 75.0


@dataclass
class AttendanceRecord:
    user_id: str
    classroom_id: str
    class_id: str
    date: str  # YYYY-MM-DD
    status: str
    marked_at: str
    updated_at: Optional[str] = None
    reason: Optional[str] = None

    @property
    def id(self) -> str:
        return record_id(self.user_id, self.class_id, self.date)


@dataclass
class AttendanceStreak:
    user_id: str
    current_streak: int = 0
    last_checked_date: Optional[str] = None
    total_days_marked: int = 0
    longest_streak: int = 0
    updated_at: Optional[str] = None


@dataclass
class SubjectAttendanceStats:
    user_id: str
    classroom_id: str
    class_id: str
    subject: str = ""
    instructor: str = ""
    total_classes: int = 0
    attended_classes: int = 0
    absent_classes: int = 0
    attendance_percentage: float = 0.0
    last_marked_date: Optional[str] = None
    last_marked_status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def id(self) -> str:
        return stats_id(self.user_id, self.classroom_id, self.class_id)


@dataclass
class ClassSchedule:
    id: str
    classroom_id: str
    name: str
    day: str  # weekday name, e.g. "Monday"
    instructor: str = ""
    start_time: str = ""
    end_time: str = ""
    location: str = ""


@dataclass
class SemesterWindow:
    start_date: date
    end_date: date
    registration_date: Optional[date] = None
    target_percentage: float = DEFAULT_TARGET_PERCENTAGE


@dataclass
class SemesterProgress:
    total_working_days: int = 0
    elapsed_working_days: int = 0
    remaining_working_days: int = 0
    progress_percentage: float = 0.0


@dataclass
class Projection:
    required_days: int = 0
    can_skip_days: int = 0
    is_on_track: bool = True
    current_percentage: float = 0.0
    remaining_working_days: int = 0
    target_days_for_semester: int = 0
    projected_final_percentage: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PreRegistrationProjection(Projection):
    """Projection that credits target-rate attendance before registration."""
    pre_registration_days: int = 0
    post_registration_days: int = 0
    assumed_pre_registration_attendance: int = 0
    actual_post_registration_performance: float = 0.0


def record_id(user_id: str, class_id: str, day: str) -> str:
    return f"{user_id}_{class_id}_{day}"


def stats_id(user_id: str, classroom_id: str, class_id: str) -> str:
    return f"{user_id}_{classroom_id}_{class_id}"
