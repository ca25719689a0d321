"""Semester attendance projection.

Answers "how many more days must I attend, and how many can I miss, to end
the semester at my target percentage?".

Two models are provided:

``project``
    Plain projection from attended/elapsed/total working-day counts. The
    forward forecast assumes the current attendance rate continues.

``project_with_pre_registration``
    For users who joined mid-semester. Working days before registration
    are credited at exactly the target rate; days after registration use
    the real attendance count. "On track" is judged on the blended figure,
    while the forecast only trusts the observed post-registration rate.

Neither function raises for bad input. Malformed counts become 0, a
missing target becomes 75, and impossible windows produce degenerate
results (see the individual functions).
"""
import logging
from collections.abc import Collection
from dataclasses import asdict
from datetime import date

from attendance_tracker.dates import coerce_date
from attendance_tracker.models import (
    DEFAULT_TARGET_PERCENTAGE, PreRegistrationProjection, Projection,
)
from attendance_tracker.semester import (
    count_working_days, elapsed_working_days, remaining_working_days,
)
from attendance_tracker.util import ceil_days, percentage, round2, round_half_up
from attendance_tracker.workdays import DEFAULT_HOLIDAYS

logger = logging.getLogger(__name__)


def _as_count(value, label: str) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric %s %r, using 0", label, value)
        return 0
    if count < 0:
        logger.warning("Negative %s %r, using 0", label, value)
        return 0
    return count


def _as_target(value) -> float:
    if value is None or value == "":
        return DEFAULT_TARGET_PERCENTAGE
    try:
        target = float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric target percentage %r, using %s", value, DEFAULT_TARGET_PERCENTAGE)
        return DEFAULT_TARGET_PERCENTAGE
    clamped = min(max(target, 0.0), 100.0)
    if clamped != target:
        logger.warning("Target percentage %r out of range, using %s", value, clamped)
    return clamped


def target_days(target_percentage: float, total_working_days: int) -> int:
    return ceil_days(target_percentage / 100 * total_working_days)


def _forecast(attended: float, remaining: int, rate_percentage: float, total: int) -> float:
    return percentage(attended + remaining * rate_percentage / 100, total)


def project(attended_days, elapsed_working_days, total_working_days,
            target_percentage=DEFAULT_TARGET_PERCENTAGE) -> Projection:
    """Project the semester outcome from raw working-day counts.

    Args:
        attended_days: Working days attended so far
        elapsed_working_days: Working days elapsed since the semester start
        total_working_days: Working days in the whole semester
        target_percentage: Required attendance, 0-100 (default 75)

    Returns:
        Projection with percentages rounded to 2 places.
    """
    attended = _as_count(attended_days, "attended days")
    elapsed = _as_count(elapsed_working_days, "elapsed working days")
    total = _as_count(total_working_days, "total working days")
    target = _as_target(target_percentage)

    current = percentage(attended, elapsed)
    goal = target_days(target, total)
    # Clamped so an elapsed count past the semester end leaves 0 remaining.
    remaining = max(0, total - elapsed)
    required = max(0, goal - attended)
    result = Projection(
        required_days=required,
        can_skip_days=max(0, remaining - required),
        is_on_track=current >= target,
        current_percentage=round2(current),
        remaining_working_days=remaining,
        target_days_for_semester=goal,
        projected_final_percentage=round2(_forecast(attended, remaining, current, total)),
    )
    logger.debug("Projection for attended=%d elapsed=%d total=%d target=%s: %s",
                 attended, elapsed, total, target, result)
    return result


def _semester_over() -> PreRegistrationProjection:
    return PreRegistrationProjection(is_on_track=True)


def _not_started(target: float, total: int) -> PreRegistrationProjection:
    goal = target_days(target, total)
    return PreRegistrationProjection(
        required_days=goal,
        can_skip_days=0,
        is_on_track=True,
        remaining_working_days=total,
        target_days_for_semester=goal,
    )


def _project_without_registration(start: date, end: date, attended: int, target: float,
                                  today: date, holidays: Collection) -> PreRegistrationProjection:
    total = count_working_days(start, end, holidays)
    elapsed = elapsed_working_days(start, today, holidays)
    remaining = remaining_working_days(end, today, holidays)

    current = percentage(attended, elapsed)
    goal = target_days(target, total)
    required = max(0, goal - attended)
    return PreRegistrationProjection(
        required_days=required,
        can_skip_days=max(0, remaining - required),
        is_on_track=current >= target,
        current_percentage=round2(current),
        remaining_working_days=remaining,
        target_days_for_semester=goal,
        projected_final_percentage=round2(_forecast(attended, remaining, current, total)),
        post_registration_days=elapsed,
        actual_post_registration_performance=round2(current),
    )


def project_with_pre_registration(semester_start, semester_end, registration_date,
                                  actual_attended_days,
                                  target_percentage=DEFAULT_TARGET_PERCENTAGE,
                                  today: date | None = None,
                                  holidays: Collection = DEFAULT_HOLIDAYS) -> PreRegistrationProjection:
    """Project the semester outcome for a user who registered mid-semester.

    Degenerate results:

    * registration after the semester end: all zeros, on track;
    * today before the semester start: the whole-semester target is
      required and every working day remains, on track;
    * unparsable registration date: the plain model over the whole
      semester with the attendance count as given;
    * unparsable semester bounds: all zeros, on track.

    The post-registration window is clipped to the semester: it starts no
    earlier than the semester start and ends no later than the semester end.
    """
    today = today or date.today()
    attended = _as_count(actual_attended_days, "attended days")
    target = _as_target(target_percentage)
    start = coerce_date(semester_start, "semester start date")
    end = coerce_date(semester_end, "semester end date")
    registered = coerce_date(registration_date, "registration date")

    if start is None or end is None:
        logger.error("Semester window incomplete (%r to %r)", semester_start, semester_end)
        return PreRegistrationProjection(is_on_track=True)

    if registered is not None and registered > end:
        logger.warning("Registered on %s after the semester ended on %s", registered, end)
        return _semester_over()

    if today < start:
        logger.info("Semester starting %s has not begun yet", start)
        return _not_started(target, count_working_days(start, end, holidays))

    if registered is None:
        logger.error("Invalid registration date %r, using the plain projection", registration_date)
        return _project_without_registration(start, end, attended, target, today, holidays)

    total = count_working_days(start, end, holidays)
    # Both periods are clipped to the semester window.
    pre_days = count_working_days(start, registered, holidays) if registered >= start else 0
    counted_from = max(registered, start)
    counted_to = min(today, end)
    post_days = count_working_days(counted_from, counted_to, holidays) if counted_from <= counted_to else 0
    remaining = count_working_days(today, end, holidays) if today <= end else 0

    assumed = round_half_up(target / 100 * pre_days)
    post_rate = percentage(attended, post_days)
    total_attended = assumed + attended
    current = percentage(total_attended, pre_days + post_days)

    goal = target_days(target, total)
    required = max(0, goal - total_attended)
    result = PreRegistrationProjection(
        required_days=required,
        can_skip_days=max(0, remaining - required),
        is_on_track=current >= target,
        current_percentage=round2(current),
        remaining_working_days=remaining,
        target_days_for_semester=goal,
        projected_final_percentage=round2(_forecast(total_attended, remaining, post_rate, total)),
        pre_registration_days=pre_days,
        post_registration_days=post_days,
        assumed_pre_registration_attendance=assumed,
        actual_post_registration_performance=round2(post_rate),
    )
    logger.debug("Pre-registration projection: %s", asdict(result))
    return result
