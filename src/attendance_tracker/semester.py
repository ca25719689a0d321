"""Working-day counts over a semester window."""
import logging
from collections.abc import Collection
from datetime import date, timedelta

from attendance_tracker.dates import coerce_date
from attendance_tracker.models import SemesterProgress
from attendance_tracker.util import percentage, round2
from attendance_tracker.workdays import DEFAULT_HOLIDAYS, is_working_day

logger = logging.getLogger(__name__)


def count_working_days(start, end, holidays: Collection = DEFAULT_HOLIDAYS) -> int:
    """Count working days in [start, end], both inclusive.

    Accepts dates or any text parse_date understands. Unparsable bounds or
    start after end give 0 and are logged as errors.
    """
    start_date = coerce_date(start, "start date")
    end_date = coerce_date(end, "end date")
    if start_date is None or end_date is None:
        logger.error("Cannot count working days between %r and %r", start, end)
        return 0
    if start_date > end_date:
        logger.error("Start date %s is after end date %s", start_date, end_date)
        return 0
    if start_date == end_date:
        return 1 if is_working_day(start_date, holidays) else 0

    working = 0
    current = start_date
    while current <= end_date:
        if is_working_day(current, holidays):
            working += 1
        current += timedelta(days=1)
    logger.debug("%d working days from %s to %s", working, start_date, end_date)
    return working


def elapsed_working_days(semester_start, today: date | None = None,
                         holidays: Collection = DEFAULT_HOLIDAYS) -> int:
    """Working days from the semester start up to and including today."""
    today = today or date.today()
    start = coerce_date(semester_start, "semester start date")
    if start is None:
        logger.error("Invalid semester start date: %r", semester_start)
        return 0
    if today < start:
        return 0
    return count_working_days(start, today, holidays)


def remaining_working_days(semester_end, today: date | None = None,
                           holidays: Collection = DEFAULT_HOLIDAYS) -> int:
    """Working days from today through the semester end, today included."""
    today = today or date.today()
    end = coerce_date(semester_end, "semester end date")
    if end is None:
        logger.error("Invalid semester end date: %r", semester_end)
        return 0
    if today > end:
        return 0
    return count_working_days(today, end, holidays)


def get_semester_progress(start, end, today: date | None = None,
                          holidays: Collection = DEFAULT_HOLIDAYS) -> SemesterProgress:
    total = count_working_days(start, end, holidays)
    # Elapsed can overshoot the total once today is past the end date.
    elapsed = min(elapsed_working_days(start, today, holidays), total)
    return SemesterProgress(
        total_working_days=total,
        elapsed_working_days=elapsed,
        remaining_working_days=max(0, total - elapsed),
        progress_percentage=round2(percentage(elapsed, total)),
    )
