"""Working-day calendar: Sundays and holidays don't count toward attendance."""
from collections.abc import Collection
from datetime import date

# Month-day pairs; they recur every year.
DEFAULT_HOLIDAYS = frozenset({
    (1, 26),   # Republic Day
    (8, 15),   # Independence Day
    (10, 2),   # Gandhi Jayanti
    (12, 25),  # Christmas
    (5, 1),    # Labour Day
    # Movable holidays pinned to their 2025 dates. They are wrong in other
    # years unless a yearly table is loaded (see holidays.load_holidays).
    (4, 10),   # Ram Navami
    (4, 18),   # Good Friday
    (10, 31),  # Diwali
    (3, 14),   # Holi
    (8, 16),   # Janmashtami
})

REST_WEEKDAY = 6  # date.weekday() for Sunday

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def is_sunday(day: date) -> bool:
    return day.weekday() == REST_WEEKDAY


def is_holiday(day: date, holidays: Collection = DEFAULT_HOLIDAYS) -> bool:
    """Check ``day`` against a holiday table.

    The table may mix ``(month, day)`` pairs, which recur every year, with
    full ``date`` entries that only apply to that year.
    """
    return (day.month, day.day) in holidays or day in holidays


def is_working_day(day: date, holidays: Collection = DEFAULT_HOLIDAYS) -> bool:
    return not is_sunday(day) and not is_holiday(day, holidays)


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]
