"""Exceptions raised by the store-facing layer.

Calculation functions never raise for expected edge cases; these are for
commands that can't be carried out and for storage failures.
"""


class TrackerError(Exception):
    """Base class for attendance tracker errors."""


class ValidationError(TrackerError):
    """A command was given input it can't act on (e.g. an unknown status)."""


class RecordNotFoundError(TrackerError):
    """The attendance record to correct does not exist."""


class StoreError(TrackerError):
    """The database failed while reading or writing attendance data."""
