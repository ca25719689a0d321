# tests/test_holidays.py
from datetime import date
import pytest
from attendance_tracker.db import init_db
from attendance_tracker.holidays import add_holiday, remove_holiday, list_holidays, load_holidays
from attendance_tracker.workdays import DEFAULT_HOLIDAYS
from attendance_tracker.semester import count_working_days


def test_load_falls_back_to_default_table(tmp_db):
    init_db(tmp_db)
    assert load_holidays(tmp_db) == DEFAULT_HOLIDAYS

def test_yearly_table(tmp_db):
    init_db(tmp_db)
    add_holiday(tmp_db, 1, 26, "Republic Day")
    add_holiday(tmp_db, 10, 20, "Diwali", year=2025)
    add_holiday(tmp_db, 11, 8, "Diwali", year=2026)
    table = load_holidays(tmp_db, years=[2025])
    assert (1, 26) in table
    assert date(2025, 10, 20) in table
    assert date(2026, 11, 8) not in table
    assert len(load_holidays(tmp_db)) == 3

def test_yearly_table_changes_working_day_counts(tmp_db):
    init_db(tmp_db)
    add_holiday(tmp_db, 10, 20, "Diwali", year=2025)
    table = load_holidays(tmp_db)
    # Oct 20 2025 is a Monday; Oct 31 is no longer a holiday under this table
    assert count_working_days(date(2025, 10, 20), date(2025, 10, 20), table) == 0
    assert count_working_days(date(2025, 10, 31), date(2025, 10, 31), table) == 1

def test_duplicate_and_remove(tmp_db):
    init_db(tmp_db)
    assert add_holiday(tmp_db, 12, 25, "Christmas") is True
    assert add_holiday(tmp_db, 12, 25, "Christmas") is False
    assert add_holiday(tmp_db, 12, 25, "Christmas", year=2030) is True
    assert remove_holiday(tmp_db, 12, 25) is True
    assert remove_holiday(tmp_db, 12, 25) is False
    assert list_holidays(tmp_db) == [{"year": 2030, "month": 12, "day": 25, "name": "Christmas"}]

def test_invalid_holiday_rejected(tmp_db):
    init_db(tmp_db)
    with pytest.raises(ValueError):
        add_holiday(tmp_db, 2, 30)
    add_holiday(tmp_db, 2, 29, "Leap day")
    with pytest.raises(ValueError):
        add_holiday(tmp_db, 2, 29, year=2025)
