"""Database initialization and connection management."""
import os
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = os.environ.get(
    "ATTENDANCE_TRACKER_DB", str(Path.home() / ".attendance_tracker" / "attendance.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    nickname TEXT,
    semester_start_date TEXT,
    semester_end_date TEXT,
    attendance_target REAL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS classrooms (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    attendance_target REAL DEFAULT 75,
    created_by TEXT REFERENCES users(id),
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS classroom_members (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    classroom_id TEXT NOT NULL REFERENCES classrooms(id),
    user_id TEXT NOT NULL REFERENCES users(id),
    joined_at TEXT,
    UNIQUE(classroom_id, user_id)
);

CREATE TABLE IF NOT EXISTS class_schedules (
    id TEXT PRIMARY KEY,
    classroom_id TEXT NOT NULL REFERENCES classrooms(id),
    name TEXT NOT NULL,
    instructor TEXT DEFAULT '',
    day TEXT NOT NULL,
    start_time TEXT,
    end_time TEXT,
    location TEXT DEFAULT ''
);

CREATE TABLE IF NOT EXISTS attendance_records (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    classroom_id TEXT NOT NULL,
    class_id TEXT NOT NULL,
    date TEXT NOT NULL,
    status TEXT NOT NULL CHECK (status IN ('present', 'absent')),
    reason TEXT,
    marked_at TEXT NOT NULL,
    updated_at TEXT,
    UNIQUE(user_id, class_id, date)
);

CREATE TABLE IF NOT EXISTS attendance_streaks (
    user_id TEXT PRIMARY KEY,
    current_streak INTEGER NOT NULL DEFAULT 0,
    last_checked_date TEXT,
    total_days_marked INTEGER NOT NULL DEFAULT 0,
    longest_streak INTEGER NOT NULL DEFAULT 0,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS subject_attendance_stats (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    classroom_id TEXT NOT NULL,
    class_id TEXT NOT NULL,
    subject TEXT DEFAULT '',
    instructor TEXT DEFAULT '',
    total_classes INTEGER NOT NULL DEFAULT 0,
    attended_classes INTEGER NOT NULL DEFAULT 0,
    absent_classes INTEGER NOT NULL DEFAULT 0,
    attendance_percentage REAL NOT NULL DEFAULT 0,
    last_marked_date TEXT,
    last_marked_status TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS holidays (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    year INTEGER,
    month INTEGER NOT NULL,
    day INTEGER NOT NULL,
    name TEXT DEFAULT '',
    UNIQUE(year, month, day)
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
