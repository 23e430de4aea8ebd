"""Configuration constants and settings for activity log statistics."""
import os
from typing import Dict, Tuple

# ============================================================================
# FILTER CONFIGURATION
# ============================================================================

# Days with fewer total hours are treated as anomalies (0 disables the rule)
DEFAULT_MIN_DAILY_HOURS = float(os.getenv("ACTIVITY_MIN_DAILY_HOURS", "0"))

# Days whose work share reaches this percent are anomalies (101 disables the rule)
DEFAULT_MAX_WORK_PERCENT = float(os.getenv("ACTIVITY_MAX_WORK_PERCENT", "101"))

# ============================================================================
# FILE / ENCODING CONFIGURATION
# ============================================================================

PRIMARY_ENCODING = os.getenv("ACTIVITY_PRIMARY_ENCODING", "utf-8")
FALLBACK_ENCODING = os.getenv("ACTIVITY_FALLBACK_ENCODING", "windows-1251")

ALLOWED_SUFFIXES = {".csv"}

REPLACEMENT_CHAR = "\ufffd"

# Case-sensitive; at least one must appear in correctly decoded text
ENCODING_CHECK_KEYWORDS: Tuple[str, ...] = (
    "День", "Сотрудник", "Проект", "Тип", "Часов",
    "Date", "Employee", "Project", "Type", "Hours",
)

# ============================================================================
# COLUMN DEFINITIONS
# ============================================================================

# Positional layout used when the file has no recognizable header
DEFAULT_COLUMN_ORDER: Tuple[str, ...] = (
    "date",
    "project",
    "activity_type",
    "employee",
    "role",
    "program",
    "hours",
    "sessions",
)

# Any of these in the first line marks it as a header row
HEADER_KEYWORDS: Tuple[str, ...] = ("день", "date", "сотрудник", "часов")

# Per-field header keywords, searched in order against lowercased headers
COLUMN_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "date": ("день", "date"),
    "project": ("проект", "project"),
    "activity_type": ("тип активности", "activity", "тип"),
    "employee": ("сотрудник", "employee", "name", "фио"),
    "role": ("должность", "role", "position"),
    "program": ("программа", "program", "app"),
    "hours": ("часов", "hours", "time", "duration"),
    "sessions": ("сессий", "sessions"),
}

# Without these a derived mapping is discarded in favour of the positional one
REQUIRED_HEADER_COLUMNS: Tuple[str, ...] = ("date", "hours")

# Column used for the activity label when the header does not name it
DEFAULT_ACTIVITY_COLUMN = 2

NOT_FOUND = -1

# ============================================================================
# BUSINESS RULES
# ============================================================================

# Shorter date keys are never admitted into aggregation
MIN_DATE_KEY_LENGTH = 5

WORK_KEYWORDS: Tuple[str, ...] = ("работ", "work", "prod", "dev", "проект")
COMMUNICATION_KEYWORDS: Tuple[str, ...] = ("коммун", "comm", "meet", "vks", "mail", "chat")

# Employees below this many work hours are flagged as "low data" in reports
LOW_DATA_WORK_HOURS = float(os.getenv("ACTIVITY_LOW_DATA_WORK_HOURS", "10"))

# ============================================================================
# REPORT CONFIGURATION
# ============================================================================

REPORT_ENCODING = "utf-8-sig"

DAILY_REPORT_FILE = "daily_stats.csv"
PROJECT_TRENDS_REPORT_FILE = "project_trends.csv"
PROJECT_META_REPORT_FILE = "project_meta.csv"
EMPLOYEE_REPORT_FILE = "employee_stats.csv"

DAILY_COLUMNS = ["date", "work", "comm", "other", "total", "unique_users"]

PROJECT_TREND_COLUMNS = ["project", "date", "work", "comm", "other", "total", "employees"]

PROJECT_META_COLUMNS = ["project_name", "total_hours", "average_efficiency"]

EMPLOYEE_COLUMNS = [
    "name",
    "role",
    "work_hours",
    "comm_hours",
    "other_hours",
    "total_hours",
    "efficiency",
]
