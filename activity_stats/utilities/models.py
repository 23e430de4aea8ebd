"""Data models for activity log statistics."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from activity_stats.utilities import config


class ActivityCategory(str, Enum):
    """Semantic bucket an activity label is classified into."""
    WORK = "work"
    COMMUNICATION = "comm"
    OTHER = "other"


@dataclass(frozen=True)
class ColumnMap:
    """Column index for each record field; -1 means the column is absent."""
    date: int = 0
    project: int = 1
    activity_type: int = 2
    employee: int = 3
    role: int = 4
    program: int = 5
    hours: int = 6
    sessions: int = 7


@dataclass(frozen=True)
class RawRecord:
    """One decoded input row."""
    date: str
    project: str = ""
    activity_type: str = ""
    employee: str = ""
    role: str = ""
    program: str = ""
    hours: float = 0.0
    sessions: float = 0.0

    @property
    def is_admitted(self) -> bool:
        return bool(self.date) and len(self.date) >= config.MIN_DATE_KEY_LENGTH


@dataclass
class FilterOptions:
    """Thresholds for anomaly-day exclusion."""
    min_daily_hours: float = config.DEFAULT_MIN_DAILY_HOURS
    max_work_percent: float = config.DEFAULT_MAX_WORK_PERCENT


@dataclass
class DayTotals:
    """First-pass per-date totals used by the anomaly filter."""
    total: float = 0.0
    work: float = 0.0

    @property
    def work_percent(self) -> float:
        return self.work / self.total * 100 if self.total > 0 else 0.0


@dataclass
class DailyStats:
    """Hours per activity bucket for one date, optionally scoped to a project."""
    date: str
    work: float = 0.0
    comm: float = 0.0
    other: float = 0.0
    total: float = 0.0
    employees: Optional[List[str]] = None
    unique_users: Optional[int] = None

    def add(self, category: ActivityCategory, hours: float) -> None:
        if category is ActivityCategory.WORK:
            self.work += hours
        elif category is ActivityCategory.COMMUNICATION:
            self.comm += hours
        else:
            self.other += hours
        self.total += hours


@dataclass
class EmployeeStats:
    """Hour totals for one employee."""
    name: str
    role: str = ""
    work_hours: float = 0.0
    comm_hours: float = 0.0
    other_hours: float = 0.0
    total_hours: float = 0.0
    efficiency: float = 0.0

    def add(self, category: ActivityCategory, hours: float) -> None:
        if category is ActivityCategory.WORK:
            self.work_hours += hours
        elif category is ActivityCategory.COMMUNICATION:
            self.comm_hours += hours
        else:
            self.other_hours += hours
        self.total_hours += hours


@dataclass
class ProjectMeta:
    """Summary metrics for one project."""
    project_name: str
    total_hours: float = 0.0
    average_efficiency: float = 0.0


@dataclass
class AggregatedData:
    """Container for every aggregate view built from one record set."""
    daily_percents: List[DailyStats] = field(default_factory=list)
    project_trends: Dict[str, List[DailyStats]] = field(default_factory=dict)
    project_meta: Dict[str, ProjectMeta] = field(default_factory=dict)
    employee_stats: List[EmployeeStats] = field(default_factory=list)
    project_list: List[str] = field(default_factory=list)
    excluded_dates: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the input carried no usable data."""
        return not (
            self.daily_percents
            or self.project_trends
            or self.project_meta
            or self.employee_stats
            or self.project_list
        )

    def daily_frame(self) -> pd.DataFrame:
        rows = [
            {
                "date": day.date,
                "work": day.work,
                "comm": day.comm,
                "other": day.other,
                "total": day.total,
                "unique_users": day.unique_users or 0,
            }
            for day in self.daily_percents
        ]
        return pd.DataFrame(rows, columns=config.DAILY_COLUMNS)

    def project_trends_frame(self) -> pd.DataFrame:
        rows = [
            {
                "project": project,
                "date": day.date,
                "work": day.work,
                "comm": day.comm,
                "other": day.other,
                "total": day.total,
                "employees": ", ".join(day.employees or []),
            }
            for project in self.project_list
            for day in self.project_trends.get(project, [])
        ]
        return pd.DataFrame(rows, columns=config.PROJECT_TREND_COLUMNS)

    def project_meta_frame(self) -> pd.DataFrame:
        rows = [
            {
                "project_name": meta.project_name,
                "total_hours": meta.total_hours,
                "average_efficiency": meta.average_efficiency,
            }
            for meta in (self.project_meta[name] for name in self.project_list)
        ]
        return pd.DataFrame(rows, columns=config.PROJECT_META_COLUMNS)

    def employee_frame(self) -> pd.DataFrame:
        rows = [
            {column: getattr(employee, column) for column in config.EMPLOYEE_COLUMNS}
            for employee in self.employee_stats
        ]
        return pd.DataFrame(rows, columns=config.EMPLOYEE_COLUMNS)


@dataclass
class ActivityFile:
    """Decoded contents of one activity log file."""
    path: str
    text: str
    encoding: str
    used_fallback: bool = False
