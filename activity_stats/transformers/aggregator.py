"""Aggregation of activity records into daily, project and employee views."""
import logging
from collections import defaultdict
from typing import AbstractSet, Dict, Iterable, List, Optional

from activity_stats.transformers import classifier
from activity_stats.utilities import utils
from activity_stats.utilities.models import (
    ActivityCategory,
    AggregatedData,
    DailyStats,
    EmployeeStats,
    ProjectMeta,
    RawRecord,
)

logger = logging.getLogger(__name__)


class _Tally:
    """Work and total hours of one employee within one project."""

    __slots__ = ("work", "total")

    def __init__(self) -> None:
        self.work = 0.0
        self.total = 0.0


def aggregate(
    records: Iterable[RawRecord],
    excluded_dates: Optional[AbstractSet[str]] = None,
) -> AggregatedData:
    """
    Fold records into every aggregate view in a single pass.

    Records without a usable date, and records on excluded dates, are skipped.
    Empty project or employee names keep a record out of the project or
    employee structures respectively.

    Args:
        records: Decoded records
        excluded_dates: Date keys to drop from all views

    Returns:
        Finalized aggregate data
    """
    excluded = excluded_dates or frozenset()

    daily: Dict[str, DailyStats] = {}
    daily_users: Dict[str, Dict[str, None]] = defaultdict(dict)
    project_days: Dict[str, Dict[str, DailyStats]] = {}
    project_day_users: Dict[str, Dict[str, Dict[str, None]]] = defaultdict(lambda: defaultdict(dict))
    employees: Dict[str, EmployeeStats] = {}
    tallies: Dict[str, Dict[str, _Tally]] = defaultdict(lambda: defaultdict(_Tally))
    projects = set()

    for record in records:
        if not record.is_admitted or record.date in excluded:
            continue

        category = classifier.classify(record.activity_type)
        hours = record.hours

        day = daily.get(record.date)
        if day is None:
            day = daily[record.date] = DailyStats(date=record.date)
        day.add(category, hours)
        if record.employee:
            daily_users[record.date][record.employee] = None

        if record.project:
            projects.add(record.project)
            days = project_days.setdefault(record.project, {})
            project_day = days.get(record.date)
            if project_day is None:
                project_day = days[record.date] = DailyStats(date=record.date)
            project_day.add(category, hours)

            if record.employee:
                project_day_users[record.project][record.date][record.employee] = None
                tally = tallies[record.project][record.employee]
                tally.total += hours
                if category is ActivityCategory.WORK:
                    tally.work += hours

        if record.employee:
            employee = employees.get(record.employee)
            if employee is None:
                # Role is taken from the first record only
                employee = employees[record.employee] = EmployeeStats(
                    name=record.employee,
                    role=record.role,
                )
            employee.add(category, hours)

    result = AggregatedData(
        daily_percents=_finalize_daily(daily, daily_users),
        project_trends=_finalize_project_trends(project_days, project_day_users),
        employee_stats=_finalize_employees(employees),
        project_list=sorted(projects),
        excluded_dates=utils.chronological_order(excluded),
    )
    result.project_meta = _finalize_project_meta(result.project_trends, tallies)

    logger.debug(
        "Aggregated %d day(s), %d project(s), %d employee(s)",
        len(result.daily_percents),
        len(result.project_list),
        len(result.employee_stats),
    )
    return result


def _finalize_daily(
    daily: Dict[str, DailyStats],
    daily_users: Dict[str, Dict[str, None]],
) -> List[DailyStats]:
    series = []
    for date_key in utils.chronological_order(daily):
        day = daily[date_key]
        day.unique_users = len(daily_users.get(date_key, ()))
        series.append(day)
    return series


def _finalize_project_trends(
    project_days: Dict[str, Dict[str, DailyStats]],
    project_day_users: Dict[str, Dict[str, Dict[str, None]]],
) -> Dict[str, List[DailyStats]]:
    trends: Dict[str, List[DailyStats]] = {}
    for project, days in project_days.items():
        users = project_day_users.get(project, {})
        series = []
        for date_key in utils.chronological_order(days):
            day = days[date_key]
            day.employees = list(users.get(date_key, ()))
            series.append(day)
        trends[project] = series
    return trends


def _work_percent(work: float, total: float) -> float:
    """Work share of total hours as a percentage, kept within 0..100."""
    if total <= 0:
        return 0.0
    # Negative hours in the log can push the raw ratio outside the range
    return min(max(work / total * 100, 0.0), 100.0)


def _finalize_employees(employees: Dict[str, EmployeeStats]) -> List[EmployeeStats]:
    for employee in employees.values():
        employee.efficiency = _work_percent(employee.work_hours, employee.total_hours)
    return list(employees.values())


def _finalize_project_meta(
    project_trends: Dict[str, List[DailyStats]],
    tallies: Dict[str, Dict[str, _Tally]],
) -> Dict[str, ProjectMeta]:
    """
    Build per-project summaries.

    Average efficiency is the plain mean of each contributor's own work
    percentage within the project, not weighted by hours. Contributors with
    no hours on the project are left out of the mean.
    """
    meta: Dict[str, ProjectMeta] = {}
    for project in sorted(project_trends):
        total_hours = sum(day.total for day in project_trends[project])
        ratios = [
            _work_percent(tally.work, tally.total)
            for tally in tallies.get(project, {}).values()
            if tally.total > 0
        ]
        average = sum(ratios) / len(ratios) if ratios else 0.0
        meta[project] = ProjectMeta(
            project_name=project,
            total_hours=total_hours,
            average_efficiency=average,
        )
    return meta
