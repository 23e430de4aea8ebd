"""Anomaly-day detection for activity logs."""
import logging
from typing import Dict, Iterable, Mapping, Set

from activity_stats.transformers import classifier
from activity_stats.utilities import config
from activity_stats.utilities.models import ActivityCategory, DayTotals, RawRecord

logger = logging.getLogger(__name__)


def daily_totals(records: Iterable[RawRecord]) -> Dict[str, DayTotals]:
    """
    Sum total and work hours per date over admitted records.

    The result does not depend on filter thresholds and can be reused
    across re-aggregations.

    Args:
        records: Decoded records

    Returns:
        Mapping of date key to its totals
    """
    totals: Dict[str, DayTotals] = {}
    for record in records:
        if not record.is_admitted:
            continue
        day = totals.setdefault(record.date, DayTotals())
        day.total += record.hours
        if classifier.classify(record.activity_type) is ActivityCategory.WORK:
            day.work += record.hours
    return totals


def excluded_from_totals(
    totals: Mapping[str, DayTotals],
    min_daily_hours: float = config.DEFAULT_MIN_DAILY_HOURS,
    max_work_percent: float = config.DEFAULT_MAX_WORK_PERCENT,
) -> Set[str]:
    """
    Select anomaly days from precomputed per-date totals.

    A day is excluded when its total is below min_daily_hours, or when it has
    hours and its work share is at least max_work_percent.

    Args:
        totals: Per-date totals from daily_totals()
        min_daily_hours: Inclusive lower bound on a real day's hours
        max_work_percent: Work percent at or above which a day is excluded

    Returns:
        Set of excluded date keys
    """
    excluded = {
        date_key
        for date_key, day in totals.items()
        if day.total < min_daily_hours
        or (day.total > 0 and day.work_percent >= max_work_percent)
    }
    if excluded:
        logger.info(
            "Excluding %d of %d day(s) (min hours %s, max work %s%%)",
            len(excluded),
            len(totals),
            min_daily_hours,
            max_work_percent,
        )
    return excluded


def compute_excluded_dates(
    records: Iterable[RawRecord],
    min_daily_hours: float = config.DEFAULT_MIN_DAILY_HOURS,
    max_work_percent: float = config.DEFAULT_MAX_WORK_PERCENT,
) -> Set[str]:
    """Compute the set of dates to drop from every aggregate."""
    return excluded_from_totals(daily_totals(records), min_daily_hours, max_work_percent)
