"""Tests for anomaly-day detection."""
from activity_stats.transformers import anomaly_filter
from activity_stats.utilities.models import RawRecord


def _record(date, hours, activity="Работа"):
    return RawRecord(date=date, project="P", activity_type=activity, employee="E", hours=hours)


RECORDS = [
    _record("2024-01-01", 6),
    _record("2024-01-01", 2, "Meeting"),
    _record("2024-01-02", 3),
    _record("2024-01-03", 4, "Прочее"),
    _record("2024-01-03", 4),
    _record("2024-01-04", 0, "Прочее"),
    _record("bad", 100),
]


def test_daily_totals_skip_records_without_usable_date():
    totals = anomaly_filter.daily_totals(RECORDS)
    assert set(totals) == {"2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"}
    assert totals["2024-01-01"].total == 8
    assert totals["2024-01-01"].work == 6
    assert totals["2024-01-04"].work_percent == 0


def test_defaults_exclude_nothing():
    assert anomaly_filter.compute_excluded_dates(RECORDS) == set()


def test_min_daily_hours():
    excluded = anomaly_filter.compute_excluded_dates(RECORDS, min_daily_hours=5)
    assert excluded == {"2024-01-02", "2024-01-04"}


def test_min_daily_hours_is_inclusive_lower_bound():
    assert "2024-01-01" not in anomaly_filter.compute_excluded_dates(RECORDS, min_daily_hours=8)


def test_max_work_percent_is_inclusive():
    excluded = anomaly_filter.compute_excluded_dates(RECORDS, max_work_percent=75)
    # 01: 75%, 02: 100%, 03: 50%, 04: no hours
    assert excluded == {"2024-01-01", "2024-01-02"}


def test_zero_total_day_never_excluded_by_percent():
    excluded = anomaly_filter.compute_excluded_dates(RECORDS, max_work_percent=0)
    assert "2024-01-04" not in excluded


def test_raising_min_hours_only_grows_exclusions():
    totals = anomaly_filter.daily_totals(RECORDS)
    previous = set()
    for threshold in (0, 1, 3, 3.5, 8, 8.5, 100):
        excluded = anomaly_filter.excluded_from_totals(totals, min_daily_hours=threshold)
        assert previous <= excluded
        previous = excluded
