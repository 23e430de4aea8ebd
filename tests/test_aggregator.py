"""Tests for record aggregation."""
import pytest

from activity_stats.transformers import aggregator, anomaly_filter
from activity_stats.utilities.models import RawRecord


def _record(date, project, activity, employee, hours, role=""):
    return RawRecord(
        date=date,
        project=project,
        activity_type=activity,
        employee=employee,
        role=role,
        hours=hours,
    )


@pytest.fixture
def records():
    return [
        _record("2024-01-10", "Beta", "Работа", "Alice", 4, role="Dev"),
        _record("2024-01-02", "Alpha", "Meeting", "Alice", 2, role="Lead"),
        _record("2024-01-02", "Alpha", "Работа", "Bob", 3, role="QA"),
        _record("2024-01-02", "Alpha", "Прочее", "", 1),
        _record("2024-01-02", "", "Чат", "Carol", 5, role="PM"),
        _record("2024-01-02", "Alpha", "Work", "Bob", 0.5),
        _record("24", "Alpha", "Работа", "Bob", 100),
        _record("", "Alpha", "Работа", "Bob", 100),
    ]


def test_daily_series_sorted_with_unique_users(records):
    data = aggregator.aggregate(records)
    assert [day.date for day in data.daily_percents] == ["2024-01-02", "2024-01-10"]

    first = data.daily_percents[0]
    assert first.work == 3.5
    assert first.comm == 2
    assert first.other == 6
    assert first.total == 11.5
    assert first.unique_users == 3
    assert first.employees is None


def test_totals_equal_category_sums(records):
    data = aggregator.aggregate(records)
    buckets = list(data.daily_percents)
    for series in data.project_trends.values():
        buckets.extend(series)
    for day in buckets:
        assert day.total == day.work + day.comm + day.other


def test_project_trends_carry_employee_lists(records):
    data = aggregator.aggregate(records)
    alpha = data.project_trends["Alpha"]
    assert len(alpha) == 1
    assert alpha[0].employees == ["Alice", "Bob"]
    assert alpha[0].total == 6.5
    assert alpha[0].other == 1
    assert alpha[0].unique_users is None
    assert data.project_list == ["Alpha", "Beta"]


def test_empty_project_stays_out_of_project_views(records):
    data = aggregator.aggregate(records)
    assert "" not in data.project_trends
    carol = next(e for e in data.employee_stats if e.name == "Carol")
    assert carol.other_hours == 5


def test_employee_role_is_taken_from_first_record(records):
    data = aggregator.aggregate(records)
    alice = next(e for e in data.employee_stats if e.name == "Alice")
    assert alice.role == "Dev"
    assert alice.total_hours == 6
    bob = next(e for e in data.employee_stats if e.name == "Bob")
    assert bob.role == "QA"


def test_efficiency_bounds(records):
    data = aggregator.aggregate(records + [_record("2024-01-03", "", "Прочее", "Dave", 0)])
    for employee in data.employee_stats:
        if employee.total_hours > 0:
            assert 0 <= employee.efficiency <= 100
        else:
            assert employee.efficiency == 0
    alice = next(e for e in data.employee_stats if e.name == "Alice")
    assert alice.efficiency == pytest.approx(4 / 6 * 100)


def test_project_meta(records):
    data = aggregator.aggregate(records)
    alpha = data.project_meta["Alpha"]
    assert alpha.project_name == "Alpha"
    assert alpha.total_hours == 6.5
    # Alice 0%, Bob 100%
    assert alpha.average_efficiency == pytest.approx(50)
    assert data.project_meta["Beta"].average_efficiency == pytest.approx(100)


def test_average_efficiency_is_not_hours_weighted():
    data = aggregator.aggregate([
        _record("2024-03-01", "P", "Работа", "Short", 1),
        _record("2024-03-01", "P", "Работа", "Long", 50),
        _record("2024-03-01", "P", "Прочее", "Long", 450),
    ])
    assert data.project_meta["P"].average_efficiency == pytest.approx(55)


def test_project_without_named_employees_has_zero_efficiency():
    data = aggregator.aggregate([_record("2024-03-01", "P", "Работа", "", 4)])
    assert data.project_meta["P"].total_hours == 4
    assert data.project_meta["P"].average_efficiency == 0
    assert data.project_trends["P"][0].employees == []
    assert data.employee_stats == []


def test_contributor_without_project_hours_left_out_of_average():
    data = aggregator.aggregate([
        _record("2024-01-01", "P", "Работа", "Worker", 4),
        _record("2024-01-01", "P", "Прочее", "Idle", 0),
    ])
    assert data.project_meta["P"].average_efficiency == pytest.approx(100)
    assert data.project_trends["P"][0].employees == ["Worker", "Idle"]


def test_project_employees_keep_first_seen_order():
    data = aggregator.aggregate([
        _record("2024-01-01", "P", "Работа", "Bob", 2),
        _record("2024-01-01", "P", "Meeting", "Alice", 1),
        _record("2024-01-01", "P", "Работа", "Bob", 1),
    ])
    assert data.project_trends["P"][0].employees == ["Bob", "Alice"]


def test_negative_hours_keep_efficiency_within_bounds():
    data = aggregator.aggregate([
        _record("2024-01-01", "P", "Работа", "Neg", -5),
        _record("2024-01-01", "P", "Chat", "Neg", 10),
        _record("2024-01-01", "P", "Работа", "Over", 10),
        _record("2024-01-01", "P", "Chat", "Over", -5),
    ])
    neg = next(e for e in data.employee_stats if e.name == "Neg")
    over = next(e for e in data.employee_stats if e.name == "Over")
    assert neg.total_hours == 5
    assert neg.efficiency == 0
    assert over.efficiency == 100
    assert data.project_meta["P"].average_efficiency == pytest.approx(50)


def test_dates_sorted_chronologically_not_lexically():
    data = aggregator.aggregate([
        _record("2024-1-10", "", "Работа", "A", 1),
        _record("2024-1-9", "", "Работа", "A", 1),
        _record("2023-12-31", "", "Работа", "A", 1),
    ])
    assert [d.date for d in data.daily_percents] == ["2023-12-31", "2024-1-9", "2024-1-10"]


def test_excluded_dates_dropped_from_every_view(records):
    excluded = anomaly_filter.compute_excluded_dates(records, min_daily_hours=10)
    assert excluded == {"2024-01-10"}

    data = aggregator.aggregate(records, excluded)
    assert [day.date for day in data.daily_percents] == ["2024-01-02"]
    assert "Beta" not in data.project_trends
    assert "Beta" not in data.project_meta
    assert data.project_list == ["Alpha"]
    alice = next(e for e in data.employee_stats if e.name == "Alice")
    assert alice.work_hours == 0
    assert alice.total_hours == 2
    # first admitted record now decides the role
    assert alice.role == "Lead"
    assert data.excluded_dates == ["2024-01-10"]


def test_aggregation_is_repeatable(records):
    assert aggregator.aggregate(records) == aggregator.aggregate(records)


def test_no_records_gives_empty_result():
    data = aggregator.aggregate([])
    assert data.is_empty
    assert data.daily_percents == []
    assert data.project_trends == {}
    assert data.project_meta == {}
    assert data.employee_stats == []
    assert data.project_list == []
