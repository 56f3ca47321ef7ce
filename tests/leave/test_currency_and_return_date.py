from __future__ import annotations

from datetime import date, timedelta

import pytest

from leave_digest.domain.leave.currency import current_periods, is_current
from leave_digest.domain.leave.merger import merge
from leave_digest.domain.leave.return_date import return_date
from leave_digest.domain.models import MergedLeavePeriod, RawLeaveRecord


def period(start: str, end: str, emp: str = "1") -> MergedLeavePeriod:
    return MergedLeavePeriod(emp, "A B", date.fromisoformat(start), date.fromisoformat(end))


def test_boundaries_are_inclusive():
    assert is_current(period("2024-04-03", "2024-04-05"), date(2024, 4, 3))
    assert is_current(period("2024-04-01", "2024-04-03"), date(2024, 4, 3))
    assert is_current(period("2024-04-03", "2024-04-03"), date(2024, 4, 3))


def test_outside_period_is_not_current():
    assert not is_current(period("2024-04-04", "2024-04-05"), date(2024, 4, 3))
    assert not is_current(period("2024-04-01", "2024-04-02"), date(2024, 4, 3))


def test_scenario_b_future_leave_is_excluded():
    records = [RawLeaveRecord("2", "C D", date(2024, 4, 10), date(2024, 4, 10))]
    reference = date(2024, 4, 9)

    merged = merge(records, reference)

    assert "2" in merged
    assert current_periods(merged.values(), reference) == []


@pytest.mark.parametrize(
    "end, expected",
    [
        ("2024-04-01", "2024-04-02"),  # Monday
        ("2024-04-02", "2024-04-03"),
        ("2024-04-03", "2024-04-04"),
        ("2024-04-04", "2024-04-05"),  # Thursday -> Friday
        ("2024-04-05", "2024-04-08"),  # Friday -> Monday
        ("2024-04-06", "2024-04-08"),  # Saturday -> Monday
        ("2024-04-07", "2024-04-08"),  # Sunday -> Monday
    ],
)
def test_return_date(end, expected):
    assert return_date(date.fromisoformat(end)) == date.fromisoformat(expected)


def test_return_date_is_never_on_a_weekend():
    start = date(2024, 1, 1)
    for offset in range(366):
        day = start + timedelta(days=offset)
        back = return_date(day)
        assert back > day
        assert back.weekday() < 5
        assert return_date(back).weekday() < 5


def test_scenario_a_return_date():
    merged = merge(
        [
            RawLeaveRecord("1", "A B", date(2024, 4, 1), date(2024, 4, 2)),
            RawLeaveRecord("1", "A B", date(2024, 4, 3), date(2024, 4, 5)),
        ],
        date(2024, 4, 3),
    )
    current = current_periods(merged.values(), date(2024, 4, 3))

    assert len(current) == 1
    assert return_date(current[0].end) == date(2024, 4, 8)
