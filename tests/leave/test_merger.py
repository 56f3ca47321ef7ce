from __future__ import annotations

from datetime import date, timedelta

import pytest

from leave_digest.domain.leave.merger import extend_run, merge, same_or_adjacent_workdays
from leave_digest.domain.models import MergedLeavePeriod, RawLeaveRecord


def rec(emp: str, start: str, end: str, name: str | None = None) -> RawLeaveRecord:
    return RawLeaveRecord(
        employee_id=emp,
        display_name=name or f"Employee {emp}",
        start=date.fromisoformat(start),
        end=date.fromisoformat(end),
    )


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("2024-04-03", "2024-04-03", True),   # same day
        ("2024-04-03", "2024-04-04", True),   # next day
        ("2024-04-04", "2024-04-03", True),   # order does not matter
        ("2024-04-05", "2024-04-08", True),   # Friday -> Monday
        ("2024-04-08", "2024-04-05", True),
        ("2024-04-05", "2024-04-07", False),  # Friday -> Sunday is not a weekend skip
        ("2024-04-04", "2024-04-08", False),  # Thursday -> Monday
        ("2024-04-03", "2024-04-05", False),  # one working day in between
        ("2024-04-06", "2024-04-09", False),  # Saturday + 3 is not bridged
    ],
)
def test_same_or_adjacent_workdays(a, b, expected):
    assert same_or_adjacent_workdays(date.fromisoformat(a), date.fromisoformat(b)) is expected


def test_every_friday_bridges_to_following_monday():
    friday = date(2024, 1, 5)
    for week in range(52):
        day = friday + timedelta(weeks=week)
        merged = merge(
            [
                RawLeaveRecord("1", "A B", day - timedelta(days=2), day),
                RawLeaveRecord("1", "A B", day + timedelta(days=3), day + timedelta(days=4)),
            ],
            day,
        )
        assert merged["1"].end == day + timedelta(days=4)


def test_scenario_a_finished_fragment_is_dropped_before_folding():
    merged = merge(
        [rec("1", "2024-04-03", "2024-04-05"), rec("1", "2024-04-01", "2024-04-02")],
        date(2024, 4, 3),
    )

    assert merged == {
        "1": MergedLeavePeriod(
            employee_id="1",
            display_name="Employee 1",
            start=date(2024, 4, 3),
            end=date(2024, 4, 5),
        )
    }


def test_only_first_contiguous_run_is_kept():
    merged = merge(
        [
            rec("1", "2024-04-01", "2024-04-03"),
            rec("1", "2024-04-05", "2024-04-05"),   # gap on Thursday
            rec("1", "2024-06-10", "2024-06-14"),   # later in the year
        ],
        date(2024, 4, 2),
    )

    assert merged["1"].start == date(2024, 4, 1)
    assert merged["1"].end == date(2024, 4, 3)


def test_later_run_is_ignored_even_when_it_is_adjacent_to_a_discarded_record():
    merged = merge(
        [
            rec("1", "2024-04-01", "2024-04-02"),
            rec("1", "2024-04-04", "2024-04-04"),
            rec("1", "2024-04-05", "2024-04-05"),
        ],
        date(2024, 4, 1),
    )

    assert merged["1"].end == date(2024, 4, 2)


def test_finished_records_are_discarded_before_folding():
    merged = merge(
        [
            rec("1", "2024-03-25", "2024-03-29"),
            rec("1", "2024-04-10", "2024-04-12"),
            rec("2", "2024-03-01", "2024-03-02"),
        ],
        date(2024, 4, 3),
    )

    assert set(merged) == {"1"}
    assert merged["1"].start == date(2024, 4, 10)


def test_end_only_grows():
    merged = merge(
        [rec("1", "2024-04-01", "2024-04-05"), rec("1", "2024-04-05", "2024-04-05")],
        date(2024, 4, 1),
    )

    assert merged["1"].end == date(2024, 4, 5)


def test_employees_are_folded_independently():
    merged = merge(
        [
            rec("1", "2024-04-01", "2024-04-02"),
            rec("2", "2024-04-02", "2024-04-02"),
            rec("1", "2024-04-03", "2024-04-03"),
            rec("2", "2024-04-04", "2024-04-04"),
        ],
        date(2024, 4, 2),
    )

    assert merged["1"].end == date(2024, 4, 3)
    assert merged["2"].end == date(2024, 4, 2)


def test_extend_run_returns_new_value():
    run = MergedLeavePeriod("1", "A B", date(2024, 4, 1), date(2024, 4, 2))

    extended = extend_run(run, rec("1", "2024-04-03", "2024-04-04"))

    assert extended.end == date(2024, 4, 4)
    assert run.end == date(2024, 4, 2)
    assert extend_run(run, rec("1", "2024-04-10", "2024-04-11")) is run


def test_empty_input():
    assert merge([], date(2024, 4, 1)) == {}


def test_record_without_employee_id_is_rejected():
    record = RawLeaveRecord(
        employee_id=None,
        display_name="Nobody",
        start=date(2024, 4, 3),
        end=date(2024, 4, 5),
    )

    with pytest.raises(ValueError):
        MergedLeavePeriod.from_record(record)
    with pytest.raises(ValueError):
        merge([record], date(2024, 4, 3))
