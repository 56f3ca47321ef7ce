from __future__ import annotations

from datetime import date

import pytest

from leave_digest.domain.models import EmployeeDirectoryEntry, EnrichedLeaveEntry, MergedLeavePeriod
from leave_digest.domain.presentation.grouper import (
    OTHER_DEPARTMENTS,
    display_name,
    group_by_department,
    return_phrase,
    split_free_text_name,
)

REFERENCE = date(2024, 4, 3)  # Wednesday


def entry(emp: str, raw_name: str, end: str = "2024-04-05", directory: EmployeeDirectoryEntry | None = None):
    return EnrichedLeaveEntry(
        period=MergedLeavePeriod(emp, raw_name, date(2024, 4, 1), date.fromisoformat(end)),
        directory=directory,
    )


@pytest.mark.parametrize(
    "back_on, expected",
    [
        ("2024-04-04", "tomorrow"),
        ("2024-04-05", "Friday"),
        ("2024-04-08", "Monday"),
        ("2024-04-09", "Tuesday"),
        ("2024-04-10", "next Wednesday"),
        ("2024-04-11", "11 April"),
        ("2024-05-02", "2 May"),
    ],
)
def test_return_phrase(back_on, expected):
    assert return_phrase(date.fromisoformat(back_on), REFERENCE) == expected


def test_split_free_text_name_on_first_space():
    assert split_free_text_name("Mary Ann Smith") == ("Mary", "Ann Smith")
    assert split_free_text_name("Cher") == ("Cher", "")


def test_display_name_prefers_preferred_name():
    directory = EmployeeDirectoryEntry(first_name="Robert", last_name="Jones", preferred_name="Bob")
    assert display_name(entry("1", "Robert Jones", directory=directory)) == "Bob Jones"


def test_display_name_uses_first_and_last_name():
    directory = EmployeeDirectoryEntry(first_name="Robert", last_name="Jones")
    assert display_name(entry("1", "R. Jones", directory=directory)) == "Robert Jones"


def test_display_name_falls_back_to_raw_name():
    assert display_name(entry("1", "Mary Ann Smith")) == "Mary Ann Smith"
    hidden = EmployeeDirectoryEntry(department="Sales")
    assert display_name(entry("1", "Mary Ann Smith", directory=hidden)) == "Mary Ann Smith"


def test_groups_sorted_by_department_and_name_with_id_tie_break():
    entries = [
        entry("9", "Zed Zulu", directory=EmployeeDirectoryEntry("Zed", "Zulu", department="Sales")),
        entry("3", "Amy Adams"),
        entry("7", "Amy Adams", directory=EmployeeDirectoryEntry("Amy", "Adams", department="Engineering")),
        entry("2", "Amy Adams", directory=EmployeeDirectoryEntry("Amy", "Adams", department="Engineering")),
        entry("5", "Ben Brown", directory=EmployeeDirectoryEntry("Ben", "Brown", department="Engineering")),
    ]

    groups = group_by_department(entries, REFERENCE)

    assert [g.label for g in groups] == ["Engineering", OTHER_DEPARTMENTS, "Sales"]
    assert [(e.display_name, e.employee_id) for e in groups[0].entries] == [
        ("Amy Adams", "2"),
        ("Amy Adams", "7"),
        ("Ben Brown", "5"),
    ]
    assert groups[1].entries[0].employee_id == "3"


def test_id_tie_break_orders_numeric_ids_by_value():
    entries = [entry(emp, "Amy Adams") for emp in ("10", "9", "100", "2")]

    groups = group_by_department(entries, REFERENCE)

    assert [e.employee_id for e in groups[0].entries] == ["2", "9", "10", "100"]


def test_presented_entry_carries_return_date_and_phrase():
    groups = group_by_department([entry("1", "A B", end="2024-04-05")], REFERENCE)

    presented = groups[0].entries[0]
    assert presented.return_date == date(2024, 4, 8)
    assert presented.return_phrase == "Monday"
