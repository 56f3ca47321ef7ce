from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from leave_digest.domain.leave.return_date import return_date
from leave_digest.domain.models import EnrichedLeaveEntry

OTHER_DEPARTMENTS = "Other departments"


@dataclass(frozen=True)
class PresentedEntry:
    """
    Назначение:
        Строка дайджеста: имя, отдел и фраза о возвращении.
    """

    employee_id: str
    display_name: str
    department: str
    return_date: date
    return_phrase: str


@dataclass(frozen=True)
class DepartmentGroup:
    label: str
    entries: tuple[PresentedEntry, ...]


def split_free_text_name(name: str) -> tuple[str, str]:
    """Делит свободный текст имени по первому пробелу на (first, last)."""
    first, _, last = name.strip().partition(" ")
    return first, last.strip()


def display_name(entry: EnrichedLeaveEntry) -> str:
    """
    Назначение:
        Имя для показа.

    Алгоритм:
        - preferred_name (иначе first_name) + last_name из справочника.
        - Если справочник не дал ни одной части имени: разбор имени из записи whos_out.
    """
    directory = entry.directory
    if directory is not None:
        given = directory.preferred_name or directory.first_name
        parts = [p for p in (given, directory.last_name) if p]
        if parts:
            return " ".join(parts)

    first, last = split_free_text_name(entry.period.display_name)
    return " ".join(p for p in (first, last) if p)


def department_label(entry: EnrichedLeaveEntry) -> str:
    return entry.department or OTHER_DEPARTMENTS


def return_phrase(back_on: date, reference_date: date) -> str:
    """
    Назначение:
        Описание даты возвращения относительно даты отчёта.

    Выходные данные:
        str
            "tomorrow" | "Thursday" | "next Monday" | "22 April"
    """
    if back_on == reference_date + timedelta(days=1):
        return "tomorrow"
    week_ahead = reference_date + timedelta(days=7)
    if back_on < week_ahead:
        return back_on.strftime("%A")
    if back_on == week_ahead:
        return f"next {back_on.strftime('%A')}"
    return f"{back_on.day} {back_on.strftime('%B')}"


def present(entry: EnrichedLeaveEntry, reference_date: date) -> PresentedEntry:
    back_on = return_date(entry.period.end)
    return PresentedEntry(
        employee_id=entry.employee_id,
        display_name=display_name(entry),
        department=department_label(entry),
        return_date=back_on,
        return_phrase=return_phrase(back_on, reference_date),
    )


def group_by_department(entries: Iterable[EnrichedLeaveEntry], reference_date: date) -> list[DepartmentGroup]:
    """
    Назначение:
        Группирует записи по отделам с детерминированным порядком.

    Алгоритм:
        - Отделы по возрастанию названия (корзина без отдела сортируется по своей метке).
        - Внутри отдела: по имени, затем по employee_id (числовые id по значению: "9" < "10").
    """
    by_department: dict[str, list[PresentedEntry]] = {}
    for entry in entries:
        presented = present(entry, reference_date)
        by_department.setdefault(presented.department, []).append(presented)

    return [
        DepartmentGroup(
            label=label,
            entries=tuple(sorted(by_department[label], key=lambda e: (e.display_name, len(e.employee_id), e.employee_id))),
        )
        for label in sorted(by_department)
    ]


__all__ = [
    "OTHER_DEPARTMENTS",
    "DepartmentGroup",
    "PresentedEntry",
    "department_label",
    "display_name",
    "group_by_department",
    "present",
    "return_phrase",
    "split_free_text_name",
]
