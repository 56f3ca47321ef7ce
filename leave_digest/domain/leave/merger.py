from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from functools import reduce
from typing import Iterable

from leave_digest.domain.models import MergedLeavePeriod, RawLeaveRecord

FRIDAY = 4


def same_or_adjacent_workdays(a: date, b: date) -> bool:
    """
    Назначение:
        Проверяет, что даты совпадают, идут подряд или разделены только выходными.

    Алгоритм:
        - Порядок аргументов не важен (меньшая дата ставится первой).
        - Пятница и следующий понедельник считаются соседними днями.
        - Праздники и любые другие разрывы не учитываются.
    """
    if b < a:
        a, b = b, a
    if a == b:
        return True
    if b == a + timedelta(days=1):
        return True
    return a.weekday() == FRIDAY and b == a + timedelta(days=3)


def extend_run(run: MergedLeavePeriod, record: RawLeaveRecord) -> MergedLeavePeriod:
    """
    Назначение:
        Шаг свёртки: продлевает период записью, если она примыкает к его концу.

    Выходные данные:
        MergedLeavePeriod
            Новый период; исходный не изменяется. Непримыкающая запись отбрасывается.
    """
    if not same_or_adjacent_workdays(run.end, record.start):
        return run
    return replace(run, end=max(run.end, record.end))


def merge(records: Iterable[RawLeaveRecord], reference_date: date) -> dict[str, MergedLeavePeriod]:
    """
    Назначение:
        Возвращает первый непрерывный период отсутствия для каждого сотрудника.

    Входные данные:
        records: Iterable[RawLeaveRecord]
            Записи time off (с employee_id).
        reference_date: date
            Дата отчёта; записи, закончившиеся раньше, отбрасываются.

    Выходные данные:
        dict[str, MergedLeavePeriod]
            Ключ: employee_id.

    Алгоритм:
        - Фильтр end >= reference_date.
        - Сортировка по (start, end): свёртка идёт только вперёд по времени.
        - Группировка по employee_id с сохранением порядка.
        - reduce(extend_run) по группе; после разрыва остальные периоды не попадают в результат.
    """
    ordered = sorted(
        (r for r in records if r.end >= reference_date),
        key=lambda r: (r.start, r.end),
    )

    groups: dict[str, list[RawLeaveRecord]] = {}
    for record in ordered:
        groups.setdefault(str(record.employee_id), []).append(record)

    merged: dict[str, MergedLeavePeriod] = {}
    for employee_id, group in groups.items():
        first, rest = group[0], group[1:]
        merged[employee_id] = reduce(extend_run, rest, MergedLeavePeriod.from_record(first))
    return merged


__all__ = ["extend_run", "merge", "same_or_adjacent_workdays"]
