from __future__ import annotations

from datetime import date, timedelta

# weekday() -> сколько дней до первого рабочего дня после этой даты
_DAYS_UNTIL_NEXT_WORKDAY = {
    4: 3,  # пятница
    5: 2,  # суббота
    6: 1,  # воскресенье
}


def return_date(period_end: date) -> date:
    """
    Назначение:
        Первый рабочий день строго после окончания отпуска.

    Алгоритм:
        - Пятница/суббота/воскресенье -> понедельник после выходных.
        - Иначе следующий день.
        - Праздники не учитываются, выходные фиксированы (сб/вс).
    """
    return period_end + timedelta(days=_DAYS_UNTIL_NEXT_WORKDAY.get(period_end.weekday(), 1))


__all__ = ["return_date"]
