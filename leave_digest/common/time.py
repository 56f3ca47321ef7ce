from __future__ import annotations

import uuid
from datetime import date, datetime

from leave_digest.domain.exceptions import InvalidReferenceDateError

DATE_FORMAT = "%Y-%m-%d"


def generate_run_id() -> str:
    """Сгенерировать run_id для запуска."""
    return str(uuid.uuid4())


def getNowIso() -> str:
    """Текущее время в ISO 8601 с локальной timezone."""
    return datetime.now().astimezone().isoformat()


def getDurationMs(startMonotonic: float, endMonotonic: float) -> int:
    return int((endMonotonic - startMonotonic) * 1000)


def parse_reference_date(value: str | None, today: date | None = None) -> date:
    """
    Назначение:
        Дата отчёта из --date.

    Входные данные:
        value: str | None
            YYYY-MM-DD или None (тогда локальная текущая дата).
        today: date | None
            Подмена "сегодня" для тестов.

    Поведение:
        - Неверный формат: InvalidReferenceDateError.
    """
    if value is None:
        return today or date.today()
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidReferenceDateError(value) from exc
