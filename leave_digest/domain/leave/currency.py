from __future__ import annotations

from datetime import date
from typing import Iterable

from leave_digest.domain.models import MergedLeavePeriod


def is_current(period: MergedLeavePeriod, reference_date: date) -> bool:
    """Период покрывает дату отчёта (обе границы включительно)."""
    return period.start <= reference_date <= period.end


def current_periods(periods: Iterable[MergedLeavePeriod], reference_date: date) -> list[MergedLeavePeriod]:
    # Будущий отпуск, который ещё не начался, отсутствием "сейчас" не считается.
    return [p for p in periods if is_current(p, reference_date)]


__all__ = ["current_periods", "is_current"]
