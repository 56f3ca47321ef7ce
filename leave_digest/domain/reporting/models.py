from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    reference_date: str | None = None
    finished_at: str | None = None
    duration_ms: int | None = None
    dry_run: bool = False


@dataclass
class ReportSummary:
    """
    Назначение:
        Счётчики выполнения.
    """

    records_total: int = 0
    records_by_kind: dict[str, int] = field(default_factory=dict)
    employees_merged: int = 0
    entries_current: int = 0
    holidays_current: int = 0
    enrichment_gaps: int = 0
    errors_total: int = 0


@dataclass
class ReportItem:
    """
    Назначение:
        Сотрудник, попавший в дайджест.
    """

    employee_id: str
    display_name: str
    department: str
    start: str
    end: str
    return_date: str
    return_phrase: str
    directory_found: bool = True


@dataclass(frozen=True)
class ReportError:
    category: str
    code: str
    message: str


@dataclass
class ReportEnvelope:
    """
    Назначение:
        Корневой объект отчёта.
    """

    status: str
    meta: ReportMeta
    summary: ReportSummary
    items: list[ReportItem]
    errors: list[ReportError]
    context: dict[str, Any] = field(default_factory=dict)
