from __future__ import annotations

from dataclasses import asdict
from typing import Any

from leave_digest.common.time import getNowIso
from leave_digest.domain.reporting.models import (
    ReportEnvelope,
    ReportError,
    ReportItem,
    ReportMeta,
    ReportSummary,
)
from leave_digest.errors import AppError


class ReportCollector:
    """
    Назначение/ответственность:
        Единый сборщик отчёта запуска.
    """

    def __init__(self, run_id: str, command: str, started_at: str | None = None) -> None:
        self.meta = ReportMeta(
            run_id=run_id,
            command=command,
            started_at=started_at or getNowIso(),
        )
        self.summary = ReportSummary()
        self.items: list[ReportItem] = []
        self.errors: list[ReportError] = []
        self.context: dict[str, Any] = {}
        self.status: str | None = None

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def count_record(self, kind: str) -> None:
        self.summary.records_total += 1
        self.summary.records_by_kind[kind] = self.summary.records_by_kind.get(kind, 0) + 1

    def add_item(self, item: ReportItem) -> None:
        self.items.append(item)
        if not item.directory_found:
            self.summary.enrichment_gaps += 1

    def add_error(self, error: AppError) -> None:
        self.summary.errors_total += 1
        self.errors.append(ReportError(category=error.category, code=error.code, message=error.message))

    def finish(self, finished_at: str | None = None, duration_ms: int | None = None) -> None:
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms
        if self.status is None:
            self.status = self._derive_status()

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status or self._derive_status(),
            meta=self.meta,
            summary=self.summary,
            items=self.items,
            errors=self.errors,
            context=self.context,
        )

    def _derive_status(self) -> str:
        if self.summary.errors_total == 0:
            return "SUCCESS"
        return "FAILED"


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "summary": asdict(envelope.summary),
        "items": [asdict(item) for item in envelope.items],
        "errors": [asdict(err) for err in envelope.errors],
        "context": envelope.context,
    }
