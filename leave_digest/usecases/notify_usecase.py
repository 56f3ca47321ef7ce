from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, timedelta

from leave_digest.common.sanitize import truncateText
from leave_digest.domain.leave.currency import current_periods
from leave_digest.domain.leave.merger import merge
from leave_digest.domain.models import EnrichedLeaveEntry, LeaveKind, RawLeaveRecord
from leave_digest.domain.ports.sources import DirectoryProtocol, LeaveSourceProtocol, NotificationSinkProtocol
from leave_digest.domain.presentation.blocks import Document, render
from leave_digest.domain.presentation.grouper import present
from leave_digest.domain.reporting.collector import ReportCollector
from leave_digest.domain.reporting.models import ReportItem
from leave_digest.infra.http.api_error import ApiError
from leave_digest.infra.logging.setup import logEvent

# Отпуск длиннее года от даты отчёта может быть пропущен.
LEAVE_LOOKAHEAD = timedelta(days=365)


@dataclass(frozen=True)
class NotifyResult:
    document: Document
    entries: list[EnrichedLeaveEntry]
    holidays: list[RawLeaveRecord]
    delivered: bool


class NotifyLeaveUseCase:
    """
    Назначение/ответственность:
        Сбор дайджеста "кто сейчас отсутствует" и его отправка.
    Взаимодействия:
        - LeaveSourceProtocol: записи whos_out.
        - DirectoryProtocol: отделы и имена сотрудников.
        - NotificationSinkProtocol: доставка (None = dry run).
    Ограничения:
        - Ошибки источника/справочника/доставки пробрасываются как ApiError.
        - Сообщение не отправляется, если данные получены не полностью.
    """

    def __init__(
        self,
        leave_source: LeaveSourceProtocol,
        directory: DirectoryProtocol,
        sink: NotificationSinkProtocol | None,
    ):
        self.leave_source = leave_source
        self.directory = directory
        self.sink = sink

    def run(self, reference_date: date, logger, report: ReportCollector, run_id: str) -> NotifyResult:
        report.meta.reference_date = reference_date.isoformat()
        report.meta.dry_run = self.sink is None

        logEvent(logger, logging.INFO, run_id, "bamboo", f"fetching leave for {reference_date}")
        records = self.leave_source.fetch_leave(reference_date, reference_date + LEAVE_LOOKAHEAD)

        time_off: list[RawLeaveRecord] = []
        holidays: list[RawLeaveRecord] = []
        for record in records:
            report.count_record(record.kind.value)
            if record.kind == LeaveKind.TIME_OFF:
                time_off.append(record)
            elif record.kind == LeaveKind.HOLIDAY:
                if record.includes(reference_date):
                    holidays.append(record)
            else:
                logEvent(logger, logging.DEBUG, run_id, "bamboo", f"ignoring record of unknown type: {record.display_name}")

        merged = merge(time_off, reference_date)
        current = current_periods(merged.values(), reference_date)
        report.summary.employees_merged = len(merged)
        report.summary.entries_current = len(current)
        report.summary.holidays_current = len(holidays)
        logEvent(
            logger,
            logging.INFO,
            run_id,
            "merge",
            f"records={len(records)} time_off={len(time_off)} merged={len(merged)} current={len(current)} holidays={len(holidays)}",
        )

        employee_ids = sorted(p.employee_id for p in current)
        directory = self.directory.fetch_directory(employee_ids) if employee_ids else {}

        entries: list[EnrichedLeaveEntry] = []
        for period in current:
            entry = EnrichedLeaveEntry(period=period, directory=directory.get(period.employee_id))
            if entry.directory is None:
                logEvent(
                    logger,
                    logging.WARNING,
                    run_id,
                    "directory",
                    f"no directory entry for employee_id={period.employee_id}; using whos_out name",
                )
            entries.append(entry)
            presented = present(entry, reference_date)
            report.add_item(
                ReportItem(
                    employee_id=period.employee_id,
                    display_name=presented.display_name,
                    department=presented.department,
                    start=period.start.isoformat(),
                    end=period.end.isoformat(),
                    return_date=presented.return_date.isoformat(),
                    return_phrase=presented.return_phrase,
                    directory_found=entry.directory is not None,
                )
            )

        document = render(entries, reference_date, holidays)

        if self.sink is None:
            logEvent(logger, logging.INFO, run_id, "slack", "dry run: message not sent")
            return NotifyResult(document=document, entries=entries, holidays=holidays, delivered=False)

        payload = document.to_payload()
        try:
            self.sink.send(payload)
        except ApiError as exc:
            logEvent(logger, logging.ERROR, run_id, "slack", f"delivery failed: {exc.message}")
            logEvent(logger, logging.ERROR, run_id, "slack", f"payload: {json.dumps(payload, ensure_ascii=False)}")
            logEvent(logger, logging.ERROR, run_id, "slack", f"response: {truncateText(exc.details.get('response_body'))}")
            raise

        logEvent(logger, logging.INFO, run_id, "slack", f"message sent blocks={len(document.blocks)}")
        return NotifyResult(document=document, entries=entries, holidays=holidays, delivered=True)


__all__ = ["LEAVE_LOOKAHEAD", "NotifyLeaveUseCase", "NotifyResult"]
