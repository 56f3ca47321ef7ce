from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

from leave_digest.domain.models import EmployeeDirectoryEntry, RawLeaveRecord


@runtime_checkable
class LeaveSourceProtocol(Protocol):
    """
    Назначение:
        Источник записей об отсутствии (whos_out).

    Контракт:
        - fetch_leave(start, end) -> list[RawLeaveRecord]
        - Ошибка получения бросается целиком, частичных результатов нет.
    """

    def fetch_leave(self, start: date, end: date) -> list[RawLeaveRecord]: ...


@runtime_checkable
class DirectoryProtocol(Protocol):
    """
    Назначение:
        Справочник сотрудников.

    Контракт:
        - fetch_directory(ids) -> Mapping[id, EmployeeDirectoryEntry]
        - Недоступные/скрытые сотрудники просто отсутствуют в результате.
    """

    def fetch_directory(self, employee_ids: Iterable[str]) -> Mapping[str, EmployeeDirectoryEntry]: ...


@runtime_checkable
class NotificationSinkProtocol(Protocol):
    """
    Назначение:
        Получатель готового сообщения (Slack webhook).
    """

    def send(self, payload: Mapping[str, Any]) -> None: ...


__all__ = ["DirectoryProtocol", "LeaveSourceProtocol", "NotificationSinkProtocol"]
