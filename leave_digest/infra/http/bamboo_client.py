from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping

import httpx

from leave_digest.domain.error_codes import ErrorCode
from leave_digest.domain.models import EmployeeDirectoryEntry, LeaveKind, RawLeaveRecord
from leave_digest.infra.http.api_error import ApiError

BAMBOO_API_URL = "https://api.bamboohr.com/api/gateway.php"
DIRECTORY_FIELDS = "firstName,lastName,preferredName,department"

# Статусы, при которых данные сотрудника скрыты, но запуск продолжается.
DIRECTORY_GAP_STATUSES = (403, 404)


def _blank_to_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class BambooHrClient:
    def __init__(
        self,
        companyDomain: str,
        apiKey: str,
        timeoutSeconds: float = 20.0,
        baseUrl: str = BAMBOO_API_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Назначение:
            Клиент BambooHR API (whos_out + данные сотрудников).
        Контракт:
            - companyDomain, apiKey обязательны.
            - Basic auth: (apiKey, "x").
            - Повторных попыток нет: любая ошибка сразу превращается в ApiError.
        """
        self.baseUrl = f"{baseUrl.rstrip('/')}/{companyDomain}"
        self.client = httpx.Client(
            base_url=self.baseUrl,
            timeout=timeoutSeconds,
            auth=(apiKey, "x"),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            return self.client.get(path, params=params or {})
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise ApiError("Network error", status_code=None, code=ErrorCode.NETWORK_ERROR.value) from exc

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.status_code == 200:
            return
        body_snippet = resp.text[:200] if resp.text else None
        raise ApiError(
            f"HTTP {resp.status_code}",
            status_code=resp.status_code,
            body_snippet=body_snippet,
            details={"body_snippet": body_snippet, "error_code": ErrorCode.from_status(resp.status_code).value},
        )

    def _json(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(
                "Invalid JSON response",
                status_code=resp.status_code,
                code=ErrorCode.INVALID_JSON.value,
            ) from exc

    def getJson(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET JSON, парсит ответ или бросает ApiError."""
        resp = self._get(path, params)
        self._raise_for_status(resp)
        return self._json(resp)

    def fetch_leave(self, start: date, end: date) -> list[RawLeaveRecord]:
        """
        Назначение:
            Загружает whos_out за период [start, end].

        Выходные данные:
            list[RawLeaveRecord]
                Включая праздники и записи неизвестного типа (kind=UNKNOWN).
        """
        data = self.getJson("/v1/time_off/whos_out/", {"start": start.isoformat(), "end": end.isoformat()})
        if not isinstance(data, list):
            raise ApiError(
                "Unexpected response format: whos_out is not a list",
                code=ErrorCode.INVALID_PAYLOAD.value,
            )
        return [self._parse_leave_item(item) for item in data]

    def _parse_leave_item(self, item: Any) -> RawLeaveRecord:
        try:
            kind = LeaveKind.from_wire(item.get("type"))
            employee_id = item.get("employeeId")
            if kind == LeaveKind.TIME_OFF and employee_id is None:
                raise ValueError("timeOff item without employeeId")
            return RawLeaveRecord(
                employee_id=str(employee_id) if employee_id is not None else None,
                display_name=str(item["name"]),
                start=date.fromisoformat(item["start"]),
                end=date.fromisoformat(item["end"]),
                kind=kind,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ApiError(
                f"Malformed whos_out item: {exc}",
                code=ErrorCode.INVALID_PAYLOAD.value,
                details={"item": item if isinstance(item, dict) else repr(item)},
            ) from exc

    def fetch_employee(self, employee_id: str) -> EmployeeDirectoryEntry | None:
        """
        Назначение:
            Данные одного сотрудника.

        Выходные данные:
            EmployeeDirectoryEntry | None
                None, если доступ к сотруднику запрещён (403) или он не найден (404).
        """
        resp = self._get(f"/v1/employees/{employee_id}/", {"fields": DIRECTORY_FIELDS})
        if resp.status_code in DIRECTORY_GAP_STATUSES:
            return None
        self._raise_for_status(resp)
        data = self._json(resp)
        if not isinstance(data, dict):
            raise ApiError(
                f"Unexpected employee payload for {employee_id}",
                code=ErrorCode.INVALID_PAYLOAD.value,
            )
        return EmployeeDirectoryEntry(
            first_name=_blank_to_none(data.get("firstName")),
            last_name=_blank_to_none(data.get("lastName")),
            preferred_name=_blank_to_none(data.get("preferredName")),
            department=_blank_to_none(data.get("department")),
        )

    def fetch_directory(self, employee_ids: Iterable[str]) -> Mapping[str, EmployeeDirectoryEntry]:
        directory: dict[str, EmployeeDirectoryEntry] = {}
        for employee_id in employee_ids:
            entry = self.fetch_employee(employee_id)
            if entry is not None:
                directory[employee_id] = entry
        return directory

    def check(self, day: date) -> int:
        """Проверка доступа: whos_out за один день, возвращает число записей."""
        return len(self.fetch_leave(day, day))


__all__ = ["BambooHrClient", "DIRECTORY_FIELDS"]
