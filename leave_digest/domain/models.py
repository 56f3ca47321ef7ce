from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class LeaveKind(str, Enum):
    """
    Назначение:
        Тип записи об отсутствии из whos_out.
    """

    TIME_OFF = "time_off"
    HOLIDAY = "holiday"
    UNKNOWN = "unknown"

    @classmethod
    def from_wire(cls, value: str | None) -> "LeaveKind":
        # Наблюдались только "timeOff" и "holiday", остальное игнорируется.
        if value == "timeOff":
            return cls.TIME_OFF
        if value == "holiday":
            return cls.HOLIDAY
        return cls.UNKNOWN


@dataclass(frozen=True)
class RawLeaveRecord:
    """
    Назначение:
        Один непрерывный блок отсутствия в том виде, как его отдал источник.

    Поля:
        employee_id: идентификатор сотрудника (None для праздников компании)
        display_name: свободный текст имени (или название праздника)
        start, end: границы блока включительно
        kind: LeaveKind
    """

    employee_id: str | None
    display_name: str
    start: date
    end: date
    kind: LeaveKind = LeaveKind.TIME_OFF

    def includes(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class EmployeeDirectoryEntry:
    """
    Назначение:
        Метаданные сотрудника из справочника. Любое поле может быть скрыто источником.
    """

    first_name: str | None = None
    last_name: str | None = None
    preferred_name: str | None = None
    department: str | None = None


@dataclass(frozen=True)
class MergedLeavePeriod:
    """
    Назначение:
        Первый непрерывный период отсутствия сотрудника после слияния записей.

    Инварианты:
        - start <= end
        - end равен максимальному end среди слитых записей
    """

    employee_id: str
    display_name: str
    start: date
    end: date

    @classmethod
    def from_record(cls, record: RawLeaveRecord) -> "MergedLeavePeriod":
        if record.employee_id is None:
            raise ValueError(f"leave record without employee_id: {record.display_name}")
        return cls(
            employee_id=str(record.employee_id),
            display_name=record.display_name,
            start=record.start,
            end=record.end,
        )


@dataclass(frozen=True)
class EnrichedLeaveEntry:
    period: MergedLeavePeriod
    directory: EmployeeDirectoryEntry | None = None

    @property
    def employee_id(self) -> str:
        return self.period.employee_id

    @property
    def department(self) -> str | None:
        if self.directory is None:
            return None
        return self.directory.department
