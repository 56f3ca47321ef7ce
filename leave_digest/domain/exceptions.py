from __future__ import annotations

from leave_digest.domain.error_codes import ErrorCode
from leave_digest.errors import AppError


class ConfigError(AppError):
    """
    Назначение:
        Обязательные параметры подключения отсутствуют или некорректны.
    Инварианты/гарантии:
        - Бросается до любого сетевого обращения.
        - details["missing"] содержит имена недостающих настроек.
    """

    def __init__(self, message: str, missing: list[str] | None = None, code: ErrorCode = ErrorCode.CONFIG_MISSING):
        super().__init__(
            category="config",
            code=code.value,
            message=message,
            details={"missing": list(missing or [])},
        )
        self.missing = list(missing or [])


class InvalidReferenceDateError(AppError):
    """
    Назначение:
        Дата отчёта (--date) не соответствует формату YYYY-MM-DD.
    """

    def __init__(self, value: str):
        super().__init__(
            category="input",
            code=ErrorCode.INVALID_DATE.value,
            message=f"Invalid date argument (expected YYYY-MM-DD): {value}",
            details={"value": value},
        )
        self.value = value


__all__ = ["ConfigError", "InvalidReferenceDateError"]
