from __future__ import annotations

from leave_digest.errors import AppError


class ApiError(AppError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body_snippet: str | None = None,
        details: dict | None = None,
        code: str | None = None,
    ):
        """
        Назначение:
            Исключение для ошибок HTTP/API уровня (BambooHR, Slack).
        Контракт:
            - code: строковый код (HTTP_*, NETWORK_ERROR, INVALID_JSON, DELIVERY_FAILED и т.п.).
            - status_code/body_snippet используются для диагностики.
        """
        super().__init__(
            category="api",
            code=code or (f"HTTP_{status_code}" if status_code else "API_ERROR"),
            message=message,
            details=details or {},
        )
        self.status_code = status_code
        self.body_snippet = body_snippet


__all__ = ["ApiError"]
