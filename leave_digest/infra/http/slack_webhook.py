from __future__ import annotations

from typing import Any, Mapping

import httpx

from leave_digest.domain.error_codes import ErrorCode
from leave_digest.infra.http.api_error import ApiError


class SlackWebhookClient:
    def __init__(
        self,
        webhookUrl: str,
        timeoutSeconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Назначение:
            Отправка сообщения в Slack incoming webhook.
        Контракт:
            - Один POST, без ретраев.
            - Любой не-2xx ответ -> ApiError(code=DELIVERY_FAILED) с телом ответа.
        """
        self.webhookUrl = webhookUrl
        self.client = httpx.Client(timeout=timeoutSeconds, transport=transport)

    def close(self) -> None:
        self.client.close()

    def send(self, payload: Mapping[str, Any]) -> None:
        try:
            resp = self.client.post(self.webhookUrl, json=dict(payload))
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise ApiError("Network error", status_code=None, code=ErrorCode.NETWORK_ERROR.value) from exc

        if 200 <= resp.status_code <= 299:
            return

        raise ApiError(
            f"Slack webhook rejected message: HTTP {resp.status_code}",
            status_code=resp.status_code,
            body_snippet=resp.text[:200] if resp.text else None,
            code=ErrorCode.DELIVERY_FAILED.value,
            details={"response_body": resp.text},
        )


__all__ = ["SlackWebhookClient"]
