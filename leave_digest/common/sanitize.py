from __future__ import annotations

from urllib.parse import urlsplit


def maskSecret(value: str | None) -> str | None:
    """
    Назначение:
        Маскирует секреты для безопасного вывода в stdout/logs.

    Выходные данные:
        str | None
            Если value задано: '***', иначе None.
    """
    if value is None:
        return None
    return "***"


def maskUrl(url: str | None) -> str | None:
    """
    Назначение:
        Маскирует путь URL вебхука (в нём токен), оставляя схему и хост.

    Пример:
        https://hooks.slack.com/services/T/B/X -> https://hooks.slack.com/***
    """
    if url is None:
        return None
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return maskSecret(url)
    return f"{parts.scheme}://{parts.netloc}/***"


def truncateText(value: str | None, limit: int = 500) -> str | None:
    """
    Назначение:
        Ограничивает длину текста, чтобы избежать раздувания логов/отчётов.
    """
    if value is None:
        return None
    if len(value) <= limit:
        return value
    suffix = "..." if limit > 3 else ""
    head = limit - len(suffix)
    return value[:head] + suffix
