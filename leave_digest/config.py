from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
from urllib.parse import urlsplit

import yaml

from leave_digest.domain.error_codes import ErrorCode
from leave_digest.domain.exceptions import ConfigError


@dataclass(frozen=True)
class Settings:
    # BambooHR
    bamboo_company_domain: str | None = None
    bamboo_api_key: str | None = None

    # Slack
    slack_webhook_url: str | None = None

    # Logging / artifacts
    log_level: str = "INFO"
    log_dir: str = "./logs"
    report_dir: str = "./reports"

    # HTTP
    timeout_seconds: float = 20.0


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


ENV_VARS = {
    "bamboo_company_domain": "BAMBOO_COMPANY_DOMAIN",
    "bamboo_api_key": "BAMBOO_API_KEY",
    "slack_webhook_url": "SLACK_WEBHOOK_URL",
    "log_level": "LEAVE_DIGEST_LOG_LEVEL",
    "log_dir": "LEAVE_DIGEST_LOG_DIR",
    "report_dir": "LEAVE_DIGEST_REPORT_DIR",
    "timeout_seconds": "LEAVE_DIGEST_TIMEOUT_SECONDS",
}


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _parse_timeout(value) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid timeout_seconds: {value}",
            code=ErrorCode.CONFIG_INVALID,
        ) from exc
    if timeout <= 0:
        raise ConfigError(f"Invalid timeout_seconds: {value}", code=ErrorCode.CONFIG_INVALID)
    return timeout


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {key: _env_get(name) for key, name in ENV_VARS.items()}
    if any(v is not None for v in env.values()):
        sources.append("env")

    merged = {key: cfg.get(key, getattr(defaults, key)) for key in ENV_VARS}

    for key, value in env.items():
        if value is not None:
            merged[key] = value

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        bamboo_company_domain=merged["bamboo_company_domain"],
        bamboo_api_key=merged["bamboo_api_key"],
        slack_webhook_url=merged["slack_webhook_url"],
        log_level=str(merged["log_level"]),
        log_dir=str(merged["log_dir"]),
        report_dir=str(merged["report_dir"]),
        timeout_seconds=_parse_timeout(merged["timeout_seconds"]),
    )

    return LoadedSettings(settings=settings, sources_used=sources)


def require_settings(settings: Settings, need_webhook: bool) -> None:
    """
    Назначение:
        Проверяет наличие параметров подключения до любого сетевого обращения.

    Поведение:
        - Если чего-то не хватает: ConfigError со списком недостающих ключей.
        - Если webhook URL задан, но не является http(s)-адресом с хостом:
          ConfigError CONFIG_INVALID.
    """
    missing = []
    if not settings.bamboo_company_domain:
        missing.append("bamboo_company_domain")
    if not settings.bamboo_api_key:
        missing.append("bamboo_api_key")
    if need_webhook and not settings.slack_webhook_url:
        missing.append("slack_webhook_url")

    if missing:
        raise ConfigError(f"missing required settings: {', '.join(missing)}", missing=missing)

    if need_webhook:
        _validate_webhook_url(settings.slack_webhook_url)


def _validate_webhook_url(url: str) -> None:
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError as exc:
        raise ConfigError(
            f"Invalid slack_webhook_url: {exc}",
            missing=["slack_webhook_url"],
            code=ErrorCode.CONFIG_INVALID,
        ) from exc
    if parts.scheme not in ("http", "https") or not host:
        raise ConfigError(
            "Invalid slack_webhook_url: expected an http(s) URL with a host",
            missing=["slack_webhook_url"],
            code=ErrorCode.CONFIG_INVALID,
        )


__all__ = ["ENV_VARS", "LoadedSettings", "Settings", "load_settings", "require_settings"]
