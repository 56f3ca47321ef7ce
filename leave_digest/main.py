from __future__ import annotations

import json
import logging
import time
from pathlib import Path

import typer

from leave_digest.common.sanitize import maskSecret, maskUrl
from leave_digest.common.time import generate_run_id, getDurationMs, parse_reference_date
from leave_digest.config import Settings, load_settings, require_settings
from leave_digest.domain.error_codes import ErrorCode
from leave_digest.domain.exceptions import ConfigError
from leave_digest.errors import AppError
from leave_digest.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from leave_digest.infra.http.bamboo_client import BambooHrClient
from leave_digest.infra.http.slack_webhook import SlackWebhookClient
from leave_digest.infra.logging.setup import closeLogger, createCommandLogger, logEvent, mapLogLevel
from leave_digest.usecases.notify_usecase import NotifyLeaveUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)


def ensureDir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    """
    Назначение:
        Печатает безопасную сводку параметров запуска (без секретов).
    """
    typer.echo(
        f"run_id={runId} command={command} "
        f"bamboo_company_domain={settings.bamboo_company_domain} "
        f"bamboo_api_key={maskSecret(settings.bamboo_api_key)} "
        f"slack_webhook_url={maskUrl(settings.slack_webhook_url)} sources={sources} "
        f"log_level={settings.log_level}"
    )


def runWithReport(ctx: typer.Context, commandName: str, runner) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт report.json skeleton
        - превращает AppError и любые непредвиденные ошибки в запись лога/отчёта и exit code 2
        - гарантирует запись отчёта в finally
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )
    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)

    exitCode = 0
    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        printRunHeader(runId, commandName, settings, sources)
        try:
            runner(logger, report)
        except AppError as exc:
            report.add_error(exc)
            logEvent(logger, logging.ERROR, runId, exc.category, f"{exc.code}: {exc.message}")
            typer.echo(f"ERROR: {exc.message} (see logs/report)", err=True)
            exitCode = 2
        except Exception as exc:
            # Непредвиденная ошибка: запуск всё равно фиксируется как FAILED.
            report.add_error(
                AppError(
                    category="internal",
                    code=ErrorCode.UNEXPECTED_ERROR.value,
                    message=f"{type(exc).__name__}: {exc}",
                )
            )
            report.status = "FAILED"
            logger.exception(
                f"Unexpected error: {type(exc).__name__}: {exc}",
                extra={"runId": runId, "component": "core"},
            )
            typer.echo(f"ERROR: unexpected {type(exc).__name__}: {exc} (see logs/report)", err=True)
            exitCode = 2
    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        finalizeReport(report=report, durationMs=durationMs, logFile=logFilePath, reportDir=settings.report_dir)
        reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
        closeLogger(logger)

    if exitCode:
        raise typer.Exit(code=exitCode)


def buildBambooClient(settings: Settings, transport=None) -> BambooHrClient:
    return BambooHrClient(
        companyDomain=settings.bamboo_company_domain or "",
        apiKey=settings.bamboo_api_key or "",
        timeoutSeconds=settings.timeout_seconds,
        transport=transport,
    )


def runSendCommand(ctx: typer.Context, dateArg: str | None, dryRun: bool, apiTransport=None) -> None:
    settings: Settings = ctx.obj["settings"]
    runId = ctx.obj["runId"]

    def execute(logger, report) -> None:
        # Конфигурация и дата проверяются до любых сетевых запросов.
        require_settings(settings, need_webhook=not dryRun)
        referenceDate = parse_reference_date(dateArg)
        typer.echo(f"sending leave for {referenceDate}")

        bamboo = buildBambooClient(settings, apiTransport)
        slack = None if dryRun else SlackWebhookClient(
            webhookUrl=settings.slack_webhook_url or "",
            timeoutSeconds=settings.timeout_seconds,
            transport=apiTransport,
        )
        try:
            result = NotifyLeaveUseCase(leave_source=bamboo, directory=bamboo, sink=slack).run(
                reference_date=referenceDate,
                logger=logger,
                report=report,
                run_id=runId,
            )
        finally:
            bamboo.close()
            if slack is not None:
                slack.close()

        if dryRun:
            typer.echo(json.dumps(result.document.to_payload(), ensure_ascii=False, indent=2))

    runWithReport(ctx=ctx, commandName="send", runner=execute)


def runCheckApiCommand(ctx: typer.Context, apiTransport=None) -> None:
    settings: Settings = ctx.obj["settings"]
    runId = ctx.obj["runId"]

    def execute(logger, report) -> None:
        require_settings(settings, need_webhook=False)
        client = buildBambooClient(settings, apiTransport)
        try:
            start = time.monotonic()
            count = client.check(parse_reference_date(None))
            latency_ms = int((time.monotonic() - start) * 1000)
        finally:
            client.close()
        logEvent(logger, logging.INFO, runId, "bamboo", f"api ok records_today={count} latency_ms={latency_ms}")
        report.set_context("api", {"base_url": client.baseUrl, "latency_ms": latency_ms})
        typer.echo(f"api ok records_today={count}")

    runWithReport(ctx=ctx, commandName="check-api", runner=execute)


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
    bambooDomain: str | None = typer.Option(None, "--bamboo-domain", help="BambooHR company domain"),
    bambooApiKey: str | None = typer.Option(None, "--bamboo-api-key", help="BambooHR API key (avoid; use env/file)"),
    bambooApiKeyFile: str | None = typer.Option(None, "--bamboo-api-key-file", help="Read BambooHR API key from file"),
    slackWebhookUrl: str | None = typer.Option(None, "--slack-webhook-url", help="Slack incoming webhook URL"),
    timeoutSeconds: float | None = typer.Option(None, "--timeout-seconds", help="HTTP timeout in seconds"),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if bambooApiKeyFile and not bambooApiKey:
        p = Path(bambooApiKeyFile)
        if not p.exists() or not p.is_file():
            typer.echo(f"ERROR: bamboo-api-key-file not found: {bambooApiKeyFile}", err=True)
            raise typer.Exit(code=2)
        bambooApiKey = p.read_text(encoding="utf-8").strip()

    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "bamboo_company_domain": bambooDomain,
        "bamboo_api_key": bambooApiKey,
        "slack_webhook_url": slackWebhookUrl,
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "timeout_seconds": timeoutSeconds,
    }
    try:
        loaded = load_settings(config_path=config, cli_overrides=cliOverrides)
        mapLogLevel(loaded.settings.log_level)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc.message}", err=True)
        raise typer.Exit(code=2)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }


@app.command("send")
def send(
    ctx: typer.Context,
    date: str | None = typer.Option(None, "--date", help="Report date YYYY-MM-DD (default: today)"),
    dryRun: bool = typer.Option(False, "--dry-run/--no-dry-run", help="Print the Slack payload instead of posting it"),
):
    runSendCommand(ctx, date, dryRun)


@app.command("check-api")
def checkApi(ctx: typer.Context):
    runCheckApiCommand(ctx)


if __name__ == "__main__":
    app()
