from __future__ import annotations

import json

from leave_digest.common.sanitize import maskUrl, truncateText
from leave_digest.domain.exceptions import InvalidReferenceDateError
from leave_digest.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson


def test_report_is_written_with_status_and_errors(tmp_path):
    report = createEmptyReport(runId="r1", command="send", configSources=["env"])
    report.count_record("time_off")
    report.add_error(InvalidReferenceDateError("2024-13-01"))

    finalizeReport(report, durationMs=12, logFile="logs/send_r1.log", reportDir=str(tmp_path))
    path = writeReportJson(report, str(tmp_path), "report_send_r1")

    data = json.loads(open(path, encoding="utf-8").read())
    assert data["status"] == "FAILED"
    assert data["meta"]["duration_ms"] == 12
    assert data["summary"]["records_by_kind"] == {"time_off": 1}
    assert data["errors"] == [
        {"category": "input", "code": "INVALID_DATE", "message": "Invalid date argument (expected YYYY-MM-DD): 2024-13-01"}
    ]
    assert data["context"]["config"] == {"sources": ["env"]}


def test_mask_url_hides_webhook_token():
    assert maskUrl("https://hooks.slack.com/services/T0/B0/XYZ") == "https://hooks.slack.com/***"
    assert maskUrl("not a url") == "***"
    assert maskUrl(None) is None


def test_truncate_text():
    assert truncateText("abcdef", limit=5) == "ab..."
    assert truncateText("abc", limit=5) == "abc"
