"""CLI argument handling and command handoff."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest
from _pytest.capture import CaptureFixture
from _pytest.monkeypatch import MonkeyPatch

from keibaslip.application.slips import scan as scan_workflow
from keibaslip.cli import main as unified_cli
from keibaslip.runtime.logging import set_log_level


def test_main_without_command_prints_help(capsys: CaptureFixture[str]) -> None:
    assert unified_cli.main([]) == 1
    assert "parse" in capsys.readouterr().out


def test_parse_json_output(tmp_path: Path, ipat_history_text: str, capsys: CaptureFixture[str]) -> None:
    slip = tmp_path / "slip.txt"
    slip.write_text(ipat_history_text, encoding="utf-8")

    exit_code = unified_cli.main(["parse", str(slip), "--no-ai", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["aiStatus"] == "disabled"
    assert payload["usedFallback"] is False
    assert [bet["numbers"] for bet in payload["bets"]] == ["2→5→7", "3-8", "5"]
    assert payload["recoveryRate"] == round(12340 / 1600 * 100, 1)


def test_parse_summary_reads_stdin(
    monkeypatch: MonkeyPatch, ipat_history_text: str, capsys: CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(ipat_history_text))

    assert unified_cli.main(["parse", "--no-ai"]) == 0
    output = capsys.readouterr().out
    assert "買い目 (3点):" in output
    assert "払戻金: 12,340円" in output


def test_parse_missing_file_fails(tmp_path: Path) -> None:
    assert unified_cli.main(["parse", str(tmp_path / "missing.txt")]) == 1


def test_scan_missing_image_fails(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    assert unified_cli.main(["scan", str(tmp_path / "missing.jpg")]) == 1
    assert "not found" in capsys.readouterr().out


def test_scan_hands_typed_request_to_workflow(monkeypatch: MonkeyPatch, capsys: CaptureFixture[str]) -> None:
    captured: list[scan_workflow.SlipScanRequest] = []

    async def fake_run(request: scan_workflow.SlipScanRequest) -> scan_workflow.SlipScanResult:
        captured.append(request)
        return scan_workflow.SlipScanResult(status="ocr_unavailable", error="GCV_API_KEY is not configured")

    monkeypatch.setattr(scan_workflow, "run_slip_scan", fake_run)

    assert unified_cli.main(["scan", "slip.jpg", "--no-ai"]) == 1
    assert captured == [scan_workflow.SlipScanRequest(image_path=Path("slip.jpg"), use_ai=False)]
    assert "OCR service unavailable" in capsys.readouterr().out


def test_log_level_option_sets_package_level(tmp_path: Path, ipat_history_text: str) -> None:
    slip = tmp_path / "slip.txt"
    slip.write_text(ipat_history_text, encoding="utf-8")
    package_logger = logging.getLogger("keibaslip")
    previous = package_logger.level

    try:
        assert unified_cli.main(["--log-level", "debug", "parse", str(slip), "--no-ai", "--json"]) == 0
        assert package_logger.level == logging.DEBUG
    finally:
        set_log_level(previous)


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        unified_cli.main(["--log-level", "chatty", "parse"])

    assert excinfo.value.code == 2
