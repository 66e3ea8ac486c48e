# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the css-audit command line."""

import json
import xml.etree.ElementTree as ET
from pathlib import Path

from typer.testing import CliRunner

from cssaudit.cli import app

runner = CliRunner()
PLAIN = ["--no-color", "--no-emoji"]


def test_list_tools() -> None:
    result = runner.invoke(app, ["--list-tools", *PLAIN])

    assert result.exit_code == 0
    assert "css-unused-classes" in result.output
    assert "css-purge-styles" in result.output


def test_pretty_run_passes_on_warnings_by_default(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), *PLAIN])

    assert result.exit_code == 0
    assert "Unused CSS class: .legacy" in result.output


def test_strict_fails_on_warnings(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--strict", *PLAIN])

    assert result.exit_code == 1


def test_fail_on_overrides_strict(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--strict", "--fail-on", "error", *PLAIN])

    assert result.exit_code == 0


def test_baseline_update_then_strict_run_passes(button_repo: Path) -> None:
    update = runner.invoke(app, ["--root", str(button_repo), "--update-baseline", *PLAIN])
    rerun = runner.invoke(app, ["--root", str(button_repo), "--strict", *PLAIN])

    assert update.exit_code == 0
    assert (button_repo / ".css-audit-baseline.json").is_file()
    assert rerun.exit_code == 0


def test_update_baseline_with_changed_is_a_usage_error(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--changed", "--update-baseline", *PLAIN])

    assert result.exit_code == 2
    assert not (button_repo / ".css-audit-baseline.json").exists()


def test_json_and_junit_are_exclusive(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--json", "--junit", *PLAIN])

    assert result.exit_code == 2


def test_ci_json_report_written_to_conventional_path(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--ci", "--json", *PLAIN])

    report = button_repo / "reports" / "css-audit" / "report.json"
    assert result.exit_code == 0
    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["summary"]["newCount"] == 1


def test_ci_defaults_to_junit(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--ci", *PLAIN])

    report = button_repo / "reports" / "css-audit" / "report.xml"
    assert result.exit_code == 0
    assert ET.fromstring(report.read_bytes()).tag == "testsuites"


def test_explicit_output_path(button_repo: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.json"

    result = runner.invoke(app, ["--root", str(button_repo), "--format", "json", "-o", str(output), *PLAIN])

    assert result.exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8"))["findings"][0]["ruleId"] == "unused-class"


def test_missing_root_exits_with_failure(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--root", str(tmp_path / "missing"), *PLAIN])

    assert result.exit_code == 1


def test_changed_mode_outside_git_exits_with_failure(button_repo: Path) -> None:
    result = runner.invoke(app, ["--root", str(button_repo), "--changed", "--since", "main", *PLAIN])

    assert result.exit_code == 1
