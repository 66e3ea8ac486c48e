# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for run options and CLI flag translation."""

from pathlib import Path

import pytest
import typer

from cssaudit.cli.options import build_audit_options, resolve_fail_on, resolve_format
from cssaudit.errors import ConfigError
from cssaudit.options import AuditOptions, ReportFormat
from cssaudit.severity import Severity


def test_list_options_accept_comma_separated_values(tmp_path: Path) -> None:
    options = AuditOptions(root=tmp_path, tools=["a,b", " c "], exclude="x/, y/")

    assert options.tools == ("a", "b", "c")
    assert options.exclude == ("x/", "y/")


def test_update_baseline_in_changed_mode_requires_force(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        AuditOptions(root=tmp_path, changed=True, update_baseline=True).check_combinations()
    AuditOptions(root=tmp_path, changed=True, update_baseline=True, force=True).check_combinations()


def test_baseline_path_resolution(tmp_path: Path) -> None:
    assert AuditOptions(root=tmp_path).resolved_baseline_path == tmp_path / ".css-audit-baseline.json"
    assert AuditOptions(root=tmp_path, baseline_path=Path("b.json")).resolved_baseline_path == tmp_path / "b.json"
    absolute = tmp_path / "elsewhere" / "b.json"
    assert AuditOptions(root=tmp_path, baseline_path=absolute).resolved_baseline_path == absolute


def test_ci_reports_default_to_conventional_location(tmp_path: Path) -> None:
    junit = AuditOptions(root=tmp_path, ci=True, format=ReportFormat.JUNIT)
    pretty = AuditOptions(root=tmp_path, ci=True)

    assert junit.resolved_output_path == tmp_path / "reports" / "css-audit" / "report.xml"
    assert pretty.resolved_output_path is None
    assert AuditOptions(root=tmp_path, output_path=Path("r.json")).resolved_output_path == tmp_path / "r.json"


def test_jobs_must_be_positive(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        AuditOptions(root=tmp_path, jobs=0)


def test_resolve_format_precedence() -> None:
    assert resolve_format(None, json_flag=False, junit_flag=False, ci=False) is ReportFormat.PRETTY
    assert resolve_format(None, json_flag=False, junit_flag=False, ci=True) is ReportFormat.JUNIT
    assert resolve_format(None, json_flag=True, junit_flag=False, ci=True) is ReportFormat.JSON
    assert resolve_format(ReportFormat.PRETTY, json_flag=True, junit_flag=False, ci=True) is ReportFormat.PRETTY
    with pytest.raises(typer.BadParameter):
        resolve_format(None, json_flag=True, junit_flag=True, ci=False)


def test_resolve_fail_on_precedence() -> None:
    assert resolve_fail_on(None, strict=False) is Severity.ERROR
    assert resolve_fail_on(None, strict=True) is Severity.WARN
    assert resolve_fail_on(Severity.INFO, strict=True) is Severity.INFO


def test_build_audit_options_maps_flags(tmp_path: Path) -> None:
    options = build_audit_options(root=tmp_path, tools=["a,b"], no_color=True, strict=True, junit_flag=True)

    assert options.tools == ("a", "b")
    assert options.color is False
    assert options.emoji is True
    assert options.fail_on is Severity.WARN
    assert options.format is ReportFormat.JUNIT
