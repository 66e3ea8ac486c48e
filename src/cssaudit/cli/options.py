# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer parameter declarations and their translation into :class:`AuditOptions`."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..options import DEFAULT_SINCE, AuditOptions, ReportFormat
from ..severity import Severity

ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Repository root (defaults to the current directory).", show_default=False),
]
CHANGED_OPTION = Annotated[
    bool,
    typer.Option("--changed", "-c", help="Only audit files changed since --since."),
]
SINCE_OPTION = Annotated[
    str,
    typer.Option("--since", "-s", help="Git reference compared against in --changed mode."),
]
INCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--include", "-i", help="Glob limiting audited files (repeatable, comma-separated)."),
]
EXCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-e", help="Glob removing audited files (repeatable, comma-separated)."),
]
TOOLS_OPTION = Annotated[
    list[str] | None,
    typer.Option("--tools", "-t", help="Only run these tool ids (repeatable, comma-separated)."),
]
SKIP_TOOLS_OPTION = Annotated[
    list[str] | None,
    typer.Option("--skip-tools", help="Skip these tool ids (repeatable, comma-separated)."),
]
BASELINE_OPTION = Annotated[
    Path | None,
    typer.Option("--baseline", "-b", help="Baseline file (default: <root>/.css-audit-baseline.json)."),
]
NO_BASELINE_OPTION = Annotated[
    bool,
    typer.Option("--no-baseline", help="Report every finding, ignoring the baseline."),
]
UPDATE_BASELINE_OPTION = Annotated[
    bool,
    typer.Option("--update-baseline", "-u", help="Rewrite the baseline from this run's findings."),
]
FORCE_OPTION = Annotated[
    bool,
    typer.Option("--force", "-f", help="Allow fix tools and baseline updates in --changed mode."),
]
FAIL_ON_OPTION = Annotated[
    Severity | None,
    typer.Option("--fail-on", help="Lowest severity of a new finding that fails the run.", case_sensitive=False),
]
STRICT_OPTION = Annotated[
    bool,
    typer.Option("--strict", help="Shorthand for --fail-on warn."),
]
FORMAT_OPTION = Annotated[
    ReportFormat | None,
    typer.Option("--format", help="Report format.", case_sensitive=False),
]
JSON_OPTION = Annotated[bool, typer.Option("--json", help="Shorthand for --format json.")]
JUNIT_OPTION = Annotated[bool, typer.Option("--junit", help="Shorthand for --format junit.")]
OUTPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Write the report to this file."),
]
CI_OPTION = Annotated[
    bool,
    typer.Option("--ci", help="CI mode: silence tool logging and default to a JUnit report file."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", help="Configuration file (default: <root>/.css-audit.config.json)."),
]
JOBS_OPTION = Annotated[
    int,
    typer.Option("--jobs", "-j", min=1, help="Worker threads for file reads and files-scoped tools."),
]
NO_COLOR_OPTION = Annotated[bool, typer.Option("--no-color", help="Disable ANSI colour output.")]
NO_EMOJI_OPTION = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")]
LIST_TOOLS_OPTION = Annotated[
    bool,
    typer.Option("--list-tools", help="List registered tools and exit."),
]


def resolve_format(fmt: ReportFormat | None, *, json_flag: bool, junit_flag: bool, ci: bool) -> ReportFormat:
    """Return the report format implied by the format flags.

    Raises:
        typer.BadParameter: If ``--json`` and ``--junit`` are combined.
    """

    if json_flag and junit_flag:
        raise typer.BadParameter("--json and --junit are mutually exclusive")
    if fmt is not None:
        return fmt
    if json_flag:
        return ReportFormat.JSON
    if junit_flag or ci:
        return ReportFormat.JUNIT
    return ReportFormat.PRETTY


def resolve_fail_on(fail_on: Severity | None, *, strict: bool) -> Severity:
    """Return the failure threshold; ``--fail-on`` wins over ``--strict``."""

    if fail_on is not None:
        return fail_on
    return Severity.WARN if strict else Severity.ERROR


def build_audit_options(
    *,
    root: Path | None = None,
    changed: bool = False,
    since: str = DEFAULT_SINCE,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    tools: list[str] | None = None,
    skip_tools: list[str] | None = None,
    baseline: Path | None = None,
    no_baseline: bool = False,
    update_baseline: bool = False,
    force: bool = False,
    fail_on: Severity | None = None,
    strict: bool = False,
    fmt: ReportFormat | None = None,
    json_flag: bool = False,
    junit_flag: bool = False,
    output: Path | None = None,
    ci: bool = False,
    config: Path | None = None,
    jobs: int = 1,
    no_color: bool = False,
    no_emoji: bool = False,
) -> AuditOptions:
    """Translate raw CLI flags into :class:`AuditOptions`."""

    return AuditOptions(
        root=(root or Path.cwd()).expanduser(),
        changed=changed,
        since=since,
        include=include or (),
        exclude=exclude or (),
        tools=tools or (),
        skip_tools=skip_tools or (),
        baseline_path=baseline,
        no_baseline=no_baseline,
        update_baseline=update_baseline,
        force=force,
        fail_on=resolve_fail_on(fail_on, strict=strict),
        format=resolve_format(fmt, json_flag=json_flag, junit_flag=junit_flag, ci=ci),
        output_path=output,
        ci=ci,
        config_path=config,
        jobs=jobs,
        color=not no_color,
        emoji=not no_emoji,
    )


__all__ = ["build_audit_options", "resolve_fail_on", "resolve_format"]
