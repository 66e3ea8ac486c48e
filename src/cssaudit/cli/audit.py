# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""The ``css-audit`` command."""

from __future__ import annotations

import typer
from rich.table import Table

from ..console import audit_console
from ..errors import AuditError, ConfigError
from ..logging import fail, ok
from ..options import DEFAULT_SINCE, AuditOptions, ReportFormat
from ..orchestration import Orchestrator, compute_exit_code
from ..reporting import generate_report
from ..tools.registry import ToolRegistry
from .options import (
    BASELINE_OPTION,
    CHANGED_OPTION,
    CI_OPTION,
    CONFIG_OPTION,
    EXCLUDE_OPTION,
    FAIL_ON_OPTION,
    FORCE_OPTION,
    FORMAT_OPTION,
    INCLUDE_OPTION,
    JOBS_OPTION,
    JSON_OPTION,
    JUNIT_OPTION,
    LIST_TOOLS_OPTION,
    NO_BASELINE_OPTION,
    NO_COLOR_OPTION,
    NO_EMOJI_OPTION,
    OUTPUT_OPTION,
    ROOT_OPTION,
    SINCE_OPTION,
    SKIP_TOOLS_OPTION,
    STRICT_OPTION,
    TOOLS_OPTION,
    UPDATE_BASELINE_OPTION,
    build_audit_options,
)


def render_tool_list(registry: ToolRegistry, options: AuditOptions) -> None:
    """Print the registered tools as a table."""

    table = Table(title="CSS audit tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Scope")
    table.add_column("Default")
    table.add_column("Description")
    for tool in registry.tools():
        table.add_row(
            tool.id,
            tool.category.value,
            tool.scope.type,
            "on" if tool.default_enabled else "off",
            tool.description,
        )
    audit_console(color=options.color, emoji=options.emoji).print(table)


def run_audit(options: AuditOptions, *, orchestrator: Orchestrator | None = None) -> int:
    """Run the audit, emit the report and return the process exit status.

    Args:
        options: Resolved run options.
        orchestrator: Optional orchestrator, e.g. with a custom registry.

    Returns:
        int: ``0`` when no new finding meets the threshold, otherwise ``1``.

    Raises:
        AuditError: On fatal root, git, baseline or report failures.
    """

    orchestrator = orchestrator or Orchestrator()
    result = orchestrator.run(options)
    generate_report(
        result,
        options.format,
        options.resolved_output_path,
        use_color=options.color,
        use_emoji=options.emoji,
        quiet=options.ci,
    )
    exit_code = compute_exit_code(result.findings, options.fail_on)
    if exit_code == 0 and not options.ci and options.format is ReportFormat.PRETTY:
        ok(f"No new findings at or above '{options.fail_on.value}'", use_emoji=options.emoji, use_color=options.color)
    return exit_code


def audit_command(
    root: ROOT_OPTION = None,
    changed: CHANGED_OPTION = False,
    since: SINCE_OPTION = DEFAULT_SINCE,
    include: INCLUDE_OPTION = None,
    exclude: EXCLUDE_OPTION = None,
    tools: TOOLS_OPTION = None,
    skip_tools: SKIP_TOOLS_OPTION = None,
    baseline: BASELINE_OPTION = None,
    no_baseline: NO_BASELINE_OPTION = False,
    update_baseline: UPDATE_BASELINE_OPTION = False,
    force: FORCE_OPTION = False,
    fail_on: FAIL_ON_OPTION = None,
    strict: STRICT_OPTION = False,
    fmt: FORMAT_OPTION = None,
    json_flag: JSON_OPTION = False,
    junit_flag: JUNIT_OPTION = False,
    output: OUTPUT_OPTION = None,
    ci: CI_OPTION = False,
    config: CONFIG_OPTION = None,
    jobs: JOBS_OPTION = 1,
    no_color: NO_COLOR_OPTION = False,
    no_emoji: NO_EMOJI_OPTION = False,
    list_tools: LIST_TOOLS_OPTION = False,
) -> None:
    """Audit CSS for regressions against the baseline."""

    options = build_audit_options(
        root=root,
        changed=changed,
        since=since,
        include=include,
        exclude=exclude,
        tools=tools,
        skip_tools=skip_tools,
        baseline=baseline,
        no_baseline=no_baseline,
        update_baseline=update_baseline,
        force=force,
        fail_on=fail_on,
        strict=strict,
        fmt=fmt,
        json_flag=json_flag,
        junit_flag=junit_flag,
        output=output,
        ci=ci,
        config=config,
        jobs=jobs,
        no_color=no_color,
        no_emoji=no_emoji,
    )
    orchestrator = Orchestrator()
    if list_tools:
        render_tool_list(orchestrator.registry, options)
        raise typer.Exit(code=0)
    try:
        options.check_combinations()
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc
    try:
        exit_code = run_audit(options, orchestrator=orchestrator)
    except AuditError as exc:
        fail(str(exc), use_emoji=options.emoji, use_color=options.color)
        raise typer.Exit(code=1) from exc
    raise typer.Exit(code=exit_code)


__all__ = ["audit_command", "render_tool_list", "run_audit"]
