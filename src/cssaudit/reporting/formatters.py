# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Human-readable rendering of audit results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from rich.text import Text

from ..logging import emoji
from ..models import AuditResult, Finding, RankedCount
from ..severity import Severity

RULE_WIDTH: Final[int] = 60
UNKNOWN_FILE: Final[str] = "<unknown>"

SEVERITY_LABELS: Final[dict[Severity, tuple[str, str]]] = {
    Severity.ERROR: ("ERROR", "bold red"),
    Severity.WARN: ("WARN", "yellow"),
    Severity.INFO: ("INFO", "blue"),
}


def group_by_file(findings: Sequence[Finding]) -> dict[str, list[Finding]]:
    """Group ``findings`` by file in first-seen order."""

    grouped: dict[str, list[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.file or UNKNOWN_FILE, []).append(finding)
    return grouped


def _location(finding: Finding) -> str:
    if finding.line is None:
        return ""
    return f":{finding.line}:{finding.col}" if finding.col is not None else f":{finding.line}"


def _heading(text: Text, title: str) -> None:
    text.append(f"\n{title}\n", style="bold")


def _ranked(text: Text, title: str, entries: Sequence[RankedCount]) -> None:
    if not entries:
        return
    _heading(text, title)
    for entry in entries:
        text.append(f"  {entry.name}: {entry.count}\n")


def build_pretty(result: AuditResult, *, use_emoji: bool = True) -> Text:
    """Return the styled pretty report for ``result``.

    Args:
        result: Orchestrator result to render.
        use_emoji: Whether to decorate headings with emoji.

    Returns:
        Text: Rich text whose ``plain`` value is the unstyled report.
    """

    stats = result.stats
    text = Text()
    text.append(f"\n{emoji('📊 ', use_emoji)}CSS Audit Results\n", style="bold")
    text.append("─" * RULE_WIDTH + "\n")

    _heading(text, "Statistics:")
    text.append(f"  Mode: {stats.mode.value}")
    if stats.since_ref:
        text.append(f" (since {stats.since_ref}, {stats.changed_files_count} changed file(s))")
    text.append("\n")
    text.append(f"  Total findings: {stats.total_findings}\n")
    text.append("  New findings: ")
    text.append(str(stats.new_count), style="yellow")
    text.append("\n  Suppressed (baseline): ")
    text.append(str(stats.suppressed_count), style="dim")
    text.append("\n")

    _heading(text, "By Severity:")
    for label, severity, count in (
        ("Errors", Severity.ERROR, stats.by_severity.error),
        ("Warnings", Severity.WARN, stats.by_severity.warn),
        ("Info", Severity.INFO, stats.by_severity.info),
    ):
        text.append(f"  {label}: ")
        text.append(str(count), style=SEVERITY_LABELS[severity][1])
        text.append("\n")

    if stats.by_tool:
        _heading(text, "By Tool:")
        for tool_id, count in stats.by_tool.items():
            text.append(f"  {tool_id}: {count}\n")
    if stats.failed_tools:
        _heading(text, "Failed Tools:")
        for tool_id in stats.failed_tools:
            text.append(f"  {tool_id}\n", style="red")
    _ranked(text, "Top Rules:", stats.top_rule_ids)
    _ranked(text, "Top Files:", stats.top_files)

    if not result.findings:
        text.append(f"\n{emoji('✅ ', use_emoji)}No issues found!\n", style="green")
        return text

    _heading(text, "Findings:")
    for file, findings in group_by_file(result.findings).items():
        text.append("\n")
        text.append(file, style="underline")
        text.append("\n")
        for finding in findings:
            label, style = SEVERITY_LABELS[finding.severity]
            text.append("  ")
            text.append(label, style=style)
            text.append(f" {finding.tool}/{finding.rule_id}{_location(finding)}\n")
            text.append(f"    {finding.message}\n")
            if finding.hint:
                text.append(f"    {emoji('💡 ', use_emoji)}")
                text.append(finding.hint, style="dim")
                text.append("\n")
    return text


def format_pretty(result: AuditResult, *, use_emoji: bool = True) -> str:
    """Return the pretty report for ``result`` as plain text."""

    return build_pretty(result, use_emoji=use_emoji).plain


__all__ = ["SEVERITY_LABELS", "build_pretty", "format_pretty", "group_by_file"]
