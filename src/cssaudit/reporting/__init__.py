# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report generation for audit results."""

from __future__ import annotations

from pathlib import Path

from ..console import audit_console
from ..errors import ReportWriteError
from ..logging import info
from ..models import AuditResult
from ..options import ReportFormat
from .emitters import format_json, format_junit
from .formatters import build_pretty, format_pretty


def render_report(result: AuditResult, fmt: ReportFormat, *, use_emoji: bool = True) -> str:
    """Return ``result`` rendered as ``fmt`` without side effects."""

    match fmt:
        case ReportFormat.JSON:
            return format_json(result)
        case ReportFormat.JUNIT:
            return format_junit(result)
        case _:
            return format_pretty(result, use_emoji=use_emoji)


def write_report(path: Path, report: str) -> None:
    """Write ``report`` to ``path``, creating parent directories.

    Raises:
        ReportWriteError: If the directory or file cannot be written.
    """

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"cannot write report {path}: {exc.strerror or exc}") from exc


def generate_report(
    result: AuditResult,
    fmt: ReportFormat,
    output_path: Path | None = None,
    *,
    use_color: bool = True,
    use_emoji: bool = True,
    quiet: bool = False,
) -> str:
    """Render ``result`` and deliver it.

    With ``output_path`` the report is written to disk. Without one, the
    pretty format is printed to the console and other formats are only
    returned.

    Args:
        result: Orchestrator result.
        fmt: Requested format.
        output_path: Optional destination file.
        use_color: Whether console output may use colour.
        use_emoji: Whether console output may use emoji.
        quiet: Suppress the ``Report written to`` message.

    Returns:
        str: The rendered report.

    Raises:
        ReportWriteError: If ``output_path`` cannot be written.
    """

    report = render_report(result, fmt, use_emoji=use_emoji)
    if output_path is not None:
        write_report(output_path, report)
        if not quiet:
            info(f"Report written to: {output_path}", use_emoji=use_emoji, use_color=use_color)
    elif fmt is ReportFormat.PRETTY:
        console = audit_console(color=use_color, emoji=use_emoji)
        console.print(build_pretty(result, use_emoji=use_emoji), end="")
    return report


__all__ = [
    "build_pretty",
    "format_json",
    "format_junit",
    "format_pretty",
    "generate_report",
    "render_report",
    "write_report",
]
