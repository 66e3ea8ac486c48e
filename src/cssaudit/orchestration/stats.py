# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Aggregate statistics and the exit-code rule."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import Final

from ..models import AuditStats, Finding, RankedCount, SeverityCounts, TargetSet
from ..severity import Severity, meets_threshold

TOP_LIMIT: Final[int] = 5


def rank(counter: Counter[str], limit: int = TOP_LIMIT) -> list[RankedCount]:
    """Return the ``limit`` most common entries, count-descending then by name."""

    ordered = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [RankedCount(name=name, count=count) for name, count in ordered[:limit]]


def compute_stats(
    *,
    raw_findings: Sequence[Finding],
    new: Sequence[Finding],
    suppressed: Sequence[Finding],
    tools_run: Iterable[str],
    failed_tools: Iterable[str],
    tool_stats: Mapping[str, Mapping[str, int]],
    targets: TargetSet,
) -> AuditStats:
    """Build :class:`AuditStats` for one run.

    ``total_findings`` and ``by_tool`` count raw findings before
    de-duplication; severity and top-N breakdowns cover new findings only.
    """

    ran = list(tools_run)
    by_tool = dict.fromkeys(ran, 0)
    for finding in raw_findings:
        by_tool[finding.tool] = by_tool.get(finding.tool, 0) + 1
    return AuditStats(
        total_findings=len(raw_findings),
        new_count=len(new),
        suppressed_count=len(suppressed),
        by_severity=SeverityCounts.from_findings(new),
        by_tool=by_tool,
        tools_run=ran,
        failed_tools=list(failed_tools),
        top_rule_ids=rank(Counter(f"{finding.tool}/{finding.rule_id}" for finding in new)),
        top_files=rank(Counter(finding.file for finding in new if finding.file)),
        tool_stats={tool_id: dict(values) for tool_id, values in tool_stats.items()},
        mode=targets.mode,
        since_ref=targets.since_ref,
        changed_files_count=len(targets.changed_files),
    )


def compute_exit_code(findings: Iterable[Finding], fail_on: Severity) -> int:
    """Return 1 when any finding meets ``fail_on``, otherwise 0."""

    return 1 if any(meets_threshold(finding.severity, fail_on) for finding in findings) else 0


__all__ = ["TOP_LIMIT", "compute_exit_code", "compute_stats", "rank"]
