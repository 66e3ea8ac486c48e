# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Orchestration layer tying targets, tools and the baseline together."""

from __future__ import annotations

from .orchestrator import ExecutionState, Orchestrator, ToolOutcome, normalize_findings
from .selection import SelectionResult, ToolDecision, select_tools
from .stats import compute_exit_code, compute_stats
from .targeting import apply_tool_filters, narrow_targets, resolve_tool_targets

__all__ = [
    "ExecutionState",
    "Orchestrator",
    "SelectionResult",
    "ToolDecision",
    "ToolOutcome",
    "apply_tool_filters",
    "compute_exit_code",
    "compute_stats",
    "narrow_targets",
    "normalize_findings",
    "resolve_tool_targets",
    "select_tools",
]
