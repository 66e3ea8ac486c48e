# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide which registered tools run for a given set of options."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..options import AuditOptions
from ..tools.base import ToolDescriptor
from ..tools.registry import ToolRegistry


@dataclass(frozen=True, slots=True)
class ToolDecision:
    """Selection outcome for one registered tool."""

    tool_id: str
    run: bool
    reason: str


@dataclass(slots=True)
class SelectionResult:
    """Tools chosen for a run plus the reasoning behind each decision."""

    tools: list[ToolDescriptor] = field(default_factory=list)
    decisions: list[ToolDecision] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)

    @property
    def tool_ids(self) -> list[str]:
        """Return identifiers of the selected tools in execution order."""

        return [tool.id for tool in self.tools]


def select_tools(
    registry: ToolRegistry,
    options: AuditOptions,
    *,
    debug: Callable[[str], None] | None = None,
) -> SelectionResult:
    """Return the tools enabled by ``options``.

    Starts from every tool enabled by default (a tool named in ``--tools`` is
    enabled even when it is off by default), intersects with the allow-list,
    subtracts the skip-list, and finally drops fix tools unless fixes are
    forced or the tool was named explicitly.

    Args:
        registry: Registry of available tools.
        options: Resolved run options.
        debug: Optional callback receiving one line per decision.

    Returns:
        SelectionResult: Selected tools in registry order.
    """

    requested = set(options.tools)
    skipped = set(options.skip_tools)
    result = SelectionResult(unknown=[tool_id for tool_id in options.tools if tool_id not in registry])
    for tool in registry.tools():
        decision = _decide(tool, requested, skipped, force=options.force)
        result.decisions.append(decision)
        if debug is not None:
            debug(f"{tool.id}: {'run' if decision.run else 'skip'} ({decision.reason})")
        if decision.run:
            result.tools.append(tool)
    return result


def _decide(tool: ToolDescriptor, requested: set[str], skipped: set[str], *, force: bool) -> ToolDecision:
    named = tool.id in requested
    if requested and not named:
        return ToolDecision(tool.id, False, "not requested")
    if not tool.default_enabled and not named:
        return ToolDecision(tool.id, False, "disabled by default")
    if tool.id in skipped:
        return ToolDecision(tool.id, False, "skipped")
    if tool.is_fix and not (force or named):
        return ToolDecision(tool.id, False, "fix tools need --force or an explicit --tools entry")
    return ToolDecision(tool.id, True, "requested" if named else "enabled")


__all__ = ["SelectionResult", "ToolDecision", "select_tools"]
