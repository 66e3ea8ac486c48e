# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Delete style modules that nothing imports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from ...filesystem.paths import resolve_repo_path
from ...models import Finding, ToolRunResult, compute_fingerprint
from ...severity import Severity
from ..base import EntitiesScope, ToolCategory, ToolContext, ToolDescriptor
from .orphaned_modules import find_orphans

TOOL_ID: Final[str] = "css-purge-styles"
RULE_ID: Final[str] = "purged-module"


def run(ctx: ToolContext, tool_config: Mapping[str, Any]) -> ToolRunResult:
    """Remove orphaned style modules, or only report them when ``dryRun`` is set."""

    dry_run = bool(tool_config.get("dryRun", False))
    findings: list[Finding] = []
    removed = 0
    for module in find_orphans(ctx):
        target = resolve_repo_path(ctx.root, module)
        if not dry_run:
            try:
                target.unlink()
            except OSError as exc:
                ctx.warn(f"Could not remove {module}: {exc.strerror or exc}")
                continue
            removed += 1
        action = "Would remove" if dry_run else "Removed"
        ctx.log(f"{action} orphaned CSS module {module}")
        findings.append(
            Finding(
                tool=TOOL_ID,
                rule_id=RULE_ID,
                severity=Severity.INFO,
                file=module,
                message=f"{action} orphaned CSS module",
                fingerprint=compute_fingerprint(TOOL_ID, RULE_ID, module),
            ),
        )
    return ToolRunResult(findings=findings, stats={"modulesRemoved": removed, "orphansFound": len(findings)})


PURGE_STYLES_TOOL: Final[ToolDescriptor] = ToolDescriptor(
    id=TOOL_ID,
    title="Purge Orphaned Styles",
    description="Deletes CSS modules that no component imports",
    category=ToolCategory.FIX,
    default_enabled=False,
    scope=EntitiesScope(),
    run=run,
)

__all__ = ["PURGE_STYLES_TOOL", "run"]
