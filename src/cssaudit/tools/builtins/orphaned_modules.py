# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report style modules that no logic file imports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from ...models import Finding, ToolRunResult, compute_fingerprint
from ...severity import Severity
from ..base import EntitiesScope, ToolContext, ToolDescriptor

TOOL_ID: Final[str] = "css-orphaned-modules"
RULE_ID: Final[str] = "orphaned-module"


def find_orphans(ctx: ToolContext) -> list[str]:
    """Return targeted style modules without a single importer."""

    return [module for module in ctx.targets.css_module_files if not ctx.index.importers_of(module)]


def run(ctx: ToolContext, _tool_config: Mapping[str, Any]) -> ToolRunResult:
    orphans = find_orphans(ctx)
    findings = [
        Finding(
            tool=TOOL_ID,
            rule_id=RULE_ID,
            severity=Severity.WARN,
            file=module,
            message="CSS module is not imported by any component",
            hint="Delete the module or import it where it is needed.",
            fingerprint=compute_fingerprint(TOOL_ID, RULE_ID, module),
        )
        for module in orphans
    ]
    return ToolRunResult(
        findings=findings,
        stats={"orphanedModules": len(findings), "cssModulesChecked": len(ctx.targets.css_module_files)},
    )


ORPHANED_MODULES_TOOL: Final[ToolDescriptor] = ToolDescriptor(
    id=TOOL_ID,
    title="Orphaned CSS Modules",
    description="CSS modules that no TypeScript or JavaScript file imports",
    scope=EntitiesScope(),
    run=run,
)

__all__ = ["ORPHANED_MODULES_TOOL", "find_orphans", "run"]
