# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detect classes defined in style modules that no importer references."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

from ...indexing import iter_style_module_imports, resolve_import
from ...models import Finding, ToolRunResult, compute_fingerprint
from ...severity import Severity
from ..base import EntitiesScope, ToolContext, ToolDescriptor
from ..css import class_definitions

TOOL_ID: Final[str] = "css-unused-classes"
RULE_ID: Final[str] = "unused-class"


def _usage_patterns(binding: str) -> tuple[re.Pattern[str], re.Pattern[str], re.Pattern[str]]:
    """Return dot, literal-bracket and dynamic-bracket patterns for ``binding``."""

    name = re.escape(binding)
    dot = re.compile(rf"(?<![\w$.]){name}\??\.([A-Za-z_$][\w$]*)")
    bracket = re.compile(rf"(?<![\w$.]){name}\??\.?\[\s*(['\"])([^'\"`]+)\1\s*\]")
    dynamic = re.compile(rf"(?<![\w$.]){name}\??\.?\[\s*(?!['\"][^'\"`]+['\"]\s*\])")
    return dot, bracket, dynamic


def collect_class_usage(source: str, binding: str) -> tuple[set[str], bool]:
    """Return classes referenced through ``binding`` and whether access is dynamic.

    Args:
        source: Importer source text.
        binding: Local name the style module was imported as.

    Returns:
        tuple[set[str], bool]: Referenced class names, and ``True`` when the
        module is indexed with a non-literal key (``styles[variant]``).
    """

    dot, bracket, dynamic = _usage_patterns(binding)
    used = set(dot.findall(source))
    used.update(match.group(2) for match in bracket.finditer(source))
    return used, dynamic.search(source) is not None


def is_baseline_worthy(finding: Finding, _ctx: ToolContext) -> bool:
    """Persist warn-level unused classes only."""

    return finding.severity is Severity.WARN


def run(ctx: ToolContext, tool_config: Mapping[str, Any]) -> ToolRunResult:
    """Scan every targeted style module for unreferenced classes."""

    ignored = set(tool_config.get("ignoreClasses", ()))
    findings: list[Finding] = []
    processed = 0
    dynamic_modules = 0
    for module in ctx.targets.css_module_files:
        importers = ctx.index.importers_of(module)
        if not importers:
            continue
        text = ctx.read_text(module)
        if text is None:
            continue
        definitions = class_definitions(text)
        if not definitions:
            continue
        processed += 1
        used: set[str] = set()
        dynamic = False
        for importer in sorted(importers):
            source = ctx.read_text(importer)
            if source is None:
                continue
            for item in iter_style_module_imports(source):
                if resolve_import(ctx.root, importer, item.specifier) != module:
                    continue
                names, is_dynamic = collect_class_usage(source, item.binding)
                used.update(names)
                dynamic = dynamic or is_dynamic
        if dynamic:
            dynamic_modules += 1
            ctx.log(f"{module}: dynamic class access, skipping unused-class check")
            continue
        for class_name, line in definitions.items():
            if class_name in used or class_name in ignored:
                continue
            findings.append(
                Finding(
                    tool=TOOL_ID,
                    rule_id=RULE_ID,
                    severity=Severity.WARN,
                    file=module,
                    line=line,
                    message=f"Unused CSS class: .{class_name}",
                    hint=f'Class "{class_name}" is defined but never referenced by its importers.',
                    fingerprint=compute_fingerprint(TOOL_ID, RULE_ID, module, class_name),
                ),
            )
    return ToolRunResult(
        findings=findings,
        stats={
            "unusedClasses": len(findings),
            "cssModulesProcessed": processed,
            "dynamicModulesSkipped": dynamic_modules,
        },
    )


UNUSED_CLASSES_TOOL: Final[ToolDescriptor] = ToolDescriptor(
    id=TOOL_ID,
    title="Unused CSS Classes",
    description="Classes defined in CSS modules that no importing component references",
    scope=EntitiesScope(),
    run=run,
    baseline_include=is_baseline_worthy,
)

__all__ = ["UNUSED_CLASSES_TOOL", "collect_class_usage", "is_baseline_worthy", "run"]
