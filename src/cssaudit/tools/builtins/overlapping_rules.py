# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detect repeated selectors and copy-pasted declaration blocks."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any, Final

from ...models import Finding, ToolRunResult, compute_fingerprint
from ...severity import Severity
from ...targets import FileKind
from ..base import FilesScope, ToolContext, ToolDescriptor
from ..css import CssRule, parse_rules

TOOL_ID: Final[str] = "css-overlapping-rules"
DUPLICATE_SELECTOR_RULE: Final[str] = "duplicate-selector"
DUPLICATE_DECLARATIONS_RULE: Final[str] = "duplicate-declarations"
MIN_SHARED_DECLARATIONS: Final[int] = 2


def _context_label(rule: CssRule) -> str:
    return " ".join(rule.context)


def duplicate_selectors(path: str, rules: list[CssRule]) -> list[Finding]:
    """Return a finding for every repeat of a selector within one file."""

    findings: list[Finding] = []
    first_seen: dict[tuple[str, str], int] = {}
    repeats: Counter[tuple[str, str]] = Counter()
    for rule in rules:
        key = (_context_label(rule), rule.normalized_selector)
        if key not in first_seen:
            first_seen[key] = rule.line
            continue
        repeats[key] += 1
        scope = f" inside {key[0]}" if key[0] else ""
        findings.append(
            Finding(
                tool=TOOL_ID,
                rule_id=DUPLICATE_SELECTOR_RULE,
                severity=Severity.WARN,
                file=path,
                line=rule.line,
                message=f'Selector "{key[1]}"{scope} is declared more than once',
                hint=f"Merge it with the rule on line {first_seen[key]}.",
                fingerprint=compute_fingerprint(TOOL_ID, DUPLICATE_SELECTOR_RULE, path, *key, repeats[key]),
            ),
        )
    return findings


def _signature_text(signature: tuple[tuple[str, str], ...]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in signature)


def duplicate_blocks(parsed: dict[str, list[CssRule]]) -> list[Finding]:
    """Return findings for identical declaration blocks found in different files.

    The first file (in target order) owning a block is the reference; every
    later file repeating it gets one info finding. The reference file appears
    in the message only; the fingerprint covers the repeating file, its
    selector and the shared declarations.
    """

    owners: dict[tuple[tuple[str, str], ...], tuple[str, CssRule]] = {}
    findings: list[Finding] = []
    reported: set[tuple[str, str, str]] = set()
    for path, rules in parsed.items():
        for rule in rules:
            signature = rule.declaration_signature
            if len(signature) < MIN_SHARED_DECLARATIONS:
                continue
            owner = owners.setdefault(signature, (path, rule))
            if owner[0] == path:
                continue
            key = (path, rule.normalized_selector, _signature_text(signature))
            if key in reported:
                continue
            reported.add(key)
            findings.append(
                Finding(
                    tool=TOOL_ID,
                    rule_id=DUPLICATE_DECLARATIONS_RULE,
                    severity=Severity.INFO,
                    file=path,
                    line=rule.line,
                    message=(
                        f'"{rule.normalized_selector}" repeats the declarations of '
                        f'"{owner[1].normalized_selector}" in {owner[0]}'
                    ),
                    hint="Extract the shared declarations into one class or token.",
                    fingerprint=compute_fingerprint(TOOL_ID, DUPLICATE_DECLARATIONS_RULE, *key),
                ),
            )
    return findings


def run(ctx: ToolContext, _tool_config: Mapping[str, Any]) -> ToolRunResult:
    parsed: dict[str, list[CssRule]] = {}
    for path in (*ctx.targets.css_files, *ctx.targets.css_module_files):
        text = ctx.read_text(path)
        if text is not None:
            parsed[path] = parse_rules(text)
    findings: list[Finding] = []
    for path, rules in parsed.items():
        findings.extend(duplicate_selectors(path, rules))
    findings.extend(duplicate_blocks(parsed))
    return ToolRunResult(
        findings=findings,
        stats={
            "overlappingRules": len(findings),
            "rulesChecked": sum(len(rules) for rules in parsed.values()),
        },
    )


OVERLAPPING_RULES_TOOL: Final[ToolDescriptor] = ToolDescriptor(
    id=TOOL_ID,
    title="Overlapping CSS Rules",
    description="Selectors declared twice in one file and declaration blocks copied across files",
    scope=FilesScope(kinds=(FileKind.CSS, FileKind.CSS_MODULE)),
    run=run,
)

__all__ = ["OVERLAPPING_RULES_TOOL", "duplicate_blocks", "duplicate_selectors", "run"]
