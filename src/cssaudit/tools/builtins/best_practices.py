# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Flag hard-coded colours and ``!important`` declarations in stylesheets."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any, Final

from ...models import Finding, ToolRunResult, compute_fingerprint
from ...severity import Severity
from ...targets import FileKind
from ..base import FilesScope, ToolContext, ToolDescriptor
from ..css import parse_rules

TOOL_ID: Final[str] = "css-best-practices"
HARDCODED_COLOR_RULE: Final[str] = "hardcoded-color"
IMPORTANT_RULE: Final[str] = "important-declaration"
DEFAULT_TOKEN_PATHS: Final[tuple[str, ...]] = ("styles/tokens/",)

_HEX_COLOR_RE: Final[re.Pattern[str]] = re.compile(r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3,4})\b")
_FUNCTION_COLOR_RE: Final[re.Pattern[str]] = re.compile(r"\b(?:rgba?|hsla?)\([^)\x00]*\)", re.IGNORECASE)
_VAR_RE: Final[re.Pattern[str]] = re.compile(r"var\((?:[^()]|\([^()]*\))*\)")
_IMPORTANT_RE: Final[re.Pattern[str]] = re.compile(r"!\s*important\b", re.IGNORECASE)


def _token_paths(tool_config: Mapping[str, Any]) -> tuple[str, ...]:
    configured = tool_config.get("tokenPaths")
    if isinstance(configured, Sequence) and not isinstance(configured, str):
        return tuple(str(entry) for entry in configured)
    return DEFAULT_TOKEN_PATHS


def find_hardcoded_colors(value: str) -> list[str]:
    """Return literal colours in a declaration value, ignoring custom properties."""

    masked = _VAR_RE.sub("\x00", value)
    return [*_HEX_COLOR_RE.findall(masked), *_FUNCTION_COLOR_RE.findall(masked)]


def check_file(path: str, text: str, *, is_token_file: bool) -> list[Finding]:
    """Return best-practice findings for one stylesheet.

    Identical declarations repeated within the same file get an occurrence
    index so their fingerprints stay distinct and stable.
    """

    findings: list[Finding] = []
    occurrences: Counter[tuple[str, str]] = Counter()
    for rule in parse_rules(text):
        for decl in rule.declarations:
            if decl.prop.startswith("--"):
                continue
            shape = f"{rule.normalized_selector} {{ {decl.prop}: {decl.value} }}"
            if not is_token_file:
                colours = find_hardcoded_colors(decl.value)
                if colours:
                    occurrences[(HARDCODED_COLOR_RULE, shape)] += 1
                    findings.append(
                        Finding(
                            tool=TOOL_ID,
                            rule_id=HARDCODED_COLOR_RULE,
                            severity=Severity.WARN,
                            file=path,
                            line=decl.line,
                            message=f"Hardcoded color {colours[0]} in '{decl.prop}'",
                            hint="Use a design token such as hsl(var(--foreground)) instead.",
                            fingerprint=compute_fingerprint(
                                TOOL_ID,
                                HARDCODED_COLOR_RULE,
                                path,
                                shape,
                                occurrences[(HARDCODED_COLOR_RULE, shape)],
                            ),
                        ),
                    )
            if _IMPORTANT_RE.search(decl.value):
                occurrences[(IMPORTANT_RULE, shape)] += 1
                findings.append(
                    Finding(
                        tool=TOOL_ID,
                        rule_id=IMPORTANT_RULE,
                        severity=Severity.INFO,
                        file=path,
                        line=decl.line,
                        message=f"!important used on '{decl.prop}' in {rule.normalized_selector}",
                        hint="Prefer raising selector specificity or restructuring the cascade.",
                        fingerprint=compute_fingerprint(
                            TOOL_ID,
                            IMPORTANT_RULE,
                            path,
                            shape,
                            occurrences[(IMPORTANT_RULE, shape)],
                        ),
                    ),
                )
    return findings


def run(ctx: ToolContext, tool_config: Mapping[str, Any]) -> ToolRunResult:
    """Check every targeted stylesheet."""

    token_paths = _token_paths(tool_config)
    files = (*ctx.targets.css_files, *ctx.targets.css_module_files)
    findings: list[Finding] = []
    checked = 0
    for path in files:
        text = ctx.read_text(path)
        if text is None:
            continue
        checked += 1
        is_token_file = any(marker in path for marker in token_paths)
        findings.extend(check_file(path, text, is_token_file=is_token_file))
    return ToolRunResult(findings=findings, stats={"bestPracticeIssues": len(findings), "filesChecked": checked})


BEST_PRACTICES_TOOL: Final[ToolDescriptor] = ToolDescriptor(
    id=TOOL_ID,
    title="CSS Best Practices",
    description="Hard-coded colours outside token files and !important declarations",
    scope=FilesScope(kinds=(FileKind.CSS, FileKind.CSS_MODULE)),
    run=run,
)

__all__ = ["BEST_PRACTICES_TOOL", "check_file", "find_hardcoded_colors", "run"]
