# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lightweight regex-driven stylesheet scanning shared by the built-in tools.

This is not a CSS parser. Rules are split on braces, comments are blanked out
with line breaks preserved, and at-rules that hold declarations rather than
rules (``@keyframes``, ``@font-face`` and friends) are skipped wholesale.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final

_COMMENT_RE: Final[re.Pattern[str]] = re.compile(r"/\*.*?\*/", re.DOTALL)
_BRACE_RE: Final[re.Pattern[str]] = re.compile(r"[{};]")
_GLOBAL_RE: Final[re.Pattern[str]] = re.compile(r":global\((?:[^()]|\([^()]*\))*\)|:global\b[^,{]*")
_CLASS_RE: Final[re.Pattern[str]] = re.compile(r"\.(-?[_a-zA-Z][_a-zA-Z0-9-]*)")
_ATTRIBUTE_RE: Final[re.Pattern[str]] = re.compile(r"\[[^\]]*\]")
_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")
_COMBINATOR_RE: Final[re.Pattern[str]] = re.compile(r"\s*([>+~,])\s*")
_PROPERTY_RE: Final[re.Pattern[str]] = re.compile(r"^-{0,2}[a-zA-Z][a-zA-Z0-9-]*$")

# At-rules whose blocks contain ordinary style rules.
NESTING_AT_RULES: Final[frozenset[str]] = frozenset({"media", "supports", "layer", "container", "document", "scope"})


@dataclass(frozen=True, slots=True)
class Declaration:
    """One ``property: value`` pair inside a rule body."""

    prop: str
    value: str
    line: int


@dataclass(frozen=True, slots=True)
class CssRule:
    """A style rule with its selector, declarations and enclosing at-rules."""

    selector: str
    line: int
    declarations: tuple[Declaration, ...] = ()
    context: tuple[str, ...] = ()

    @property
    def normalized_selector(self) -> str:
        """Return the selector with whitespace and combinators canonicalised."""

        return normalize_selector(self.selector)

    @property
    def declaration_signature(self) -> tuple[tuple[str, str], ...]:
        """Return a sorted, whitespace-normalised view of the declarations."""

        return tuple(sorted((decl.prop.lower(), _collapse(decl.value)) for decl in self.declarations))


@dataclass(slots=True)
class _Frame:
    kind: str
    selector: str = ""
    line: int = 0
    body_start: int = 0
    context: tuple[str, ...] = field(default_factory=tuple)


def _collapse(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def strip_comments(text: str) -> str:
    """Blank out ``/* ... */`` comments while keeping line numbers intact."""

    return _COMMENT_RE.sub(lambda match: "\n" * match.group(0).count("\n"), text)


def line_at(text: str, offset: int) -> int:
    """Return the 1-based line number of ``offset`` within ``text``."""

    return text.count("\n", 0, offset) + 1


def normalize_selector(selector: str) -> str:
    """Return ``selector`` with whitespace collapsed around combinators."""

    return _COMBINATOR_RE.sub(lambda match: f" {match.group(1)} " if match.group(1) != "," else ", ", _collapse(selector))


def parse_declarations(body: str, start_line: int) -> tuple[Declaration, ...]:
    """Split a rule body into declarations.

    Nested blocks are ignored; only segments shaped like ``prop: value``
    survive.
    """

    declarations: list[Declaration] = []
    offset = 0
    for segment in body.split(";"):
        line = start_line + body.count("\n", 0, offset)
        offset += len(segment) + 1
        if "{" in segment or "}" in segment or ":" not in segment:
            continue
        prop, _, value = segment.partition(":")
        leading = len(segment) - len(segment.lstrip())
        prop = prop.strip()
        if not _PROPERTY_RE.match(prop) or not value.strip():
            continue
        declarations.append(Declaration(prop, _collapse(value), line + segment.count("\n", 0, leading)))
    return tuple(declarations)


def iter_rules(text: str) -> Iterator[CssRule]:
    """Yield the style rules declared in ``text`` in source order of closing."""

    source = strip_comments(text)
    stack: list[_Frame] = []
    prelude_start = 0
    for match in _BRACE_RE.finditer(source):
        char = match.group(0)
        position = match.start()
        if char == ";":
            prelude_start = position + 1
            continue
        if char == "{":
            prelude = source[prelude_start:position]
            stripped = prelude.strip()
            leading = len(prelude) - len(prelude.lstrip())
            line = line_at(source, prelude_start + leading)
            context = stack[-1].context if stack else ()
            if stack and stack[-1].kind == "skip":
                stack.append(_Frame("skip"))
            elif stripped.startswith("@"):
                name = stripped[1:].split(None, 1)[0].split("(", 1)[0].lower() if len(stripped) > 1 else ""
                if name in NESTING_AT_RULES:
                    stack.append(_Frame("at", context=(*context, _collapse(stripped))))
                else:
                    stack.append(_Frame("skip"))
            else:
                stack.append(_Frame("rule", stripped, line, position + 1, context))
            prelude_start = position + 1
            continue
        prelude_start = position + 1
        if not stack:
            continue
        frame = stack.pop()
        if frame.kind == "rule" and frame.selector:
            body = source[frame.body_start : position]
            yield CssRule(
                selector=frame.selector,
                line=frame.line,
                declarations=parse_declarations(body, line_at(source, frame.body_start)),
                context=frame.context,
            )


def parse_rules(text: str) -> list[CssRule]:
    """Return the style rules in ``text`` ordered by their starting line."""

    return sorted(iter_rules(text), key=lambda rule: rule.line)


def extract_class_names(selector: str) -> list[str]:
    """Return local class names referenced by ``selector``.

    ``:global(...)`` segments and attribute selectors are ignored.
    """

    local = _ATTRIBUTE_RE.sub("", _GLOBAL_RE.sub("", selector))
    return list(dict.fromkeys(_CLASS_RE.findall(local)))


def class_definitions(text: str) -> dict[str, int]:
    """Map each local class name defined in ``text`` to its first line."""

    definitions: dict[str, int] = {}
    for rule in parse_rules(text):
        for name in extract_class_names(rule.selector):
            definitions.setdefault(name, rule.line)
    return definitions


__all__ = [
    "NESTING_AT_RULES",
    "CssRule",
    "Declaration",
    "class_definitions",
    "extract_class_names",
    "iter_rules",
    "line_at",
    "normalize_selector",
    "parse_declarations",
    "parse_rules",
    "strip_comments",
]
