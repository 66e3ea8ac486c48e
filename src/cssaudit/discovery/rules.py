# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Include/exclude pattern matching for repository-relative paths."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import Final

_GLOB_CHARS: Final[frozenset[str]] = frozenset("*?[")


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a path glob into a regular expression.

    ``**`` spans directories, ``*`` and ``?`` stay within one path segment,
    and ``[...]`` is a character class where a leading ``!`` negates it.
    """

    parts: list[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if pattern.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
            continue
        if pattern.startswith("**", index):
            parts.append(".*")
            index += 2
            continue
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            closing = pattern.find("]", index + 1)
            body = pattern[index + 1 : closing] if closing != -1 else ""
            if body.lstrip("!"):
                if body.startswith("!"):
                    body = "^" + body[1:]
                elif body.startswith("^"):
                    body = "\\" + body
                parts.append(f"[{body}]")
                index = closing + 1
                continue
            parts.append(re.escape(char))
        else:
            parts.append(re.escape(char))
        index += 1
    return re.compile("".join(parts))


def matches_pattern(path: str, pattern: str) -> bool:
    """Return whether ``path`` matches ``pattern``.

    Neither kind of pattern is anchored: a glob may match anywhere in the
    path, so ``*.module.css`` selects nested modules and ``src/legacy/*``
    selects everything below ``src/legacy``. Plain patterns match as a
    substring (``components/`` selects a directory).

    Args:
        path: Repository-relative POSIX path.
        pattern: Glob or plain fragment.

    Returns:
        bool: ``True`` when the pattern selects ``path``.
    """

    if not pattern:
        return False
    if not _GLOB_CHARS.intersection(pattern):
        return pattern in path
    return _compile_glob(pattern).search(path) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """Return whether any of ``patterns`` matches ``path``."""

    return any(matches_pattern(path, pattern) for pattern in patterns)


def filter_paths(
    paths: Iterable[str],
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> list[str]:
    """Return ``paths`` kept by ``include`` and not dropped by ``exclude``.

    An empty ``include`` keeps everything. Order is preserved.

    Args:
        paths: Candidate repository-relative paths.
        include: Patterns a path must match to be kept.
        exclude: Patterns that remove a path.

    Returns:
        list[str]: Filtered paths in input order.
    """

    kept: list[str] = []
    for path in paths:
        if include and not matches_any(path, include):
            continue
        if exclude and matches_any(path, exclude):
            continue
        kept.append(path)
    return kept


__all__ = ["filter_paths", "matches_any", "matches_pattern"]
