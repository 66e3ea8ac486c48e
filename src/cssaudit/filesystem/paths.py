# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for reasoning about repository-relative paths.

Every path that crosses a component boundary (TargetSet buckets, index keys,
finding locations, baseline entries) is a POSIX string relative to the
repository root. These helpers are the only place that conversion happens.
"""

from __future__ import annotations

import posixpath
from pathlib import Path


def normalize_posix(value: str) -> str:
    """Return ``value`` with separators and ``./`` segments normalised.

    Args:
        value: Repository-relative path as reported by git or a tool.

    Returns:
        str: POSIX path without a leading ``./``.
    """

    cleaned = value.strip().replace("\\", "/")
    if not cleaned:
        return ""
    normalised = posixpath.normpath(cleaned)
    return "" if normalised == "." else normalised


def resolve_repo_path(root: Path, relative: str) -> Path:
    """Return the absolute path for a repository-relative POSIX ``relative``."""

    return root / Path(*relative.split("/"))


__all__ = ("normalize_posix", "resolve_repo_path")
