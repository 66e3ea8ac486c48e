# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""File discovery strategies used by the target resolver."""

from __future__ import annotations

from .filesystem import ALWAYS_EXCLUDE_DIRS, FilesystemDiscovery
from .git import GitDiscovery, GitRunner
from .rules import filter_paths, matches_any, matches_pattern

__all__ = [
    "ALWAYS_EXCLUDE_DIRS",
    "FilesystemDiscovery",
    "GitDiscovery",
    "GitRunner",
    "filter_paths",
    "matches_any",
    "matches_pattern",
]
