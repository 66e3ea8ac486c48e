# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem discovery strategy."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Final

from ..filesystem.paths import normalize_posix

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        "node_modules",
        ".next",
        ".turbo",
        "build",
        "dist",
        "coverage",
        ".cache",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
    },
)

WarnCallback = Callable[[str], None]


class FilesystemDiscovery:
    """Traverse the repository tree collecting every candidate file."""

    def __init__(self, *, follow_symlinks: bool = False, warn: WarnCallback | None = None) -> None:
        """Create a discovery strategy.

        Args:
            follow_symlinks: When ``True`` walk directories pointed to by
                symlinks instead of skipping them.
            warn: Callback receiving messages about unreadable directories.
        """

        self.follow_symlinks = follow_symlinks
        self._warn = warn

    @property
    def identifier(self) -> str:
        """Return the identifier for the filesystem discovery strategy."""

        return "filesystem"

    def discover(self, root: Path) -> list[str]:
        """Return sorted repository-relative POSIX paths of files under ``root``.

        Args:
            root: Repository root directory.

        Returns:
            list[str]: Every file outside the always-excluded directories.
        """

        return sorted(self._walk(root))

    def _walk(self, root: Path) -> Iterator[str]:
        """Yield repository-relative files beneath ``root``."""

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_error, followlinks=self.follow_symlinks):
            dirnames[:] = sorted(name for name in dirnames if name not in ALWAYS_EXCLUDE_DIRS)
            current = Path(dirpath)
            for filename in filenames:
                relative = os.path.relpath(current / filename, root)
                yield normalize_posix(relative)

    def _on_error(self, error: OSError) -> None:
        """Report an unreadable directory and keep walking."""

        if self._warn is not None:
            self._warn(f"Skipping unreadable path {error.filename}: {error.strerror}")


__all__ = ["ALWAYS_EXCLUDE_DIRS", "FilesystemDiscovery"]
