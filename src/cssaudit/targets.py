# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve and classify the files examined by an audit run."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Final

from .discovery import FilesystemDiscovery, GitDiscovery, filter_paths
from .errors import RootResolutionError
from .models import ScanMode, TargetSet
from .options import AuditOptions

CSS_MODULE_SUFFIX: Final[str] = ".module.css"
DECLARATION_SUFFIX: Final[str] = ".d.ts"
COMPONENT_SUFFIXES: Final[tuple[str, ...]] = (".tsx", ".jsx")
LOGIC_SUFFIXES: Final[tuple[str, ...]] = (".ts", ".js", ".mts", ".cts", ".mjs", ".cjs")


class FileKind(str, Enum):
    """Buckets a repository file can be classified into."""

    CSS = "css"
    CSS_MODULE = "cssModule"
    TS = "ts"
    TSX = "tsx"


def classify_path(path: str) -> FileKind | None:
    """Return the bucket for ``path`` based solely on its suffix.

    Args:
        path: Repository-relative POSIX path.

    Returns:
        FileKind | None: Matching bucket, or ``None`` for unrelated files.
    """

    lowered = path.lower()
    if lowered.endswith(CSS_MODULE_SUFFIX):
        return FileKind.CSS_MODULE
    if lowered.endswith(".css"):
        return FileKind.CSS
    if lowered.endswith(COMPONENT_SUFFIXES):
        return FileKind.TSX
    if lowered.endswith(DECLARATION_SUFFIX):
        return None
    if lowered.endswith(LOGIC_SUFFIXES):
        return FileKind.TS
    return None


def classify_files(
    files: Iterable[str],
    *,
    mode: ScanMode,
    since_ref: str | None = None,
    changed_files: Sequence[str] = (),
) -> TargetSet:
    """Build a :class:`TargetSet` by classifying ``files``.

    Args:
        files: Repository-relative POSIX paths forming ``all_files``.
        mode: Scan mode recorded on the target set.
        since_ref: Git reference used in changed mode.
        changed_files: Files reported as changed.

    Returns:
        TargetSet: Classified snapshot; every bucket is a subset of ``all_files``.
    """

    universe = tuple(dict.fromkeys(files))
    buckets: dict[FileKind, list[str]] = {kind: [] for kind in FileKind}
    for path in universe:
        kind = classify_path(path)
        if kind is not None:
            buckets[kind].append(path)
    return TargetSet(
        mode=mode,
        since_ref=since_ref,
        changed_files=tuple(changed_files),
        css_files=tuple(buckets[FileKind.CSS]),
        css_module_files=tuple(buckets[FileKind.CSS_MODULE]),
        ts_files=tuple(buckets[FileKind.TS]),
        tsx_files=tuple(buckets[FileKind.TSX]),
        all_files=universe,
    )


def ensure_root(root: Path) -> Path:
    """Return the resolved repository root or raise when it is unusable.

    Raises:
        RootResolutionError: If ``root`` is missing, not a directory or unreadable.
    """

    try:
        resolved = root.expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise RootResolutionError(f"cannot resolve repository root {root}: {exc}") from exc
    if not resolved.is_dir():
        raise RootResolutionError(f"repository root {resolved} is not a directory")
    if not os.access(resolved, os.R_OK | os.X_OK):
        raise RootResolutionError(f"repository root {resolved} is not readable")
    return resolved


class TargetResolver:
    """Compute the authoritative, classified file set for one run."""

    def __init__(
        self,
        *,
        filesystem: FilesystemDiscovery | None = None,
        git: GitDiscovery | None = None,
        warn: Callable[[str], None] | None = None,
    ) -> None:
        self._filesystem = filesystem or FilesystemDiscovery(warn=warn)
        self._git = git or GitDiscovery()

    def build(
        self,
        options: AuditOptions,
        *,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
    ) -> TargetSet:
        """Return the target set described by ``options``.

        In full mode the whole tree is enumerated. In changed mode only files
        changed since ``options.since`` are classified; buckets without
        changed files are empty.

        Args:
            options: Resolved run options.
            include: Include globs overriding ``options.include``.
            exclude: Exclude globs overriding ``options.exclude``.

        Returns:
            TargetSet: Classified snapshot for the run.

        Raises:
            RootResolutionError: If the repository root cannot be used.
            TargetResolutionError: If the git reference is invalid in changed mode.
        """

        root = ensure_root(options.root)
        include = options.include if include is None else include
        exclude = options.exclude if exclude is None else exclude
        if not options.changed:
            return self.enumerate_workspace(root, include, exclude)
        changed = filter_paths(self._git.changed_files(root, options.since), include, exclude)
        return classify_files(
            changed,
            mode=ScanMode.CHANGED,
            since_ref=options.since,
            changed_files=changed,
        )

    def enumerate_workspace(
        self,
        root: Path,
        include: Sequence[str] = (),
        exclude: Sequence[str] = (),
    ) -> TargetSet:
        """Return a full-mode target set covering every file under ``root``."""

        files = filter_paths(self._filesystem.discover(root), include, exclude)
        return classify_files(files, mode=ScanMode.FULL)


__all__ = [
    "CSS_MODULE_SUFFIX",
    "FileKind",
    "TargetResolver",
    "classify_files",
    "classify_path",
    "ensure_root",
]
