# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-tool target derivation."""

from __future__ import annotations

from collections.abc import Sequence

from ..discovery import filter_paths
from ..models import ScanMode, TargetSet, WorkspaceIndex
from ..targets import FileKind, classify_files
from ..tools.base import CSS_MODULE_ENTITY, EntitiesScope, FilesScope, GlobalScope, ToolDescriptor

_BUCKETS: dict[FileKind, str] = {
    FileKind.CSS: "css_files",
    FileKind.CSS_MODULE: "css_module_files",
    FileKind.TS: "ts_files",
    FileKind.TSX: "tsx_files",
}


def resolve_tool_targets(tool: ToolDescriptor, targets: TargetSet, index: WorkspaceIndex) -> list[str]:
    """Return the candidate files for ``tool`` before its own filters apply.

    Args:
        tool: Tool whose scope drives the selection.
        targets: Run-wide target set.
        index: Run-wide workspace index.

    Returns:
        list[str]: Ordered, de-duplicated repository-relative paths.
    """

    match tool.scope:
        case FilesScope(kinds=kinds):
            selected: dict[str, None] = {}
            for kind in kinds:
                selected.update(dict.fromkeys(getattr(targets, _BUCKETS[kind])))
            return list(selected)
        case EntitiesScope(entity=entity) if entity == CSS_MODULE_ENTITY:
            if targets.mode is ScanMode.CHANGED and index.impacted_css_modules is not None:
                return sorted(index.impacted_css_modules)
            return list(targets.css_module_files)
        case GlobalScope() | EntitiesScope():
            return []
    return []


def apply_tool_filters(paths: Sequence[str], tool: ToolDescriptor) -> list[str]:
    """Apply ``tool``'s own include/exclude patterns to ``paths``."""

    if not tool.include and not tool.exclude:
        return list(paths)
    return filter_paths(paths, tool.include, tool.exclude)


def narrow_targets(targets: TargetSet, files: Sequence[str]) -> TargetSet:
    """Return a target set restricted to ``files`` with buckets re-derived.

    The scan mode, reference and changed-file list are carried over.
    """

    return classify_files(
        files,
        mode=targets.mode,
        since_ref=targets.since_ref,
        changed_files=targets.changed_files,
    )


__all__ = ["apply_tool_filters", "narrow_targets", "resolve_tool_targets"]
