# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool definitions and the read-only context handed to each run."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..config import AuditConfig
from ..filesystem.paths import resolve_repo_path
from ..models import Finding, TargetSet, ToolRunResult, WorkspaceIndex
from ..options import AuditOptions
from ..targets import FileKind

CSS_MODULE_ENTITY: Final[str] = "cssModule"


class ToolCategory(str, Enum):
    """Whether a tool only inspects files or also mutates them."""

    CHECK = "check"
    FIX = "fix"


@dataclass(frozen=True, slots=True)
class FilesScope:
    """Tool receives the union of the named file buckets."""

    kinds: tuple[FileKind, ...]
    type: Literal["files"] = "files"


@dataclass(frozen=True, slots=True)
class EntitiesScope:
    """Tool receives higher-level units such as style modules."""

    entity: str = CSS_MODULE_ENTITY
    type: Literal["entities"] = "entities"


@dataclass(frozen=True, slots=True)
class GlobalScope:
    """Tool runs once and ignores targets."""

    type: Literal["global"] = "global"


ToolScope = FilesScope | EntitiesScope | GlobalScope


def _noop(_message: str) -> None:
    """Discard ``_message``."""


class ToolContext(BaseModel):
    """Read-only bundle passed to every tool invocation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    root: Path
    config: AuditConfig
    options: AuditOptions
    targets: TargetSet
    index: WorkspaceIndex
    log: Callable[[str], None] = _noop
    warn: Callable[[str], None] = _noop

    def with_targets(self, targets: TargetSet) -> ToolContext:
        """Return a copy of the context narrowed to ``targets``."""

        return self.model_copy(update={"targets": targets})

    def read_text(self, relative: str) -> str | None:
        """Return the text of ``relative`` or ``None`` after warning when unreadable.

        Args:
            relative: Repository-relative POSIX path.

        Returns:
            str | None: Decoded file contents.
        """

        try:
            return resolve_repo_path(self.root, relative).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            self.warn(f"Skipping unreadable file {relative}: {exc.strerror or exc}")
            return None


ToolRunner = Callable[[ToolContext, Mapping[str, Any]], ToolRunResult]
BaselinePredicate = Callable[[Finding, ToolContext], bool]


class ToolDescriptor(BaseModel):
    """Declarative metadata plus the run callable for one analyzer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    title: str
    description: str = ""
    category: ToolCategory = ToolCategory.CHECK
    default_enabled: bool = True
    scope: ToolScope = Field(default_factory=GlobalScope)
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    run: ToolRunner
    baseline_include: BaselinePredicate | None = None

    @property
    def is_fix(self) -> bool:
        """Return whether the tool mutates the working tree."""

        return self.category is ToolCategory.FIX


__all__ = [
    "CSS_MODULE_ENTITY",
    "BaselinePredicate",
    "EntitiesScope",
    "FilesScope",
    "GlobalScope",
    "ToolCategory",
    "ToolContext",
    "ToolDescriptor",
    "ToolRunner",
    "ToolScope",
]
