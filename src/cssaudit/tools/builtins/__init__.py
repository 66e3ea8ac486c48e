# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in CSS analyzers and the default registry."""

from __future__ import annotations

from typing import Final

from ..base import ToolDescriptor
from ..registry import ToolRegistry
from .best_practices import BEST_PRACTICES_TOOL
from .orphaned_modules import ORPHANED_MODULES_TOOL
from .overlapping_rules import OVERLAPPING_RULES_TOOL
from .purge_styles import PURGE_STYLES_TOOL
from .unused_classes import UNUSED_CLASSES_TOOL

BUILTIN_TOOLS: Final[tuple[ToolDescriptor, ...]] = (
    UNUSED_CLASSES_TOOL,
    ORPHANED_MODULES_TOOL,
    BEST_PRACTICES_TOOL,
    OVERLAPPING_RULES_TOOL,
    PURGE_STYLES_TOOL,
)


def default_registry() -> ToolRegistry:
    """Return a fresh registry populated with the built-in tools."""

    return ToolRegistry(BUILTIN_TOOLS)


__all__ = ["BUILTIN_TOOLS", "default_registry"]
