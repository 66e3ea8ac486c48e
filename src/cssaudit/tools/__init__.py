# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool contract, registry and built-in analyzers."""

from __future__ import annotations

from .base import (
    EntitiesScope,
    FilesScope,
    GlobalScope,
    ToolCategory,
    ToolContext,
    ToolDescriptor,
    ToolScope,
)
from .builtins import BUILTIN_TOOLS, default_registry
from .registry import ToolRegistry

__all__ = [
    "BUILTIN_TOOLS",
    "EntitiesScope",
    "FilesScope",
    "GlobalScope",
    "ToolCategory",
    "ToolContext",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolScope",
    "default_registry",
]
